import json
import os
import threading

import pytest

from tracker.config import STORAGE_KEY
from tracker.io import JsonFileStorage, MemoryStorage, OrderStore
from tracker.models import Order


def make_order(code, name='Alice'):
    return Order({'id': f'id-{code}', 'orderCode': code, 'customerName': name})


def test_load_missing_key_is_empty(store):
    assert store.load() == []
    assert store.last_error is None


def test_save_replaces_whole_collection(store):
    store.save([make_order('A'), make_order('B')])
    store.save([make_order('C')])
    assert [o.order_code for o in store.load()] == ['C']


def test_blob_uses_camel_case_record_shape(storage, store):
    store.save([make_order('A')])
    records = json.loads(storage.get(STORAGE_KEY))
    assert records[0]['orderCode'] == 'A'
    assert records[0]['customerName'] == 'Alice'


@pytest.mark.parametrize('blob', [b'{not json', b'{"orderCode": "A"}', b'[{"orderCode": "A"}]', b'\xff\xfe'])
def test_corrupt_blob_fails_closed(storage, store, blob, capsys):
    storage.set(STORAGE_KEY, blob)
    assert store.load() == []
    assert store.last_error is not None
    assert '⚠️' in capsys.readouterr().out


def test_subscribers_see_saves_from_other_clients(storage):
    first = OrderStore(storage)
    second = OrderStore(storage)
    seen = []
    second.subscribe(lambda orders: seen.append([o.order_code for o in orders]))

    first.save([make_order('A')])

    assert seen == [['A']]


def test_unsubscribe_stops_notifications(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.save([make_order('A')])
    unsubscribe()
    store.save([make_order('B')])
    assert len(seen) == 1


def test_failing_subscriber_does_not_block_others(store, capsys):
    seen = []

    def broken(orders):
        raise RuntimeError('boom')

    store.subscribe(broken)
    store.subscribe(seen.append)
    store.save([make_order('A')])

    assert len(seen) == 1
    assert 'boom' in capsys.readouterr().out


def test_mutate_writes_nothing_when_fn_raises(store):
    store.save([make_order('A')])

    def fail(orders):
        orders.append(make_order('B'))
        raise ValueError('rejected')

    with pytest.raises(ValueError):
        store.mutate(fail)
    assert [o.order_code for o in store.load()] == ['A']


def test_mutate_only_if_changed_skips_save(store):
    saves = []
    store.subscribe(saves.append)
    assert store.mutate(lambda orders: False, only_if_changed=True) is False
    assert saves == []


def test_concurrent_mutations_do_not_lose_updates(store):
    def add(i):
        store.mutate(lambda orders: orders.append(make_order(f'C-{i}')))

    threads = [threading.Thread(target=add, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.load()) == 20


def test_file_storage_round_trip(tmp_path):
    storage = JsonFileStorage(str(tmp_path))
    store = OrderStore(storage)
    store.save([make_order('A')])

    reopened = OrderStore(JsonFileStorage(str(tmp_path)))
    assert [o.order_code for o in reopened.load()] == ['A']
    # Only the final file remains; temp files are replaced into place
    assert os.listdir(tmp_path) == [f'{STORAGE_KEY}.json']


def test_file_storage_poll_reports_external_writes(tmp_path):
    watcher = JsonFileStorage(str(tmp_path))
    watched = OrderStore(watcher)
    seen = []
    watched.subscribe(lambda orders: seen.append([o.order_code for o in orders]))
    watcher.poll()

    other_process = OrderStore(JsonFileStorage(str(tmp_path)))
    other_process.save([make_order('A')])

    assert watcher.poll() == [STORAGE_KEY]
    assert seen == [['A']]
    # Nothing new on the next poll
    assert watcher.poll() == []


def test_memory_storage_isolates_keys():
    storage = MemoryStorage()
    a = OrderStore(storage, key='a')
    b = OrderStore(storage, key='b')
    seen = []
    b.subscribe(seen.append)

    a.save([make_order('A')])

    assert b.load() == []
    assert seen == []


def test_file_storage_watcher_thread_notifies(tmp_path):
    watcher = JsonFileStorage(str(tmp_path))
    watched = OrderStore(watcher)
    changed = threading.Event()
    watched.subscribe(lambda orders: changed.set())
    watcher.start_watching(interval=0.01)
    try:
        OrderStore(JsonFileStorage(str(tmp_path))).save([make_order('A')])
        assert changed.wait(timeout=5)
    finally:
        watcher.stop_watching()
