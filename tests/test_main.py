import pytest

from tracker.io import MemoryStorage, OrderStore
from tracker.main import TrackerApp, main
from tracker.models import STATUS_DELIVERED, STATUS_OUT_FOR_DELIVERY


@pytest.fixture()
def shared_storage():
    return MemoryStorage()


def run(storage, *argv):
    store = OrderStore(storage)
    try:
        return TrackerApp(store, tick_interval=0.001).run(list(argv))
    finally:
        store.close()


def load(storage):
    return OrderStore(storage).load()


def test_create_and_list(shared_storage, capsys):
    assert run(shared_storage, 'create', 'ORD-1', 'Alice', 'Riyadh', '3') == 0
    assert run(shared_storage, 'list', 'ord') == 0
    out = capsys.readouterr().out
    assert 'Created ORD-1' in out
    assert 'Riyadh' in out
    assert load(shared_storage)[0].quantity == 3


def test_duplicate_create_reports_error(shared_storage, capsys):
    run(shared_storage, 'create', 'ORD-1', 'Alice')
    assert run(shared_storage, 'create', 'ORD-1', 'Bob') == 1
    assert 'already exists' in capsys.readouterr().out
    assert len(load(shared_storage)) == 1


def test_unknown_code_reports_not_found(shared_storage, capsys):
    assert run(shared_storage, 'track', 'NOPE') == 1
    assert 'NOPE' in capsys.readouterr().out


def test_wrong_arguments_and_unknown_command(shared_storage, capsys):
    assert run(shared_storage, 'create', 'ORD-1') == 1
    assert run(shared_storage, 'fly') == 1
    out = capsys.readouterr().out
    assert 'Wrong arguments for create' in out
    assert 'Unknown command: fly' in out


def test_full_delivery_flow(shared_storage, capsys):
    run(shared_storage, 'create', 'ORD-1', 'Alice')
    assert run(shared_storage, 'status', 'ord-1', 'OutForDelivery') == 0
    assert load(shared_storage)[0].status == STATUS_OUT_FOR_DELIVERY

    assert run(shared_storage, 'simulate', 'ORD-1') == 0
    order = load(shared_storage)[0]
    assert order.remaining_distance() < 0.001

    assert run(shared_storage, 'complete', 'ORD-1') == 0
    assert load(shared_storage)[0].status == STATUS_DELIVERED

    assert run(shared_storage, 'summary') == 0
    assert 'ORDER SUMMARY' in capsys.readouterr().out


def test_simulate_requires_out_for_delivery(shared_storage, capsys):
    run(shared_storage, 'create', 'ORD-1', 'Alice')
    assert run(shared_storage, 'simulate', 'ORD-1') == 1
    assert 'Out for Delivery' in capsys.readouterr().out


def test_delete(shared_storage):
    run(shared_storage, 'create', 'ORD-1', 'Alice')
    assert run(shared_storage, 'delete', 'ORD-1') == 0
    assert load(shared_storage) == []


def test_main_uses_file_storage(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr('tracker.main.DATA_DIR', str(tmp_path))
    assert main(['create', 'ORD-1', 'Alice']) == 0
    assert main(['list']) == 0
    assert 'ORD-1' in capsys.readouterr().out
    assert main([]) == 1
