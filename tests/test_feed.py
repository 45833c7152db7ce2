import pytest

from tracker.errors import ValidationError
from tracker.models import Location


def test_set_location_updates_role_field(service, feed):
    order = service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    assert feed.set_location('ORD-1', 'driver', {'lat': 24.70, 'lng': 46.67}) is True
    assert feed.set_location('ORD-1', 'customer', Location(24.71, 46.68)) is True

    driver, customer = feed.get_locations(order.id)
    assert driver == Location(24.70, 46.67)
    assert customer == Location(24.71, 46.68)
    assert service.get(order.id).updated_at >= order.updated_at


def test_set_location_matches_code_exactly(service, feed):
    order = service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    assert feed.set_location('ord-1', 'driver', (1.0, 2.0)) is False
    assert feed.get_locations(order.id) == (None, None)


def test_set_location_unknown_code_is_silent_noop(service, feed, store):
    service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    before = [o.to_dict() for o in store.load()]
    saves = []
    store.subscribe(saves.append)

    assert feed.set_location('NOPE', 'driver', (1.0, 2.0)) is False

    assert [o.to_dict() for o in store.load()] == before
    assert saves == []


def test_set_location_rejects_bad_role_and_coordinate(service, feed):
    service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    with pytest.raises(ValidationError):
        feed.set_location('ORD-1', 'dispatcher', (1.0, 2.0))
    with pytest.raises(ValidationError):
        feed.set_location('ORD-1', 'driver', {'lat': 1.0})


def test_get_locations_unknown_id(feed):
    assert feed.get_locations('missing') == (None, None)


def test_subscribe_receives_location_changes(service, feed):
    service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    seen = []
    feed.subscribe(lambda orders: seen.append(orders[0].driver_location))
    feed.set_location('ORD-1', 'driver', (24.7, 46.6))
    assert seen == [Location(24.7, 46.6)]


@pytest.mark.parametrize('value', [
    (float('nan'), 46.68),
    (24.71, float('inf')),
    {'lat': float('-inf'), 'lng': 46.68},
    Location(float('nan'), float('nan')),
])
def test_set_location_rejects_non_finite_coordinates(service, feed, value):
    order = service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    with pytest.raises(ValidationError):
        feed.set_location('ORD-1', 'customer', value)
    assert feed.get_locations(order.id) == (None, None)


@pytest.mark.parametrize('value', ['12', b'12'])
def test_set_location_rejects_strings(service, feed, value):
    service.create({'orderCode': 'ORD-1', 'customerName': 'Alice'})
    with pytest.raises(ValidationError):
        feed.set_location('ORD-1', 'driver', value)
