import random

import pytest

from tracker.io import MemoryStorage, OrderStore
from tracker.models import Location
from tracker.simulation import DeliveryManager
from tracker.tracking import OrderService, LocationFeed


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def store(storage):
    s = OrderStore(storage)
    yield s
    s.close()


@pytest.fixture()
def service(store):
    return OrderService(store)


@pytest.fixture()
def feed(store):
    return LocationFeed(store)


@pytest.fixture()
def manager(service, feed):
    m = DeliveryManager(service, feed, tick_interval=0.001, rng=random.Random(7))
    yield m
    m.shutdown()


@pytest.fixture()
def driver_start():
    return Location(24.70, 46.67)


@pytest.fixture()
def customer_point():
    return Location(24.71, 46.68)


@pytest.fixture()
def out_for_delivery(service, feed, customer_point):
    """An Out for Delivery order with a fixed customer location"""
    order = service.create({'orderCode': 'ORD-1', 'customerName': 'Alice', 'quantity': 3})
    service.set_status(order.id, 'OutForDelivery')
    feed.set_location('ORD-1', 'customer', customer_point)
    return service.get(order.id)
