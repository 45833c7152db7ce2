# tracker/simulation/manager.py
"""Coordinates one DeliverySimulator per active delivery"""
import random
import threading
from typing import Any, Callable, Dict, List, Optional

from tracker.config import TICK_INTERVAL_SEC, VERBOSE
from tracker.errors import ValidationError
from tracker.models import Location, Order, STATUS_OUT_FOR_DELIVERY
from tracker.simulation.simulator import DeliverySimulator, STATE_IDLE, STATE_RUNNING
from tracker.tracking import OrderService, LocationFeed


class DeliveryManager:
    """Starts, cancels and completes simulated deliveries.

    Simulators of different orders run independently. The manager watches
    the store and stops and forgets a simulator when its order is deleted or
    leaves the Out for Delivery status.
    """

    def __init__(
        self,
        service: OrderService,
        feed: LocationFeed,
        tick_interval: float = TICK_INTERVAL_SEC,
        on_arrival: Optional[Callable[[Order], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.service = service
        self.feed = feed
        self.tick_interval = tick_interval
        self._on_arrival = on_arrival
        self._rng = rng
        self._simulators: Dict[str, DeliverySimulator] = {}
        self._arrived: List[str] = []
        self._lock = threading.RLock()
        self._unsubscribe = feed.subscribe(self._on_orders_changed)

    def start_delivery(self, order_id: str, start_position: Optional[Location] = None,
                       autorun: bool = True) -> DeliverySimulator:
        """Start simulating the delivery of an Out for Delivery order.

        Returns the already running simulator if there is one.
        """
        order = self.service.get(order_id)
        if order.status != STATUS_OUT_FOR_DELIVERY:
            raise ValidationError(
                'status', f"{order.order_code} is {order.status}, expected {STATUS_OUT_FOR_DELIVERY}"
            )
        with self._lock:
            existing = self._simulators.get(order_id)
            if existing is not None and existing.state == STATE_RUNNING:
                return existing
            simulator = DeliverySimulator(
                order_id,
                self.feed,
                tick_interval=self.tick_interval,
                start_position=start_position,
                on_arrival=self._handle_arrival,
                rng=self._rng,
            )
            self._simulators[order_id] = simulator
        simulator.start(autorun=autorun)
        return simulator

    def get(self, order_id: str) -> Optional[DeliverySimulator]:
        with self._lock:
            return self._simulators.get(order_id)

    def cancel_delivery(self, order_id: str) -> bool:
        """Stop the simulator for `order_id`; returns False if none was tracked"""
        with self._lock:
            simulator = self._simulators.pop(order_id, None)
        if simulator is None:
            return False
        simulator.cancel()
        return True

    def complete_delivery(self, order_id: str) -> Order:
        """Stop any simulator, forget the delivery and mark the order Delivered"""
        self.cancel_delivery(order_id)
        with self._lock:
            self._forget_arrival(order_id)
        order = self.service.complete_delivery(order_id)
        if VERBOSE:
            print(f"📦 {order.order_code} delivered")
        return order

    def arrived(self) -> List[str]:
        """Order ids whose simulator reached the customer"""
        with self._lock:
            return list(self._arrived)

    def active(self) -> List[Dict[str, Any]]:
        """Status snapshots of all tracked simulators"""
        with self._lock:
            simulators = list(self._simulators.values())
        return [s.status() for s in simulators]

    def shutdown(self) -> None:
        """Cancel every simulator and stop watching the store"""
        with self._lock:
            simulators = list(self._simulators.values())
            self._simulators.clear()
        for simulator in simulators:
            simulator.cancel()
        self._unsubscribe()

    # -------------------- Callbacks --------------------

    def _handle_arrival(self, order: Order) -> None:
        with self._lock:
            self._arrived.append(order.id)
        if self._on_arrival is not None:
            self._on_arrival(order)

    def _on_orders_changed(self, orders: List[Order]) -> None:
        by_id = {o.id: o for o in orders}
        with self._lock:
            simulators = list(self._simulators.items())
        for order_id, simulator in simulators:
            if simulator.state == STATE_IDLE:
                continue
            order = by_id.get(order_id)
            if order is not None and order.status == STATUS_OUT_FOR_DELIVERY:
                continue
            if simulator.state == STATE_RUNNING:
                if VERBOSE:
                    reason = 'deleted' if order is None else order.status
                    print(f"⚠️  Stopping simulation for {order_id}: order {reason}")
                # Runs inside a store write; must not wait for the worker
                simulator.cancel(join=False)
            with self._lock:
                if self._simulators.get(order_id) is simulator:
                    del self._simulators[order_id]
                self._forget_arrival(order_id)

    def _forget_arrival(self, order_id: str) -> None:
        if order_id in self._arrived:
            self._arrived.remove(order_id)
