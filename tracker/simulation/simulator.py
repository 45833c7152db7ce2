# tracker/simulation/simulator.py
"""Simulated driver movement for a single delivery.

Each simulator owns one worker thread that ticks on a fixed interval:
- read the order's customer location
- move the driver a fixed fraction of the remaining distance toward it
- persist the new driver position through the LocationFeed
- stop once the driver is within the arrival threshold

The simulator never changes the order status; completing the delivery is a
separate explicit action.
"""
import random
import threading
from typing import Any, Callable, Dict, Optional

from tracker.config import (
    TICK_INTERVAL_SEC, STEP_FRACTION, ARRIVAL_THRESHOLD,
    REFERENCE_LAT, REFERENCE_LNG, CUSTOMER_OFFSET_SPAN, VERBOSE,
)
from tracker.errors import NotFound
from tracker.models import Location, Order
from tracker.tracking import LocationFeed

STATE_IDLE = 'Idle'
STATE_RUNNING = 'Running'
STATE_ARRIVED = 'Arrived'
STATE_CANCELLED = 'Cancelled'

REFERENCE_POINT = Location(REFERENCE_LAT, REFERENCE_LNG)


def synthesize_customer_location(rng: random.Random,
                                 origin: Location = REFERENCE_POINT,
                                 span: float = CUSTOMER_OFFSET_SPAN) -> Location:
    """Random point within +/- span/2 of `origin` on each axis.

    Demo only: a real deployment gets the customer location from geocoding.
    """
    return Location(
        origin.lat + (rng.random() - 0.5) * span,
        origin.lng + (rng.random() - 0.5) * span,
    )


class DeliverySimulator:
    """Moves a driver toward the customer of one order.

    State machine: Idle -> Running -> {Arrived, Cancelled}.
    """

    def __init__(
        self,
        order_id: str,
        feed: LocationFeed,
        tick_interval: float = TICK_INTERVAL_SEC,
        step_fraction: float = STEP_FRACTION,
        arrival_threshold: float = ARRIVAL_THRESHOLD,
        start_position: Optional[Location] = None,
        on_arrival: Optional[Callable[[Order], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.order_id = order_id
        self.feed = feed
        self.tick_interval = tick_interval
        self.step_fraction = step_fraction
        self.arrival_threshold = arrival_threshold
        self._start_position = start_position
        self._on_arrival = on_arrival
        self._rng = rng or random.Random()

        self._state = STATE_IDLE
        self._driver: Optional[Location] = None
        self._ticks = 0
        self._state_lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> str:
        with self._state_lock:
            return self._state

    @property
    def driver_position(self) -> Optional[Location]:
        return self._driver

    def start(self, autorun: bool = True) -> None:
        """Idle -> Running.

        Synthesizes a customer location when the order has none. With
        `autorun` a daemon thread ticks every `tick_interval` seconds;
        otherwise the caller drives `tick()`.
        """
        with self._tick_lock:
            if self.state != STATE_IDLE:
                raise RuntimeError(f"Simulator for {self.order_id} is {self.state}, not {STATE_IDLE}")
            order = self._load_order()
            if order is None:
                raise NotFound('id', self.order_id)

            if order.customer_location is None:
                customer = synthesize_customer_location(self._rng)
                self.feed.set_location(order.order_code, 'customer', customer)

            if self._start_position is not None:
                driver = self._start_position
            elif order.driver_location is not None:
                driver = order.driver_location
            else:
                driver = REFERENCE_POINT

            with self._state_lock:
                if self._state != STATE_IDLE:
                    # Cancelled while starting
                    return
                self._driver = driver
                self._state = STATE_RUNNING

        if VERBOSE:
            print(f"🚚 Delivery started for {order.order_code} from {self._driver}")

        if autorun:
            self._thread = threading.Thread(
                target=self._run, name=f"DeliverySimulator-{order.order_code}", daemon=True
            )
            self._thread.start()

    def tick(self) -> bool:
        """Advance the driver one step. Returns True if a position was written."""
        arrived_order = None
        with self._tick_lock:
            if self.state != STATE_RUNNING:
                return False

            order = self._load_order()
            if order is None:
                print(f"⚠️  Order {self.order_id} no longer exists, stopping simulation")
                self.cancel(join=False)
                return False
            customer = order.customer_location
            if customer is None:
                return False

            self._driver = self._driver.step_toward(customer, self.step_fraction)
            # Re-read the code every tick; the id is the stable key
            self.feed.set_location(order.order_code, 'driver', self._driver)
            self._ticks += 1

            distance = self._driver.distance_to(customer)
            if distance < self.arrival_threshold:
                with self._state_lock:
                    if self._state == STATE_RUNNING:
                        self._state = STATE_ARRIVED
                        self._stop_event.set()
                        arrived_order = order
                        arrived_order.driver_location = self._driver

        if arrived_order is not None:
            if VERBOSE:
                print(f"✅ Reached destination for {arrived_order.order_code} after {self._ticks} ticks")
            if self._on_arrival is not None:
                try:
                    self._on_arrival(arrived_order)
                except Exception as e:
                    print(f"⚠️  Arrival callback failed for {arrived_order.order_code}: {e}")
        return True

    def cancel(self, join: bool = True) -> None:
        """Stop ticking; positions already written stay as they are.

        With `join`, waits for any in-flight tick and the worker thread so no
        write happens after this returns.
        """
        with self._state_lock:
            if self._state in (STATE_IDLE, STATE_RUNNING):
                self._state = STATE_CANCELLED
            self._stop_event.set()
        if join:
            thread = self._thread
            if thread is not None and thread is not threading.current_thread():
                thread.join()
            with self._tick_lock:
                pass

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker thread exits; returns False on timeout"""
        if self._thread is None:
            return self.state != STATE_RUNNING
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def status(self) -> Dict[str, Any]:
        """Snapshot: order id, state, driver position and tick count"""
        driver = self._driver
        return {
            'order_id': self.order_id,
            'state': self.state,
            'driver_location': None if driver is None else driver.to_dict(),
            'ticks': self._ticks,
        }

    # -------------------- Internal --------------------

    def _load_order(self) -> Optional[Order]:
        for order in self.feed.store.load():
            if order.id == self.order_id:
                return order
        return None

    def _run(self) -> None:
        while not self._stop_event.wait(self.tick_interval):
            try:
                self.tick()
            except Exception as e:
                print(f"❌ Simulation for {self.order_id} failed: {e}")
                self.cancel(join=False)
                break
