# tracker/main.py
"""Main entry point for the order tracker"""
import inspect
import sys
from typing import Any, Dict, List, Optional

from tracker.analysis import OrderAnalyzer
from tracker.config import DATA_DIR, TICK_INTERVAL_SEC
from tracker.errors import TrackerError, DuplicateCode, NotFound, ValidationError
from tracker.io import JsonFileStorage, OrderStore
from tracker.models import Order
from tracker.simulation import DeliveryManager, STATE_ARRIVED
from tracker.tracking import OrderService, LocationFeed
from tracker.utils import format_timestamp

USAGE = (
    "Usage: tracker <command> [args]\n"
    "Commands:\n"
    "  list [filter]                  - list orders matching code or customer\n"
    "  create CODE NAME [CITY] [QTY]  - create an order\n"
    "  status CODE STATUS             - change an order's status\n"
    "  delete CODE                    - delete an order\n"
    "  track CODE                     - show an order and its live locations\n"
    "  simulate CODE                  - drive the delivery until arrival\n"
    "  complete CODE                  - mark the delivery as Delivered\n"
    "  summary                        - counts by status and city\n"
)


class OutputFormatter:
    """Formats and displays orders"""

    @staticmethod
    def print_orders(orders: List[Order]):
        """Print an order table"""
        if not orders:
            print("No orders found.")
            return
        print(f"\n📋 ORDERS ({len(orders)})")
        print("-"*80)
        for order in orders:
            print(f"   {order.order_code:<12} {order.customer_name:<20} {order.city:<14} "
                  f"x{order.quantity:<4} {order.status}")

    @staticmethod
    def print_order(order: Order):
        """Print a single order with its locations"""
        print(f"\n📦 {order.order_code} - {order.customer_name}")
        print(f"   City: {order.city}")
        print(f"   Quantity: {order.quantity}")
        print(f"   Status: {order.status}")
        print(f"   Updated: {format_timestamp(order.updated_at)}")
        if order.driver_location is not None:
            print(f"   Driver: {order.driver_location.lat:.6f}, {order.driver_location.lng:.6f}")
        if order.customer_location is not None:
            print(f"   Customer: {order.customer_location.lat:.6f}, {order.customer_location.lng:.6f}")
        distance = order.remaining_distance()
        if distance is not None:
            print(f"   Remaining distance: {distance:.6f}")

    @staticmethod
    def print_summary(analysis: Dict[str, Any]):
        """Print the collection summary"""
        print("\n" + "="*80)
        print("📊 ORDER SUMMARY")
        print("="*80)
        print(f"   Total Orders: {analysis['total_orders']}")
        print(f"   Total Quantity: {analysis['total_quantity']}")
        print(f"\n   By Status:")
        for status, count in analysis['orders_by_status'].items():
            print(f"      {status}: {count}")
        print(f"\n   By City:")
        for city, codes in sorted(analysis['orders_by_city'].items()):
            print(f"      {city}: {len(codes)}")
        deliveries = analysis['active_deliveries']
        if deliveries:
            print(f"\n🚚 ACTIVE DELIVERIES ({len(deliveries)}):")
            for d in deliveries:
                remaining = d['remaining_distance']
                remaining_str = 'not started' if remaining is None else f"{remaining:.6f} remaining"
                print(f"      {d['order_code']} ({d['customer_name']}): {remaining_str}")
        if analysis['duplicate_codes']:
            print(f"\n⚠️  DUPLICATE CODES: {', '.join(analysis['duplicate_codes'])}")
        print("\n" + "="*80)


class TrackerApp:
    """Wires the store, services and delivery manager together"""

    def __init__(self, store: OrderStore, tick_interval: float = TICK_INTERVAL_SEC):
        self.store = store
        self.service = OrderService(store)
        self.feed = LocationFeed(store)
        self.manager = DeliveryManager(self.service, self.feed, tick_interval=tick_interval)

    def run(self, argv: List[str]) -> int:
        """Execute one command; returns a process exit code"""
        if not argv or argv[0] in ('help', '-h', '--help'):
            print(USAGE)
            return 0 if argv else 1
        cmd, args = argv[0].lower(), argv[1:]
        handler = getattr(self, f'cmd_{cmd}', None)
        if handler is None:
            print(f"❌ Unknown command: {cmd}")
            print(USAGE)
            return 1
        try:
            inspect.signature(handler).bind(*args)
        except TypeError:
            print(f"❌ Wrong arguments for {cmd}")
            print(USAGE)
            return 1
        try:
            return handler(*args) or 0
        except (ValidationError, DuplicateCode, NotFound) as e:
            print(f"❌ {e}")
            return 1
        except TrackerError as e:
            print(f"❌ Error: {e}")
            return 2
        finally:
            self.manager.shutdown()

    def cmd_list(self, filter_text: str = ''):
        OutputFormatter.print_orders(self.service.list(filter_text))

    def cmd_create(self, code: str, name: str, city: str = '', quantity: Optional[str] = None):
        order = self.service.create({
            'orderCode': code, 'customerName': name, 'city': city, 'quantity': quantity,
        })
        print(f"✅ Created {order.order_code} ({order.id})")
        OutputFormatter.print_order(order)

    def cmd_status(self, code: str, status: str):
        order = self.service.find_by_code(code)
        order = self.service.set_status(order.id, status)
        print(f"✅ {order.order_code} is now {order.status}")

    def cmd_delete(self, code: str):
        order = self.service.find_by_code(code)
        self.service.delete(order.id)
        print(f"🗑️  Deleted {order.order_code}")

    def cmd_track(self, code: str):
        OutputFormatter.print_order(self.service.find_by_code(code))

    def cmd_simulate(self, code: str):
        order = self.service.find_by_code(code)
        simulator = self.manager.start_delivery(order.id)
        try:
            while not simulator.wait(timeout=self.manager.tick_interval):
                status = simulator.status()
                print(f"   📍 tick {status['ticks']}: {status['driver_location']}")
        except KeyboardInterrupt:
            print("\n⚠️  Simulation interrupted")
            self.manager.cancel_delivery(order.id)
            return 1
        if simulator.state != STATE_ARRIVED:
            print(f"⚠️  Simulation ended without arrival ({simulator.state})")
            return 1
        print(f"✅ Driver arrived. Run 'tracker complete {order.order_code}' to hand over.")
        return 0

    def cmd_complete(self, code: str):
        order = self.service.find_by_code(code)
        self.manager.complete_delivery(order.id)

    def cmd_summary(self):
        OutputFormatter.print_summary(OrderAnalyzer.analyze(self.store.load()))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    if argv is None:
        argv = sys.argv[1:]
    store = OrderStore(JsonFileStorage(DATA_DIR))
    try:
        return TrackerApp(store).run(argv)
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
