# tracker/analysis/analyzer.py
"""Order collection analysis"""
from typing import Dict, Any, List

from tracker.models import Order, ALL_STATUSES
from tracker.tracking.validator import OrderValidator


class OrderAnalyzer:
    """Summarizes the current order collection"""

    @staticmethod
    def analyze(orders: List[Order]) -> Dict[str, Any]:
        """Count orders by status and city and list active deliveries"""
        analysis = {
            'total_orders': len(orders),
            'total_quantity': 0,
            'orders_by_status': {status: 0 for status in ALL_STATUSES},
            'orders_by_city': {},
            'active_deliveries': [],
            'duplicate_codes': OrderValidator.find_duplicates([o.order_code for o in orders]),
        }

        for order in orders:
            analysis['total_quantity'] += order.quantity

            # Unknown statuses from hand-edited data still get counted
            status = order.status
            analysis['orders_by_status'][status] = analysis['orders_by_status'].get(status, 0) + 1

            # Group by city
            city = order.city
            if city not in analysis['orders_by_city']:
                analysis['orders_by_city'][city] = []
            analysis['orders_by_city'][city].append(order.order_code)

            if order.is_out_for_delivery:
                analysis['active_deliveries'].append({
                    'order_code': order.order_code,
                    'customer_name': order.customer_name,
                    'has_driver_location': order.driver_location is not None,
                    'remaining_distance': order.remaining_distance(),
                })

        return analysis
