"""Order lifecycle and location tracking"""

from .validator import OrderValidator
from .service import OrderService
from .feed import LocationFeed

__all__ = ['OrderValidator', 'OrderService', 'LocationFeed']
