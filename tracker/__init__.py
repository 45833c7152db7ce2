"""Order tracking service: order lifecycle, live locations and delivery simulation"""

__version__ = '0.1.0'
