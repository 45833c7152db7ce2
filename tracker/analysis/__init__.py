"""Analysis functionality"""

from .analyzer import OrderAnalyzer

__all__ = ['OrderAnalyzer']
