"""
Trade data models.
"""
from .trades import Period, Trade

__all__ = ["Period", "Trade"]
