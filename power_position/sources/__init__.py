"""
Trade sources: the contract and a simulated implementation.
"""
from .base import TradeSource
from .simulated import SimulatedTradeSource

__all__ = ["TradeSource", "SimulatedTradeSource"]
