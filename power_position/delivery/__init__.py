"""
Snapshot delivery: the Sink contract and the file system implementation.
"""
from .base import Sink
from .file_delivery import FileSink

__all__ = ["Sink", "FileSink"]
