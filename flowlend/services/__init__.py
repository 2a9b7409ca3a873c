"""Service modules"""
from .position_sync import PositionDataSync
from .session import LendingSession
from .transactions import TransactionController

__all__ = ["PositionDataSync", "TransactionController", "LendingSession"]
