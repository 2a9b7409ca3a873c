"""Protocol interfaces for external collaborators."""
from .auth import AuthProvider
from .ledger import FinalitySubscription, LedgerMutateClient, LedgerQueryClient

__all__ = [
    "AuthProvider",
    "FinalitySubscription",
    "LedgerMutateClient",
    "LedgerQueryClient",
]
