"""Flow chain client."""
from .client import FlowAccessClient

__all__ = ["FlowAccessClient"]
