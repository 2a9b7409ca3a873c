"""Cadence programs and JSON-Cadence codec."""
from . import programs
from .arguments import arg, decode, resolve_imports

__all__ = ["arg", "decode", "programs", "resolve_imports"]
