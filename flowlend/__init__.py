"""FlowLend collateralized position manager."""

__version__ = "0.1.0"
