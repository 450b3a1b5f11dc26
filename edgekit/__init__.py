"""edgekit: verification and routing helpers for edge HTTP handlers."""

__version__ = "0.1.0"
