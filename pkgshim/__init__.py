"""pkg-config wrapper that builds native libraries required by Go modules."""

__version__ = "0.1.0"
