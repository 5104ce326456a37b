"""Payment broker core: order ledger, gateway integration and payment verification."""

__version__ = "0.1.0"
