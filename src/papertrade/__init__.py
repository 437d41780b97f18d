"""Paper-trading portfolio ledger with offline-tolerant remote sync."""

__version__ = "0.1.0"
