"""Single-round election ledger with an HTTP host service."""

__version__ = "0.1.0"
