"""In-memory ledger, order-matching engine, JSON HTTP server and interactive client."""

__version__ = "0.1.0"