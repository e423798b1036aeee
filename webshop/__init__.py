"""Per-user shopping cart service with live catalog enrichment."""

__version__ = "0.1.0"
