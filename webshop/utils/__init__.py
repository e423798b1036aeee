"""Cart state, enrichment, orders and shared helpers."""
