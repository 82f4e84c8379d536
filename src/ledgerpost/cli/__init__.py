"""CLI layer for ledgerpost."""
