"""Stockroom: inventory items, stock batches and bulk stock ingestion."""

__version__ = "1.0.0"
