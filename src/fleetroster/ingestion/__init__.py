"""Ingestion layer.

This package contains the adapters that fetch records from the external
stores and normalize them into roster models.
"""

__all__: list[str] = []
