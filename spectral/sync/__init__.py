"""Sync: moving spectral objects into and out of the catalog.

This package provides the primitives for:
- Excavation: turning excavated documents into catalog records under governance flags
- Export: writing catalog snapshots as JSON or NDJSON
- Loading: reading raw record documents from JSON, NDJSON, or YAML files
"""
