"""Registry: the in-memory catalog of spectral objects.

The registry provides:
- Cataloging: insert-or-update records keyed by id
- Discovery: lookups by kind, origin domain, and stability
- Export: plain snapshots of every record for external serialization
"""
