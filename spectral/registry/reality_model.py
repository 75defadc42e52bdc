"""In-memory spectral reality model.

A keyed catalog of spectral objects. Records are created or updated through
:meth:`SpectralRealityModel.upsert`; every lookup is a scan over the current
contents in insertion order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from spectral.log import get_logger
from spectral.registry.models import Clock, SpectralObject

logger = get_logger(__name__)

DEFAULT_STABILITY_THRESHOLD = 0.8


class SpectralRealityModel:
    """Caller-owned catalog of spectral objects keyed by id."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock
        self._objects: dict[str, SpectralObject] = {}

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: object) -> bool:
        return object_id in self._objects

    def __iter__(self) -> Iterator[SpectralObject]:
        return iter(list(self._objects.values()))

    def upsert(self, raw: Mapping[str, Any]) -> SpectralObject:
        """Insert a new object, or touch the existing one with the same id.

        On the update path only the mutable fields of ``raw`` are applied;
        ``kind``, ``origin`` and ``signature`` are ignored.
        """
        existing = self._objects.get(raw.get("id"))
        if existing is not None:
            existing.touch(raw, clock=self._clock)
            logger.debug("Updated spectral object %s", existing.id)
            return existing

        obj = SpectralObject.from_raw(raw, clock=self._clock)
        self._objects[obj.id] = obj
        logger.debug("Created spectral object %s (%s)", obj.id, obj.kind)
        return obj

    def get_by_id(self, object_id: str) -> SpectralObject | None:
        return self._objects.get(object_id)

    def list_by_kind(self, kind: str) -> list[SpectralObject]:
        """All objects whose kind equals ``kind`` exactly."""
        return [obj for obj in self._objects.values() if obj.kind == kind]

    def list_high_stability(
        self, threshold: float = DEFAULT_STABILITY_THRESHOLD
    ) -> list[SpectralObject]:
        """Objects at or above ``threshold`` stability with drift at most ``1 - threshold``.

        The threshold is not range-checked: 0 admits nearly everything and
        values above 1 admit nothing.
        """
        return [
            obj
            for obj in self._objects.values()
            if obj.stability >= threshold and obj.drift <= 1 - threshold
        ]

    def list_by_origin_domain(self, domain: str) -> list[SpectralObject]:
        """Objects whose ``origin["domain"]`` equals ``domain``.

        Objects whose origin has no ``domain`` key never match, even for ``None``.
        """
        results = []
        for obj in self._objects.values():
            origin = obj.origin
            if isinstance(origin, Mapping) and "domain" in origin and origin["domain"] == domain:
                results.append(obj)
        return results

    def snapshot(self) -> list[dict[str, Any]]:
        """Independent plain projections of every object."""
        return [obj.to_dict() for obj in self._objects.values()]
