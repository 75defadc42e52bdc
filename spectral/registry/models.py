"""Spectral object data model: identity, provenance, and quality metrics."""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import InitVar, dataclass, field
from datetime import datetime, timezone
from typing import Any

Clock = Callable[[], datetime]

REQUIRED_FIELDS = ("id", "kind", "origin")
IMMUTABLE_FIELDS = frozenset({"id", "kind", "origin", "created_at"})


class ValidationError(ValueError):
    """Raised when a spectral object would be created without id, kind, or origin."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "SpectralObject requires id, kind, and origin "
            f"(missing: {', '.join(missing)})"
        )


class SpectralKind:
    """Well-known kinds. Kinds are free strings; these are the common ones."""

    DOM_SHEET = "dom-sheet"
    JSON_SCHEMA = "json-schema"
    STATE_MACHINE = "state-machine"
    API_SHAPE = "api-shape"
    TRACE_PATTERN = "trace-pattern"
    VM_REGION = "vm-region"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render an instant as UTC ISO 8601 with millisecond precision and a ``Z`` suffix.

    Naive datetimes are taken to be UTC already.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass
class SpectralObject:
    """A catalogued artifact with provenance, shape signature, and quality metrics.

    ``id``, ``kind`` and ``origin`` are fixed at construction. Metrics,
    relationships and metadata change only through :meth:`touch`.
    """

    # Identity
    id: str
    kind: str  # e.g. "dom-sheet", "json-schema", "state-machine"
    origin: Any  # e.g. {"domain", "system", "run_id", "modality"}

    # Shape
    signature: dict[str, Any] = field(default_factory=dict)

    # Quality, conventionally 0.0 - 1.0
    stability: float = 0.0
    drift: float = 0.0
    confidence: float = 0.0

    relationships: list[Any] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)  # tags, impact, notes

    created_at: str = field(init=False)
    updated_at: str = field(init=False)

    clock: InitVar[Clock | None] = None

    def __post_init__(self, clock: Clock | None) -> None:
        missing = [name for name in REQUIRED_FIELDS if not getattr(self, name)]
        if missing:
            raise ValidationError(missing)

        self.signature = dict(self.signature) if isinstance(self.signature, Mapping) else {}
        self.stability = float(self.stability) if is_number(self.stability) else 0.0
        self.drift = float(self.drift) if is_number(self.drift) else 0.0
        self.confidence = float(self.confidence) if is_number(self.confidence) else 0.0
        self.relationships = list(self.relationships) if is_sequence(self.relationships) else []
        self.metadata = dict(self.metadata) if isinstance(self.metadata, Mapping) else {}

        self._clock = clock or utc_now
        self.created_at = format_timestamp(self._clock())
        self.updated_at = self.created_at

    def __setattr__(self, name: str, value: Any) -> None:
        if name in IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"SpectralObject.{name} cannot be changed")
        super().__setattr__(name, value)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], clock: Clock | None = None) -> SpectralObject:
        """Build an object from a raw record-shaped mapping."""
        return cls(
            id=raw.get("id"),
            kind=raw.get("kind"),
            origin=raw.get("origin"),
            signature=raw.get("signature"),
            stability=raw.get("stability"),
            drift=raw.get("drift"),
            confidence=raw.get("confidence"),
            relationships=raw.get("relationships"),
            metadata=raw.get("metadata"),
            clock=clock,
        )

    def touch(
        self, update: Mapping[str, Any] | None = None, clock: Clock | None = None
    ) -> SpectralObject:
        """Apply a best-effort partial update and refresh ``updated_at``.

        Each eligible field is applied independently and only when its value
        has the right shape; anything else in ``update`` is ignored. Returns
        ``self`` so calls can be chained.
        """
        if isinstance(update, Mapping):
            for apply in _UPDATE_APPLIERS:
                apply(self, update)

        stamp = format_timestamp((clock or self._clock)())
        self.updated_at = max(self.updated_at, stamp)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain snapshot of every field; containers are shallow copies."""
        return {
            "id": self.id,
            "kind": self.kind,
            "origin": copy.copy(self.origin),
            "signature": copy.copy(self.signature),
            "stability": self.stability,
            "drift": self.drift,
            "confidence": self.confidence,
            "relationships": copy.copy(self.relationships),
            "metadata": copy.copy(self.metadata),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


# --- Update appliers ---


def _metric_applier(name: str) -> Callable[[SpectralObject, Mapping[str, Any]], None]:
    def apply(obj: SpectralObject, update: Mapping[str, Any]) -> None:
        value = update.get(name)
        if is_number(value):
            setattr(obj, name, float(value))

    return apply


def _apply_relationships(obj: SpectralObject, update: Mapping[str, Any]) -> None:
    value = update.get("relationships")
    if is_sequence(value):
        obj.relationships = list(value)


def _apply_metadata(obj: SpectralObject, update: Mapping[str, Any]) -> None:
    value = update.get("metadata")
    if isinstance(value, Mapping):
        obj.metadata = {**obj.metadata, **value}


_UPDATE_APPLIERS = (
    _metric_applier("stability"),
    _metric_applier("drift"),
    _metric_applier("confidence"),
    _apply_relationships,
    _apply_metadata,
)
