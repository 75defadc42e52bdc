"""Tests for the spectral object model."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from spectral.registry.models import (
    SpectralKind,
    SpectralObject,
    ValidationError,
    format_timestamp,
)

BASE = datetime(2026, 1, 22, 22, 8, tzinfo=timezone.utc)


def _clock(start: datetime = BASE, step: timedelta = timedelta(seconds=1)):
    """A clock that advances by ``step`` on every call."""
    ticks = itertools.count()
    return lambda: start + step * next(ticks)


def _make(**overrides) -> SpectralObject:
    clock = overrides.pop("clock", None) or _clock()
    raw = {
        "id": "checkout-form",
        "kind": SpectralKind.DOM_SHEET,
        "origin": {"domain": "checkout", "system": "web", "run_id": "r1", "modality": "dom"},
    }
    raw.update(overrides)
    return SpectralObject.from_raw(raw, clock=clock)


def test_defaults_applied():
    obj = _make()
    assert obj.signature == {}
    assert obj.stability == 0.0
    assert obj.drift == 0.0
    assert obj.confidence == 0.0
    assert obj.relationships == []
    assert obj.metadata == {}
    assert obj.created_at == "2026-01-22T22:08:00.000Z"
    assert obj.updated_at == obj.created_at


def test_non_numeric_metrics_default_to_zero():
    obj = _make(stability="high", drift=None, confidence=True)
    assert obj.stability == 0.0
    assert obj.drift == 0.0
    assert obj.confidence == 0.0


def test_integer_metrics_become_floats():
    obj = _make(stability=1, drift=0)
    assert obj.stability == 1.0
    assert isinstance(obj.stability, float)


def test_non_sequence_relationships_default_to_empty():
    assert _make(relationships="refines:base").relationships == []
    assert _make(relationships=("a", "b")).relationships == ["a", "b"]


def test_missing_id_raises():
    with pytest.raises(ValidationError) as exc:
        SpectralObject.from_raw({"kind": "json-schema", "origin": {"domain": "d"}})
    assert exc.value.missing == ["id"]


def test_falsy_required_fields_raise():
    with pytest.raises(ValidationError) as exc:
        SpectralObject(id="", kind="", origin={})
    assert exc.value.missing == ["id", "kind", "origin"]

    with pytest.raises(ValidationError):
        SpectralObject(id="a", kind="k", origin=None)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        SpectralObject.from_raw({})


def test_identity_fields_are_immutable():
    obj = _make()
    for name in ("id", "kind", "origin", "created_at"):
        with pytest.raises(AttributeError):
            setattr(obj, name, "changed")
    assert obj.id == "checkout-form"


def test_touch_replaces_numeric_metrics_only():
    obj = _make(stability=0.5, drift=0.3, confidence=0.7)
    obj.touch({"stability": 0.9, "drift": "bad", "confidence": None})
    assert obj.stability == 0.9
    assert obj.drift == 0.3
    assert obj.confidence == 0.7


def test_touch_replaces_relationships_wholesale():
    obj = _make(relationships=["refines:base"])
    obj.touch({"relationships": ["contains:row"]})
    assert obj.relationships == ["contains:row"]

    obj.touch({"relationships": {"not": "a list"}})
    assert obj.relationships == ["contains:row"]


def test_touch_merges_metadata_shallowly():
    obj = _make(metadata={"a": 1, "b": 2})
    obj.touch({"metadata": {"b": 3, "c": 4}})
    assert obj.metadata == {"a": 1, "b": 3, "c": 4}

    obj.touch({"metadata": ["ignored"]})
    obj.touch({"metadata": None})
    assert obj.metadata == {"a": 1, "b": 3, "c": 4}


def test_touch_never_changes_identity_or_signature():
    obj = _make(signature={"selectors": ["#cart"]})
    created = obj.created_at
    obj.touch(
        {
            "id": "other",
            "kind": "state-machine",
            "origin": {"domain": "elsewhere"},
            "signature": {"selectors": []},
            "createdAt": "1970-01-01T00:00:00.000Z",
            "unknown": 1,
        }
    )
    assert obj.id == "checkout-form"
    assert obj.kind == "dom-sheet"
    assert obj.origin["domain"] == "checkout"
    assert obj.signature == {"selectors": ["#cart"]}
    assert obj.created_at == created


def test_touch_refreshes_updated_at_and_chains():
    obj = _make()
    result = obj.touch().touch({})
    assert result is obj
    assert obj.updated_at == "2026-01-22T22:08:02.000Z"
    assert obj.updated_at > obj.created_at


def test_updated_at_never_moves_backwards():
    obj = _make(clock=_clock(step=-timedelta(seconds=5)))
    before = obj.updated_at
    obj.touch({"stability": 0.4})
    assert obj.stability == 0.4
    assert obj.updated_at == before


def test_touch_accepts_explicit_clock():
    obj = _make()
    obj.touch({}, clock=lambda: BASE + timedelta(hours=1))
    assert obj.updated_at == "2026-01-22T23:08:00.000Z"


def test_to_dict_fields_and_copies():
    obj = _make(
        signature={"fields": ["email"]},
        relationships=["refines:base"],
        metadata={"tags": ["ui"]},
        stability=0.9,
    )
    data = obj.to_dict()
    assert list(data) == [
        "id",
        "kind",
        "origin",
        "signature",
        "stability",
        "drift",
        "confidence",
        "relationships",
        "metadata",
        "createdAt",
        "updatedAt",
    ]
    assert data["stability"] == 0.9

    data["metadata"]["extra"] = True
    data["relationships"].append("x")
    assert "extra" not in obj.metadata
    assert obj.relationships == ["refines:base"]


def test_construction_does_not_alias_inputs():
    metadata = {"tags": ["ui"]}
    obj = _make(metadata=metadata)
    metadata["late"] = True
    assert "late" not in obj.metadata


def test_format_timestamp_naive_and_offset():
    assert format_timestamp(datetime(2026, 3, 1, 12, 0, 0, 123456)) == "2026-03-01T12:00:00.123Z"
    plus_two = timezone(timedelta(hours=2))
    assert format_timestamp(datetime(2026, 3, 1, 14, 0, tzinfo=plus_two)) == "2026-03-01T12:00:00.000Z"


def test_default_clock_produces_iso_timestamps():
    obj = SpectralObject(id="a", kind="k", origin={"domain": "d"})
    assert obj.created_at.endswith("Z")
    assert datetime.fromisoformat(obj.created_at.replace("Z", "+00:00")).tzinfo is not None
