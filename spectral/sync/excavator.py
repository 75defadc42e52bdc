"""Excavation: turn excavated spectral documents into catalog records.

An excavated document carries scored fields (``stability_score`` and so on),
knowledge/priority/safety ratings, tags, and provenance of the raw artifacts
it was dug out of. Excavation checks governance flags and score bounds, then
maps the document onto the registry's raw record shape. Documents that carry
per-band ``bands`` readings also get a spectral-vision evaluation stored
under ``signature["extra"]``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from spectral.log import get_logger
from spectral.registry.models import SpectralObject, is_number, is_sequence
from spectral.registry.reality_model import SpectralRealityModel
from spectral.sync.vision import (
    GovernanceState,
    RawBand,
    SpectralVisionParams,
    evaluate_spectral_vision,
)

logger = get_logger(__name__)

SCORE_FIELDS = ("stability_score", "drift_score", "confidence_score")
PROVENANCE_FIELDS = ("har_files", "trace_dumps", "memory_images", "tools")


class ExcavationError(ValueError):
    """An excavated document is malformed or its scores are out of bounds."""


class GovernanceError(PermissionError):
    """Excavation attempted without the required governance flags."""


@dataclass
class GovernanceFlags:
    """Non-interference flags that must hold for excavation to proceed."""

    spectral_roaming_active: bool = True
    non_interference_required: bool = True
    soul_modeling_forbidden: bool = True


def excavate(document: Mapping[str, Any], flags: GovernanceFlags) -> dict[str, Any]:
    """Validate an excavated document and return it as a raw record mapping.

    Raises:
        GovernanceError: If soul modeling is not forbidden.
        ExcavationError: If the document is not a mapping, a score is
            missing, non-numeric, or outside [0, 1], or kps, tags,
            relations, provenance or bands have the wrong shape.
    """
    if not flags.soul_modeling_forbidden:
        raise GovernanceError("Governance abort: soul modeling must be forbidden.")

    if not isinstance(document, Mapping):
        raise ExcavationError("Excavated document must be a mapping")

    name = document.get("spectral_id", "(unnamed)")
    for score_field in SCORE_FIELDS:
        value = document.get(score_field)
        if not is_number(value):
            raise ExcavationError(f"{name}: {score_field} must be a number, got {value!r}")
        if not 0.0 <= value <= 1.0:
            raise ExcavationError(f"{name}: {score_field} {value} out of [0,1] bounds")

    kps = document.get("kps")
    if kps is not None and not isinstance(kps, Mapping):
        raise ExcavationError(f"{name}: kps must be a mapping, got {kps!r}")
    tags = _sequence_field(name, "tags", document.get("tags"))
    relations = _sequence_field(name, "relations", document.get("relations"))

    provenance = document.get("provenance")
    if provenance is None:
        provenance = {}
    elif not isinstance(provenance, Mapping):
        raise ExcavationError(f"{name}: provenance must be a mapping, got {provenance!r}")

    return {
        "id": document.get("spectral_id"),
        "kind": document.get("kind"),
        "origin": document.get("origin"),
        "signature": _signature_with_vision(name, document, flags),
        "stability": document["stability_score"],
        "drift": document["drift_score"],
        "confidence": document["confidence_score"],
        "relationships": relations,
        "metadata": {
            "tags": tags,
            "kps": dict(kps or {}),
            "provenance": {
                key: _sequence_field(name, f"provenance.{key}", provenance.get(key))
                for key in PROVENANCE_FIELDS
            },
        },
    }


def _sequence_field(name: str, field_name: str, value: Any) -> list[Any]:
    if value is None:
        return []
    if not is_sequence(value):
        raise ExcavationError(f"{name}: {field_name} must be a list, got {value!r}")
    return list(value)


def _parse_bands(name: str, bands: Any) -> list[RawBand]:
    if not is_sequence(bands):
        raise ExcavationError(f"{name}: bands must be a list, got {bands!r}")
    parsed = []
    for band in bands:
        if not (
            is_sequence(band)
            and len(band) == 3
            and isinstance(band[0], int)
            and not isinstance(band[0], bool)
            and is_number(band[1])
            and is_number(band[2])
        ):
            raise ExcavationError(
                f"{name}: each band must be [band_index, mean, stddev], got {band!r}"
            )
        parsed.append((band[0], float(band[1]), float(band[2])))
    return parsed


def _signature_with_vision(
    name: str, document: Mapping[str, Any], flags: GovernanceFlags
) -> Any:
    """Attach spectral-vision results to ``signature["extra"]`` when bands are present."""
    signature = document.get("signature")
    if "bands" not in document:
        return signature

    raw_bands = _parse_bands(name, document["bands"])
    artifact_fraction = document.get("artifact_epoch_fraction", 0.0)
    if not is_number(artifact_fraction):
        raise ExcavationError(
            f"{name}: artifact_epoch_fraction must be a number, got {artifact_fraction!r}"
        )

    decision = evaluate_spectral_vision(
        raw_bands,
        document["stability_score"],
        document["confidence_score"],
        artifact_fraction,
        SpectralVisionParams(),
        GovernanceState(soul_modeling_forbidden=flags.soul_modeling_forbidden),
    )
    logger.debug(
        "Spectral vision for %s: depth=%s promotion=%.3f",
        name,
        decision.excavation_depth.value,
        decision.promotion_score,
    )

    signature = dict(signature) if isinstance(signature, Mapping) else {}
    extra = signature.get("extra")
    signature["extra"] = {
        **(extra if isinstance(extra, Mapping) else {}),
        **decision.to_signature_extra(),
    }
    return signature


def excavate_into(
    model: SpectralRealityModel,
    documents: Iterable[Mapping[str, Any]],
    flags: GovernanceFlags,
) -> list[SpectralObject]:
    """Excavate every document first, then upsert them all into ``model``.

    Governance and score checks run on every document before any is stored.
    """
    raws = []
    for document in documents:
        try:
            raws.append(excavate(document, flags))
        except ExcavationError as e:
            logger.warning("Rejected excavated document: %s", e)
            raise
    return [model.upsert(raw) for raw in raws]
