"""Spectral vision: band safety, hygiene, promotion, and excavation depth.

Scores one spectral object from its per-band ``(band_index, mean, stddev)``
power readings plus its stability and confidence. All inputs are clamped to
[0, 1]; non-finite values count as 0. Results are stored on the record under
``signature["extra"]`` as ``bandsafetyprofile``, ``spectralhygiene`` and
``catalogpromotiongate``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any

RawBand = tuple[int, float, float]


class BandHazardClass(Enum):
    """Discrete hazard class for routing and policies."""

    SAFE = "safe"
    ELEVATED = "elevated"
    HIGH = "high"


@total_ordering
class ExcavationDepth(Enum):
    """How deep excavation may dig. Ordered SNIFF < DIG_LIGHT < DIG_FULL."""

    SNIFF = "sniff"
    DIG_LIGHT = "dig_light"
    DIG_FULL = "dig_full"

    @property
    def rank(self) -> int:
        return _DEPTH_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ExcavationDepth):
            return NotImplemented
        return self.rank < other.rank


_DEPTH_RANK = {
    ExcavationDepth.SNIFF: 0,
    ExcavationDepth.DIG_LIGHT: 1,
    ExcavationDepth.DIG_FULL: 2,
}


class GovernanceMode(Enum):
    DORMANT = "dormant"
    ACTIVE_FREE = "active_free"  # roaming + non-interference: observe only
    ACTIVE_GOVERNED = "active_governed"
    TECHNICAL_ONLY = "technical_only"


@dataclass
class GovernanceState:
    """Governance snapshot consulted when choosing excavation depth."""

    mode: GovernanceMode = GovernanceMode.ACTIVE_GOVERNED
    spectral_quantification_active: bool = True
    soul_modeling_forbidden: bool = True


@dataclass
class SpectralVisionParams:
    """Thresholds and weights for spectral-vision scoring."""

    # Excavation depth: below safety_slow sniff, below safety_shigh dig light
    safety_slow: float = 0.4
    safety_shigh: float = 0.7

    # Per-band hazard: below elevated_max HIGH, at or above safe_min SAFE
    hazard_elevated_max: float = 0.4
    hazard_safe_min: float = 0.7

    # Promotion weights, renormalized to sum to 1
    w_stability: float = 0.4
    w_confidence: float = 0.4
    w_safety_min: float = 0.2

    promotion_threshold: float = 0.8


@dataclass
class BandSafetyEntry:
    band_index: int
    mean_power: float
    stddev_power: float
    safety_score: float
    hazard_class: BandHazardClass


@dataclass
class BandSafetyProfile:
    bands: list[BandSafetyEntry] = field(default_factory=list)
    safety_min: float = 1.0
    safety_mean: float = 0.0


@dataclass
class SpectralHygiene:
    band_quality: float = 0.0
    artifact_level: float = 1.0
    safe_band_fraction: float = 0.0


@dataclass
class SpectralVisionDecision:
    """The full spectral-vision outcome for one object."""

    band_profile: BandSafetyProfile
    hygiene: SpectralHygiene
    excavation_depth: ExcavationDepth
    promotion_score: float
    promotion_passed: bool

    def to_signature_extra(self) -> dict[str, Any]:
        """Plain mapping for ``signature["extra"]``."""
        return {
            "bandsafetyprofile": {
                "bands": [
                    {
                        "band_index": b.band_index,
                        "mean_power": b.mean_power,
                        "stddev_power": b.stddev_power,
                        "safety_score": b.safety_score,
                        "hazard_class": b.hazard_class.value,
                    }
                    for b in self.band_profile.bands
                ],
                "safety_min": self.band_profile.safety_min,
                "safety_mean": self.band_profile.safety_mean,
            },
            "spectralhygiene": {
                "band_quality": self.hygiene.band_quality,
                "artifact_level": self.hygiene.artifact_level,
                "safe_band_fraction": self.hygiene.safe_band_fraction,
            },
            "catalogpromotiongate": {
                "promotion_score": self.promotion_score,
                "passed": self.promotion_passed,
                "excavation_depth": self.excavation_depth.value,
            },
        }


def clamp01(x: float) -> float:
    if not math.isfinite(x):
        return 0.0
    return min(max(x, 0.0), 1.0)


def compute_band_safety(
    raw_bands: Sequence[RawBand], params: SpectralVisionParams
) -> BandSafetyProfile:
    """Per-band safety ``s = clamp01(1 - mean - stddev)`` with min and mean.

    With no bands, ``safety_min`` stays 1.0 and ``safety_mean`` is 0.0.
    """
    entries = []
    safety_min = 1.0

    for band_index, mean_raw, stddev_raw in raw_bands:
        mu = clamp01(mean_raw)
        sigma = clamp01(stddev_raw)
        score = clamp01(1.0 - mu - sigma)

        if score < params.hazard_elevated_max:
            hazard = BandHazardClass.HIGH
        elif score < params.hazard_safe_min:
            hazard = BandHazardClass.ELEVATED
        else:
            hazard = BandHazardClass.SAFE

        safety_min = min(safety_min, score)
        entries.append(
            BandSafetyEntry(
                band_index=band_index,
                mean_power=mu,
                stddev_power=sigma,
                safety_score=score,
                hazard_class=hazard,
            )
        )

    safety_mean = sum(e.safety_score for e in entries) / len(entries) if entries else 0.0
    return BandSafetyProfile(
        bands=entries,
        safety_min=clamp01(safety_min),
        safety_mean=clamp01(safety_mean),
    )


def compute_spectral_hygiene(
    band_profile: BandSafetyProfile,
    artifact_epoch_fraction: float,
    safety_threshold: float,
) -> SpectralHygiene:
    artifact_fraction = clamp01(artifact_epoch_fraction)
    band_quality = clamp01(band_profile.safety_mean * (1.0 - artifact_fraction))

    bands = band_profile.bands
    if bands:
        safe_count = sum(1 for b in bands if b.safety_score >= safety_threshold)
        safe_band_fraction = safe_count / len(bands)
    else:
        safe_band_fraction = 0.0

    return SpectralHygiene(
        band_quality=band_quality,
        artifact_level=clamp01(1.0 - band_quality),
        safe_band_fraction=clamp01(safe_band_fraction),
    )


def compute_promotion_score(
    stability: float,
    confidence: float,
    safety_min: float,
    params: SpectralVisionParams,
) -> float:
    """Weighted blend of stability, confidence, and safety_min.

    Weights are renormalized to sum to 1; if they sum to zero or less the
    score is 0.
    """
    w_sum = params.w_stability + params.w_confidence + params.w_safety_min
    if w_sum <= 0.0:
        return 0.0

    score = (
        params.w_stability / w_sum * clamp01(stability)
        + params.w_confidence / w_sum * clamp01(confidence)
        + params.w_safety_min / w_sum * clamp01(safety_min)
    )
    return clamp01(score)


def passes_promotion_gate(promotion_score: float, params: SpectralVisionParams) -> bool:
    return promotion_score >= params.promotion_threshold


def compute_excavation_depth(
    band_profile: BandSafetyProfile,
    governance: GovernanceState,
    params: SpectralVisionParams,
) -> ExcavationDepth:
    """Choose how deep to dig from safety_min and governance.

    Missing governance guarantees and ACTIVE_FREE mode both limit
    excavation to SNIFF.
    """
    if not governance.spectral_quantification_active or not governance.soul_modeling_forbidden:
        return ExcavationDepth.SNIFF
    if governance.mode == GovernanceMode.ACTIVE_FREE:
        return ExcavationDepth.SNIFF

    if band_profile.safety_min < params.safety_slow:
        return ExcavationDepth.SNIFF
    if band_profile.safety_min < params.safety_shigh:
        return ExcavationDepth.DIG_LIGHT
    return ExcavationDepth.DIG_FULL


def evaluate_spectral_vision(
    raw_bands: Sequence[RawBand],
    stability: float,
    confidence: float,
    artifact_epoch_fraction: float,
    params: SpectralVisionParams,
    governance: GovernanceState,
) -> SpectralVisionDecision:
    band_profile = compute_band_safety(raw_bands, params)
    hygiene = compute_spectral_hygiene(band_profile, artifact_epoch_fraction, params.safety_shigh)
    promotion_score = compute_promotion_score(
        stability, confidence, band_profile.safety_min, params
    )
    return SpectralVisionDecision(
        band_profile=band_profile,
        hygiene=hygiene,
        excavation_depth=compute_excavation_depth(band_profile, governance, params),
        promotion_score=promotion_score,
        promotion_passed=passes_promotion_gate(promotion_score, params),
    )
