"""
Tunable thresholds of the detection pipeline.

All values are empirically calibrated; the defaults reproduce the reference
behavior and should only change together with a recalibration.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union


@dataclass(frozen=True)
class DetectionConfig:
    """
    Configuration of the shape detection engine.

    Attributes:
        threshold: Gray level below which a pixel is foreground
        alpha_cutoff: Alpha value a pixel must exceed to be foreground
        min_blob_area: Blobs with fewer pixels are ignored (thin noise lines
            peak around 322 px, the smallest real shapes start around 375 px)
        min_contour_length: Contours with fewer points are ignored
        epsilon: Ramer-Douglas-Peucker tolerance, in pixels
        closure_distance: First/last vertices closer than this count once
        circularity_threshold: Circularity above which a blob is a circle
        star_ratio: Inner/outer radius ratio below which 10 vertices make a star
        min_confidence: Lower clamp of the reported confidence
        max_confidence: Upper clamp of the reported confidence
    """

    threshold: int = 128
    alpha_cutoff: int = 128
    min_blob_area: int = 350
    min_contour_length: int = 20
    epsilon: float = 2.0
    closure_distance: float = 10.0
    circularity_threshold: float = 0.88
    star_ratio: float = 0.7
    min_confidence: float = 0.5
    max_confidence: float = 1.0

    def __post_init__(self) -> None:
        if not 0 <= self.threshold <= 256:
            raise ValueError(f"threshold must be within [0, 256], got {self.threshold}")
        if not 0 <= self.alpha_cutoff <= 255:
            raise ValueError(f"alpha_cutoff must be within [0, 255], got {self.alpha_cutoff}")
        if self.min_blob_area < 0:
            raise ValueError("min_blob_area must be >= 0")
        if self.min_contour_length < 0:
            raise ValueError("min_contour_length must be >= 0")
        if self.epsilon <= 0:
            raise ValueError("epsilon must be > 0")
        if self.closure_distance < 0:
            raise ValueError("closure_distance must be >= 0")
        if self.star_ratio <= 0:
            raise ValueError("star_ratio must be > 0")
        if not 0 <= self.min_confidence <= self.max_confidence:
            raise ValueError(
                f"Confidence bounds must satisfy 0 <= min <= max, "
                f"got [{self.min_confidence}, {self.max_confidence}]"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectionConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "DetectionConfig":
        """Load a configuration from a JSON object; missing keys keep their defaults."""
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")

        return cls.from_dict(data)

    def with_overrides(self, **changes: Any) -> "DetectionConfig":
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["DetectionConfig"]
