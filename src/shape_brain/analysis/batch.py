"""
batch.py - Batch detection over a directory of images
======================================================
Runs the detection engine on every matching image and collects the results
in pandas DataFrames.

Usage:
    from shape_brain.analysis.batch import BatchRunner

    runner = BatchRunner()
    report = runner.run("images/", pattern="*.png")
    print(report.summary())
    report.save("results/")
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from shape_brain.core.logger import PipelineLogger, PipelineStage
from shape_brain.core.models import DetectedShape, ShapeType
from shape_brain.io.loader import load_image
from shape_brain.perception.engine import ShapeDetectionEngine


SHAPE_COLUMNS = [
    "image",
    "type",
    "confidence",
    "x",
    "y",
    "width",
    "height",
    "center_x",
    "center_y",
    "area",
]


@dataclass
class ImageReport:
    """Outcome of one image of a batch."""

    image: str
    width: int = 0
    height: int = 0
    shapes: List[DetectedShape] = field(default_factory=list)
    processing_time: float = 0.0  # milliseconds, detection only
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_message is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image,
            "success": self.success,
            "width": self.width,
            "height": self.height,
            "processing_time": round(self.processing_time, 3),
            "shapes": [shape.to_dict() for shape in self.shapes],
            "error": self.error_message,
        }


@dataclass
class BatchReport:
    """All image reports of a batch run."""

    images: List[ImageReport] = field(default_factory=list)
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    total_time: float = 0.0  # seconds, including image loading

    def to_dataframe(self) -> pd.DataFrame:
        """One row per detected shape."""
        rows = []
        for report in self.images:
            for shape in report.shapes:
                bbox = shape.bounding_box
                rows.append(
                    {
                        "image": report.image,
                        "type": shape.shape_type.value,
                        "confidence": shape.confidence,
                        "x": bbox.min_x,
                        "y": bbox.min_y,
                        "width": bbox.width,
                        "height": bbox.height,
                        "center_x": shape.center.x,
                        "center_y": shape.center.y,
                        "area": float(shape.area),
                    }
                )
        return pd.DataFrame(rows, columns=SHAPE_COLUMNS)

    def summary(self) -> pd.DataFrame:
        """Per-image shape counts by type, indexed by image name."""
        types = [shape_type.value for shape_type in ShapeType]
        records = []
        for report in self.images:
            counts = {t: 0 for t in types}
            for shape in report.shapes:
                counts[shape.shape_type.value] += 1
            records.append(
                {
                    "image": report.image,
                    **counts,
                    "total": len(report.shapes),
                    "processing_time": report.processing_time,
                    "error": report.error_message,
                }
            )

        columns = ["image", *types, "total", "processing_time", "error"]
        return pd.DataFrame(records, columns=columns).set_index("image")

    def save(self, output_dir: Union[str, Path]) -> Path:
        """Writes ``detections.csv`` and ``summary.json`` into ``output_dir``."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        self.to_dataframe().to_csv(output_dir / "detections.csv", index=False)

        summary = {
            "started_at": self.started_at,
            "total_time": round(self.total_time, 3),
            "images": len(self.images),
            "failed": sum(1 for report in self.images if not report.success),
            "results": [report.to_dict() for report in self.images],
        }
        with open(output_dir / "summary.json", "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2)

        return output_dir


class BatchRunner:
    """Runs a ShapeDetectionEngine over many image files."""

    def __init__(self, engine: Optional[ShapeDetectionEngine] = None):
        self.engine = engine or ShapeDetectionEngine()

    @property
    def logger(self) -> PipelineLogger:
        return self.engine.logger

    def run(self, directory: Union[str, Path], pattern: str = "*.png") -> BatchReport:
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Directory not found: {directory}")

        paths = sorted(p for p in directory.glob(pattern) if p.is_file())
        self.logger.step(PipelineStage.BATCH, f"Running batch on {len(paths)} image(s)", directory=str(directory))
        return self.run_files(paths)

    def run_files(self, paths: List[Path]) -> BatchReport:
        report = BatchReport()
        start_time = time.time()

        for path in paths:
            report.images.append(self._run_one(Path(path)))

        report.total_time = time.time() - start_time
        return report

    def _run_one(self, path: Path) -> ImageReport:
        try:
            buffer = load_image(path)
        except (OSError, ValueError) as e:
            self.logger.error(PipelineStage.IO, f"Could not load {path.name}", exception=e)
            return ImageReport(image=path.name, error_message=str(e))

        result = self.engine.detect_shapes(buffer)
        return ImageReport(
            image=path.name,
            width=result.image_width,
            height=result.image_height,
            shapes=list(result.shapes),
            processing_time=result.processing_time,
        )


__all__ = ["ImageReport", "BatchReport", "BatchRunner", "SHAPE_COLUMNS"]
