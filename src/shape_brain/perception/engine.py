"""
Shape detection engine: binarize -> blobs -> contours -> classification.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shape_brain.core.config import DetectionConfig
from shape_brain.core.logger import PipelineLogger, PipelineStage
from shape_brain.core.models import DetectedShape, DetectionResult, PixelBuffer
from shape_brain.perception.binarizer import Binarizer
from shape_brain.perception.blobs import BlobExtractor
from shape_brain.perception.contour import ContourTracer
from shape_brain.perception.detectors import ShapeClassifier
from shape_brain.perception.simplify import ContourSimplifier


@dataclass
class _RunStatistics:
    blobs_total: int = 0
    rejected_area: int = 0
    rejected_contour: int = 0
    unclassified: int = 0
    shapes: List[DetectedShape] = field(default_factory=list)


class ShapeDetectionEngine:
    """High-level interface detecting shapes in an RGBA pixel buffer."""

    def __init__(self, config: Optional[DetectionConfig] = None, logger: Optional[PipelineLogger] = None):
        self.config = config or DetectionConfig()
        self.logger = logger or PipelineLogger(keep_entries=False)

        self.binarizer = Binarizer(self.config.threshold, self.config.alpha_cutoff)
        self.extractor = BlobExtractor()
        self.tracer = ContourTracer()
        self.simplifier = ContourSimplifier(self.config.epsilon, self.config.closure_distance)
        self.classifier = ShapeClassifier(self.config)

    def detect_shapes(self, buffer: PixelBuffer) -> DetectionResult:
        """Run the full pipeline on one image."""
        result, _ = self._run(buffer)
        return result

    def _run(self, buffer: PixelBuffer) -> tuple[DetectionResult, _RunStatistics]:
        start_time = time.perf_counter()
        stats = _RunStatistics()
        log = self.logger

        with log.timed_step(PipelineStage.BINARIZE, "Binarization", threshold=self.config.threshold):
            grid = self.binarizer.binarize(buffer)

        with log.timed_step(PipelineStage.BLOBS, "Blob extraction"):
            blobs = self.extractor.extract(grid)
        stats.blobs_total = len(blobs)

        for blob in blobs:
            if blob.area < self.config.min_blob_area:
                stats.rejected_area += 1
                log.debug(PipelineStage.BLOBS, "Blob below minimum area", label=blob.label, area=blob.area)
                continue

            with log.timed_step(PipelineStage.CONTOUR, "Contour tracing", label=blob.label):
                contour = self.tracer.trace(blob, grid)
            if len(contour) < self.config.min_contour_length:
                stats.rejected_contour += 1
                log.debug(PipelineStage.CONTOUR, "Contour too short", label=blob.label, points=len(contour))
                continue

            with log.timed_step(PipelineStage.CLASSIFY, "Classification", label=blob.label):
                vertices = self.simplifier.simplify(contour)
                vertex_count = self.simplifier.count_vertices(vertices)
                detection = self.classifier.classify(contour, blob, vertices, vertex_count)

            if detection is None:
                stats.unclassified += 1
                log.debug(PipelineStage.CLASSIFY, "Unclassified blob", label=blob.label, vertices=vertex_count)
                continue

            log.debug(
                PipelineStage.CLASSIFY,
                f"Detected {detection.shape_type.value}",
                label=blob.label,
                confidence=round(detection.confidence, 3),
            )
            stats.shapes.append(detection)

        processing_time = (time.perf_counter() - start_time) * 1000
        log.metrics.images_processed += 1
        log.step(
            PipelineStage.PIPELINE,
            f"Detected {len(stats.shapes)} shape(s) in {processing_time:.1f}ms",
            width=buffer.width,
            height=buffer.height,
            blobs=stats.blobs_total,
        )

        result = DetectionResult(
            shapes=tuple(stats.shapes),
            processing_time=processing_time,
            image_width=buffer.width,
            image_height=buffer.height,
        )
        return result, stats

    def analyze_image(self, buffer: PixelBuffer, verbose: bool = False) -> Dict[str, Any]:
        """Detection plus statistics on how each blob was handled."""
        result, stats = self._run(buffer)
        counts = result.count_by_type()

        analysis: Dict[str, Any] = {
            "result": result,
            "statistics": {
                "blobs_total": stats.blobs_total,
                "rejected_area": stats.rejected_area,
                "rejected_contour": stats.rejected_contour,
                "unclassified": stats.unclassified,
                "shapes_total": len(result.shapes),
                **counts,
            },
        }

        if verbose:
            print(f"\n{'='*60}")
            print("IMAGE ANALYSIS")
            print(f"{'='*60}")
            print(f"Image size: {buffer.width} x {buffer.height}")
            print(f"Blobs found: {stats.blobs_total}")
            print(f"  - Below minimum area: {stats.rejected_area}")
            print(f"  - Contour too short: {stats.rejected_contour}")
            print(f"  - Unclassified: {stats.unclassified}")
            print(f"Total shapes detected: {len(result.shapes)}")
            for shape_type, count in counts.items():
                if count:
                    print(f"  - {shape_type.capitalize()}: {count}")

        return analysis


__all__ = ["ShapeDetectionEngine"]
