"""
Visualization helpers for debugging detections.
"""

from __future__ import annotations

from typing import Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle as MPLRect

from shape_brain.core.models import DetectedShape, DetectionResult, PixelBuffer


SHAPE_COLORS = {
    "circle": "tab:blue",
    "triangle": "tab:orange",
    "rectangle": "tab:green",
    "pentagon": "tab:purple",
    "star": "tab:red",
}


class DetectionVisualizer:
    """Overlays detections on the source image and formats text reports."""

    @staticmethod
    def plot_binary(grid: np.ndarray, title: str = "Foreground", figsize: Tuple[int, int] = (8, 6)):
        fig, ax = plt.subplots(figsize=figsize)
        ax.imshow(grid, cmap="gray_r", interpolation="nearest")
        ax.set_title(title)
        ax.axis("off")
        plt.tight_layout()
        return fig, ax

    @staticmethod
    def plot_detections(
        buffer: PixelBuffer,
        result: DetectionResult,
        title: str = "Detected Shapes",
        figsize: Tuple[int, int] = (10, 8),
    ):
        fig, ax = plt.subplots(figsize=figsize)
        ax.imshow(buffer.to_array(), interpolation="nearest")
        ax.set_title(f"{title} ({len(result.shapes)})")
        ax.axis("off")

        for shape in result.shapes:
            DetectionVisualizer._add_shape_overlay(ax, shape)

        plt.tight_layout()
        return fig, ax

    @staticmethod
    def _add_shape_overlay(ax: plt.Axes, shape: DetectedShape) -> None:
        """Bounding box, centroid and label of one detection."""
        bbox = shape.bounding_box
        color = SHAPE_COLORS.get(shape.shape_type.value, "red")

        ax.add_patch(
            MPLRect(
                (bbox.min_x - 0.5, bbox.min_y - 0.5),
                bbox.width,
                bbox.height,
                linewidth=2,
                edgecolor=color,
                facecolor="none",
                linestyle="--",
            )
        )
        ax.plot(shape.center.x, shape.center.y, marker="+", color=color, markersize=10)
        ax.text(
            bbox.min_x,
            bbox.min_y - 2,
            f"{shape.shape_type.value} {shape.confidence:.0%}",
            color=color,
            fontsize=9,
            fontweight="bold",
            verticalalignment="bottom",
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.7),
        )

    @staticmethod
    def format_result(result: DetectionResult) -> str:
        """Human-readable summary of a detection result."""
        lines = [
            f"Processing Time: {result.processing_time:.2f}ms",
            f"Image Size: {result.image_width} x {result.image_height}",
            f"Shapes Found: {len(result.shapes)}",
        ]

        if not result.shapes:
            lines.append("No shapes detected.")
            return "\n".join(lines)

        for i, shape in enumerate(result.shapes, 1):
            bbox = shape.bounding_box
            lines.append(
                f"  {i}. {shape.shape_type.value.capitalize()}"
                f" | confidence {shape.confidence * 100:.1f}%"
                f" | center ({shape.center.x:.1f}, {shape.center.y:.1f})"
                f" | box {bbox.width}x{bbox.height} at ({bbox.min_x}, {bbox.min_y})"
                f" | area {float(shape.area):.1f}px²"
            )
        return "\n".join(lines)

    @staticmethod
    def print_result(result: DetectionResult) -> None:
        print(DetectionVisualizer.format_result(result))


__all__ = ["DetectionVisualizer", "SHAPE_COLORS"]
