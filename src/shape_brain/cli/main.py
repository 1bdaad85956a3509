"""
Command line interface for shape-brain.

Commands:
    detect  Detect shapes in one image and print the result
    batch   Run detection over a directory of images
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt

from shape_brain.analysis.batch import BatchRunner
from shape_brain.core.config import DetectionConfig
from shape_brain.core.logger import configure_logging
from shape_brain.io.loader import load_image
from shape_brain.perception.engine import ShapeDetectionEngine
from shape_brain.perception.visualize import DetectionVisualizer


def _build_config(args: argparse.Namespace) -> DetectionConfig:
    config = DetectionConfig.from_json(args.config) if args.config else DetectionConfig()
    return config.with_overrides(
        threshold=getattr(args, "threshold", None),
        epsilon=getattr(args, "epsilon", None),
        min_blob_area=getattr(args, "min_area", None),
    )


def cmd_detect(args: argparse.Namespace) -> int:
    """`detect`: one image, text summary or JSON on stdout."""
    engine = ShapeDetectionEngine(config=_build_config(args))
    buffer = load_image(args.image)
    result = engine.detect_shapes(buffer)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"Image: {args.image}")
        DetectionVisualizer.print_result(result)

    if args.plot:
        fig, _ = DetectionVisualizer.plot_detections(buffer, result, title=Path(args.image).name)
        fig.savefig(args.plot, dpi=100)
        plt.close(fig)
        print(f"Overlay saved to {args.plot}", file=sys.stderr)

    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """`batch`: every matching image of a directory, summary table on stdout."""
    runner = BatchRunner(ShapeDetectionEngine(config=_build_config(args)))
    report = runner.run(args.directory, pattern=args.pattern)

    summary = report.summary()
    if summary.empty:
        print(f"No image matching '{args.pattern}' in {args.directory}")
    else:
        print(summary.to_string())

    if args.output:
        saved = report.save(args.output)
        print(f"Reports saved to {saved}", file=sys.stderr)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shape-brain", description="Geometric shape detection in raster images")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, help="JSON file with detection thresholds.")
    common.add_argument("-v", "--verbose", action="store_true", help="Log per-blob decisions.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser("detect", parents=[common], help="Detect shapes in one image.")
    detect_parser.add_argument("image", type=str, help="Path to the image file.")
    detect_parser.add_argument("--threshold", type=int, help="Binarization gray threshold (default 128).")
    detect_parser.add_argument("--epsilon", type=float, help="Contour simplification tolerance (default 2.0).")
    detect_parser.add_argument("--min-area", type=int, dest="min_area", help="Minimum blob area in pixels.")
    detect_parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    detect_parser.add_argument("--plot", type=str, help="Save an overlay of the detections to this file.")
    detect_parser.set_defaults(func=cmd_detect)

    batch_parser = subparsers.add_parser("batch", parents=[common], help="Detect shapes in every image of a directory.")
    batch_parser.add_argument("directory", type=str, help="Directory containing the images.")
    batch_parser.add_argument("--pattern", type=str, default="*.png", help="Glob pattern (default *.png).")
    batch_parser.add_argument("--output", type=str, help="Directory for detections.csv and summary.json.")
    batch_parser.set_defaults(func=cmd_batch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
