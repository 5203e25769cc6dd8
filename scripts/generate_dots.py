"""Generate dot-density points for a set of features.

Reads a JSON list of features (this package's Feature schema), runs a batch,
and writes the dots as a GeoJSON FeatureCollection.

Usage:
    python -m scripts.generate_dots data/features.json --out data/dots.geojson
    python -m scripts.generate_dots data/features.json --method random --seed 42
    python -m scripts.generate_dots data/features.json --from-attributes \\
        --unit-per-dot 100 --categories retail,office

Exit code 1 when any feature failed to generate.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog
from pydantic import TypeAdapter

from dotdensity.config.logging_setup import configure_logging
from dotdensity.config.settings import get_settings
from dotdensity.data.dot_counts import build_feature
from dotdensity.engine.batch import BatchRequest, BatchRunner
from dotdensity.export.geojson import dot_sets_to_geojson, write_geojson
from dotdensity.models.common import PlacementMethod
from dotdensity.models.geometry import Feature

_FEATURES = TypeAdapter(list[Feature])


def load_features(path: Path) -> list[Feature]:
    """Load and validate a JSON list of features."""
    return _FEATURES.validate_json(path.read_bytes())


def rescale_features(
    features: list[Feature],
    unit_per_dot: float,
    categories: list[str] | None = None,
) -> list[Feature]:
    """Recompute every feature's dot counts from its raw attributes."""
    return [
        build_feature(f.feature_id, f.geometry, f.attributes, unit_per_dot, categories)
        for f in features
    ]


def _parse_categories(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [c.strip() for c in value.split(",") if c.strip()]


def main(argv: list[str] | None = None) -> int:
    """Dot generation entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Generate dot-density points inside polygons",
    )
    parser.add_argument("features_path", type=Path, help="Path to features JSON")
    parser.add_argument(
        "--method", choices=[m.value for m in PlacementMethod],
        default=settings.DEFAULT_METHOD.value,
        help="Placement strategy (default: %(default)s)",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.RANDOM_SEED,
        help="Base seed for random placement",
    )
    parser.add_argument(
        "--workers", type=int, default=settings.MAX_WORKERS,
        help="Worker threads (default: %(default)s)",
    )
    parser.add_argument(
        "--categories", default=None,
        help="Comma-separated category order (default: each feature's own order)",
    )
    parser.add_argument(
        "--from-attributes", action="store_true",
        help="Recompute dot counts from raw attributes",
    )
    parser.add_argument(
        "--unit-per-dot", type=float, default=settings.UNITS_PER_DOT,
        help="Raw units per dot with --from-attributes (default: %(default)s)",
    )
    parser.add_argument(
        "--out", type=Path, default=None,
        help="Output GeoJSON path (default: stdout)",
    )
    args = parser.parse_args(argv)

    configure_logging(settings)
    log = structlog.get_logger()

    categories = _parse_categories(args.categories)
    features = load_features(args.features_path)
    if args.from_attributes:
        features = rescale_features(features, args.unit_per_dot, categories)
    log.info(
        "features_loaded",
        features=len(features),
        requested_dots=sum(f.total_dots for f in features),
    )

    runner = BatchRunner(settings=settings)
    result = runner.run(BatchRequest(
        features=features,
        method=args.method,
        seed=args.seed,
        categories=categories,
        max_workers=args.workers,
    ))

    if args.out is not None:
        write_geojson(args.out, result.dot_sets)
        log.info("dots_written", path=str(args.out), dots=result.snapshot.dot_count)
    else:
        json.dump(dot_sets_to_geojson(result.dot_sets), sys.stdout)
        sys.stdout.write("\n")

    for failure in result.failures:
        log.warning(
            "feature_failed",
            feature_id=failure.feature_id,
            category=failure.category,
            error=failure.message,
        )

    log.info(
        "run_complete",
        run_id=str(result.snapshot.run_id),
        features=result.snapshot.feature_count,
        dots=result.snapshot.dot_count,
        failed=result.snapshot.failed_count,
        degenerate=result.snapshot.degenerate_count,
    )
    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main())
