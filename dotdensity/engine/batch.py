"""Batch runner — dots for many features and categories in one run.

Work units are (feature, category) pairs in caller order. Units are
independent: each gets its own sub-seed derived from the base seed, the
feature id and the category, so output is the same whether units run
sequentially or on a thread pool. Results are collected in submission order.

A unit that raises DotDensityError is logged and recorded as a
FeatureFailure; the rest of the run continues. Zero-area geometry is not a
failure; it yields an empty DotSet flagged degenerate.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from dotdensity.config.settings import Settings, get_settings
from dotdensity.engine.allocation import derive_seed
from dotdensity.engine.errors import DotDensityError
from dotdensity.engine.generator import Dot, DotGenerator, DotSet
from dotdensity.models.common import PlacementMethod, new_uuid7
from dotdensity.models.geometry import Feature
from dotdensity.models.run import FeatureFailure, RunSnapshot
from dotdensity.observability.metrics import MetricEvent, MetricsStore, MetricType

logger = logging.getLogger(__name__)


@dataclass
class BatchRequest:
    """Input for a batch run: features plus placement options.

    ``categories`` fixes the category order for every feature; a feature
    lacking a category gets zero dots for it. When None, each feature's own
    ``dot_counts`` order is used.
    """

    features: list[Feature]
    method: PlacementMethod | str | None = None
    seed: int | None = None
    categories: list[str] | None = None
    max_workers: int | None = None


@dataclass(frozen=True)
class BatchResult:
    """Result of an entire batch run."""

    snapshot: RunSnapshot
    dot_sets: list[DotSet]
    failures: list[FeatureFailure] = field(default_factory=list)

    @property
    def dots(self) -> list[Dot]:
        """Every dot of the run, grouped by feature then category."""
        return [d for ds in self.dot_sets for d in ds.dots]

    def dot_sets_for(self, feature_id: str) -> list[DotSet]:
        """DotSets produced for one feature, in category order."""
        return [ds for ds in self.dot_sets if ds.feature_id == feature_id]


@dataclass(frozen=True)
class _WorkUnit:
    feature: Feature
    category: str
    count: int


@dataclass(frozen=True)
class _UnitOutcome:
    dot_set: DotSet | None = None
    failure: FeatureFailure | None = None


class BatchRunner:
    """Runs the dot generator over a batch of features."""

    def __init__(
        self,
        generator: DotGenerator | None = None,
        metrics: MetricsStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._generator = generator or DotGenerator(self._settings)
        self._metrics = metrics

    def run(self, request: BatchRequest) -> BatchResult:
        """Generate dots for every (feature, category) unit of the request.

        Returns:
            BatchResult with DotSets in stable (feature, category) order and
            one FeatureFailure per failed unit.
        """
        method = self._generator.resolve_method(request.method)
        units = self._build_units(request)
        max_workers = request.max_workers or self._settings.MAX_WORKERS
        seed = request.seed if request.seed is not None else self._settings.RANDOM_SEED

        started = time.perf_counter()
        if max_workers > 1 and len(units) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(
                    pool.map(lambda u: self._execute_unit(u, method, seed), units),
                )
        else:
            outcomes = [self._execute_unit(u, method, seed) for u in units]
        elapsed = time.perf_counter() - started

        dot_sets = [o.dot_set for o in outcomes if o.dot_set is not None]
        failures = [o.failure for o in outcomes if o.failure is not None]
        degenerate = sum(1 for ds in dot_sets if ds.degenerate)
        dot_count = sum(len(ds) for ds in dot_sets)

        snapshot = RunSnapshot(
            run_id=new_uuid7(),
            method=method,
            seed=seed,
            feature_count=len(request.features),
            unit_count=len(units),
            dot_count=dot_count,
            failed_count=len(failures),
            degenerate_count=degenerate,
        )

        logger.info(
            "Batch run %s: %d features, %d units, %d dots, %d failed, "
            "%d degenerate (%.3fs)",
            snapshot.run_id, snapshot.feature_count, snapshot.unit_count,
            dot_count, len(failures), degenerate, elapsed,
        )

        if self._metrics is not None:
            self._record_metrics(snapshot, elapsed)

        return BatchResult(snapshot=snapshot, dot_sets=dot_sets, failures=failures)

    @staticmethod
    def _build_units(request: BatchRequest) -> list[_WorkUnit]:
        units: list[_WorkUnit] = []
        for feature in request.features:
            if request.categories is not None:
                pairs = [(c, feature.dot_counts.get(c, 0)) for c in request.categories]
            else:
                pairs = list(feature.dot_counts.items())
            units.extend(_WorkUnit(feature, c, n) for c, n in pairs)
        return units

    def _execute_unit(
        self,
        unit: _WorkUnit,
        method: PlacementMethod,
        base_seed: int | None,
    ) -> _UnitOutcome:
        feature_id = unit.feature.feature_id
        try:
            dot_set = self._generator.generate(
                unit.feature.geometry,
                unit.count,
                method,
                seed=derive_seed(base_seed, feature_id, unit.category),
                category=unit.category,
                feature_id=feature_id,
            )
        except DotDensityError as exc:
            logger.warning(
                "Feature %s category %s failed: %s",
                feature_id, unit.category, exc,
            )
            return _UnitOutcome(
                failure=FeatureFailure(
                    feature_id=feature_id,
                    category=unit.category,
                    error_type=type(exc).__name__,
                    message=str(exc),
                ),
            )
        return _UnitOutcome(dot_set=dot_set)

    def _record_metrics(self, snapshot: RunSnapshot, elapsed: float) -> None:
        metadata = {"method": snapshot.method.value, "seed": snapshot.seed}
        for metric_type, value, unit in (
            (MetricType.DOTS_GENERATED, float(snapshot.dot_count), "dots"),
            (MetricType.FEATURES_FAILED, float(snapshot.failed_count), "units"),
            (MetricType.DEGENERATE_FEATURES, float(snapshot.degenerate_count), "units"),
            (MetricType.GENERATION_TIME, elapsed, "seconds"),
        ):
            self._metrics.record(MetricEvent(
                run_id=snapshot.run_id,
                metric_type=metric_type,
                value=value,
                unit=unit,
                metadata=dict(metadata),
            ))
