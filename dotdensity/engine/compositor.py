"""Category compositor — several categories' dots over one geometry.

Calls the generator once per category (in the caller's order), labels each
call's dots with its category, and concatenates everything into a single
DotSet for overlay rendering.
"""

from collections.abc import Mapping

from dotdensity.engine.allocation import derive_seed
from dotdensity.engine.generator import DotGenerator, DotSet
from dotdensity.models.common import PlacementMethod
from dotdensity.models.geometry import MultiPolygonGeometry, PolygonGeometry


class CategoryCompositor:
    """Multi-category overlay built from per-category generator calls."""

    def __init__(self, generator: DotGenerator | None = None) -> None:
        self._generator = generator or DotGenerator()

    def compose(
        self,
        geometry: PolygonGeometry | MultiPolygonGeometry,
        counts: Mapping[str, int],
        method: PlacementMethod | str | None = None,
        *,
        seed: int | None = None,
        feature_id: str | None = None,
    ) -> DotSet:
        """Generate and combine the dots of every category.

        Each category gets the sub-seed ``derive_seed(seed, feature_id,
        category)``, the same one the batch runner uses, so a composed
        feature matches its batch output.

        Returns:
            DotSet with ``category=None`` whose dots carry their own labels,
            grouped by category in ``counts`` order.

        Raises:
            InvalidArgumentError: From any per-category generate call.
        """
        resolved = self._generator.resolve_method(method)
        dot_sets = [
            self._generator.generate(
                geometry,
                count,
                resolved,
                seed=derive_seed(seed, feature_id, category),
                category=category,
                feature_id=feature_id,
            )
            for category, count in counts.items()
        ]
        return DotSet.concat(dot_sets, method=resolved, feature_id=feature_id)
