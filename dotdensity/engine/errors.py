"""Error taxonomy for dot generation.

InvalidArgumentError is fatal to one generation call only; batch callers
record it and continue with the next feature. Zero-area polygons are not an
error at all: the generator returns an empty, degenerate DotSet.
"""


class DotDensityError(Exception):
    """Base class for dot generation failures."""


class InvalidArgumentError(DotDensityError, ValueError):
    """Negative dot count or malformed ring (fewer than 3 vertices, non-finite)."""


class PlacementError(DotDensityError, RuntimeError):
    """Placement exhausted its refinement or draw budget before reaching the count."""
