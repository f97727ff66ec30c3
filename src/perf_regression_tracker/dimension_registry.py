"""
Dimension registry for performance measurements.

This module keeps the ordered list of measurement dimensions (elapsed time,
CPU time, ...) that results are recorded against. The first registered
dimension is the default one used for regression deviations.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass


@dataclass(frozen=True)
class Dimension:
    """A measurable performance axis."""

    id: int
    name: str
    short_name: str  # Key used in JSON sample files and CLI options
    unit: str


class DimensionRegistry:
    """Registry for measurement dimensions."""

    def __init__(self):
        self._dimensions: Dict[int, Dimension] = {}

    def register_dimension(self, dimension: Dimension):
        """Register a dimension. Registration order is kept."""
        if dimension.id in self._dimensions:
            raise ValueError(f"Dimension id already registered: {dimension.id}")
        self._dimensions[dimension.id] = dimension

    def get_dimension(self, dim_id: int) -> Optional[Dimension]:
        """Get a dimension by id."""
        return self._dimensions.get(dim_id)

    def find(self, short_name: str) -> Dimension:
        """Get a dimension by its short name, raising KeyError when unknown."""
        for dimension in self._dimensions.values():
            if dimension.short_name == short_name:
                return dimension
        raise KeyError(f"Unknown dimension: {short_name}")

    def supported_dimensions(self) -> List[Dimension]:
        """List all registered dimensions, default dimension first."""
        return list(self._dimensions.values())

    def default_dimension(self) -> Dimension:
        """Get the dimension used for regression deviations."""
        if not self._dimensions:
            raise LookupError("No dimension registered")
        return next(iter(self._dimensions.values()))


# Global registry instance
_registry = DimensionRegistry()


def get_registry() -> DimensionRegistry:
    """Get the global dimension registry."""
    return _registry


# Built-in dimension ids
ELAPSED_PROCESS = 24
CPU_TIME = 20
USER_TIME = 10
KERNEL_TIME = 11
USED_JAVA_HEAP = 3
WORKING_SET = 4
GC_TIME = 27


def register_builtin_dimensions():
    """Register all built-in dimensions, elapsed process time first."""

    _registry.register_dimension(
        Dimension(
            id=ELAPSED_PROCESS,
            name="Elapsed Process",
            short_name="elapsed",
            unit="ms",
        )
    )

    _registry.register_dimension(
        Dimension(id=CPU_TIME, name="CPU Time", short_name="cpu_time", unit="ms")
    )

    _registry.register_dimension(
        Dimension(id=USER_TIME, name="User time", short_name="user_time", unit="ms")
    )

    _registry.register_dimension(
        Dimension(
            id=KERNEL_TIME, name="Kernel time", short_name="kernel_time", unit="ms"
        )
    )

    _registry.register_dimension(
        Dimension(
            id=USED_JAVA_HEAP, name="Used Java Heap", short_name="heap", unit="bytes"
        )
    )

    _registry.register_dimension(
        Dimension(
            id=WORKING_SET, name="Working Set", short_name="working_set", unit="bytes"
        )
    )

    _registry.register_dimension(
        Dimension(id=GC_TIME, name="GC time", short_name="gc_time", unit="ms")
    )


# Initialize built-in dimensions
register_builtin_dimensions()
