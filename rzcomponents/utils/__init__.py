"""Utility modules for rzcomponents.

This package contains helpers for working with resource graphs expressed as
plain adjacency dictionaries.
"""

from .graph_utils import (
    find_circular_refs,
    find_missing_dependencies,
    topological_order,
)

__all__ = [
    "find_circular_refs",
    "find_missing_dependencies",
    "topological_order",
]
