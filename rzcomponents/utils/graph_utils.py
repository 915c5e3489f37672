"""Graph manipulation utilities for rzcomponents.

This module provides helpers that operate on plain adjacency dictionaries
(``{node: [dependencies]}``), the same shape ``ResourceGraph.graphdict``
returns.
"""

from graphlib import CycleError, TopologicalSorter
from typing import Dict, List

from rzcomponents.exceptions import ConfigurationError


def find_missing_dependencies(graphdict: Dict[str, List[str]]) -> List[tuple]:
    """Find dependency edges pointing at nodes absent from the graph.

    Args:
        graphdict: Adjacency dict mapping each node to its dependencies

    Returns:
        list: Sorted list of (node, missing_dependency) tuples
    """
    missing = []
    for node, dependencies in graphdict.items():
        for dependency in dependencies:
            if dependency not in graphdict:
                missing.append((node, dependency))
    return sorted(missing)


def find_circular_refs(graphdict: Dict[str, List[str]]) -> List[str]:
    """Return one dependency cycle in the graph, or an empty list.

    Args:
        graphdict: Adjacency dict mapping each node to its dependencies

    Returns:
        list: Node names forming the cycle, first node repeated at the end
    """
    try:
        TopologicalSorter(graphdict).prepare()
    except CycleError as e:
        return list(e.args[1])
    return []


def topological_order(graphdict: Dict[str, List[str]]) -> List[str]:
    """Order nodes so every node comes after all of its dependencies.

    Ties are broken by declaration order so the result is deterministic.

    Args:
        graphdict: Adjacency dict mapping each node to its dependencies

    Returns:
        list: Node names in creation order

    Raises:
        ConfigurationError: If the graph contains a dependency cycle
    """
    position = {node: index for index, node in enumerate(graphdict)}
    sorter = TopologicalSorter(graphdict)
    try:
        sorter.prepare()
    except CycleError as e:
        raise ConfigurationError(
            "Dependency cycle in resource graph", context={"cycle": " -> ".join(e.args[1])}
        ) from e

    order = []
    while sorter.is_active():
        ready = sorted(sorter.get_ready(), key=lambda node: position.get(node, len(position)))
        order.extend(ready)
        sorter.done(*ready)
    return order
