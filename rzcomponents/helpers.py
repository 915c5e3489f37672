"""Helper functions for exporting declared graphs."""

import json
from typing import Any, Dict

import click

from rzcomponents.graph import ResourceGraph


def graph_summary(graph: ResourceGraph) -> Dict[str, int]:
    """Count declared nodes per resource type, sorted by type."""
    counts: Dict[str, int] = {}
    for node in graph.nodes:
        counts[node.resource_type] = counts.get(node.resource_type, 0) + 1
    return dict(sorted(counts.items()))


def export_graph(graph: ResourceGraph, filepath: str = "rzgraph.json") -> Dict[str, Any]:
    """Export the declared graph, in creation order, to a JSON file.

    Args:
        graph: Declared resource graph
        filepath: Destination path

    Returns:
        dict: The exported data
    """
    data = graph.to_dict()
    data["creation_order"] = graph.creation_order()
    with open(filepath, "w") as file:
        json.dump(data, file, indent=4)
    click.echo(
        click.style(
            f"\nINFO: {len(graph)} resources from {len(graph.components)} components "
            f"written to {filepath}\n",
            fg="yellow",
            bold=True,
        )
    )
    return data
