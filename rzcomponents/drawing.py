"""Drawing module for rzcomponents.

This module renders the declarations recorded in a ResourceGraph with
Graphviz. Each component becomes a cluster (nested components are nested
clusters), each resource a box labelled with its type, and each explicit
``depends_on`` an edge pointing from the dependency to the resource that needs
it, i.e. in creation order.
"""

from typing import Dict, List, Optional

import click
import graphviz

from rzcomponents.graph import ResourceGraph

NODE_STYLE = {"shape": "box", "style": "rounded", "fontname": "Helvetica", "fontsize": "10"}
CLUSTER_STYLE = {"style": "dashed", "fontname": "Helvetica", "fontsize": "11"}


def _draw_component(
    canvas: graphviz.Digraph,
    graph: ResourceGraph,
    component: str,
    children: Dict[Optional[str], List[str]],
    type_tokens: Dict[str, str],
) -> None:
    with canvas.subgraph(name=f"cluster_{component}") as cluster:
        cluster.attr(label=f"{component}\n{type_tokens[component]}", **CLUSTER_STYLE)
        for node in graph.owned_by(component):
            cluster.node(node.name, label=f"{node.resource_type}\n{node.name}", **NODE_STYLE)
        for child in children.get(component, []):
            _draw_component(cluster, graph, child, children, type_tokens)


def build_digraph(graph: ResourceGraph, title: str = "rzcomponents") -> graphviz.Digraph:
    """Create a Graphviz digraph of the declared resources.

    Args:
        graph: Declared resource graph
        title: Diagram title

    Returns:
        graphviz.Digraph: Unrendered diagram
    """
    canvas = graphviz.Digraph(name=title, graph_attr={"label": title, "rankdir": "TB"})
    children: Dict[Optional[str], List[str]] = {}
    type_tokens = {}
    for record in graph.components:
        children.setdefault(record.parent, []).append(record.name)
        type_tokens[record.name] = record.type_token

    for root in children.get(None, []):
        _draw_component(canvas, graph, root, children, type_tokens)

    for node, dependency in graph.edges():
        canvas.edge(dependency, node)
    return canvas


def render_graph(
    graph: ResourceGraph, outfile: str, outformat: str = "png", title: str = "rzcomponents"
) -> str:
    """Render the declared graph to an image file.

    Requires the Graphviz ``dot`` binary on PATH.

    Args:
        graph: Declared resource graph
        outfile: Output filename without extension
        outformat: Output format (png, svg, pdf)
        title: Diagram title

    Returns:
        str: Path of the rendered file
    """
    click.echo(click.style("\nRendering Resource Graph...", fg="white", bold=True))
    path = build_digraph(graph, title).render(filename=outfile, format=outformat, cleanup=True)
    click.echo(f"  Output file: {path}")
    return path
