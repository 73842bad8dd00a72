"""Graph export: networkx snapshots and their text renderings.

The snapshot is built from two full-table scans (vertices, then edges) so
isolated vertices are kept. Edges whose endpoints no longer exist still
appear; networkx adds the missing nodes without attributes.
"""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any

import networkx as nx

if TYPE_CHECKING:
    from kvgraph.infrastructure.context import GraphContext


def build_networkx(ctx: GraphContext) -> nx.MultiDiGraph:
    """Snapshot every live vertex and edge; edge keys are edge IDs."""
    g = nx.MultiDiGraph(name=ctx.tables.prefix)
    for snap in ctx.vertices.snapshots():
        g.add_node(snap.element_id)
        g.nodes[snap.element_id].update(snap.properties)
    for record in ctx.edges.records():
        g.add_edge(record.out_id, record.in_id, key=record.edge_id)
        attrs = g.edges[record.out_id, record.in_id, record.edge_id]
        attrs.update(record.properties)
        attrs["label"] = record.label
    return g


def jsonable(value: Any) -> Any:
    """Property value in a JSON-safe form (bytes become base64 text)."""
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, list):
        return [jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    return value


def to_json(g: nx.MultiDiGraph) -> str:
    """``{"nodes": [...], "links": [...]}`` with properties inlined."""
    nodes = [{**jsonable(dict(attrs)), "id": node_id} for node_id, attrs in g.nodes(data=True)]
    links = [
        {**jsonable(dict(attrs)), "id": key, "source": src, "target": tgt}
        for src, tgt, key, attrs in g.edges(keys=True, data=True)
    ]
    return json.dumps({"nodes": nodes, "links": links}, indent=2, sort_keys=True)


def _quote(text: Any) -> str:
    return '"' + str(text).replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_dot(g: nx.MultiDiGraph) -> str:
    """Graphviz DOT, one statement per vertex and per edge."""
    lines = [f"digraph {_quote(g.graph.get('name', 'kvgraph'))} {{"]
    for node_id in g.nodes:
        lines.append(f"  {_quote(node_id)};")
    for src, tgt, key, attrs in g.edges(keys=True, data=True):
        label = _quote(attrs.get("label", ""))
        lines.append(f"  {_quote(src)} -> {_quote(tgt)} [id={_quote(key)} label={label}];")
    lines.append("}")
    return "\n".join(lines) + "\n"
