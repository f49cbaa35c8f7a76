"""Echelon layering and layout

This module provides:
- The echelon map (node id -> layer index) over the canonical layer order
- Deterministic row-based coordinates for every layered node
- Layering diagnostics for imported documents

Layer 0 is the most upstream layer. The canonical order is the document's
`backwards` partition reversed.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from pydantic import BaseModel

from .types import Echelons, GraphDocument, Node

EchelonMap = dict[str, int]


class Position(BaseModel):
    """2-D coordinate of a node; y grows downstream."""

    x: float
    y: float


ORIGIN = Position(x=0.0, y=0.0)


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing used by compute_echelon_positions.

    Attributes:
        echelon_spacing: Vertical distance between consecutive layers
        base_spacing: Horizontal distance between nodes in rows of 10 or more
    """

    echelon_spacing: float = 150.0
    base_spacing: float = 200.0


def canonical_layers(echelons: Echelons) -> list[list[str]]:
    """Return the layers in upstream -> downstream order."""
    return [list(layer) for layer in reversed(echelons.backwards)]


def build_echelon_map(layers: Sequence[Sequence[str]]) -> EchelonMap:
    """Map every node id appearing in layers to its 0-based layer index.

    When an id appears in several layers the last occurrence wins.
    """
    echelon_map: EchelonMap = {}
    for index, layer in enumerate(layers):
        for node_id in layer:
            echelon_map[node_id] = index
    return echelon_map


def echelon_index(echelon_map: EchelonMap, node_id: str) -> int:
    """Layer of node_id, defaulting to 0 for ids in no layer."""
    return echelon_map.get(node_id, 0)


def goes_downstream(echelon_map: EchelonMap, source: str, target: str) -> bool:
    """True when an edge source -> target points to a deeper layer."""
    return echelon_index(echelon_map, source) < echelon_index(echelon_map, target)


def compute_echelon_positions(
    layers: Sequence[Sequence[str]],
    nodes: Iterable[Node],
    config: LayoutConfig | None = None,
) -> dict[str, Position]:
    """Place the nodes of each layer on a horizontally centered row.

    Row r sits at y = r * echelon_spacing. Node spacing within a row is
    base_spacing * max(1, 10 / row_size): sparse rows are spread wider and
    rows of 10 or more nodes use base_spacing. Ids not in
    nodes are skipped, and nodes in no layer get no position.

    Examples:
        A row ["a", "b"] with default config yields x = -500, 500 at y = 0.
    """
    config = config or LayoutConfig()
    present = {node.id for node in nodes}
    positions: dict[str, Position] = {}

    for row, layer in enumerate(layers):
        row_ids = [node_id for node_id in layer if node_id in present]
        if not row_ids:
            continue
        y = row * config.echelon_spacing
        spacing = config.base_spacing * max(1.0, 10 / len(row_ids))
        offset = (len(row_ids) - 1) * spacing / 2
        for i, node_id in enumerate(row_ids):
            positions[node_id] = Position(x=i * spacing - offset, y=y)

    return positions


def echelon_diagnostics(document: GraphDocument) -> list[str]:
    """Describe layering anomalies that the editor tolerates.

    Reports ids listed in more than one layer of a partition, ids that are
    not nodes of the document, and nodes that appear in no layer.
    """
    node_ids = [node.id for node in document.graph.nodes]
    known = set(node_ids)
    messages: list[str] = []

    for name, layers in (
        ("forward", document.echelons.forward),
        ("backwards", document.echelons.backwards),
    ):
        seen: set[str] = set()
        reported: set[str] = set()
        for layer in layers:
            for node_id in layer:
                if node_id in seen and node_id not in reported:
                    messages.append(f"Node '{node_id}' appears in several {name} echelons")
                    reported.add(node_id)
                seen.add(node_id)
        for node_id in sorted(seen - known):
            messages.append(f"Echelon {name} lists unknown node '{node_id}'")
        for node_id in node_ids:
            if node_id not in seen:
                messages.append(f"Node '{node_id}' is missing from {name} echelons")

    return messages
