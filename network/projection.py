"""Rendering projection of a graph document

Builds the plain data a diagram renderer displays: node labels, CSS class
names and positions, edge handle sides, and the set of elements to keep
highlighted for the current selection. The projection is disposable and is
re-derived from the document after every edit.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from .echelons import (
    ORIGIN,
    LayoutConfig,
    Position,
    build_echelon_map,
    canonical_layers,
    compute_echelon_positions,
    goes_downstream,
)
from .enums import SelectionKind
from .errors import InvariantViolation, UnknownElementError
from .templates import build_short_node_label
from .types import GraphDocument


class FlowNode(BaseModel):
    """A node as handed to the renderer."""

    id: str
    label: str
    position: Position
    class_name: str
    obj: dict[str, Any]


class FlowEdge(BaseModel):
    """An edge as handed to the renderer.

    Downstream edges leave the bottom of the source and enter the top of
    the target; lateral and upstream edges do the opposite.
    """

    id: str
    source: str
    target: str
    source_handle: str
    target_handle: str
    class_name: str
    obj: dict[str, Any]


class NetworkView(BaseModel):
    nodes: list[FlowNode]
    edges: list[FlowEdge]


class Selection(BaseModel):
    """The element the user clicked."""

    model_config = ConfigDict(use_enum_values=True)

    kind: SelectionKind
    id: str


class SelectionFocus(BaseModel):
    """Elements kept fully visible while a selection is active."""

    node_ids: list[str]
    edge_ids: list[str]


def edge_handles(downstream: bool) -> tuple[str, str]:
    """Return (source_handle, target_handle) for an edge direction."""
    if downstream:
        return "source-bottom", "target-top"
    return "source-top", "target-bottom"


def build_network_view(
    document: GraphDocument,
    layout: LayoutConfig | None = None,
    label_max_len: int = 26,
    show_type: bool = True,
) -> NetworkView:
    """Project a document into renderer-ready nodes and edges.

    Nodes missing from every echelon are placed at the origin.

    Raises:
        InvariantViolation: If an edge references a node that does not exist
    """
    layers = canonical_layers(document.echelons)
    echelon_map = build_echelon_map(layers)
    positions = compute_echelon_positions(layers, document.graph.nodes, layout)

    nodes: list[FlowNode] = []
    for node in document.graph.nodes:
        obj = node.obj.to_json()
        nodes.append(
            FlowNode(
                id=node.id,
                label=build_short_node_label(obj, max_len=label_max_len, show_type=show_type),
                position=positions.get(node.id, ORIGIN),
                class_name=f"node--{node.obj.node_type}",
                obj=obj,
            )
        )

    node_ids = {node.id for node in nodes}
    edges: list[FlowEdge] = []
    for edge in document.graph.edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            raise InvariantViolation(
                f"Edge '{edge.key}' references a missing node ({edge.source} -> {edge.target})"
            )
        source_handle, target_handle = edge_handles(
            goes_downstream(echelon_map, edge.source, edge.target)
        )
        edges.append(
            FlowEdge(
                id=edge.key,
                source=edge.source,
                target=edge.target,
                source_handle=source_handle,
                target_handle=target_handle,
                class_name=f"edge--{edge.obj.edge_type}",
                obj=edge.obj.to_json(),
            )
        )

    return NetworkView(nodes=nodes, edges=edges)


def selection_focus(document: GraphDocument, selection: Selection) -> SelectionFocus:
    """Elements related to the selection.

    A node keeps itself, its neighbours, and its incident edges; an edge
    keeps itself and both endpoints.

    Raises:
        UnknownElementError: If the selected element does not exist
    """
    if selection.kind == SelectionKind.EDGE.value:
        for edge in document.graph.edges:
            if edge.key == selection.id:
                return SelectionFocus(node_ids=[edge.source, edge.target], edge_ids=[edge.key])
        raise UnknownElementError(f"Edge '{selection.id}' not found")

    if not any(node.id == selection.id for node in document.graph.nodes):
        raise UnknownElementError(f"Node '{selection.id}' not found")

    node_ids = [selection.id]
    edge_ids: list[str] = []
    for edge in document.graph.edges:
        if edge.source == selection.id:
            edge_ids.append(edge.key)
            if edge.target not in node_ids:
                node_ids.append(edge.target)
        elif edge.target == selection.id:
            edge_ids.append(edge.key)
            if edge.source not in node_ids:
                node_ids.append(edge.source)
    return SelectionFocus(node_ids=node_ids, edge_ids=edge_ids)
