"""Graph document operations

Every operation takes a GraphDocument and returns a new one; the input is
never mutated and untouched nodes/edges are shared between versions.

- parse_document / load_document: validated import
- add_node, connect, delete_node, delete_edge: structural edits
- replace_node_object / replace_edge_object: write back an edited `obj`
- export_document / dump_document: rounded wire output
"""

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .adjacency import has_max_out_edge, is_pair_allowed, resolve_edge_type
from .echelons import build_echelon_map, canonical_layers, goes_downstream
from .enums import ConnectionVerdict, EdgeType, NodeType, Severity
from .errors import DocumentFormatError, UnknownElementError
from .json_patch import round_numbers
from .templates import (
    build_initial_sale_stream,
    build_network_key,
    edge_template,
    node_template,
)
from .types import Echelons, Edge, EdgeObject, Graph, GraphDocument, Node, NodeObject

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2
MAX_PRECISION = 15


# ============================================================================
# Import / Export
# ============================================================================


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def load_document(data: Any) -> GraphDocument:
    """Validate already-decoded JSON data as a graph document.

    Raises:
        DocumentFormatError: If data is not shaped like a graph document
    """
    try:
        return GraphDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentFormatError(
            f"Invalid network document ({_describe_validation_error(exc)})"
        ) from exc


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"Unexpected constant {name}")


def parse_document(text: str | bytes) -> GraphDocument:
    """Decode and validate a JSON graph document.

    Raises:
        DocumentFormatError: If text is not JSON or not a graph document
    """
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DocumentFormatError("Invalid JSON file.") from exc
    return load_document(data)


def export_document(document: GraphDocument, precision: int = DEFAULT_PRECISION) -> dict[str, Any]:
    """Wire representation with every number in node/edge objects rounded."""
    data = document.to_json()
    for node in data["graph"]["nodes"]:
        node["obj"] = round_numbers(node["obj"], precision)
    for edge in data["graph"]["edges"]:
        edge["obj"] = round_numbers(edge["obj"], precision)
    return data


def dump_document(document: GraphDocument, precision: int = DEFAULT_PRECISION) -> str:
    """Serialize a document for download (2-space indented JSON)."""
    return json.dumps(export_document(document, precision), indent=2, ensure_ascii=False)


# ============================================================================
# Lookups
# ============================================================================


def find_node(document: GraphDocument, node_id: str) -> Node | None:
    return next((node for node in document.graph.nodes if node.id == node_id), None)


def find_edge(document: GraphDocument, key: str) -> Edge | None:
    return next((edge for edge in document.graph.edges if edge.key == key), None)


def node_type_of(document: GraphDocument, node_id: str) -> NodeType | None:
    """Type of node_id, or None when the node does not exist."""
    node = find_node(document, node_id)
    return NodeType(node.obj.node_type) if node is not None else None


def _require_node(document: GraphDocument, node_id: str) -> Node:
    node = find_node(document, node_id)
    if node is None:
        raise UnknownElementError(f"Node '{node_id}' not found")
    return node


def _require_edge(document: GraphDocument, key: str) -> Edge:
    edge = find_edge(document, key)
    if edge is None:
        raise UnknownElementError(f"Edge '{key}' not found")
    return edge


def _short_uid() -> str:
    return uuid.uuid4().hex[:10]


# ============================================================================
# Nodes
# ============================================================================


def add_node(
    document: GraphDocument,
    node_type: NodeType | str,
    values: dict[str, str] | None = None,
    node_id: str | None = None,
) -> tuple[GraphDocument, Node]:
    """Add a node built from the template of node_type.

    When identifying values are given (location, product, ...) the node's
    network key is built from them and used as its id; otherwise a synthetic
    id is generated and doubles as the network key. A new sale node built
    from values gets an initial demand stream.

    The node joins the most upstream echelon of both partitions.

    Raises:
        DocumentFormatError: If the id is already taken
        ValueError: If values lack an identifying attribute
    """
    node_type = NodeType(node_type)
    obj = node_template(node_type)

    network_key: str | None = None
    if values:
        network_key = build_network_key(node_type, values)
        if node_type == NodeType.SALE:
            obj["streams"] = [build_initial_sale_stream(network_key, values)]

    if node_id is None:
        node_id = network_key or f"n_{_short_uid()}"
    if find_node(document, node_id) is not None:
        raise DocumentFormatError(f"Node '{node_id}' already exists")

    obj["network_key"] = network_key or node_id
    node = Node(id=node_id, obj=NodeObject.model_validate(obj))

    forward = [list(layer) for layer in document.echelons.forward]
    backwards = [list(layer) for layer in document.echelons.backwards]
    if forward:
        forward[0].append(node_id)
    else:
        forward.append([node_id])
    if backwards:
        backwards[-1].append(node_id)
    else:
        backwards.append([node_id])

    updated = GraphDocument.model_construct(
        graph=Graph.model_construct(
            nodes=[*document.graph.nodes, node],
            edges=document.graph.edges,
        ),
        echelons=Echelons.model_construct(forward=forward, backwards=backwards),
    )
    logger.info("[ADD_NODE] %s (%s)", node_id, node_type.value)
    return updated, node


def delete_node(document: GraphDocument, node_id: str) -> GraphDocument:
    """Remove a node, every edge touching it, and its echelon entries."""
    _require_node(document, node_id)

    edges = [
        edge for edge in document.graph.edges
        if edge.source != node_id and edge.target != node_id
    ]
    removed = len(document.graph.edges) - len(edges)
    logger.info("[DELETE_NODE] %s (cascade: %d edges)", node_id, removed)

    return GraphDocument.model_construct(
        graph=Graph.model_construct(
            nodes=[node for node in document.graph.nodes if node.id != node_id],
            edges=edges,
        ),
        echelons=Echelons.model_construct(
            forward=[[i for i in layer if i != node_id] for layer in document.echelons.forward],
            backwards=[[i for i in layer if i != node_id] for layer in document.echelons.backwards],
        ),
    )


def replace_node_object(document: GraphDocument, node_id: str, obj: dict[str, Any]) -> GraphDocument:
    """Replace the `obj` of a node with an edited wire object.

    Raises:
        UnknownElementError: If the node does not exist
        DocumentFormatError: If obj is not a valid node object
    """
    _require_node(document, node_id)
    try:
        node_obj = NodeObject.model_validate(obj)
    except ValidationError as exc:
        raise DocumentFormatError(
            f"Invalid node object ({_describe_validation_error(exc)})"
        ) from exc

    nodes = [
        Node(id=node.id, obj=node_obj) if node.id == node_id else node
        for node in document.graph.nodes
    ]
    return document.model_copy(
        update={"graph": Graph.model_construct(nodes=nodes, edges=document.graph.edges)}
    )


# ============================================================================
# Edges
# ============================================================================


@dataclass(frozen=True)
class ConnectionOutcome:
    """Result of a connection attempt.

    Rejections are ordinary outcomes (applied=False) carrying a user-facing
    severity and message; document is then the unchanged input.
    """

    verdict: ConnectionVerdict
    document: GraphDocument
    severity: Severity
    message: str
    edge: Edge | None = None
    downstream: bool = False

    @property
    def applied(self) -> bool:
        return self.verdict == ConnectionVerdict.ACCEPTED


def connect(
    document: GraphDocument,
    source: str,
    target: str,
    requested_type: EdgeType | str = EdgeType.MOVEMENT,
) -> ConnectionOutcome:
    """Run the connection-creation protocol for source -> target.

    Steps:
    1. Reject when source is a capped node that already has an out-edge
    2. Reject when the node types may not be connected (or source == target)
    3. Resolve the edge type from the node types and requested_type
    4. Skip when an identical (source, target, type) edge exists
    5. Build the edge from its type's template, stamped with network keys
    """
    src_type = node_type_of(document, source)
    tgt_type = node_type_of(document, target)

    if has_max_out_edge(source, src_type, document.graph.edges):
        logger.info("[CONNECT] %s -> %s rejected: out-degree cap", source, target)
        return ConnectionOutcome(
            verdict=ConnectionVerdict.CAPACITY,
            document=document,
            severity=Severity.ERROR,
            message=f"A {src_type.value} node can have only one outgoing edge.",
        )

    if source == target or not is_pair_allowed(src_type, tgt_type):
        logger.info("[CONNECT] %s -> %s rejected: %s -> %s not allowed", source, target, src_type, tgt_type)
        src_label = src_type.value if src_type else "unknown"
        tgt_label = tgt_type.value if tgt_type else "unknown"
        return ConnectionOutcome(
            verdict=ConnectionVerdict.ADJACENCY,
            document=document,
            severity=Severity.ERROR,
            message=f"Connection {src_label} -> {tgt_label} is not allowed.",
        )

    edge_type = resolve_edge_type(src_type, tgt_type, requested_type)

    for edge in document.graph.edges:
        if edge.source == source and edge.target == target and edge.obj.edge_type == edge_type.value:
            logger.info("[CONNECT] %s -> %s skipped: duplicate %s edge", source, target, edge_type.value)
            return ConnectionOutcome(
                verdict=ConnectionVerdict.DUPLICATE,
                document=document,
                severity=Severity.INFO,
                message=f"A {edge_type.value} edge {source} -> {target} already exists.",
            )

    obj = edge_template(edge_type)
    obj["network_key_from"] = source
    obj["network_key_to"] = target
    if not obj.get("network_key"):
        obj["network_key"] = f"({source})__{edge_type.value}__({target})"

    key = f"{source}__{edge_type.value}__{target}__{_short_uid()}"
    edge = Edge(key=key, source=source, target=target, obj=EdgeObject.model_validate(obj))

    echelon_map = build_echelon_map(canonical_layers(document.echelons))
    updated = document.model_copy(
        update={
            "graph": Graph.model_construct(
                nodes=document.graph.nodes,
                edges=[*document.graph.edges, edge],
            )
        }
    )
    logger.info("[CONNECT] %s -> %s added as %s (%s)", source, target, edge_type.value, key)
    return ConnectionOutcome(
        verdict=ConnectionVerdict.ACCEPTED,
        document=updated,
        severity=Severity.INFO,
        message=f"Added {edge_type.value} edge {source} -> {target}.",
        edge=edge,
        downstream=goes_downstream(echelon_map, source, target),
    )


def is_valid_connection(document: GraphDocument, source: str, target: str) -> bool:
    """Pre-flight check used while the user drags a connection."""
    if source == target:
        return False
    return is_pair_allowed(node_type_of(document, source), node_type_of(document, target))


def delete_edge(document: GraphDocument, key: str) -> GraphDocument:
    """Remove a single edge."""
    _require_edge(document, key)
    logger.info("[DELETE_EDGE] %s", key)
    return document.model_copy(
        update={
            "graph": Graph.model_construct(
                nodes=document.graph.nodes,
                edges=[edge for edge in document.graph.edges if edge.key != key],
            )
        }
    )


def replace_edge_object(document: GraphDocument, key: str, obj: dict[str, Any]) -> GraphDocument:
    """Replace the `obj` of an edge with an edited wire object.

    Raises:
        UnknownElementError: If the edge does not exist
        DocumentFormatError: If obj is not a valid edge object
    """
    _require_edge(document, key)
    try:
        edge_obj = EdgeObject.model_validate(obj)
    except ValidationError as exc:
        raise DocumentFormatError(
            f"Invalid edge object ({_describe_validation_error(exc)})"
        ) from exc

    edges = [
        edge.model_copy(update={"obj": edge_obj}) if edge.key == key else edge
        for edge in document.graph.edges
    ]
    return document.model_copy(
        update={"graph": Graph.model_construct(nodes=document.graph.nodes, edges=edges)}
    )
