"""Network package for the supply network editor

This package provides:
- Graph document types (GraphDocument, Node, Edge) and their wire format
- Enums (NodeType, EdgeType, Severity, ...) for categorization
- Echelon layering and deterministic layout
- Adjacency validation and edge-type resolution
- The JSON value patch engine used to edit node/edge objects
- Document operations (import, add, connect, delete, export)

This package has no knowledge of HTTP or of any rendering surface.
"""

from .adjacency import (
    ALLOWED_TARGETS,
    EDGE_TYPE_RULES,
    EdgeTypeRule,
    has_max_out_edge,
    is_pair_allowed,
    matching_rule,
    resolve_edge_type,
)
from .document import (
    DEFAULT_PRECISION,
    MAX_PRECISION,
    ConnectionOutcome,
    add_node,
    connect,
    delete_edge,
    delete_node,
    dump_document,
    export_document,
    find_edge,
    find_node,
    is_valid_connection,
    load_document,
    node_type_of,
    parse_document,
    replace_edge_object,
    replace_node_object,
)
from .echelons import (
    LayoutConfig,
    Position,
    build_echelon_map,
    canonical_layers,
    compute_echelon_positions,
    echelon_diagnostics,
    echelon_index,
    goes_downstream,
)
from .enums import ConnectionVerdict, EdgeType, NodeType, SelectionKind, Severity
from .errors import (
    DocumentFormatError,
    InvariantViolation,
    JsonPathError,
    NetworkError,
    UnknownElementError,
)
from .json_patch import (
    JSONValue,
    parse_leaf_edit,
    read_json_at_path,
    round_numbers,
    sanitize_to_json_value,
    update_json_at_path,
)
from .projection import (
    FlowEdge,
    FlowNode,
    NetworkView,
    Selection,
    SelectionFocus,
    build_network_view,
    selection_focus,
)
from .templates import (
    EDGE_TEMPLATES,
    NETWORK_KEY_FORMATS,
    NODE_TEMPLATES,
    build_initial_sale_stream,
    build_network_key,
    build_short_node_label,
    edge_template,
    node_template,
)
from .types import Echelons, Edge, EdgeObject, Graph, GraphDocument, Node, NodeObject

__all__ = [
    # Enums
    "NodeType",
    "EdgeType",
    "ConnectionVerdict",
    "SelectionKind",
    "Severity",
    # Errors
    "NetworkError",
    "DocumentFormatError",
    "InvariantViolation",
    "JsonPathError",
    "UnknownElementError",
    # Document types
    "GraphDocument",
    "Graph",
    "Echelons",
    "Node",
    "NodeObject",
    "Edge",
    "EdgeObject",
    # Echelons and layout
    "LayoutConfig",
    "Position",
    "build_echelon_map",
    "canonical_layers",
    "compute_echelon_positions",
    "echelon_diagnostics",
    "echelon_index",
    "goes_downstream",
    # Adjacency
    "ALLOWED_TARGETS",
    "EDGE_TYPE_RULES",
    "EdgeTypeRule",
    "has_max_out_edge",
    "is_pair_allowed",
    "matching_rule",
    "resolve_edge_type",
    # JSON patch engine
    "JSONValue",
    "parse_leaf_edit",
    "read_json_at_path",
    "round_numbers",
    "sanitize_to_json_value",
    "update_json_at_path",
    # Templates
    "EDGE_TEMPLATES",
    "NODE_TEMPLATES",
    "NETWORK_KEY_FORMATS",
    "build_initial_sale_stream",
    "build_network_key",
    "build_short_node_label",
    "edge_template",
    "node_template",
    # Document operations
    "DEFAULT_PRECISION",
    "MAX_PRECISION",
    "ConnectionOutcome",
    "add_node",
    "connect",
    "delete_edge",
    "delete_node",
    "dump_document",
    "export_document",
    "find_edge",
    "find_node",
    "is_valid_connection",
    "load_document",
    "node_type_of",
    "parse_document",
    "replace_edge_object",
    "replace_node_object",
    # Projection
    "FlowEdge",
    "FlowNode",
    "NetworkView",
    "Selection",
    "SelectionFocus",
    "build_network_view",
    "selection_focus",
]
