"""Adjacency validation and edge-type resolution

Pure functions over node types and existing edges:
- is_pair_allowed: may a node of one type feed a node of another type
- resolve_edge_type: which edge type a legal connection becomes
- has_max_out_edge: has a capped source already used its single out-edge

Edge-type resolution is an ordered list of named rules; the first rule whose
predicate matches decides the type.
"""

from typing import Callable, Iterable, NamedTuple

from .enums import EdgeType, NodeType
from .types import Edge

STOCK_FAMILY: frozenset[NodeType] = frozenset({NodeType.STOCK, NodeType.STOCK_NO_STORAGE})

ALLOWED_TARGETS: dict[NodeType, frozenset[NodeType]] = {
    NodeType.PROCUREMENT: frozenset({NodeType.STOCK, NodeType.STOCK_NO_STORAGE}),
    NodeType.PRODUCTION: frozenset({NodeType.STOCK, NodeType.STOCK_NO_STORAGE, NodeType.SALE}),
    NodeType.STOCK: frozenset(
        {NodeType.STOCK, NodeType.STOCK_NO_STORAGE, NodeType.PRODUCTION, NodeType.SALE}
    ),
    NodeType.STOCK_NO_STORAGE: frozenset(
        {NodeType.STOCK, NodeType.STOCK_NO_STORAGE, NodeType.PRODUCTION, NodeType.SALE}
    ),
    NodeType.DISTRIBUTOR: frozenset({NodeType.SALE}),
    NodeType.SALE: frozenset(),
    NodeType.UNDEFINED: frozenset(),
}

# Node types allowed at most one outgoing edge
CAPPED_SOURCE_TYPES: frozenset[NodeType] = frozenset({NodeType.PRODUCTION, NodeType.PROCUREMENT})

# User choices honored when no structural rule applies ("bom" only ever
# results from the stock -> production rule)
HONORED_CHOICES: frozenset[EdgeType] = frozenset(
    {EdgeType.MOVEMENT, EdgeType.UNDEFINED, EdgeType.SUPPLY}
)


def as_node_type(value: NodeType | str | None) -> NodeType | None:
    """Coerce a node type tag, returning None for unknown or absent tags."""
    if value is None:
        return None
    try:
        return NodeType(value)
    except ValueError:
        return None


def as_edge_type(value: EdgeType | str | None) -> EdgeType | None:
    """Coerce an edge type tag, returning None for unknown or absent tags."""
    if value is None:
        return None
    try:
        return EdgeType(value)
    except ValueError:
        return None


def is_pair_allowed(src_type: NodeType | str | None, tgt_type: NodeType | str | None) -> bool:
    """Whether a src_type node may connect to a tgt_type node.

    Fails closed: unknown or missing types are never allowed. Procurement
    nodes are never targets and sale nodes are never sources.
    """
    src = as_node_type(src_type)
    tgt = as_node_type(tgt_type)
    if src is None or tgt is None:
        return False
    if tgt == NodeType.PROCUREMENT:
        return False
    if src == NodeType.SALE:
        return False
    return tgt in ALLOWED_TARGETS.get(src, frozenset())


class EdgeTypeRule(NamedTuple):
    """One step of edge-type resolution.

    Attributes:
        name: Human-readable rule name (used in logs and tests)
        applies: Predicate over (source type, target type, user choice)
        result: Resolved edge type, or None to keep the user's choice
    """

    name: str
    applies: Callable[[NodeType | None, NodeType | None, EdgeType | None], bool]
    result: EdgeType | None


EDGE_TYPE_RULES: tuple[EdgeTypeRule, ...] = (
    EdgeTypeRule(
        "stock_to_stock_is_movement",
        lambda src, tgt, chosen: src in STOCK_FAMILY and tgt in STOCK_FAMILY,
        EdgeType.MOVEMENT,
    ),
    EdgeTypeRule(
        "stock_to_production_is_bom",
        lambda src, tgt, chosen: tgt == NodeType.PRODUCTION and src in STOCK_FAMILY,
        EdgeType.BOM,
    ),
    EdgeTypeRule(
        "procurement_source_is_supply",
        lambda src, tgt, chosen: src == NodeType.PROCUREMENT,
        EdgeType.SUPPLY,
    ),
    EdgeTypeRule(
        "production_source_is_supply",
        lambda src, tgt, chosen: src == NodeType.PRODUCTION,
        EdgeType.SUPPLY,
    ),
    EdgeTypeRule(
        "sale_target_is_supply",
        lambda src, tgt, chosen: tgt == NodeType.SALE,
        EdgeType.SUPPLY,
    ),
    EdgeTypeRule(
        "user_choice",
        lambda src, tgt, chosen: chosen in HONORED_CHOICES,
        None,
    ),
    EdgeTypeRule(
        "fallback_undefined",
        lambda src, tgt, chosen: True,
        EdgeType.UNDEFINED,
    ),
)


def matching_rule(
    src_type: NodeType | str | None,
    tgt_type: NodeType | str | None,
    user_chosen: EdgeType | str | None,
) -> EdgeTypeRule:
    """Return the first rule of EDGE_TYPE_RULES that applies."""
    src = as_node_type(src_type)
    tgt = as_node_type(tgt_type)
    chosen = as_edge_type(user_chosen)
    for rule in EDGE_TYPE_RULES:
        if rule.applies(src, tgt, chosen):
            return rule
    # Unreachable: the fallback rule always applies
    raise AssertionError("edge type rules are not exhaustive")


def resolve_edge_type(
    src_type: NodeType | str | None,
    tgt_type: NodeType | str | None,
    user_chosen: EdgeType | str | None,
) -> EdgeType:
    """Resolve the edge type of a connection.

    Structural rules override the user's choice; the choice only matters
    when none of them applies.

    Examples:
        resolve_edge_type("stock", "stock_no_storage", "supply") -> EdgeType.MOVEMENT
        resolve_edge_type("stock", "production", "undefined") -> EdgeType.BOM
        resolve_edge_type("distributor", "sale", "undefined") -> EdgeType.SUPPLY
    """
    rule = matching_rule(src_type, tgt_type, user_chosen)
    if rule.result is None:
        return EdgeType(user_chosen)
    return rule.result


def has_max_out_edge(node_id: str, node_type: NodeType | str | None, edges: Iterable[Edge]) -> bool:
    """Whether node_id is a capped source that already has an outgoing edge."""
    if as_node_type(node_type) not in CAPPED_SOURCE_TYPES:
        return False
    return any(edge.source == node_id for edge in edges)
