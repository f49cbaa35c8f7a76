"""Per-type default objects, network keys, and labels

Provides:
- Default node/edge objects per type (deep-cloned on every access)
- Network key builders (e.g. "StockNetworkKey(location='L1', product='P1')")
- The initial demand stream attached to a newly created sale node
- Short display labels for nodes
"""

import copy
from dataclasses import dataclass
from typing import Any

from .enums import EdgeType, NodeType

# Numeric defaults are 0, per-period series start empty
_BASE_NODE_DEFAULTS: dict[str, Any] = {
    "policy": "divide",
    "has_storage": False,
    "lead_time": 0,
    "lead_time_var": 0,
    "order_calendar": [],
    "streams": [],
    "pools": [],
    "propagated_lead_time": 0,
    "propagated_lead_time_var": 0,
    "propagated_demand": [],
    "reorder_point": [],
    "order_size": [],
    "cycle_stock": [],
    "average_cycle_stock": [],
    "propagated_min_lot_size": 0,
    "propagated_lot_multiplier": 0,
    "node_lot_size": 0,
}

_BASE_EDGE_DEFAULTS: dict[str, Any] = {
    "entity": None,
    "lead_time": 0,
    "lead_time_var": 0,
    "keep_upstream": True,
    "quota": 1.0,
    "streams": [],
    "propagated_lead_time": 0,
    "propagated_lead_time_var": 0,
    "propagated_demand": None,
    "propagated_min_lot_size": 0,
    "propagated_lot_multiplier": 0,
    "min_lot_size": None,
    "lot_multiplier": None,
}

# (entity, has_storage) per node type; None entity means no entity field
_NODE_VARIANTS: dict[NodeType, tuple[str | None, bool]] = {
    NodeType.SALE: ("sale", False),
    NodeType.STOCK: ("stock", True),
    NodeType.STOCK_NO_STORAGE: ("stock", False),
    NodeType.PRODUCTION: ("production", False),
    NodeType.PROCUREMENT: ("procurement", False),
    NodeType.DISTRIBUTOR: ("stock", True),
    NodeType.UNDEFINED: (None, False),
}


def _node_default(node_type: NodeType) -> dict[str, Any]:
    entity, has_storage = _NODE_VARIANTS[node_type]
    obj: dict[str, Any] = {"node_type": node_type.value, **_BASE_NODE_DEFAULTS}
    if entity is not None:
        obj["entity"] = entity
    obj["has_storage"] = has_storage
    return obj


def _edge_default(edge_type: EdgeType) -> dict[str, Any]:
    obj: dict[str, Any] = {"edge_type": edge_type.value, **_BASE_EDGE_DEFAULTS}
    if edge_type == EdgeType.MOVEMENT:
        obj["entity"] = "movement"
    return obj


NODE_TEMPLATES: dict[NodeType, dict[str, Any]] = {
    node_type: _node_default(node_type) for node_type in _NODE_VARIANTS
}

EDGE_TEMPLATES: dict[EdgeType, dict[str, Any]] = {
    edge_type: _edge_default(edge_type) for edge_type in EdgeType
}


def node_template(node_type: NodeType | str) -> dict[str, Any]:
    """Return a fresh copy of the default object for node_type."""
    return copy.deepcopy(NODE_TEMPLATES[NodeType(node_type)])


def edge_template(edge_type: EdgeType | str) -> dict[str, Any]:
    """Return a fresh copy of the default object for edge_type."""
    return copy.deepcopy(EDGE_TEMPLATES[EdgeType(edge_type)])


# ============================================================================
# Network keys
# ============================================================================


@dataclass(frozen=True)
class NetworkKeyFormat:
    """Structured network key of a node type.

    Attributes:
        name: Key class name written in the key string
        fields: Identifying attributes, in the order they are written
    """

    name: str
    fields: tuple[str, ...]

    def build(self, values: dict[str, str]) -> str:
        missing = [name for name in self.fields if not values.get(name)]
        if missing:
            raise ValueError(f"{self.name} requires values for: {', '.join(missing)}")
        parts = ", ".join(f"{name}='{values[name]}'" for name in self.fields)
        return f"{self.name}({parts})"


NETWORK_KEY_FORMATS: dict[NodeType, NetworkKeyFormat] = {
    NodeType.PRODUCTION: NetworkKeyFormat("ProductionNetworkKey", ("bomnum", "location", "product")),
    NodeType.PROCUREMENT: NetworkKeyFormat("ProcurementNetworkKey", ("location", "product")),
    NodeType.SALE: NetworkKeyFormat("SaleNetworkKey", ("client", "location", "product")),
    NodeType.STOCK: NetworkKeyFormat("StockNetworkKey", ("location", "product")),
    NodeType.STOCK_NO_STORAGE: NetworkKeyFormat("StockNetworkKey", ("location", "product")),
    NodeType.DISTRIBUTOR: NetworkKeyFormat("StockNetworkKey", ("location", "product")),
    NodeType.UNDEFINED: NetworkKeyFormat("NetworkKey", ("location", "product")),
}


def build_network_key(node_type: NodeType | str, values: dict[str, str]) -> str:
    """Build the network key of a node from its identifying attributes.

    Raises:
        ValueError: If an identifying attribute is missing or empty
    """
    return NETWORK_KEY_FORMATS[NodeType(node_type)].build(values)


def build_initial_sale_stream(network_key: str, values: dict[str, str]) -> dict[str, Any]:
    """Default independent demand stream for a new sale node.

    Demand is flat (100 per period, variance 10) over 9 periods.
    """
    client = values.get("client", "")
    location = values.get("location", "")
    product = values.get("product", "")
    stream_key = f"StreamKey(client='{client}', location='{location}', product='{product}')"
    return {
        "path": [network_key],
        "demand_id": stream_key,
        "keep_upstream": True,
        "independent_demand": True,
        "_service_level": None,
        "demand": {
            "__metric_array__": True,
            "data": [100] * 9,
            "tails": [0, 9],
            "dtype": "float64",
        },
        "demand_var": {
            "__metric_array__": True,
            "data": [10] * 9,
            "tails": [0, 9],
            "dtype": "float64",
        },
        "backlog": [],
        "backlog_var": [],
        "safety_stock_demand": [],
        "safety_stock_supply": [],
        "safety_stock_service": [],
        "safety_stock": [],
        "propagated_demand": [],
    }


def build_short_node_label(obj: dict[str, Any], max_len: int = 26, show_type: bool = True) -> str:
    """Short display label for a node object.

    Uses the network key (or entity) and truncates with an ellipsis so the
    label fits in max_len characters, type prefix included.
    """
    node_type = str(obj.get("node_type", NodeType.UNDEFINED.value))
    name = obj.get("network_key") or obj.get("entity") or node_type
    label = f"{node_type}: {name}" if show_type else str(name)
    if len(label) > max_len:
        label = label[: max(max_len - 1, 0)] + "…"
    return label
