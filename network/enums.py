"""Network enums for the supply network editor

Provides enums used for nodes, edges, selection, and user notices.
The string values are the exact tags used in imported/exported documents.
"""

from enum import Enum


class NodeType(str, Enum):
    """Type of a supply-chain entity."""

    PROCUREMENT = "procurement"
    PRODUCTION = "production"
    STOCK = "stock"
    STOCK_NO_STORAGE = "stock_no_storage"
    DISTRIBUTOR = "distributor"
    SALE = "sale"
    UNDEFINED = "undefined"


class EdgeType(str, Enum):
    """Type of material/information flow between two entities."""

    MOVEMENT = "movement"
    SUPPLY = "supply"
    BOM = "bom"
    UNDEFINED = "undefined"


class SelectionKind(str, Enum):
    """Kind of element currently selected in the editor."""

    NODE = "node"
    EDGE = "edge"


class ConnectionVerdict(str, Enum):
    """Result of the connection-creation protocol."""

    ACCEPTED = "accepted"
    CAPACITY = "capacity"
    ADJACENCY = "adjacency"
    DUPLICATE = "duplicate"


class Severity(str, Enum):
    """Severity of a user-facing notice."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
