"""Graph document types for the supply network editor

These types are the single source of truth for the imported/exported
network document, used by the editor session, the rendering projection,
and the REST API.

Node and edge objects carry a typed core (the type tag plus a few
well-known string fields) and an `attributes` mapping holding every other
domain field untouched. `to_json()` merges both back into the flat wire
object, so a document round-trips field-for-field.

Key feature: ConfigDict(use_enum_values=True) ensures enums serialize
as strings (e.g., "stock") rather than enum objects.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import EdgeType, NodeType


def _split_object(data: Any, known: tuple[str, ...], tag: str) -> Any:
    """Split a flat wire object into typed fields and an attribute bag.

    Well-known fields are only lifted out when they hold a string; any other
    value (null, a number) is kept verbatim in attributes so it is exported
    unchanged.
    """
    if not isinstance(data, dict):
        return data
    core: dict[str, Any] = {}
    attributes: dict[str, Any] = {}
    for key, value in data.items():
        if key == tag:
            core[key] = value
        elif key in known and isinstance(value, str):
            core[key] = value
        else:
            attributes[key] = value
    core["attributes"] = attributes
    return core


class NodeObject(BaseModel):
    """Domain payload of a node (`obj` in the wire format).

    Only node_type is enforced; the rest of the schema varies by type and
    lives in attributes (policy, lead_time, streams, ...).
    """

    model_config = ConfigDict(use_enum_values=True)

    WELL_KNOWN: ClassVar[tuple[str, ...]] = ("network_key", "entity")

    node_type: NodeType
    network_key: str | None = None
    entity: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        return _split_object(data, cls.WELL_KNOWN, "node_type")

    def to_json(self) -> dict[str, Any]:
        """Return the flat wire representation."""
        out: dict[str, Any] = {"node_type": self.node_type}
        for key in self.WELL_KNOWN:
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        out.update(self.attributes)
        return out


class EdgeObject(BaseModel):
    """Domain payload of an edge (`obj` in the wire format)."""

    model_config = ConfigDict(use_enum_values=True)

    WELL_KNOWN: ClassVar[tuple[str, ...]] = (
        "network_key",
        "network_key_from",
        "network_key_to",
    )

    edge_type: EdgeType
    network_key: str | None = None
    network_key_from: str | None = None
    network_key_to: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        return _split_object(data, cls.WELL_KNOWN, "edge_type")

    def to_json(self) -> dict[str, Any]:
        """Return the flat wire representation."""
        out: dict[str, Any] = {"edge_type": self.edge_type}
        for key in self.WELL_KNOWN:
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        out.update(self.attributes)
        return out


class Node(BaseModel):
    """A supply-chain entity in the network."""

    id: str
    obj: NodeObject

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "obj": self.obj.to_json()}


class Edge(BaseModel):
    """A flow between two nodes, identified by a unique key."""

    key: str
    source: str
    target: str
    obj: EdgeObject

    def to_json(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "source": self.source,
            "target": self.target,
            "obj": self.obj.to_json(),
        }


class Graph(BaseModel):
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)


class Echelons(BaseModel):
    """Topological layering of the network.

    `backwards` reversed is the canonical upstream -> downstream order;
    `forward` holds the same layering already in that order.
    """

    forward: list[list[str]] = Field(default_factory=list)
    backwards: list[list[str]] = Field(default_factory=list)


class GraphDocument(BaseModel):
    """The complete network document (import/export shape).

    Validation enforces unique node ids, unique edge keys, and that every
    edge endpoint references an existing node.
    """

    graph: Graph
    echelons: Echelons = Field(default_factory=Echelons)

    @model_validator(mode="after")
    def _check_references(self) -> "GraphDocument":
        node_ids: set[str] = set()
        for node in self.graph.nodes:
            if node.id in node_ids:
                raise ValueError(f"Duplicate node id '{node.id}'")
            node_ids.add(node.id)

        edge_keys: set[str] = set()
        for edge in self.graph.edges:
            if edge.key in edge_keys:
                raise ValueError(f"Duplicate edge key '{edge.key}'")
            edge_keys.add(edge.key)
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_ids:
                    raise ValueError(
                        f"Edge '{edge.key}' references unknown node '{endpoint}'"
                    )
        return self

    def to_json(self) -> dict[str, Any]:
        """Return the wire representation (no rounding)."""
        return {
            "graph": {
                "nodes": [node.to_json() for node in self.graph.nodes],
                "edges": [edge.to_json() for edge in self.graph.edges],
            },
            "echelons": {
                "forward": [list(layer) for layer in self.echelons.forward],
                "backwards": [list(layer) for layer in self.echelons.backwards],
            },
        }
