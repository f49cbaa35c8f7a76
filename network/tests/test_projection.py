"""Rendering Projection Tests

These tests verify:
- Nodes carry labels, class names and echelon positions
- Edge handles follow the echelon direction
- Selection focus covers neighbours and incident edges
"""

import pytest

from network import (
    InvariantViolation,
    LayoutConfig,
    Selection,
    UnknownElementError,
    build_network_view,
    connect,
    load_document,
    selection_focus,
)
from network.projection import edge_handles
from network.types import Edge, EdgeObject, Graph


class TestNetworkView:
    """Test the renderer projection."""

    def test_node_projection(self, network_data):
        view = build_network_view(load_document(network_data))
        nodes = {node.id: node for node in view.nodes}

        assert nodes["P1"].class_name == "node--procurement"
        assert nodes["P1"].position.y == 0
        assert nodes["C1"].position.y == 600
        assert nodes["S2"].position.x == -nodes["D1"].position.x
        assert nodes["S2"].label.startswith("stock_no_storage: ")
        assert nodes["P1"].obj["lead_time"] == 2.3456

    def test_layout_config(self, network_data):
        view = build_network_view(load_document(network_data), LayoutConfig(echelon_spacing=10))
        assert {node.id: node.position.y for node in view.nodes}["C1"] == 40

    def test_unlayered_node_sits_at_origin(self, network_data):
        network_data["echelons"]["backwards"] = [["C1"], ["S2", "D1"], ["M1"], ["S1"]]
        view = build_network_view(load_document(network_data))
        p1 = next(node for node in view.nodes if node.id == "P1")
        assert (p1.position.x, p1.position.y) == (0, 0)

    def test_label_options(self, network_data):
        view = build_network_view(load_document(network_data), label_max_len=8, show_type=False)
        assert all(len(node.label) <= 8 for node in view.nodes)
        assert view.nodes[3].label == "stock"

    def test_edge_handles(self, network_data):
        document = load_document(network_data)
        outcome = connect(document, "S2", "S1")
        view = build_network_view(outcome.document)
        edges = {edge.id: edge for edge in view.edges}

        assert (edges["e1"].source_handle, edges["e1"].target_handle) == ("source-bottom", "target-top")
        upstream = edges[outcome.edge.key]
        assert (upstream.source_handle, upstream.target_handle) == ("source-top", "target-bottom")
        assert edges["e2"].class_name == "edge--bom"

    def test_handle_pairs(self):
        assert edge_handles(True) == ("source-bottom", "target-top")
        assert edge_handles(False) == ("source-top", "target-bottom")

    def test_missing_endpoint(self, network_data):
        document = load_document(network_data)
        dangling = Edge(key="x", source="P1", target="gone", obj=EdgeObject.model_validate({"edge_type": "supply"}))
        broken = document.model_copy(
            update={"graph": Graph.model_construct(nodes=document.graph.nodes, edges=[dangling])}
        )
        with pytest.raises(InvariantViolation):
            build_network_view(broken)


class TestSelectionFocus:
    """Test highlight sets for a selection."""

    def test_node_focus(self, network_data):
        focus = selection_focus(load_document(network_data), Selection(kind="node", id="S1"))
        assert focus.node_ids == ["S1", "P1", "M1"]
        assert focus.edge_ids == ["e1", "e2"]

    def test_isolated_node(self, network_data):
        focus = selection_focus(load_document(network_data), Selection(kind="node", id="D1"))
        assert focus.node_ids == ["D1"]
        assert focus.edge_ids == []

    def test_edge_focus(self, network_data):
        focus = selection_focus(load_document(network_data), Selection(kind="edge", id="e3"))
        assert focus.node_ids == ["M1", "S2"]
        assert focus.edge_ids == ["e3"]

    def test_unknown_selection(self, network_data):
        document = load_document(network_data)
        with pytest.raises(UnknownElementError):
            selection_focus(document, Selection(kind="edge", id="ghost"))
        with pytest.raises(UnknownElementError):
            selection_focus(document, Selection(kind="node", id="ghost"))
