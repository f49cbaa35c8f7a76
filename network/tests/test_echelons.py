"""Echelon Model and Layout Engine Tests

These tests verify:
- build_echelon_map assigns each id the index of its last layer
- compute_echelon_positions is deterministic and row-centered
- Stale ids are skipped and unlayered nodes get no position
- echelon_diagnostics reports tolerated layering anomalies
"""

import pytest

from network import (
    LayoutConfig,
    Node,
    NodeObject,
    build_echelon_map,
    canonical_layers,
    compute_echelon_positions,
    echelon_diagnostics,
    echelon_index,
    goes_downstream,
    load_document,
)


def make_nodes(*ids: str) -> list[Node]:
    return [Node(id=i, obj=NodeObject.model_validate({"node_type": "stock"})) for i in ids]


class TestEchelonMap:
    """Test node id -> layer index lookup."""

    def test_indexes_by_layer(self):
        assert build_echelon_map([["a", "b"], ["c"], []]) == {"a": 0, "b": 0, "c": 1}

    def test_last_occurrence_wins(self):
        echelon_map = build_echelon_map([["a"], ["b"], ["a", "c"]])
        assert echelon_map["a"] == 2

    def test_missing_id_defaults_to_layer_zero(self):
        echelon_map = build_echelon_map([["a"], ["b"]])
        assert "z" not in echelon_map
        assert echelon_index(echelon_map, "z") == 0

    def test_direction(self):
        echelon_map = build_echelon_map([["a"], ["b"]])
        assert goes_downstream(echelon_map, "a", "b")
        assert not goes_downstream(echelon_map, "b", "a")
        assert not goes_downstream(echelon_map, "a", "a")

    def test_canonical_order_reverses_backwards(self, network_data):
        document = load_document(network_data)
        assert canonical_layers(document.echelons) == [["P1"], ["S1"], ["M1"], ["S2", "D1"], ["C1"]]


class TestLayout:
    """Test deterministic row layout."""

    def test_rows_are_spaced_vertically(self):
        positions = compute_echelon_positions([["a"], ["b"], ["c"]], make_nodes("a", "b", "c"))
        assert [positions[i].y for i in ("a", "b", "c")] == [0, 150, 300]

    def test_single_node_is_centered(self):
        positions = compute_echelon_positions([["a"]], make_nodes("a"))
        assert positions["a"].x == 0

    def test_sparse_row_spacing(self):
        """Rows of up to 10 nodes use base_spacing * 10 / row_size."""
        positions = compute_echelon_positions([["a", "b"]], make_nodes("a", "b"))
        assert positions["a"].x == -500
        assert positions["b"].x == 500

    def test_dense_row_uses_base_spacing(self):
        ids = [f"n{i}" for i in range(20)]
        positions = compute_echelon_positions([ids], make_nodes(*ids))
        xs = [positions[i].x for i in ids]
        assert all(b - a == pytest.approx(200) for a, b in zip(xs, xs[1:]))

    @pytest.mark.parametrize("size", [1, 3, 10, 11, 25])
    def test_row_is_symmetric(self, size):
        ids = [f"n{i}" for i in range(size)]
        positions = compute_echelon_positions([ids], make_nodes(*ids))
        xs = sorted(positions[i].x for i in ids)
        for left, right in zip(xs, reversed(xs)):
            assert left == pytest.approx(-right)

    def test_custom_config(self):
        config = LayoutConfig(echelon_spacing=100, base_spacing=50)
        ids = [f"n{i}" for i in range(12)]
        positions = compute_echelon_positions([["top"], ids], make_nodes("top", *ids), config)
        assert positions["n0"].y == 100
        assert positions["n1"].x - positions["n0"].x == pytest.approx(50)

    def test_deterministic(self):
        layers = [["a", "b", "c"], ["d"]]
        nodes = make_nodes("a", "b", "c", "d")
        assert compute_echelon_positions(layers, nodes) == compute_echelon_positions(layers, nodes)

    def test_stale_ids_are_skipped(self):
        positions = compute_echelon_positions([["a", "gone"], ["gone"]], make_nodes("a"))
        assert set(positions) == {"a"}
        assert positions["a"].x == 0

    def test_empty_row_keeps_row_index(self):
        positions = compute_echelon_positions([["a"], ["gone"], ["b"]], make_nodes("a", "b"))
        assert positions["b"].y == 300

    def test_unlayered_node_has_no_position(self):
        positions = compute_echelon_positions([["a"]], make_nodes("a", "loose"))
        assert "loose" not in positions


class TestDiagnostics:
    """Test reporting of tolerated layering anomalies."""

    def test_clean_document(self, network_data):
        assert echelon_diagnostics(load_document(network_data)) == []

    def test_reports_anomalies(self, network_data):
        network_data["echelons"]["backwards"] = [["C1", "ghost"], ["S2", "D1", "C1"], ["M1"], ["S1"]]
        messages = echelon_diagnostics(load_document(network_data))

        assert "Node 'C1' appears in several backwards echelons" in messages
        assert "Echelon backwards lists unknown node 'ghost'" in messages
        assert "Node 'P1' is missing from backwards echelons" in messages
        assert not any("forward" in message for message in messages)
