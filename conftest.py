"""Shared pytest fixtures: small supply networks in wire format."""

import copy

import pytest

# procurement -> stock -> production -> stock -> sale, plus a distributor
NETWORK = {
    "graph": {
        "nodes": [
            {
                "id": "P1",
                "obj": {
                    "node_type": "procurement",
                    "network_key": "ProcurementNetworkKey(location='W1', product='flour')",
                    "lead_time": 2.3456,
                    "policy": "divide",
                },
            },
            {
                "id": "S1",
                "obj": {
                    "node_type": "stock",
                    "network_key": "StockNetworkKey(location='W1', product='flour')",
                    "has_storage": True,
                    "reorder_point": [10.126, 11.5],
                    "streams": [],
                },
            },
            {
                "id": "M1",
                "obj": {
                    "node_type": "production",
                    "network_key": "ProductionNetworkKey(bomnum='1', location='W1', product='bread')",
                    "lead_time": 1,
                },
            },
            {
                "id": "S2",
                "obj": {"node_type": "stock_no_storage", "entity": "stock"},
            },
            {
                "id": "D1",
                "obj": {"node_type": "distributor", "entity": "stock"},
            },
            {
                "id": "C1",
                "obj": {"node_type": "sale", "network_key": None, "demand": 100.5567},
            },
        ],
        "edges": [
            {
                "key": "e1",
                "source": "P1",
                "target": "S1",
                "obj": {"edge_type": "supply", "quota": 0.3333, "entity": None},
            },
            {
                "key": "e2",
                "source": "S1",
                "target": "M1",
                "obj": {"edge_type": "bom", "lead_time": 0},
            },
            {
                "key": "e3",
                "source": "M1",
                "target": "S2",
                "obj": {"edge_type": "supply"},
            },
            {
                "key": "e4",
                "source": "S2",
                "target": "C1",
                "obj": {"edge_type": "supply", "keep_upstream": True},
            },
        ],
    },
    "echelons": {
        "forward": [["P1"], ["S1"], ["M1"], ["S2", "D1"], ["C1"]],
        "backwards": [["C1"], ["S2", "D1"], ["M1"], ["S1"], ["P1"]],
    },
}

# The two-node network used in the end-to-end connection scenario
TWO_NODE_NETWORK = {
    "graph": {
        "nodes": [
            {"id": "A", "obj": {"node_type": "procurement"}},
            {"id": "B", "obj": {"node_type": "stock"}},
        ],
        "edges": [],
    },
    "echelons": {"backwards": [["A"], ["B"]], "forward": [["B"], ["A"]]},
}


@pytest.fixture
def network_data() -> dict:
    return copy.deepcopy(NETWORK)


@pytest.fixture
def two_node_data() -> dict:
    return copy.deepcopy(TWO_NODE_NETWORK)
