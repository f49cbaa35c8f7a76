"""Editor configuration tests."""

import pytest

from editor import EditorConfig, configure_editor
from network import EdgeType


class TestConfigureEditor:
    """Test explicit configuration."""

    def test_defaults(self):
        config = configure_editor()
        assert config.layout.echelon_spacing == 150.0
        assert config.layout.base_spacing == 200.0
        assert config.precision == 2
        assert config.connect_edge_type == EdgeType.MOVEMENT

    def test_extra_kwargs_are_ignored(self):
        assert configure_editor(theme="dark").label_max_len == 26

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"echelon_spacing": 0},
            {"base_spacing": -1},
            {"precision": -1},
            {"precision": 16},
            {"label_max_len": 0},
            {"connect_edge_type": "teleport"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            configure_editor(**kwargs)


class TestFromEnv:
    """Test NETWORK_EDITOR_* environment configuration."""

    def test_empty_environment_gives_defaults(self):
        assert EditorConfig.from_env({}) == EditorConfig()

    def test_reads_variables(self):
        config = EditorConfig.from_env(
            {
                "NETWORK_EDITOR_ECHELON_SPACING": "90",
                "NETWORK_EDITOR_BASE_SPACING": "120.5",
                "NETWORK_EDITOR_PRECISION": "4",
                "NETWORK_EDITOR_LABEL_MAX_LEN": "40",
                "NETWORK_EDITOR_SHOW_TYPE": "no",
                "NETWORK_EDITOR_CONNECT_EDGE_TYPE": "supply",
            }
        )
        assert config.layout.echelon_spacing == 90.0
        assert config.layout.base_spacing == 120.5
        assert config.precision == 4
        assert config.label_max_len == 40
        assert config.show_type_in_label is False
        assert config.connect_edge_type == EdgeType.SUPPLY

    def test_invalid_variable(self):
        with pytest.raises(ValueError):
            EditorConfig.from_env({"NETWORK_EDITOR_PRECISION": "-2"})
