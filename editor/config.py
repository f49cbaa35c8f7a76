"""Editor configuration

Layout spacing, export precision, label formatting and the edge type
requested by free-form connect gestures. Values can be set explicitly or
read from NETWORK_EDITOR_* environment variables.
"""

import os
from dataclasses import dataclass, field

from network import DEFAULT_PRECISION, MAX_PRECISION, EdgeType, LayoutConfig

ENV_PREFIX = "NETWORK_EDITOR_"


@dataclass
class EditorConfig:
    """Configuration for an editor session.

    Attributes:
        layout: Echelon/row spacing used to position nodes
        precision: Decimal places kept for numbers on export
        label_max_len: Maximum length of node labels
        show_type_in_label: Prefix node labels with the node type
        connect_edge_type: Edge type requested by drag-to-connect gestures
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    precision: int = DEFAULT_PRECISION
    label_max_len: int = 26
    show_type_in_label: bool = True
    connect_edge_type: EdgeType = EdgeType.MOVEMENT

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "EditorConfig":
        """Build a configuration from environment variables.

        Recognized variables (all optional):
            NETWORK_EDITOR_ECHELON_SPACING, NETWORK_EDITOR_BASE_SPACING,
            NETWORK_EDITOR_PRECISION, NETWORK_EDITOR_LABEL_MAX_LEN,
            NETWORK_EDITOR_SHOW_TYPE, NETWORK_EDITOR_CONNECT_EDGE_TYPE
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def get(name: str) -> str | None:
            return env.get(f"{ENV_PREFIX}{name}")

        echelon_spacing = get("ECHELON_SPACING")
        base_spacing = get("BASE_SPACING")
        precision = get("PRECISION")
        label_max_len = get("LABEL_MAX_LEN")
        show_type = get("SHOW_TYPE")
        connect_edge_type = get("CONNECT_EDGE_TYPE")

        return configure_editor(
            echelon_spacing=float(echelon_spacing) if echelon_spacing else defaults.layout.echelon_spacing,
            base_spacing=float(base_spacing) if base_spacing else defaults.layout.base_spacing,
            precision=int(precision) if precision else defaults.precision,
            label_max_len=int(label_max_len) if label_max_len else defaults.label_max_len,
            show_type_in_label=(
                show_type.strip().lower() in ("1", "true", "yes")
                if show_type
                else defaults.show_type_in_label
            ),
            connect_edge_type=connect_edge_type or defaults.connect_edge_type,
        )


def configure_editor(
    echelon_spacing: float = 150.0,
    base_spacing: float = 200.0,
    precision: int = DEFAULT_PRECISION,
    label_max_len: int = 26,
    show_type_in_label: bool = True,
    connect_edge_type: EdgeType | str = EdgeType.MOVEMENT,
    **kwargs,
) -> EditorConfig:
    """Create an editor configuration.

    Args:
        echelon_spacing: Vertical distance between echelon rows (default: 150)
        base_spacing: Base horizontal distance between nodes (default: 200)
        precision: Decimal places kept on export, 0 to 15 (default: 2)
        label_max_len: Maximum node label length (default: 26)
        show_type_in_label: Prefix labels with the node type (default: True)
        connect_edge_type: Edge type requested by connect gestures (default: "movement")
        **kwargs: Additional parameters (ignored for forward compatibility)

    Returns:
        EditorConfig: Configured editor settings

    Raises:
        ValueError: If a value is out of range or connect_edge_type is unknown
    """
    if echelon_spacing <= 0 or base_spacing <= 0:
        raise ValueError("Spacing values must be positive")
    if not 0 <= precision <= MAX_PRECISION:
        raise ValueError(f"Precision must be between 0 and {MAX_PRECISION}")
    if label_max_len < 1:
        raise ValueError("Label length must be at least 1")

    return EditorConfig(
        layout=LayoutConfig(echelon_spacing=echelon_spacing, base_spacing=base_spacing),
        precision=precision,
        label_max_len=label_max_len,
        show_type_in_label=show_type_in_label,
        connect_edge_type=EdgeType(connect_edge_type),
    )
