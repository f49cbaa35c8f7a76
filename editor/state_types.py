"""Editor state types

These types describe what an editor session reports back to its caller:
- Notice: A user-facing message (error / warning / info)
- EditResult: Outcome of a single user action
- ImportSummary: Outcome of importing a network document
"""

from pydantic import BaseModel, ConfigDict, Field

from network import Severity


class Notice(BaseModel):
    """Non-blocking message shown to the user.

    Structural validation failures (disallowed connection, out-degree cap,
    duplicate edge) are reported as notices instead of exceptions.
    """

    model_config = ConfigDict(use_enum_values=True)

    severity: Severity
    message: str


class EditResult(BaseModel):
    """Outcome of a user action on the session.

    When applied is False the document was left unchanged.
    """

    applied: bool
    notices: list[Notice] = Field(default_factory=list)
    element_id: str | None = None  # id of the created node / key of the created edge
    downstream: bool | None = None  # direction of a created edge, for rendering


class ImportSummary(BaseModel):
    """Statistics about an imported document."""

    node_count: int
    edge_count: int
    echelon_count: int
    warnings: list[str] = Field(default_factory=list)  # tolerated layering anomalies
