"""Editor session controller

EditorSession owns the ephemeral editor state explicitly:
- document: the current GraphDocument (replaced wholesale on every edit)
- selection: the clicked node or edge, if any
- details: sanitized JSON working copy of the selected element's `obj`

User actions are validated and applied as a single document replacement.
Expected user-facing failures come back as notices on an EditResult;
malformed imports raise DocumentFormatError and leave the session untouched.
"""

import logging
from typing import Any, Sequence

from network import (
    DocumentFormatError,
    EdgeType,
    GraphDocument,
    InvariantViolation,
    JSONValue,
    NetworkView,
    NodeType,
    Selection,
    SelectionFocus,
    SelectionKind,
    Severity,
    UnknownElementError,
    add_node,
    build_network_view,
    canonical_layers,
    connect,
    delete_edge,
    delete_node,
    dump_document,
    echelon_diagnostics,
    export_document,
    find_edge,
    find_node,
    is_valid_connection,
    load_document,
    parse_document,
    parse_leaf_edit,
    replace_edge_object,
    replace_node_object,
    sanitize_to_json_value,
    selection_focus,
    update_json_at_path,
)
from network.json_patch import PathSegment

from .config import EditorConfig
from .state_types import EditResult, ImportSummary, Notice

logger = logging.getLogger(__name__)


class NoDocumentLoaded(InvariantViolation):
    """Raised when an action needs a network but none has been imported."""


class NoSelection(InvariantViolation):
    """Raised when a details edit arrives while nothing is selected."""


def _rejected(severity: Severity, message: str) -> EditResult:
    return EditResult(applied=False, notices=[Notice(severity=severity, message=message)])


class EditorSession:
    """Interactive editing state for one network document."""

    def __init__(self, config: EditorConfig | None = None):
        self.config = config or EditorConfig()
        self.document: GraphDocument | None = None
        self.selection: Selection | None = None
        self.details: JSONValue | None = None

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self.document is not None

    def require_document(self) -> GraphDocument:
        if self.document is None:
            raise NoDocumentLoaded("No network loaded")
        return self.document

    def _replace_document(self, document: GraphDocument) -> ImportSummary:
        warnings = echelon_diagnostics(document)
        for warning in warnings:
            logger.warning("[IMPORT] %s", warning)

        self.document = document
        self.selection = None
        self.details = None
        logger.info(
            "[IMPORT] Loaded %d nodes, %d edges",
            len(document.graph.nodes),
            len(document.graph.edges),
        )
        return ImportSummary(
            node_count=len(document.graph.nodes),
            edge_count=len(document.graph.edges),
            echelon_count=len(canonical_layers(document.echelons)),
            warnings=warnings,
        )

    def import_text(self, text: str | bytes) -> ImportSummary:
        """Import a JSON document; all-or-nothing.

        Raises:
            DocumentFormatError: If text is not a valid network document
        """
        return self._replace_document(parse_document(text))

    def import_data(self, data: Any) -> ImportSummary:
        """Import already-decoded JSON data; all-or-nothing."""
        return self._replace_document(load_document(data))

    def export(self, precision: int | None = None) -> dict[str, Any]:
        """Return the rounded wire document."""
        document = self.require_document()
        return export_document(document, self.config.precision if precision is None else precision)

    def export_text(self, precision: int | None = None) -> str:
        document = self.require_document()
        return dump_document(document, self.config.precision if precision is None else precision)

    def view(self) -> NetworkView:
        """Renderer projection of the current document."""
        return build_network_view(
            self.require_document(),
            layout=self.config.layout,
            label_max_len=self.config.label_max_len,
            show_type=self.config.show_type_in_label,
        )

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def add_node(self, node_type: NodeType | str, values: dict[str, str] | None = None) -> EditResult:
        """Add a node from the template of node_type."""
        document = self.require_document()
        try:
            self.document, node = add_node(document, node_type, values=values)
        except (DocumentFormatError, ValueError) as exc:
            logger.info("[ADD_NODE] rejected: %s", exc)
            return _rejected(Severity.ERROR, str(exc))
        return EditResult(
            applied=True,
            notices=[Notice(severity=Severity.INFO, message=f"Added {node.obj.node_type} node {node.id}.")],
            element_id=node.id,
        )

    def add_edge(self, source: str, target: str, edge_type: EdgeType | str) -> EditResult:
        """Explicit "add edge" action with a user-chosen edge type."""
        document = self.require_document()
        if not source or not target:
            return _rejected(Severity.WARNING, "Choose both a source and a target node.")

        outcome = connect(document, source, target, edge_type)
        notice = Notice(severity=outcome.severity, message=outcome.message)
        if not outcome.applied:
            return EditResult(applied=False, notices=[notice])

        self.document = outcome.document
        return EditResult(
            applied=True,
            notices=[notice],
            element_id=outcome.edge.key,
            downstream=outcome.downstream,
        )

    def connect(self, source: str, target: str) -> EditResult:
        """Free-form connect gesture between two nodes."""
        return self.add_edge(source, target, self.config.connect_edge_type)

    def is_valid_connection(self, source: str, target: str) -> bool:
        """Pre-flight check for a connection being dragged."""
        if self.document is None:
            return False
        return is_valid_connection(self.document, source, target)

    def delete_node(self, node_id: str) -> EditResult:
        """Delete a node and every edge touching it."""
        document = self.require_document()
        self.document = delete_node(document, node_id)
        self._drop_stale_selection()
        return EditResult(
            applied=True,
            notices=[Notice(severity=Severity.INFO, message=f"Deleted node {node_id}.")],
            element_id=node_id,
        )

    def delete_edge(self, key: str) -> EditResult:
        document = self.require_document()
        self.document = delete_edge(document, key)
        self._drop_stale_selection()
        return EditResult(
            applied=True,
            notices=[Notice(severity=Severity.INFO, message=f"Deleted edge {key}.")],
            element_id=key,
        )

    def delete_selected(self) -> EditResult:
        """Delete the selected node (with its edges) or edge."""
        if self.selection is None:
            return _rejected(Severity.WARNING, "Nothing is selected.")
        selection = self.selection
        if selection.kind == SelectionKind.NODE.value:
            result = self.delete_node(selection.id)
        else:
            result = self.delete_edge(selection.id)
        self.clear_selection()
        return result

    def _drop_stale_selection(self) -> None:
        if self.selection is None or self.document is None:
            return
        if self.selection.kind == SelectionKind.NODE.value:
            exists = find_node(self.document, self.selection.id) is not None
        else:
            exists = find_edge(self.document, self.selection.id) is not None
        if not exists:
            self.clear_selection()

    # ------------------------------------------------------------------
    # Selection and field edits
    # ------------------------------------------------------------------

    def select_node(self, node_id: str) -> SelectionFocus:
        """Select a node and load its object as the details working copy."""
        document = self.require_document()
        node = find_node(document, node_id)
        if node is None:
            raise UnknownElementError(f"Node '{node_id}' not found")
        self.selection = Selection(kind=SelectionKind.NODE, id=node_id)
        self.details = sanitize_to_json_value(node.obj.to_json())
        return selection_focus(document, self.selection)

    def select_edge(self, key: str) -> SelectionFocus:
        """Select an edge and load its object as the details working copy."""
        document = self.require_document()
        edge = find_edge(document, key)
        if edge is None:
            raise UnknownElementError(f"Edge '{key}' not found")
        self.selection = Selection(kind=SelectionKind.EDGE, id=key)
        self.details = sanitize_to_json_value(edge.obj.to_json())
        return selection_focus(document, self.selection)

    def clear_selection(self) -> None:
        self.selection = None
        self.details = None

    def focus(self) -> SelectionFocus | None:
        """Elements to keep highlighted, or None when nothing is selected."""
        if self.selection is None:
            return None
        return selection_focus(self.require_document(), self.selection)

    def edit_details(self, path: Sequence[PathSegment], value: Any) -> EditResult:
        """Replace the value at path in the details and write it back.

        An edit that leaves the object invalid (e.g. an unknown node_type)
        is rejected and the working copy stays as it was.

        Raises:
            NoSelection: If nothing is selected
            JsonPathError: If path does not match the details tree
        """
        document = self.require_document()
        if self.selection is None or self.details is None:
            raise NoSelection("Select a node or edge before editing its details")

        details = update_json_at_path(self.details, list(path), sanitize_to_json_value(value))
        if not isinstance(details, dict):
            return _rejected(Severity.ERROR, "The details of an element must be an object.")

        try:
            if self.selection.kind == SelectionKind.NODE.value:
                self.document = replace_node_object(document, self.selection.id, details)
            else:
                self.document = replace_edge_object(document, self.selection.id, details)
        except DocumentFormatError as exc:
            logger.info("[EDIT] %s %s rejected: %s", self.selection.kind, self.selection.id, exc)
            return _rejected(Severity.ERROR, str(exc))

        self.details = details
        logger.debug("[EDIT] %s %s at %s", self.selection.kind, self.selection.id, list(path))
        return EditResult(applied=True, element_id=self.selection.id)

    def edit_leaf_text(self, path: Sequence[PathSegment], text: str) -> EditResult:
        """Edit a leaf typed as text, inferring null/number/bool/string."""
        return self.edit_details(path, parse_leaf_edit(text))
