"""Editor session module for the supply network editor

Provides the controller that sits between a rendering surface and the
network document model. The session owns the current document, the
selection, and the details working copy; every user action goes through it.

## Example usage

    from editor import EditorSession, configure_editor

    session = EditorSession(configure_editor(precision=3))
    session.import_text(open("network.json").read())

    result = session.connect("A", "B")
    for notice in result.notices:
        print(notice.severity, notice.message)

    session.select_node("B")
    session.edit_leaf_text(["lead_time"], "2.5")

    exported = session.export()
"""

from .config import EditorConfig, configure_editor
from .session import EditorSession, NoDocumentLoaded, NoSelection
from .state_types import EditResult, ImportSummary, Notice

__all__ = [
    "EditorConfig",
    "configure_editor",
    "EditorSession",
    "NoDocumentLoaded",
    "NoSelection",
    "EditResult",
    "ImportSummary",
    "Notice",
]
