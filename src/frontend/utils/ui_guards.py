"""UI validation guards to reduce boilerplate in TaggerWindow.

Provides common validation patterns like "load a document first" to avoid duplicated QMessageBox calls.
"""
from typing import TYPE_CHECKING

from PyQt6.QtWidgets import QMessageBox

if TYPE_CHECKING:  # pragma: no cover
    from frontend.tagger_window import TaggerWindow


def require_dataset(window: "TaggerWindow", title: str = "Action") -> bool:
    """Check if a document is loaded. Show a notice if not.

    Returns:
        True if a dataset is loaded, False otherwise
    """
    if not window.session.loaded:
        QMessageBox.information(window, title, "Load a JSON document first.")
        return False
    return True


def require_current_mask(window: "TaggerWindow") -> bool:
    if window.session.current_mask_key is None:
        window.show_status("No mask selected", 3000)
        return False
    return True
