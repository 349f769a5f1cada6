"""Compact per-split tagging progress bar."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import QHBoxLayout, QLabel, QProgressBar, QSizePolicy, QWidget

from backend.services.progress_tracker import SplitProgress
from frontend.utils.ui_messages import format_progress
from frontend.widgets import style


class ProgressPanel(QWidget):
    """Shows how many masks of the selected split carry a label."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._progress = SplitProgress()
        self._build_ui()
        self.set_progress(self._progress)

    def _build_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 0, 0, 0)
        layout.setSpacing(8)
        self.title = QLabel("Split progress:", self)
        self.title.setStyleSheet(style.heading_style(13.0))
        layout.addWidget(self.title)
        self.progress_bar = QProgressBar(self)
        self.progress_bar.setTextVisible(True)
        self.progress_bar.setMinimumWidth(260)
        self.progress_bar.setFixedHeight(style.BUTTON_HEIGHT)
        self.progress_bar.setSizePolicy(
            QSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        )
        layout.addWidget(self.progress_bar)

    @property
    def progress(self) -> SplitProgress:
        return self._progress

    def set_progress(self, progress: Optional[SplitProgress]) -> None:
        self._progress = progress or SplitProgress()
        total = max(1, self._progress.total)
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(min(self._progress.tagged, total))
        self.progress_bar.setFormat(format_progress(self._progress))
