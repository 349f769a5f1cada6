"""Main Qt window for tagging segmentation masks split by split.

Routes user actions into the labeling session and the background asset loader and keeps
combos, previews, buttons, and progress in sync with their signals.
"""

from pathlib import Path
from typing import Dict, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import (QFileDialog, QMainWindow, QMenu, QMessageBox,
                             QPushButton, QWidget)

from backend.services.asset_loader import KIND_MASK, KIND_SPLIT, AssetLoader
from backend.services.asset_resolver import AssetRef, grant_root
from backend.services.labeling_session import LabelingSession
from backend.services.preferences import PreferencesService
from backend.services.progress_tracker import SplitProgress
from backend.services.traversal import (TRAVERSAL_ALL, TRAVERSAL_MODES,
                                        TRAVERSAL_STATUS_TITLES,
                                        TRAVERSAL_UNLABELED)
from backend.utils.categories import UNKNOWN_LABEL, category_color
from backend.utils.geometry import mask_bbox
from common.log_utils import log_debug, log_info, log_warning
from config import get_config
from frontend.ui_mainwindow import Ui_MainWindow
from frontend.utils.ui_guards import require_current_mask, require_dataset
from frontend.utils.ui_messages import (PLACEHOLDER_LOADING, PLACEHOLDER_MASK,
                                        PLACEHOLDER_SPLIT, STATUS_NO_DOCUMENT,
                                        STATUS_NO_MASKS, STATUS_NO_ROOT,
                                        format_export_success,
                                        format_missing_asset,
                                        format_position, format_split_option,
                                        format_tags_loaded, help_text)
from frontend.widgets import style
from frontend.widgets.progress_panel import ProgressPanel
from frontend.widgets.split_view import SplitView

CATEGORY_COLUMNS = 2


class TaggerWindow(QMainWindow):
    def __init__(
        self,
        session: Optional[LabelingSession] = None,
        loader: Optional[AssetLoader] = None,
        preferences: Optional[PreferencesService] = None,
    ) -> None:
        super().__init__()
        self.preferences = preferences or PreferencesService()
        self.session = session or LabelingSession(parent=self)
        self.asset_loader = loader or AssetLoader(parent=self)
        self.asset_loader.set_scheme(self.session.scheme)
        self._asset_errors: Dict[str, str] = {}
        self._session_error = ""
        self._category_buttons: Dict[str, QPushButton] = {}
        self._init_ui()
        self._connect_signals()
        self._apply_preferences()
        self._refresh_all()

    # ============================================================================
    # INITIALIZATION SECTIONS
    # ============================================================================

    def _init_ui(self) -> None:
        self.ui = Ui_MainWindow()
        self.ui.setupUi(self)
        self.ui.centralwidget.setStyleSheet(f"background: {style.APP_BG};")
        for btn in (self.ui.btn_prev, self.ui.btn_next):
            btn.setStyleSheet(style.scoped_button_style(btn.objectName()))

        self.split_view = SplitView(PLACEHOLDER_SPLIT, self)
        self._replace_placeholder(self.ui.images_layout, self.ui.split_placeholder, self.split_view)
        self.mask_view = SplitView(PLACEHOLDER_MASK, self)
        self._replace_placeholder(self.ui.mask_layout, self.ui.mask_placeholder, self.mask_view)
        self.progress_panel = ProgressPanel(self)
        self._replace_placeholder(self.ui.btn_layout, self.ui.progress_placeholder, self.progress_panel)
        self._build_category_buttons()

        # Digits tag with the n-th category regardless of focus.
        self._digit_shortcuts: List[QShortcut] = []
        for number in range(1, 10):
            shortcut = QShortcut(QKeySequence(str(number)), self)
            shortcut.activated.connect(lambda n=number: self._tag_by_number(n))
            self._digit_shortcuts.append(shortcut)

    @staticmethod
    def _replace_placeholder(layout, placeholder: QWidget, widget: QWidget) -> None:
        replaced = layout.replaceWidget(placeholder, widget)
        if replaced is None:
            layout.addWidget(widget)
        placeholder.deleteLater()

    def _build_category_buttons(self) -> None:
        layout = self.ui.category_layout
        for position, name in enumerate(self.session.categories):
            button = QPushButton(self.session.categories.display_for(name), self.ui.category_container)
            button.setObjectName(f"category_{position}")
            button.setCheckable(True)
            button.setFixedHeight(style.BUTTON_HEIGHT + 4)
            button.setStyleSheet(style.category_button_style(button.objectName(), category_color(name)))
            if position < 9:
                button.setToolTip(f"Shortcut: {position + 1}")
            button.clicked.connect(lambda _=False, n=name: self.tag_current(n))
            layout.addWidget(button, position // CATEGORY_COLUMNS, position % CATEGORY_COLUMNS)
            self._category_buttons[name] = button

    def _connect_signals(self) -> None:
        ui = self.ui
        ui.action_load_document.triggered.connect(self.select_document)
        ui.action_load_tags.triggered.connect(self.select_tags_file)
        ui.action_choose_root.triggered.connect(self.select_root)
        ui.action_export.triggered.connect(self.export_document)
        ui.action_quit.triggered.connect(self.close)
        ui.action_unlabeled_only.toggled.connect(self._handle_traversal_toggled)
        ui.action_show_help.triggered.connect(self._show_help)
        ui.action_load_recent.aboutToShow.connect(self._rebuild_recent_menu)
        ui.btn_prev.clicked.connect(self.prev_mask)
        ui.btn_next.clicked.connect(self.next_mask)
        ui.combo_image.currentIndexChanged.connect(self._handle_image_combo)
        ui.combo_split.currentIndexChanged.connect(self._handle_split_combo)

        session = self.session
        session.datasetChanged.connect(self._on_dataset_changed)
        session.selectionChanged.connect(self._on_selection_changed)
        session.currentMaskChanged.connect(self._on_current_mask_changed)
        session.progressChanged.connect(self._on_progress_changed)
        session.statusMessage.connect(self.show_status)
        session.errorRaised.connect(self._on_session_error)

        loader = self.asset_loader
        loader.assetLoading.connect(self._on_asset_loading)
        loader.assetReady.connect(self._on_asset_ready)
        loader.assetMissing.connect(self._on_asset_missing)
        loader.assetCleared.connect(self._on_asset_cleared)

    def _apply_preferences(self) -> None:
        mode = self.preferences.get_preference("traversal_mode", TRAVERSAL_ALL)
        if mode in TRAVERSAL_MODES:
            self.ui.action_unlabeled_only.setChecked(mode == TRAVERSAL_UNLABELED)

    # ============================================================================
    # PUBLIC ACTIONS
    # ============================================================================

    def show_status(self, message: str, duration: int = 0) -> None:
        status = self.statusBar()
        if status is not None:
            status.showMessage(message, duration)
        else:
            log_warning(f"Status bar not available to show message: {message}", "UI")

    def load_document(self, path: Path) -> bool:
        if not self.session.load_file(path):
            return False
        self._session_error = ""
        self.preferences.touch_document(path)
        self.ui.label_document.setText(path.name)
        self._refresh_error_banner()
        return True

    def set_root(self, path: Optional[str]) -> bool:
        """Install the image directory; a cancelled or unreadable pick is not an error."""
        root = grant_root(path)
        if root is None:
            if path:
                self.show_status(f"Directory not readable: {path}", 5000)
            return False
        self.asset_loader.set_root(root)
        self.preferences.set_preference("last_root", str(root.path))
        log_info(f"Image directory set to {root.path}", "UI")
        self._request_assets()
        return True

    def select_document(self) -> None:
        start = self.preferences.last_document() or str(Path.home())
        path, _ = QFileDialog.getOpenFileName(self, "Select JSON document", start, "JSON (*.json)")
        if path:
            self.load_document(Path(path))

    def select_tags_file(self) -> None:
        if not require_dataset(self, "Load tags"):
            return
        start = str(self.session.document_path.parent) if self.session.document_path else str(Path.home())
        path, _ = QFileDialog.getOpenFileName(self, "Select tag file", start, "JSON (*.json)")
        if not path:
            return
        result = self.session.import_tags(path)
        if result is not None:
            applied, skipped = result
            QMessageBox.information(self, "Load tags", format_tags_loaded(applied, skipped))

    def select_root(self) -> None:
        start = self.preferences.last_root() or str(Path.home())
        path = QFileDialog.getExistingDirectory(self, "Select image directory", start)
        if path:
            self.set_root(path)

    def export_document(self) -> None:
        if not require_dataset(self, "Export"):
            return
        config = get_config()
        base = self.session.document_path.parent if self.session.document_path else Path.home()
        path, _ = QFileDialog.getSaveFileName(
            self, "Export tagged JSON", str(base / config.export_filename), "JSON (*.json)"
        )
        if not path:
            return
        try:
            written = self.session.export(path)
        except OSError as exc:
            log_warning(f"Export failed: {exc}", "UI")
            QMessageBox.warning(self, "Export", f"Could not write {path}: {exc}")
            return
        self.show_status(format_export_success(str(written)), 5000)

    def prev_mask(self) -> None:
        self.session.prev()

    def next_mask(self) -> None:
        self.session.next()

    def tag_current(self, category: str) -> None:
        if not require_current_mask(self):
            return
        self.session.tag_current(category)

    def _tag_by_number(self, number: int) -> None:
        names = list(self.session.categories)
        if 1 <= number <= len(names):
            self.tag_current(names[number - 1])

    def keyPressEvent(self, event):
        """Arrow keys step through the masks of the selected split."""
        if event.key() == Qt.Key.Key_Left:
            self.prev_mask()
            event.accept()
            return
        if event.key() == Qt.Key.Key_Right:
            self.next_mask()
            event.accept()
            return
        super().keyPressEvent(event)

    # ============================================================================
    # MENU HANDLERS
    # ============================================================================

    def _handle_traversal_toggled(self, checked: bool) -> None:
        mode = TRAVERSAL_UNLABELED if checked else TRAVERSAL_ALL
        self.session.set_traversal_mode(mode)
        self.preferences.set_preference("traversal_mode", mode)
        self.show_status(TRAVERSAL_STATUS_TITLES[mode], 2000)

    def _show_help(self) -> None:
        QMessageBox.information(self, "Keyboard shortcuts", help_text())

    def _rebuild_recent_menu(self) -> None:
        menu: QMenu = self.ui.action_load_recent
        menu.clear()
        entries = self.preferences.recent_documents()
        if not entries:
            empty_action = menu.addAction("No recent documents")
            if empty_action is not None:
                empty_action.setEnabled(False)
            return
        for path_str in entries:
            action = menu.addAction(Path(path_str).name)
            if action is not None:
                action.setToolTip(path_str)
                action.triggered.connect(lambda _=False, p=Path(path_str): self.load_document(p))

    def _handle_image_combo(self, index: int) -> None:
        if index < 0:
            return
        self.session.select_image(self.ui.combo_image.itemText(index))

    def _handle_split_combo(self, index: int) -> None:
        if index < 0:
            return
        split_index = self.ui.combo_split.itemData(index)
        if isinstance(split_index, int):
            self.session.select_split(split_index)

    # ============================================================================
    # SESSION SIGNALS
    # ============================================================================

    def _on_dataset_changed(self) -> None:
        keys = self.session.image_keys()
        combo = self.ui.combo_image
        current = [combo.itemText(i) for i in range(combo.count())]
        if current != keys:
            combo.blockSignals(True)
            combo.clear()
            combo.addItems(keys)
            combo.blockSignals(False)
        combo.setEnabled(bool(keys))
        self._sync_category_buttons()

    def _on_selection_changed(self, image_key: str, split_index: int) -> None:
        combo = self.ui.combo_image
        combo.blockSignals(True)
        combo.setCurrentIndex(combo.findText(image_key))
        combo.blockSignals(False)

        split_combo = self.ui.combo_split
        split_combo.blockSignals(True)
        split_combo.clear()
        for index in self.session.split_indices():
            split_combo.addItem(format_split_option(index), index)
        split_combo.setCurrentIndex(split_combo.findData(split_index))
        split_combo.blockSignals(False)
        split_combo.setEnabled(split_combo.count() > 0)
        log_debug(f"Selection {image_key} / split {split_index}", "UI")
        self.asset_loader.request_split(image_key, split_index)

    def _on_current_mask_changed(self, mask_key: Optional[str]) -> None:
        session = self.session
        mask = session.current_mask
        self.split_view.set_bbox(mask_bbox(mask))
        if mask_key is None:
            self.ui.label_mask_info.setText(STATUS_NO_MASKS if session.loaded else "")
        else:
            label = session.current_label()
            shown = session.categories.display_for(label) if label != UNKNOWN_LABEL else label
            self.ui.label_mask_info.setText(f"{mask_key} · {shown}")
        self.ui.label_position.setText(format_position(session.position, len(session.order)))
        self.ui.btn_prev.setEnabled(session.navigator.can_prev())
        self.ui.btn_next.setEnabled(session.navigator.can_next())
        self._sync_category_buttons()
        self.asset_loader.request_mask(session.image_key, session.split_index, session.current_mask_index)

    def _on_progress_changed(self, progress: SplitProgress) -> None:
        self.progress_panel.set_progress(progress)

    def _on_session_error(self, message: str) -> None:
        self._session_error = message
        self._refresh_error_banner()

    def _sync_category_buttons(self) -> None:
        has_mask = self.session.current_mask_key is not None
        label = self.session.current_label()
        for name, button in self._category_buttons.items():
            button.setEnabled(has_mask)
            button.setChecked(has_mask and name == label)

    # ============================================================================
    # ASSET SIGNALS
    # ============================================================================

    def _view_for(self, kind: str) -> SplitView:
        return self.split_view if kind == KIND_SPLIT else self.mask_view

    def _on_asset_loading(self, kind: str) -> None:
        # Only emitted for a new target, so the shown image is stale.
        self._asset_errors.pop(kind, None)
        self._view_for(kind).set_placeholder(PLACEHOLDER_LOADING)
        self._refresh_error_banner()

    def _on_asset_ready(self, kind: str, ref: AssetRef) -> None:
        self._view_for(kind).set_image_data(ref.data)
        self._asset_errors.pop(kind, None)
        self._refresh_error_banner()

    def _on_asset_missing(self, kind: str, expected_path: str) -> None:
        self._view_for(kind).set_placeholder(PLACEHOLDER_SPLIT if kind == KIND_SPLIT else PLACEHOLDER_MASK)
        self._asset_errors[kind] = format_missing_asset(expected_path)
        self._refresh_error_banner()

    def _on_asset_cleared(self, kind: str) -> None:
        self._asset_errors.pop(kind, None)
        self._view_for(kind).set_placeholder(PLACEHOLDER_SPLIT if kind == KIND_SPLIT else PLACEHOLDER_MASK)
        self._refresh_error_banner()

    def _request_assets(self) -> None:
        session = self.session
        self.asset_loader.request_split(session.image_key, session.split_index, force=True)
        self.asset_loader.request_mask(
            session.image_key, session.split_index, session.current_mask_index, force=True
        )

    def _refresh_error_banner(self) -> None:
        messages = [message for message in (self._session_error,) if message]
        messages.extend(self._asset_errors[kind] for kind in (KIND_SPLIT, KIND_MASK) if kind in self._asset_errors)
        self.ui.label_error.setText("\n".join(messages))
        self.ui.label_error.setVisible(bool(messages))

    def _refresh_all(self) -> None:
        if not self.session.loaded:
            self.show_status(STATUS_NO_DOCUMENT)
        elif self.asset_loader.root is None:
            self.show_status(STATUS_NO_ROOT)
        self._on_dataset_changed()
        self._on_progress_changed(self.session.progress)
        self._on_current_mask_changed(self.session.current_mask_key)

    # ============================================================================
    # SHUTDOWN
    # ============================================================================

    def closeEvent(self, event):  # type: ignore[override]
        log_info("closeEvent triggered - releasing assets", "VIEWER")
        self.asset_loader.shutdown()
        self.asset_loader.wait_for_done(500)
        self.preferences.save()
        super().closeEvent(event)
