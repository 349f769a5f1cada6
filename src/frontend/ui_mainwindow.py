"""Qt Designer-style layout for the tagger window.

Defines widgets, menus, and placeholders the application wires into runtime controllers.
"""

from PyQt6 import QtCore, QtGui, QtWidgets
from frontend.widgets import style


class Ui_MainWindow(object):
    def setupUi(self, MainWindow):
        MainWindow.setObjectName("MainWindow")
        MainWindow.resize(1200, 800)
        MainWindow.setWindowTitle("Mask Tagger")
        self.centralwidget = QtWidgets.QWidget(MainWindow)
        self.centralwidget.setObjectName("centralwidget")
        self.main_layout = QtWidgets.QVBoxLayout(self.centralwidget)
        self.main_layout.setContentsMargins(8, 8, 8, 8)
        self.main_layout.setSpacing(8)

        # Header row (document + selection + navigation)
        header_row = QtWidgets.QHBoxLayout()
        header_row.setSpacing(8)
        self.label_document = QtWidgets.QLabel(self.centralwidget)
        self.label_document.setObjectName("label_document")
        font = self.label_document.font()
        font.setPointSize(10)
        font.setBold(True)
        self.label_document.setFont(font)
        self.label_document.setTextInteractionFlags(
            QtCore.Qt.TextInteractionFlag.TextSelectableByMouse
            | QtCore.Qt.TextInteractionFlag.TextSelectableByKeyboard
        )
        self.label_document.setText("No document loaded")
        header_row.addWidget(self.label_document)
        header_row.addStretch(1)

        self.label_image = QtWidgets.QLabel("Image:", self.centralwidget)
        header_row.addWidget(self.label_image)
        self.combo_image = QtWidgets.QComboBox(self.centralwidget)
        self.combo_image.setObjectName("combo_image")
        self.combo_image.setMinimumWidth(160)
        self.combo_image.setEnabled(False)
        header_row.addWidget(self.combo_image)

        self.label_split = QtWidgets.QLabel("Split:", self.centralwidget)
        header_row.addWidget(self.label_split)
        self.combo_split = QtWidgets.QComboBox(self.centralwidget)
        self.combo_split.setObjectName("combo_split")
        self.combo_split.setMinimumWidth(110)
        self.combo_split.setEnabled(False)
        header_row.addWidget(self.combo_split)

        self.btn_prev = QtWidgets.QPushButton(self.centralwidget)
        self.btn_prev.setText("◀  Previous")
        self.btn_prev.setEnabled(False)
        self.btn_prev.setObjectName("btn_prev")
        header_row.addWidget(self.btn_prev)

        self.label_position = QtWidgets.QLabel("– / –", self.centralwidget)
        self.label_position.setObjectName("label_position")
        self.label_position.setMinimumWidth(70)
        self.label_position.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        header_row.addWidget(self.label_position)

        self.btn_next = QtWidgets.QPushButton(self.centralwidget)
        self.btn_next.setText("Next  ▶")
        self.btn_next.setEnabled(False)
        self.btn_next.setObjectName("btn_next")
        header_row.addWidget(self.btn_next)
        self.main_layout.addLayout(header_row)

        # Error banner (hidden until an error is reported)
        self.label_error = QtWidgets.QLabel(self.centralwidget)
        self.label_error.setObjectName("label_error")
        self.label_error.setWordWrap(True)
        self.label_error.setStyleSheet(style.error_banner_style("label_error"))
        self.label_error.setVisible(False)
        self.main_layout.addWidget(self.label_error)

        # Split image (left) and mask column (right)
        self.images_layout = QtWidgets.QHBoxLayout()
        self.images_layout.setSpacing(10)
        self.split_placeholder = QtWidgets.QWidget(self.centralwidget)
        self.split_placeholder.setObjectName("split_placeholder")
        self.images_layout.addWidget(self.split_placeholder, 3)

        self.mask_column = QtWidgets.QWidget(self.centralwidget)
        self.mask_column.setObjectName("mask_card")
        self.mask_column.setStyleSheet(style.card_style("mask_card"))
        mask_layout = QtWidgets.QVBoxLayout(self.mask_column)
        mask_layout.setContentsMargins(12, 10, 12, 10)
        mask_layout.setSpacing(8)
        self.label_mask_title = QtWidgets.QLabel("Current mask:")
        self.label_mask_title.setStyleSheet(style.heading_style())
        mask_layout.addWidget(self.label_mask_title)
        self.mask_placeholder = QtWidgets.QWidget(self.mask_column)
        self.mask_placeholder.setObjectName("mask_placeholder")
        self.mask_layout = mask_layout
        mask_layout.addWidget(self.mask_placeholder, 1)
        self.label_mask_info = QtWidgets.QLabel("")
        self.label_mask_info.setObjectName("label_mask_info")
        self.label_mask_info.setStyleSheet(style.monospace_text_style())
        self.label_mask_info.setTextInteractionFlags(
            QtCore.Qt.TextInteractionFlag.TextSelectableByMouse
        )
        mask_layout.addWidget(self.label_mask_info)
        self.label_categories_title = QtWidgets.QLabel("Tag as:")
        self.label_categories_title.setStyleSheet(style.heading_style(13.0))
        mask_layout.addWidget(self.label_categories_title)
        self.category_container = QtWidgets.QWidget(self.mask_column)
        self.category_container.setObjectName("category_container")
        self.category_container.setStyleSheet(style.panel_body_style("category_container"))
        self.category_layout = QtWidgets.QGridLayout(self.category_container)
        self.category_layout.setContentsMargins(0, 0, 0, 0)
        self.category_layout.setHorizontalSpacing(6)
        self.category_layout.setVerticalSpacing(6)
        mask_layout.addWidget(self.category_container)
        self.images_layout.addWidget(self.mask_column, 2)
        self.main_layout.addLayout(self.images_layout, 1)

        # Footer progress row
        self.btn_layout = QtWidgets.QHBoxLayout()
        self.btn_layout.setSpacing(6)
        self.btn_layout.addStretch(1)
        self.progress_placeholder = QtWidgets.QWidget(self.centralwidget)
        self.progress_placeholder.setObjectName("progress_placeholder")
        self.progress_placeholder.setMinimumWidth(260)
        self.progress_placeholder.setMaximumHeight(style.BUTTON_HEIGHT)
        self.btn_layout.addWidget(self.progress_placeholder)
        self.main_layout.addLayout(self.btn_layout)
        MainWindow.setCentralWidget(self.centralwidget)

        self.menubar = QtWidgets.QMenuBar(MainWindow)
        self.menubar.setGeometry(QtCore.QRect(0, 0, 1200, 22))
        self.menu_file = QtWidgets.QMenu("File", self.menubar)
        self.menu_view = QtWidgets.QMenu("View", self.menubar)
        self.menu_help = QtWidgets.QMenu("Help", self.menubar)

        self.action_load_document = QtGui.QAction("Load JSON…", MainWindow)
        self.action_load_document.setShortcut(QtGui.QKeySequence("Ctrl+O"))
        self.action_load_recent = QtWidgets.QMenu("Load recent", self.menu_file)
        self.action_load_tags = QtGui.QAction("Load tags…", MainWindow)
        self.action_load_tags.setShortcut(QtGui.QKeySequence("Ctrl+T"))
        self.action_choose_root = QtGui.QAction("Choose image directory…", MainWindow)
        self.action_choose_root.setShortcut(QtGui.QKeySequence("Ctrl+D"))
        self.action_export = QtGui.QAction("Export tagged JSON…", MainWindow)
        self.action_export.setShortcut(QtGui.QKeySequence("Ctrl+E"))
        self.action_quit = QtGui.QAction("Quit", MainWindow)
        self.action_quit.setShortcut(QtGui.QKeySequence("Ctrl+Q"))

        self.action_unlabeled_only = QtGui.QAction("Unlabeled masks only", MainWindow)
        self.action_unlabeled_only.setCheckable(True)
        self.action_unlabeled_only.setShortcut(QtGui.QKeySequence("Ctrl+U"))

        self.action_show_help = QtGui.QAction("Keyboard shortcuts", MainWindow)
        self.action_show_help.setShortcut(QtGui.QKeySequence("Ctrl+H"))

        self.menu_file.addAction(self.action_load_document)
        self.menu_file.addMenu(self.action_load_recent)
        self.menu_file.addAction(self.action_load_tags)
        self.menu_file.addAction(self.action_choose_root)
        self.menu_file.addSeparator()
        self.menu_file.addAction(self.action_export)
        self.menu_file.addSeparator()
        self.menu_file.addAction(self.action_quit)
        self.menu_view.addAction(self.action_unlabeled_only)
        self.menu_help.addAction(self.action_show_help)
        self.menubar.addMenu(self.menu_file)
        self.menubar.addMenu(self.menu_view)
        self.menubar.addMenu(self.menu_help)
        MainWindow.setMenuBar(self.menubar)

        self.statusbar = QtWidgets.QStatusBar(MainWindow)
        self.statusbar.setObjectName("statusbar")
        MainWindow.setStatusBar(self.statusbar)
