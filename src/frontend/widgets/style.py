"""Shared UI style helpers for the tagger window and its panels."""
from typing import Tuple

APP_BG = "#eceff3"  # light gray app background
CARD_BG = "#f9fafc"  # almost-white panels
GROUP_BG = CARD_BG
GROUP_BORDER = "#dfe3e8"
TEXT_PRIMARY = "#2b3035"  # dark gray body text
TEXT_TITLE = "#0f1115"
BODY_FONT_SIZE = "14.5px"
HEADING_FONT_SIZE = 16.0
MENU_BG = "#2d333d"
MENU_BG_HOVER = "#3a414c"
MENU_FG = "#f5f7fb"
BUTTON_HEIGHT = 30
BUTTON_BG_HOVER = "#edf1f7"
BUTTON_BORDER = GROUP_BORDER
BUTTON_BORDER_STRONG = "#c5ced9"
BUTTON_BG_GRADIENT = "qlineargradient(x1:0, y1:0, x2:0, y2:1, stop:0 #fdfefe, stop:1 #edf2f8)"
BUTTON_CHECKED_BG = "#dbe7ff"
ERROR_BG = "#fdecea"
ERROR_BORDER = "#f5c2bd"
ERROR_FG = "#8a1c14"
BBOX_COLOR = "#ff3b30"
BBOX_WIDTH = 2
MONO_TEXT_STYLE = "font-family: 'JetBrains Mono', 'Fira Code', monospace; font-size: 12.5px;"
TITLE_STYLE_BASE = f"font-weight: 700; color: {TEXT_TITLE}; background: transparent;"


def card_style(object_name: str) -> str:
    return (
        f"#{object_name} {{ background: {CARD_BG}; border-radius: 8px; }}"
        f"#{object_name} QLabel {{ color: {TEXT_PRIMARY}; font-size: {BODY_FONT_SIZE}; background: transparent; }}"
    )


def panel_body_style(object_name: str) -> str:
    return (
        f"#{object_name} {{ background: {CARD_BG}; border: 1px solid {GROUP_BORDER};"
        f" border-radius: 8px; padding: 10px 12px; font-size: {BODY_FONT_SIZE}; }}"
        f"#{object_name} QLabel {{ background: transparent; }}"
    )


def heading_style(size: float = HEADING_FONT_SIZE) -> str:
    """Shared heading style for panel titles."""
    return f"font-size: {size}px; {TITLE_STYLE_BASE}"


def error_banner_style(object_name: str) -> str:
    return (
        f"#{object_name} {{ background: {ERROR_BG}; color: {ERROR_FG}; border: 1px solid {ERROR_BORDER};"
        f" border-radius: 6px; padding: 6px 10px; font-size: {BODY_FONT_SIZE}; }}"
    )


def scoped_button_style(object_name: str) -> str:
    """Button look restricted to one object name so parent sheets do not override it."""
    return (
        f"QPushButton#{object_name} {{ color: {TEXT_PRIMARY}; background: {BUTTON_BG_GRADIENT};"
        f" border: 1px solid {BUTTON_BORDER_STRONG}; border-radius: 6px; padding: 4px 12px;"
        f" min-height: {BUTTON_HEIGHT - 8}px; }}"
        f"QPushButton#{object_name}:hover {{ background: {BUTTON_BG_HOVER}; border-color: {TEXT_TITLE}; }}"
        f"QPushButton#{object_name}:checked {{ background: {BUTTON_CHECKED_BG}; border-color: {TEXT_TITLE};"
        f" font-weight: 700; }}"
        f"QPushButton#{object_name}:disabled {{ color: #8d95a3; background: #f3f4f6; border-color: {BUTTON_BORDER}; }}"
    )


def category_button_style(object_name: str, color: Tuple[int, int, int]) -> str:
    r, g, b = color
    return scoped_button_style(object_name) + (
        f"QPushButton#{object_name} {{ border-left: 5px solid rgb({r}, {g}, {b}); }}"
    )


def image_frame_style() -> str:
    return f"border: 1px solid {GROUP_BORDER}; background: {GROUP_BG};"


def monospace_text_style() -> str:
    return MONO_TEXT_STYLE.replace("12.5px", BODY_FONT_SIZE)


def app_stylesheet() -> str:
    """Application-wide stylesheet with consistent background and text colors."""
    return (
        f"QMainWindow {{ background: {APP_BG}; color: {TEXT_PRIMARY}; font-size: {BODY_FONT_SIZE}; }}"
        f"QMessageBox {{ background: {APP_BG}; color: {TEXT_PRIMARY}; font-size: {BODY_FONT_SIZE}; }}"
        f"QWidget {{ color: {TEXT_PRIMARY}; background: {APP_BG}; font-size: {BODY_FONT_SIZE}; }}"
        f"QLabel {{ color: {TEXT_PRIMARY}; background: transparent; font-size: {BODY_FONT_SIZE}; }}"
        f"QMenuBar {{ background: {MENU_BG}; color: {MENU_FG}; }}"
        f"QMenuBar::item:selected {{ background: {MENU_BG_HOVER}; color: {MENU_FG}; }}"
        f"QMenu {{ background: {MENU_BG}; color: {MENU_FG}; }}"
        f"QMenu::item:selected {{ background: {MENU_BG_HOVER}; color: {MENU_FG}; }}"
        f"QToolTip {{ color: {TEXT_PRIMARY}; background-color: {GROUP_BG}; border: 1px solid {GROUP_BORDER}; }}"
        f"QComboBox {{ background: {CARD_BG}; border: 1px solid {BUTTON_BORDER_STRONG}; border-radius: 6px;"
        f" padding: 3px 8px; min-height: {BUTTON_HEIGHT - 8}px; }}"
        f"QPushButton {{ color: {TEXT_PRIMARY}; background: {BUTTON_BG_GRADIENT};"
        f" border: 1px solid {BUTTON_BORDER_STRONG}; border-radius: 6px; padding: 5px 10px;"
        f" min-height: 24px; font-size: {BODY_FONT_SIZE}; }}"
        f"QPushButton:hover {{ background: {BUTTON_BG_HOVER}; border-color: {TEXT_TITLE}; }}"
        f"QPushButton:pressed {{ background: #dfe6f1; border-color: {TEXT_PRIMARY}; }}"
        f"QPushButton:disabled {{ color: #8d95a3; background: #f3f4f6; border-color: {BUTTON_BORDER}; }}"
    )


def apply_app_style(app) -> None:
    """Apply the shared stylesheet to the given QApplication instance."""
    app.setStyleSheet(app_stylesheet())
