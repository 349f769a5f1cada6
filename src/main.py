import argparse
import dataclasses
import os
import sys
from pathlib import Path
from typing import List, Optional

from backend.dataset_store import DatasetLoadError, load_dataset_file
from backend.services.progress_tracker import dataset_progress
from backend.utils.table_writer import (format_progress_table,
                                        render_progress_table,
                                        write_table_to_log)
from common.log_utils import log_error, set_log_level
from config import get_config, set_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tag segmentation masks split by split.")
    parser.add_argument("--document", type=Path, help="JSON document to open on start")
    parser.add_argument("--root", type=Path, help="Directory holding <image>/split_<n>/ folders")
    parser.add_argument("--categories", help="Category set name (e.g. scene-v1) or path to a YAML file")
    parser.add_argument(
        "--split-base",
        type=int,
        choices=(0, 1),
        help="Number of the first split folder on disk (split_0 or split_1)",
    )
    parser.add_argument("--report", action="store_true", help="Print tagging progress for --document and exit")
    parser.add_argument("--report-log", action="store_true", help="Also write the progress table under logs/")
    parser.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser


def _apply_overrides(args: argparse.Namespace) -> None:
    overrides = {}
    if args.categories:
        overrides["category_set"] = args.categories
    if args.split_base is not None:
        overrides["split_first_index"] = args.split_base
    if overrides:
        set_config(dataclasses.replace(get_config(), **overrides))
    if args.log_level:
        set_log_level(args.log_level)


def run_report(document: Optional[Path], *, write_log: bool = False) -> int:
    """Print per-split progress without starting the GUI."""
    if document is None:
        log_error("--report needs --document", "MAIN")
        return 2
    try:
        dataset = load_dataset_file(document)
    except DatasetLoadError as exc:
        log_error(f"Cannot read {document}: {exc}", "MAIN")
        return 1
    rows = dataset_progress(dataset)
    print(render_progress_table(rows))
    if write_log:
        table_data, headers = format_progress_table(rows)
        write_table_to_log(table_data, headers, "tagging_progress")
    return 0


def _apply_style(app) -> None:
    from PyQt6.QtWidgets import QStyleFactory

    from frontend.widgets import style as ui_style

    available = [str(s) for s in QStyleFactory.keys()]
    prefer = os.environ.get("QT_STYLE_OVERRIDE") or os.environ.get("QT_STYLE") or "Fusion"
    if prefer not in available and available:
        prefer = available[0] if "Fusion" not in available else "Fusion"
    style = QStyleFactory.create(prefer)
    if style is not None:
        app.setStyle(style)
    ui_style.apply_app_style(app)


def run_gui(args: argparse.Namespace, argv: List[str]) -> int:
    from PyQt6.QtWidgets import QApplication

    from frontend.tagger_window import TaggerWindow

    app = QApplication(argv)
    _apply_style(app)

    window = TaggerWindow()
    if args.document is not None:
        window.load_document(args.document)
    if args.root is not None:
        window.set_root(str(args.root))
    else:
        window.set_root(window.preferences.last_root())
    window.show()
    return app.exec()


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    args = _build_parser().parse_args(argv[1:])
    _apply_overrides(args)
    if args.report:
        return run_report(args.document, write_log=args.report_log)
    return run_gui(args, argv)


if __name__ == "__main__":
    sys.exit(main())
