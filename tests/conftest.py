"""
Shared test fixtures.

Qt objects run on the offscreen platform. Background asset tasks are collected by
``FakePool`` and run synchronously on the test thread so signal delivery is direct.
"""

import base64
import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Dict, List

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from config import AppConfig, reset_config, set_config  # noqa: E402

SAMPLE_DOCUMENT: Dict[str, Any] = {
    "img1": {
        "split_1": {
            "mask_0": {"bbox": [10, 20, 110, 220]},
            "mask_1": {"label": "Wood", "bbox": [0, 0, 50, 50]},
            "mask_2": {"label": None},
            "mask_10": {},
        },
        "split_2": {
            "mask_0": {"label": "Glass"},
        },
    },
    "img2": {
        "split_1": {},
    },
}

# Smallest valid 1x1 PNG; split views need bytes that actually decode.
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class FakePool:
    """Stand-in for QThreadPool that runs tasks only when asked."""

    def __init__(self) -> None:
        self.tasks: List[Any] = []

    def start(self, task) -> None:
        self.tasks.append(task)

    def run_all(self) -> None:
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            task.run()

    def run(self, index: int) -> None:
        self.tasks.pop(index).run()

    def waitForDone(self, msecs: int = -1) -> bool:
        return True


@pytest.fixture(scope="session")
def qapp():
    """Single QApplication for the whole run."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path):
    """Keep preferences and logs inside the test's temporary directory."""
    set_config(dataclasses.replace(AppConfig(), cache_dir=tmp_path / "cache"))
    yield
    reset_config()


@pytest.fixture
def sample_document() -> Dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_DOCUMENT))


@pytest.fixture
def sample_document_file(tmp_path: Path, sample_document) -> Path:
    path = tmp_path / "masks.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path


@pytest.fixture
def asset_root(tmp_path: Path) -> Path:
    """Image tree laid out as <root>/<image>/split_<n>/{split_<n>,mask_<m>}.jpg."""
    root = tmp_path / "assets"
    files = [
        "img1/split_1/split_1.jpg",
        "img1/split_1/mask_0.jpg",
        "img1/split_1/mask_1.jpg",
        "img1/split_2/split_2.jpg",
        "img1/split_3/mask_2.jpg",
    ]
    for relative in files:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(PNG_1X1)
    return root


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()
