"""
Tests for the command line entry point (report mode only; no GUI is started).
"""

from config import get_config
from main import main, run_report


class TestReport:
    def test_prints_table(self, sample_document_file, capsys):
        assert run_report(sample_document_file) == 0

        out = capsys.readouterr().out
        assert "img1" in out
        assert "TOTAL" in out
        assert "40.0%" in out

    def test_needs_document(self):
        assert run_report(None) == 2

    def test_unreadable_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2]", encoding="utf-8")

        assert run_report(path) == 1


class TestMain:
    def test_report_flag(self, sample_document_file, capsys):
        assert main(["mask-tagger", "--report", "--document", str(sample_document_file)]) == 0
        assert "TOTAL" in capsys.readouterr().out

    def test_overrides_update_config(self, sample_document_file):
        main([
            "mask-tagger", "--report", "--document", str(sample_document_file),
            "--split-base", "0", "--categories", "scene-v1",
        ])

        config = get_config()
        assert config.split_first_index == 0
        assert config.category_set == "scene-v1"
