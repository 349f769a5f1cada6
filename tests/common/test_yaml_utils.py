"""
Tests for compact YAML output.
"""

from common.yaml_utils import dumps_yaml, load_yaml, save_yaml


class TestCompactDumper:
    def test_flat_dict_is_flow_style(self):
        assert dumps_yaml({"prefs": {"a": 1, "b": "x"}}).strip() == "prefs: {a: 1, b: x}"

    def test_list_of_scalars_is_flow_style(self):
        assert dumps_yaml({"recent": ["a", "b"]}).strip() == "recent: [a, b]"

    def test_nested_dict_is_block_style(self):
        text = dumps_yaml({"outer": {"inner": {"a": 1}}})

        assert text.splitlines()[0] == "outer:"

    def test_unicode_is_kept(self):
        assert "🪵" in dumps_yaml({"display": "🪵 Wood"})


class TestFiles:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "cache.yaml"

        assert save_yaml(path, {"version": 1, "recent_documents": ["/a.json"]})
        assert load_yaml(path) == {"version": 1, "recent_documents": ["/a.json"]}

    def test_missing_file(self, tmp_path):
        assert load_yaml(tmp_path / "nope.yaml") == {}

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        assert load_yaml(path) == {}

    def test_broken_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("a: [1, 2\n", encoding="utf-8")

        assert load_yaml(path) == {}
