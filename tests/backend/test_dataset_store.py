"""
Tests for the dataset store.

Covers loading, label backfill, read accessors, copy-on-write labeling,
export, and the flat tag file format.
"""

import json

import pytest

from backend.dataset_store import (REASON_NOT_AN_OBJECT, REASON_PARSE_FAILURE,
                                   Dataset, DatasetLoadError, apply_label,
                                   dumps_dataset, export_dataset, iter_masks,
                                   keys_of, label_of, load_dataset,
                                   load_dataset_file, load_tags_file, mask_of,
                                   masks_of, merge_tags, parse_tag_key,
                                   splits_of, to_document)
from backend.services.progress_tracker import split_progress
from backend.services.traversal import mask_order
from backend.utils.categories import BUILTIN_CATEGORY_SETS

MATERIALS = BUILTIN_CATEGORY_SETS["materials-v2"]


class TestLoadDataset:
    """Test document loading and validation."""

    def test_backfills_missing_and_null_labels(self, sample_document):
        """Masks without a label, or with a null one, read as Unknown."""
        dataset = load_dataset(sample_document)

        assert mask_of(dataset, "img1", "split_1", "mask_0")["label"] == "Unknown"
        assert mask_of(dataset, "img1", "split_1", "mask_2")["label"] == "Unknown"
        assert mask_of(dataset, "img1", "split_1", "mask_1")["label"] == "Wood"

    def test_does_not_mutate_input(self, sample_document):
        """The caller's document keeps its original shape."""
        load_dataset(sample_document)

        assert "label" not in sample_document["img1"]["split_1"]["mask_0"]

    def test_accepts_json_text(self):
        """Raw JSON text is parsed before loading."""
        dataset = load_dataset('{"img1": {"split_1": {"mask_0": {}}}}')

        assert keys_of(dataset) == ["img1"]

    def test_rejects_invalid_json(self):
        """Unparseable text raises a parse failure."""
        with pytest.raises(DatasetLoadError) as excinfo:
            load_dataset("{not json")

        assert excinfo.value.reason == REASON_PARSE_FAILURE

    @pytest.mark.parametrize("document", [[1, 2], "42", "null"])
    def test_rejects_non_object_top_level(self, document):
        """A top level that is not a mapping is refused."""
        with pytest.raises(DatasetLoadError) as excinfo:
            load_dataset(document)

        assert excinfo.value.reason == REASON_NOT_AN_OBJECT

    def test_load_file(self, sample_document_file):
        """Documents load from disk."""
        dataset = load_dataset_file(sample_document_file)

        assert keys_of(dataset) == ["img1", "img2"]

    def test_load_file_with_bom(self, tmp_path, sample_document):
        """A UTF-8 byte order mark at the start of the file is ignored."""
        path = tmp_path / "bom.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps(sample_document).encode("utf-8"))

        assert keys_of(load_dataset_file(path)) == ["img1", "img2"]

    def test_load_missing_file(self, tmp_path):
        """A missing file is reported as a parse failure."""
        with pytest.raises(DatasetLoadError):
            load_dataset_file(tmp_path / "absent.json")


class TestAccessors:
    """Test read accessors."""

    def test_splits_sorted_numerically(self):
        """split_10 sorts after split_2."""
        dataset = load_dataset({"img": {"split_10": {}, "split_2": {}, "split_1": {}}})

        assert splits_of(dataset, "img") == ["split_1", "split_2", "split_10"]

    def test_masks_of_ignores_non_mask_keys(self):
        """Only mask_* entries count as masks."""
        dataset = load_dataset({"img": {"split_1": {"mask_0": {}, "meta": {"w": 1}}}})

        assert list(masks_of(dataset, "img", "split_1")) == ["mask_0"]

    def test_missing_paths_are_empty(self, sample_document):
        """Unknown keys read as empty, never raise."""
        dataset = load_dataset(sample_document)

        assert splits_of(dataset, "nope") == []
        assert dict(masks_of(dataset, "img1", "split_9")) == {}
        assert mask_of(dataset, "img1", "split_1", "mask_99") is None

    def test_label_of_none(self):
        """A missing mask has the Unknown label."""
        assert label_of(None) == "Unknown"

    def test_iter_masks(self, sample_document):
        """Every mask of every split is visited once."""
        dataset = load_dataset(sample_document)

        visited = [(image, split, mask) for image, split, mask, _ in iter_masks(dataset)]

        assert len(visited) == 5
        assert ("img1", "split_2", "mask_0") in visited


class TestApplyLabel:
    """Test copy-on-write labeling."""

    def test_returns_new_dataset_with_label(self, sample_document):
        """The new value carries the label, the old one does not."""
        dataset = load_dataset(sample_document)

        updated = apply_label(dataset, "img1", "split_1", "mask_0", "Glass", MATERIALS)

        assert updated is not dataset
        assert mask_of(updated, "img1", "split_1", "mask_0")["label"] == "Glass"
        assert mask_of(dataset, "img1", "split_1", "mask_0")["label"] == "Unknown"

    def test_shares_untouched_branches(self, sample_document):
        """Only the dicts along the edited path are new."""
        dataset = load_dataset(sample_document)

        updated = apply_label(dataset, "img1", "split_1", "mask_0", "Glass", MATERIALS)

        old, new = dataset.raw(), updated.raw()
        assert new["img2"] is old["img2"]
        assert new["img1"]["split_2"] is old["img1"]["split_2"]
        assert new["img1"]["split_1"]["mask_1"] is old["img1"]["split_1"]["mask_1"]
        assert new["img1"]["split_1"] is not old["img1"]["split_1"]

    def test_keeps_other_mask_fields(self, sample_document):
        """The bbox survives relabeling."""
        dataset = load_dataset(sample_document)

        updated = apply_label(dataset, "img1", "split_1", "mask_0", "Metal", MATERIALS)

        assert mask_of(updated, "img1", "split_1", "mask_0")["bbox"] == [10, 20, 110, 220]

    def test_idempotent(self, sample_document):
        """Applying the same label twice yields equal datasets."""
        dataset = load_dataset(sample_document)

        once = apply_label(dataset, "img1", "split_1", "mask_0", "Glass", MATERIALS)
        twice = apply_label(once, "img1", "split_1", "mask_0", "Glass", MATERIALS)

        assert once == twice

    def test_rejects_category_outside_set(self, sample_document):
        """Labels outside the category set leave the dataset untouched."""
        dataset = load_dataset(sample_document)

        assert apply_label(dataset, "img1", "split_1", "mask_0", "Banana", MATERIALS) is dataset
        assert apply_label(dataset, "img1", "split_1", "mask_0", "", MATERIALS) is dataset

    def test_unknown_sentinel_never_stored(self, sample_document):
        """Tagging with Unknown cannot un-label a mask."""
        dataset = load_dataset(sample_document)

        assert apply_label(dataset, "img1", "split_1", "mask_1", "Unknown", MATERIALS) is dataset
        assert apply_label(dataset, "img1", "split_1", "mask_1", "Unknown") is dataset
        assert mask_of(dataset, "img1", "split_1", "mask_1")["label"] == "Wood"

    def test_default_category_set(self, sample_document):
        """Without an explicit set the configured one applies."""
        dataset = load_dataset(sample_document)

        assert apply_label(dataset, "img1", "split_1", "mask_0", "NotACategory") is dataset
        updated = apply_label(dataset, "img1", "split_1", "mask_0", "Glass")
        assert mask_of(updated, "img1", "split_1", "mask_0")["label"] == "Glass"

    def test_rejects_missing_path(self, sample_document):
        """Unknown image, split or mask keys are ignored."""
        dataset = load_dataset(sample_document)

        assert apply_label(dataset, "img9", "split_1", "mask_0", "Glass", MATERIALS) is dataset
        assert apply_label(dataset, "img1", "split_7", "mask_0", "Glass", MATERIALS) is dataset
        assert apply_label(dataset, "img1", "split_1", "mask_77", "Glass", MATERIALS) is dataset


class TestEndToEnd:
    """Load, traverse, label, and measure progress."""

    def test_two_mask_split(self):
        """One unlabeled and one labeled mask become fully tagged after one label."""
        dataset = load_dataset({"img1": {"split_1": {"mask_0": {}, "mask_1": {"label": "Wood"}}}})

        assert mask_of(dataset, "img1", "split_1", "mask_0")["label"] == "Unknown"
        order = mask_order(dataset, "img1", "split_1")
        assert order == ["mask_0", "mask_1"]
        progress = split_progress(dataset, "img1", "split_1", order)
        assert (progress.tagged, progress.total, progress.percentage) == (1, 2, 50.0)

        updated = apply_label(dataset, "img1", "split_1", "mask_0", "Glass", MATERIALS)
        order = mask_order(updated, "img1", "split_1")
        assert set(order) == {"mask_0", "mask_1"}
        assert order == ["mask_0", "mask_1"]
        progress = split_progress(updated, "img1", "split_1", order)
        assert (progress.tagged, progress.total, progress.percentage) == (2, 2, 100.0)


class TestExport:
    """Test export to JSON."""

    def test_round_trips_labels(self, sample_document, tmp_path):
        """Exported JSON loads back to an equal dataset."""
        dataset = apply_label(load_dataset(sample_document), "img1", "split_1", "mask_0", "Glass", MATERIALS)

        path = export_dataset(dataset, tmp_path / "out" / "tagged_data.json")

        assert path.exists()
        assert load_dataset_file(path) == dataset

    def test_every_mask_has_label(self, sample_document):
        """Exports write Unknown explicitly."""
        document = json.loads(dumps_dataset(load_dataset(sample_document)))

        assert document["img1"]["split_1"]["mask_10"]["label"] == "Unknown"

    def test_to_document_is_detached(self, sample_document):
        """Editing the exported dict does not reach the dataset."""
        dataset = load_dataset(sample_document)

        document = to_document(dataset)
        document["img1"]["split_1"]["mask_0"]["label"] = "Paper"

        assert mask_of(dataset, "img1", "split_1", "mask_0")["label"] == "Unknown"

    def test_keeps_non_ascii(self):
        """Image keys with accents are written as-is."""
        text = dumps_dataset(load_dataset({"árbol": {"split_1": {}}}))

        assert "árbol" in text


class TestTagFiles:
    """Test the flat image/split/mask tag file."""

    def test_parse_tag_key(self):
        """Image keys may contain slashes."""
        assert parse_tag_key("img1/split_1/mask_0") == ("img1", "split_1", "mask_0")
        assert parse_tag_key("a/b/split_2/mask_3") == ("a/b", "split_2", "mask_3")
        assert parse_tag_key("img1/mask_0") is None
        assert parse_tag_key("img1/part_1/mask_0") is None

    def test_merge_counts_applied_and_skipped(self, sample_document):
        """Unknown paths and categories are skipped, the rest applied."""
        dataset = load_dataset(sample_document)
        tags = {
            "img1/split_1/mask_0": "Glass",
            "img1/split_1/mask_2": "Stone",
            "img1/split_1/mask_99": "Glass",
            "img1/split_1/mask_10": "Banana",
            "garbage": "Glass",
        }

        merged, applied, skipped = merge_tags(dataset, tags, MATERIALS)

        assert (applied, skipped) == (2, 3)
        assert mask_of(merged, "img1", "split_1", "mask_0")["label"] == "Glass"
        assert mask_of(merged, "img1", "split_1", "mask_2")["label"] == "Stone"
        assert mask_of(merged, "img1", "split_1", "mask_10")["label"] == "Unknown"

    def test_merge_without_category_set(self, sample_document):
        """Entries are checked against the configured set, Unknown included."""
        dataset = load_dataset(sample_document)
        tags = {"img1/split_1/mask_1": "Unknown", "img1/split_1/mask_0": "Bogus", "img1/split_1/mask_2": "Paper"}

        merged, applied, skipped = merge_tags(dataset, tags)

        assert (applied, skipped) == (1, 2)
        assert mask_of(merged, "img1", "split_1", "mask_1")["label"] == "Wood"

    def test_tags_file_with_bom(self, tmp_path):
        path = tmp_path / "tags.json"
        path.write_bytes(b"\xef\xbb\xbf" + b'{"img1/split_1/mask_0": "Glass"}')

        assert load_tags_file(path) == {"img1/split_1/mask_0": "Glass"}

    def test_load_tags_file_rejects_list(self, tmp_path):
        """Tag files must hold an object."""
        path = tmp_path / "tags.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(DatasetLoadError) as excinfo:
            load_tags_file(path)

        assert excinfo.value.reason == REASON_NOT_AN_OBJECT


class TestDatasetValue:
    """Test Dataset value semantics."""

    def test_images_view_is_read_only(self, sample_document):
        """The mapping view refuses assignment."""
        dataset = load_dataset(sample_document)

        with pytest.raises(TypeError):
            dataset.images["img3"] = {}

    def test_equality_by_content(self):
        """Two datasets with the same content are equal."""
        assert Dataset({"a": {}}) == Dataset({"a": {}})
        assert Dataset({"a": {}}) != Dataset({"b": {}})
