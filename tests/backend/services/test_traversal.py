"""
Tests for mask ordering and bounded navigation.
"""

import pytest

from backend.dataset_store import load_dataset
from backend.services.traversal import MaskNavigator, mask_order


@pytest.fixture
def dataset(sample_document):
    return load_dataset(sample_document)


class TestMaskOrder:
    """Test the unlabeled-first order."""

    def test_unlabeled_first_then_numeric(self, dataset):
        """Unlabeled masks come first; each group ascends by mask number."""
        assert mask_order(dataset, "img1", "split_1") == ["mask_0", "mask_2", "mask_10", "mask_1"]

    def test_unlabeled_only(self, dataset):
        """The filtered order drops labeled masks."""
        assert mask_order(dataset, "img1", "split_1", unlabeled_only=True) == ["mask_0", "mask_2", "mask_10"]

    def test_fully_labeled_unlabeled_only_is_empty(self, dataset):
        """A fully tagged split has an empty filtered order."""
        assert mask_order(dataset, "img1", "split_2", unlabeled_only=True) == []

    def test_non_numeric_masks_sort_last(self):
        """Masks without a numeric suffix go after numbered ones."""
        dataset = load_dataset({"img": {"split_1": {"mask_b": {}, "mask_3": {}, "mask_a": {}}}})

        assert mask_order(dataset, "img", "split_1") == ["mask_3", "mask_a", "mask_b"]

    def test_missing_split(self, dataset):
        """Unknown selections have an empty order."""
        assert mask_order(dataset, "img1", "split_5") == []
        assert mask_order(dataset, "missing", "split_1") == []


class TestMaskNavigator:
    """Test position handling."""

    def test_empty_order_has_no_current(self, qapp):
        """Position is -1 when there is nothing to show."""
        navigator = MaskNavigator()
        navigator.set_order([])

        assert navigator.position == -1
        assert navigator.current() is None
        assert not navigator.next()
        assert not navigator.prev()

    def test_starts_at_zero(self, qapp):
        """A fresh order starts at the first mask."""
        navigator = MaskNavigator()
        navigator.set_order(["a", "b", "c"])

        assert navigator.position == 0
        assert navigator.current() == "a"

    def test_next_and_prev_clamp(self, qapp):
        """Stepping past either end stays in place."""
        navigator = MaskNavigator()
        navigator.set_order(["a", "b"])

        assert not navigator.prev()
        assert navigator.next()
        assert not navigator.next()
        assert navigator.current() == "b"
        assert navigator.prev()
        assert navigator.current() == "a"

    def test_shrinking_order_clamps_position(self, qapp):
        """A shorter order moves the position to its last entry."""
        navigator = MaskNavigator()
        navigator.set_order(["a", "b", "c"])
        navigator.jump_to(2)

        navigator.set_order(["a", "b"])

        assert navigator.position == 1

    def test_reset_returns_to_start(self, qapp):
        """reset=True always restarts at zero."""
        navigator = MaskNavigator()
        navigator.set_order(["a", "b", "c"])
        navigator.jump_to(2)

        navigator.set_order(["x", "y", "z"], reset=True)

        assert navigator.position == 0

    def test_jump_out_of_range(self, qapp):
        """Out-of-range jumps are refused."""
        navigator = MaskNavigator()
        navigator.set_order(["a"])

        assert not navigator.jump_to(3)
        assert not navigator.jump_to(-1)
        assert navigator.index_of("a") == 0
        assert navigator.index_of("zz") == -1

    def test_position_signal_only_on_change(self, qapp):
        """positionChanged fires once per actual move."""
        navigator = MaskNavigator()
        seen = []
        navigator.positionChanged.connect(seen.append)

        navigator.set_order(["a", "b"])
        navigator.set_order(["a", "b"])
        navigator.next()
        navigator.next()

        assert seen == [0, 1]
