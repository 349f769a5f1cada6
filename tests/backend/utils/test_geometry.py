"""
Tests for bounding-box mapping into display coordinates.
"""

import pytest

from backend.utils.geometry import DisplayRect, Scale, map_box, mask_bbox, scale_for


class TestMapBox:
    """Test box scaling."""

    def test_half_scale(self):
        """Each axis is scaled by its own factor."""
        rect = map_box([10, 20, 110, 220], Scale(0.5, 0.25))

        assert rect == DisplayRect(left=5.0, top=5.0, width=50.0, height=50.0)

    def test_identity_scale(self):
        """A 1:1 display keeps pixel coordinates."""
        assert map_box([1, 2, 3, 4], Scale(1, 1)).as_tuple() == (1.0, 2.0, 2.0, 2.0)

    @pytest.mark.parametrize("bbox", [None, [], [1, 2, 3], "1234", [1, "a", 3, 4]])
    def test_invalid_box(self, bbox):
        """Malformed boxes draw nothing."""
        assert map_box(bbox, Scale(1, 1)) is None

    @pytest.mark.parametrize("scale", [None, Scale(0, 1), Scale(1, None)])
    def test_unmeasured_image(self, scale):
        """Without a usable scale there is no rectangle."""
        assert map_box([0, 0, 10, 10], scale) is None

    def test_translated(self):
        """Offsets move the rectangle without resizing it."""
        assert DisplayRect(1, 2, 3, 4).translated(10, 20) == DisplayRect(11, 22, 3, 4)


class TestScaleFor:
    """Test displayed/natural ratios."""

    def test_ratio(self):
        """Displayed size over natural size per axis."""
        assert scale_for((200, 100), (100, 100)) == Scale(0.5, 1.0)

    def test_zero_natural_size(self):
        """An image that has not loaded yet has no scale."""
        assert scale_for((0, 100), (50, 50)) is None


class TestMaskBbox:
    """Test bbox lookup on a mask entry."""

    def test_prefers_bbox(self):
        """The bbox field wins over the legacy box field."""
        assert mask_bbox({"bbox": [1, 2, 3, 4], "box": [0, 0, 0, 0]}) == [1, 2, 3, 4]

    def test_legacy_box(self):
        """Documents with a box field still draw."""
        assert mask_bbox({"box": [5, 6, 7, 8]}) == [5, 6, 7, 8]

    def test_no_mask(self):
        """No mask, no box."""
        assert mask_bbox(None) is None
