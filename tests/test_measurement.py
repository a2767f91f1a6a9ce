"""Tests for cable diameter measurement."""

import numpy as np

from cable_inspection.core.config import InspectionConfig
from cable_inspection.core.measurement import (
    NO_IMAGE_MESSAGE,
    create_jacket_mask,
    measure_diameter,
    measure_rows,
    measurement_rows,
)
from cable_inspection.core.models import Measurement


def test_measurement_rows_are_quarters():
    assert measurement_rows(200) == [50, 100, 150]
    assert measurement_rows(203) == [50, 100, 150]
    assert measurement_rows(3) == [0, 0, 0]


def test_measure_cable_band(cable_image):
    result = measure_diameter(cable_image)

    assert result.ok
    assert result.measurements == [
        Measurement(50, 150, 249),
        Measurement(100, 150, 249),
        Measurement(150, 150, 249),
    ]
    assert all(m.width == 99 for m in result.measurements)
    assert result.mean_width == 99.0


def test_measurement_invariants(cable_image):
    rows, cols = cable_image.shape[:2]
    result = measure_diameter(cable_image)

    for m in result.measurements:
        assert 0 <= m.x_left < m.x_right < cols
        assert m.y in {rows // 4, rows // 2, 3 * rows // 4}


def test_measure_does_not_modify_input(cable_image):
    original = cable_image.copy()
    result = measure_diameter(cable_image)

    np.testing.assert_array_equal(cable_image, original)
    assert result.annotated is not cable_image
    assert result.annotated.shape == cable_image.shape
    assert result.annotated.dtype == cable_image.dtype


def test_annotation_draws_ticks(cable_image):
    result = measure_diameter(cable_image)
    color = np.array(InspectionConfig().overlay_color, dtype=np.uint8)

    # Left tick runs 15 px outward from the jacket edge
    np.testing.assert_array_equal(result.annotated[50, 135], color)
    np.testing.assert_array_equal(result.annotated[50, 264], color)
    assert not np.array_equal(result.annotated, cable_image)


def test_measure_is_idempotent(cable_image):
    first = measure_diameter(cable_image)
    second = measure_diameter(first.annotated)

    assert second.measurements == first.measurements


def test_black_image_skips_all_rows():
    image = np.zeros((120, 160, 3), dtype=np.uint8)
    result = measure_diameter(image)

    assert result.ok
    assert result.measurements == []
    assert result.mean_width is None
    np.testing.assert_array_equal(result.annotated, image)


def test_white_image_spans_full_width():
    image = np.full((120, 160, 3), 255, dtype=np.uint8)
    result = measure_diameter(image)

    assert [(m.y, m.x_left, m.x_right) for m in result.measurements] == [
        (30, 0, 159),
        (60, 0, 159),
        (90, 0, 159),
    ]
    assert all(m.width == 159 for m in result.measurements)


def test_partial_rows_are_skipped():
    # Jacket only in the top half: the 3/4 row has no foreground
    image = np.zeros((200, 100, 3), dtype=np.uint8)
    image[:100, 20:80] = 200
    result = measure_diameter(image)

    assert [m.y for m in result.measurements] == [50]


def test_empty_image_reports_precondition():
    for image in (None, np.zeros((0, 0, 3), dtype=np.uint8)):
        result = measure_diameter(image)
        assert not result.ok
        assert result.error == NO_IMAGE_MESSAGE
        assert result.annotated is None
        assert result.measurements == []


def test_measure_rows_on_mask():
    mask = np.zeros((4, 10), dtype=np.uint8)
    mask[0, 2:7] = 255
    mask[2, 5] = 255  # single pixel cannot give x_left < x_right

    assert measure_rows(mask, [0, 1, 2]) == [Measurement(0, 2, 6)]


def test_threshold_is_configurable(cable_image):
    config = InspectionConfig(measure_thresh_low=220)
    result = measure_diameter(cable_image, config)

    assert result.measurements == []


def test_debug_mask(cable_image):
    result = measure_diameter(cable_image, return_debug=True)
    mask = result.debug_images["mask"]

    np.testing.assert_array_equal(mask, create_jacket_mask(cable_image))
    assert set(np.unique(mask)) <= {0, 255}
