import math

import pytest

from albumgen.layout import (
    EMPTY_RECT,
    InvalidLayoutError,
    LayoutRect,
    fit_in_rect,
    fit_within,
    inset_region,
    partition_grid,
    ring_positions,
)


@pytest.mark.parametrize("box, intrinsic", [
    ((200, 100), (4000, 3000)),
    ((200, 100), (3000, 4000)),
    ((100, 200), (1920, 1080)),
    ((150, 150), (1, 1)),
    ((297, 210), (6000, 1000)),
    ((80, 60), (37, 1243)),
])
def test_fit_within_preserves_aspect_and_stays_inside_box(box, intrinsic):
    bw, bh = box
    iw, ih = intrinsic
    rect = fit_within(bw, bh, iw, ih)

    assert rect.width / rect.height == pytest.approx(iw / ih)
    assert LayoutRect(0, 0, bw, bh).contains(rect)
    # one side always touches the box
    assert rect.width == pytest.approx(bw) or rect.height == pytest.approx(bh)


def test_fit_within_centres_the_image():
    rect = fit_within(200, 100, 100, 100)
    assert rect == LayoutRect(50, 0, 100, 100)


def test_fit_within_scales_up_small_images():
    rect = fit_within(300, 200, 30, 20)
    assert (rect.width, rect.height) == pytest.approx((300, 200))


@pytest.mark.parametrize("iw, ih", [(0, 100), (100, 0), (0, 0), (-5, 10)])
def test_fit_within_zero_intrinsic_gives_empty_rect(iw, ih):
    rect = fit_within(200, 100, iw, ih)
    assert rect == EMPTY_RECT
    assert rect.is_empty


def test_fit_in_rect_translates_to_box():
    box = LayoutRect(10, 20, 100, 50)
    rect = fit_in_rect(box, 50, 50)
    assert rect == LayoutRect(35, 20, 50, 50)
    assert box.contains(rect)


def _overlap(a, b):
    return a.x < b.right and b.x < a.right and a.y < b.top and b.y < a.top


@pytest.mark.parametrize("region, rows, cols, gap", [
    ((0, 0, 100, 100), 2, 2, 8),
    ((30, 15, 237, 167), 2, 2, 8),
    ((5, 5, 300, 90), 3, 4, 2.5),
    ((0, 0, 50, 50), 1, 1, 10),
])
def test_partition_grid_cells_tile_the_region(region, rows, cols, gap):
    x, y, w, h = region
    cells = partition_grid(x, y, w, h, rows, cols, gap)
    assert len(cells) == rows * cols

    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            assert not _overlap(a, b)

    total_area = sum(c.width * c.height for c in cells)
    cell_w = (w - gap * (cols - 1)) / cols
    cell_h = (h - gap * (rows - 1)) / rows
    assert total_area == pytest.approx(rows * cols * cell_w * cell_h)

    assert min(c.x for c in cells) == pytest.approx(x)
    assert min(c.y for c in cells) == pytest.approx(y)
    assert max(c.right for c in cells) == pytest.approx(x + w)
    assert max(c.top for c in cells) == pytest.approx(y + h)
    # cell widths plus gaps rebuild the region on both axes
    assert cols * cell_w + (cols - 1) * gap == pytest.approx(w)
    assert rows * cell_h + (rows - 1) * gap == pytest.approx(h)


def test_partition_grid_is_row_major_top_row_first():
    cells = partition_grid(0, 0, 100, 100, 2, 2, 10)
    top_left, top_right, bottom_left, bottom_right = cells
    assert top_left == LayoutRect(0, 55, 45, 45)
    assert top_right == LayoutRect(55, 55, 45, 45)
    assert bottom_left == LayoutRect(0, 0, 45, 45)
    assert bottom_right == LayoutRect(55, 0, 45, 45)


@pytest.mark.parametrize("w, h, rows, cols, gap", [
    (10, 100, 2, 2, 10),
    (100, 16, 2, 2, 16),
    (0, 0, 1, 1, 0),
    (100, 100, 0, 2, 5),
])
def test_partition_grid_rejects_collapsed_cells(w, h, rows, cols, gap):
    with pytest.raises(InvalidLayoutError):
        partition_grid(0, 0, w, h, rows, cols, gap)


def test_inset_region():
    region = inset_region(297, 210, 20, 20, 20, 38)
    assert region == LayoutRect(20, 38, 257, 152)

    with pytest.raises(InvalidLayoutError):
        inset_region(100, 100, 60, 60, 10, 10)


def test_rect_helpers():
    rect = LayoutRect(10, 10, 40, 20)
    assert rect.center == (30, 20)
    assert rect.aspect_ratio == 2
    assert rect.inset(5) == LayoutRect(15, 15, 30, 10)
    assert rect.inset(-2) == LayoutRect(8, 8, 44, 24)
    assert rect.offset(1, -1) == LayoutRect(11, 9, 40, 20)
    assert rect.inset(10).is_empty


def test_ring_positions_are_evenly_spaced():
    points = ring_positions(100, 100, 50, 8)
    assert len(points) == 8
    assert points[0] == pytest.approx((100, 150))
    for px, py in points:
        assert math.hypot(px - 100, py - 100) == pytest.approx(50)

    angles = [math.degrees(math.atan2(py - 100, px - 100)) % 360 for px, py in points]
    steps = [(b - a) % 360 for a, b in zip(angles, angles[1:])]
    assert steps == pytest.approx([45] * 7)


def test_ring_positions_empty():
    assert ring_positions(0, 0, 10, 0) == []
