# Page geometry for the album: aspect-preserving fits, grid cells and ornament rings
import math
from dataclasses import dataclass


class InvalidLayoutError(Exception):
    """Raised when a computed layout region collapses to a non-positive size."""
    pass


@dataclass(frozen=True)
class LayoutRect:
    """A rectangle in page space. (x, y) is the bottom-left corner, as in reportlab."""
    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self):
        return self.width <= 0 or self.height <= 0

    @property
    def aspect_ratio(self):
        if self.height <= 0:
            return 0.0
        return self.width / self.height

    @property
    def center(self):
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def right(self):
        return self.x + self.width

    @property
    def top(self):
        return self.y + self.height

    def offset(self, dx, dy):
        return LayoutRect(self.x + dx, self.y + dy, self.width, self.height)

    def inset(self, margin):
        """Shrink the rectangle by `margin` on every side (negative grows it)."""
        return LayoutRect(
            self.x + margin,
            self.y + margin,
            self.width - 2 * margin,
            self.height - 2 * margin,
        )

    def contains(self, other, tol=1e-6):
        return (
            other.x >= self.x - tol
            and other.y >= self.y - tol
            and other.right <= self.right + tol
            and other.top <= self.top + tol
        )


EMPTY_RECT = LayoutRect(0.0, 0.0, 0.0, 0.0)


def fit_within(box_width, box_height, intrinsic_width, intrinsic_height):
    """
    Scale an image of the given intrinsic size to the largest rectangle that
    fits inside the box without cropping, centred in the box.

    The result is relative to the box origin; callers translate it with
    `LayoutRect.offset`. Zero or negative dimensions give EMPTY_RECT.
    """
    if intrinsic_width <= 0 or intrinsic_height <= 0:
        return EMPTY_RECT
    if box_width <= 0 or box_height <= 0:
        return EMPTY_RECT

    scale = min(box_width / intrinsic_width, box_height / intrinsic_height)
    draw_w = intrinsic_width * scale
    draw_h = intrinsic_height * scale
    x = (box_width - draw_w) / 2
    y = (box_height - draw_h) / 2
    return LayoutRect(x, y, draw_w, draw_h)


def fit_in_rect(box, intrinsic_width, intrinsic_height):
    """fit_within for a placed box, returning page coordinates."""
    fitted = fit_within(box.width, box.height, intrinsic_width, intrinsic_height)
    if fitted.is_empty:
        return fitted
    return fitted.offset(box.x, box.y)


def partition_grid(region_x, region_y, region_width, region_height, rows, cols, gap):
    """
    Split a region into rows x cols equal cells separated by `gap` on both axes.

    Cells come back in row-major order: left to right, top row first. Because
    page y grows upwards, the first row sits at the top of the region.
    """
    if rows < 1 or cols < 1:
        raise InvalidLayoutError(f"Grid needs at least one row and column, got {rows}x{cols}")

    cell_w = (region_width - gap * (cols - 1)) / cols
    cell_h = (region_height - gap * (rows - 1)) / rows
    if cell_w <= 0 or cell_h <= 0:
        raise InvalidLayoutError(
            f"Grid cells collapse to {cell_w:.2f}x{cell_h:.2f} "
            f"for a {region_width:.2f}x{region_height:.2f} region ({rows}x{cols}, gap {gap})"
        )

    region_top = region_y + region_height
    cells = []
    for r in range(rows):
        y = region_top - (r + 1) * cell_h - r * gap
        for c in range(cols):
            x = region_x + c * (cell_w + gap)
            cells.append(LayoutRect(x, y, cell_w, cell_h))
    return cells


def inset_region(width, height, left, right, top, bottom):
    """The region left over after taking the given margins off a width x height area."""
    region = LayoutRect(left, bottom, width - left - right, height - top - bottom)
    if region.is_empty:
        raise InvalidLayoutError(
            f"Margins leave no room on a {width:.2f}x{height:.2f} page"
        )
    return region


def ring_positions(cx, cy, radius, count, start_angle=90.0):
    """`count` points evenly spaced on a circle, counter-clockwise from start_angle (degrees)."""
    if count < 1:
        return []
    step = 360.0 / count
    points = []
    for i in range(count):
        angle = math.radians(start_angle + i * step)
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return points
