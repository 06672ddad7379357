# Page variants of an album and the draw routines that compose each one
from dataclasses import dataclass
from typing import Tuple, Union

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth

from .layout import (
    InvalidLayoutError,
    fit_in_rect,
    inset_region,
    partition_grid,
    ring_positions,
)
from .loader import ImageResource

# --- Page geometry (document units are mm) ---
CONTACT_SHEET_SIZE = 4
GRID_ROWS = 2
GRID_COLS = 2
GRID_GAP = 8 * mm

BORDER_OUTER_INSET = 10 * mm
BORDER_INNER_INSET = 14 * mm
CORNER_ORNAMENT_SIZE = 6 * mm
CORNER_ORNAMENT_INSET = 22 * mm

CONTACT_MARGIN_X = 30 * mm
CONTACT_MARGIN_TOP = 30 * mm       # leaves room for the page heading
CONTACT_MARGIN_BOTTOM = 15 * mm
CELL_PADDING = 3 * mm
CELL_CORNER_RADIUS = 3 * mm

PHOTO_MARGIN = 20 * mm
CAPTION_HEIGHT = 18 * mm
FRAME_PADDING = 3 * mm
SHADOW_OFFSET = 2 * mm

CLOSING_RING_RADIUS = 75 * mm
CLOSING_ORNAMENT_COUNT = 8
CLOSING_ORNAMENT_SIZE = 5 * mm

PETAL_COUNT = 5

CONTACT_SHEET_HEADING = "Highlights"
CONTACT_SHEET_PLACEHOLDER = "Select at least 4 photos to create a contact sheet"


@dataclass(frozen=True)
class Cover:
    title: str
    subtitle: str
    date_text: str


@dataclass(frozen=True)
class ContactSheet:
    images: Tuple[ImageResource, ...]


@dataclass(frozen=True)
class SinglePhoto:
    image: ImageResource
    ordinal: int


@dataclass(frozen=True)
class Closing:
    message: str = "Thank You"
    subtitle: str = "for sharing these beautiful moments"


PageSpec = Union[Cover, ContactSheet, SinglePhoto, Closing]


def plan_pages(images, title, subtitle, date_text):
    """Cover, contact sheet of the first four, one page per photo, closing."""
    images = tuple(images)
    pages = [
        Cover(title=title, subtitle=subtitle, date_text=date_text),
        ContactSheet(images=images[:CONTACT_SHEET_SIZE]),
    ]
    pages.extend(SinglePhoto(image=image, ordinal=i) for i, image in enumerate(images, start=1))
    pages.append(Closing())
    return pages


# --- Drawing primitives ---

def fit_font_size(text, font_name, font_size, max_width, min_size=6):
    """Largest size <= font_size at which text fits max_width."""
    size = font_size
    while size > min_size and stringWidth(text, font_name, size) > max_width:
        size -= 1
    return size


def draw_centred_text(c, text, font_name, font_size, color, cx, y, max_width):
    size = fit_font_size(text, font_name, font_size, max_width)
    c.setFillColor(color)
    c.setFont(font_name, size)
    c.drawCentredString(cx, y, text)


def fill_background(c, width, height, color):
    c.setFillColor(color)
    c.rect(0, 0, width, height, fill=1, stroke=0)


def draw_double_border(c, width, height, palette):
    c.setStrokeColor(palette.border)
    c.setLineWidth(2)
    c.rect(BORDER_OUTER_INSET, BORDER_OUTER_INSET,
           width - 2 * BORDER_OUTER_INSET, height - 2 * BORDER_OUTER_INSET,
           fill=0, stroke=1)
    c.setStrokeColor(palette.accent)
    c.setLineWidth(0.75)
    c.rect(BORDER_INNER_INSET, BORDER_INNER_INSET,
           width - 2 * BORDER_INNER_INSET, height - 2 * BORDER_INNER_INSET,
           fill=0, stroke=1)


def ornament_petal_centres(cx, cy, size):
    """Centres of the five petals, 72° apart, first petal straight up."""
    return ring_positions(cx, cy, size * 0.55, PETAL_COUNT)


def draw_ornament(c, cx, cy, size, palette):
    """Small flower: five petals around a core circle with a centre dot."""
    c.saveState()
    c.setFillColor(palette.accent)
    for px, py in ornament_petal_centres(cx, cy, size):
        c.circle(px, py, size * 0.4, stroke=0, fill=1)
    c.setFillColor(palette.secondary)
    c.circle(cx, cy, size * 0.38, stroke=0, fill=1)
    c.setFillColor(palette.accent)
    c.circle(cx, cy, size * 0.14, stroke=0, fill=1)
    c.restoreState()


def draw_image(c, image, rect):
    if image.raster is None:
        raise RuntimeError(f"{image.display_name} was released before it was drawn")
    c.drawImage(ImageReader(image.raster), rect.x, rect.y, width=rect.width, height=rect.height)


def place_image(image, box, page_index):
    """Fit an image inside a placed box. Raises InvalidLayoutError when nothing fits."""
    rect = fit_in_rect(box, image.pixel_width, image.pixel_height)
    if rect.is_empty:
        raise InvalidLayoutError(
            f"Page {page_index}: {image.display_name} ({image.pixel_width}×{image.pixel_height}) "
            f"does not fit a {box.width:.1f}×{box.height:.1f} box"
        )
    return rect


# --- Page composers ---

def compose_cover(doc, spec, palette, page_index):
    c = doc.canvas
    width, height = doc.page_width, doc.page_height

    fill_background(c, width, height, palette.primary)
    draw_double_border(c, width, height, palette)

    for x in (CORNER_ORNAMENT_INSET, width - CORNER_ORNAMENT_INSET):
        for y in (CORNER_ORNAMENT_INSET, height - CORNER_ORNAMENT_INSET):
            draw_ornament(c, x, y, CORNER_ORNAMENT_SIZE, palette)

    cx = width / 2
    text_width = width - 2 * (CORNER_ORNAMENT_INSET + 2 * CORNER_ORNAMENT_SIZE)
    draw_centred_text(c, spec.title, palette.heading_font, palette.title_size,
                      palette.text, cx, height * 0.56, text_width)

    c.setStrokeColor(palette.accent)
    c.setLineWidth(1)
    c.line(cx - 30 * mm, height * 0.50, cx + 30 * mm, height * 0.50)

    draw_centred_text(c, spec.subtitle, palette.italic_font, palette.subtitle_size,
                      palette.muted, cx, height * 0.42, text_width)
    draw_centred_text(c, spec.date_text, palette.font_family, palette.body_size,
                      palette.muted, cx, height * 0.22, text_width)


def compose_contact_sheet(doc, spec, palette, page_index):
    c = doc.canvas
    width, height = doc.page_width, doc.page_height
    fill_background(c, width, height, palette.primary)

    draw_centred_text(c, CONTACT_SHEET_HEADING, palette.heading_font, palette.subtitle_size + 4,
                      palette.text, width / 2, height - 20 * mm, width - 2 * CONTACT_MARGIN_X)

    if len(spec.images) < CONTACT_SHEET_SIZE:
        draw_centred_text(c, CONTACT_SHEET_PLACEHOLDER, palette.italic_font, palette.subtitle_size,
                          palette.muted, width / 2, height / 2, width - 2 * CONTACT_MARGIN_X)
        return

    region = inset_region(width, height, CONTACT_MARGIN_X, CONTACT_MARGIN_X,
                          CONTACT_MARGIN_TOP, CONTACT_MARGIN_BOTTOM)
    cells = partition_grid(region.x, region.y, region.width, region.height,
                           GRID_ROWS, GRID_COLS, GRID_GAP)

    for image, cell in zip(spec.images[:CONTACT_SHEET_SIZE], cells):
        c.setFillColor(palette.frame)
        c.setStrokeColor(palette.border)
        c.setLineWidth(0.5)
        c.roundRect(cell.x, cell.y, cell.width, cell.height, CELL_CORNER_RADIUS, stroke=1, fill=1)

        inner = cell.inset(CELL_PADDING)
        if inner.is_empty:
            raise InvalidLayoutError(f"Page {page_index}: contact sheet cell padding leaves no room")
        draw_image(c, image, place_image(image, inner, page_index))


def photo_region(page_width, page_height):
    """The area a single photo may occupy, with the caption strip kept free below it."""
    return inset_region(page_width, page_height, PHOTO_MARGIN, PHOTO_MARGIN,
                        PHOTO_MARGIN, PHOTO_MARGIN + CAPTION_HEIGHT)


def caption_lines(image):
    """Caption text under a single photo. Unknown locations are left out."""
    lines = [image.date_label]
    if image.location_label:
        lines.append(image.location_label)
    return lines


def compose_single_photo(doc, spec, palette, page_index):
    c = doc.canvas
    width, height = doc.page_width, doc.page_height
    image = spec.image

    fill_background(c, width, height, palette.primary)

    region = photo_region(width, height)
    photo = place_image(image, region, page_index)
    frame = photo.inset(-FRAME_PADDING)
    shadow = frame.offset(SHADOW_OFFSET, -SHADOW_OFFSET)

    c.setFillColor(palette.secondary)
    c.rect(shadow.x, shadow.y, shadow.width, shadow.height, fill=1, stroke=0)

    c.setFillColor(palette.frame)
    c.setStrokeColor(palette.border)
    c.setLineWidth(0.75)
    c.rect(frame.x, frame.y, frame.width, frame.height, fill=1, stroke=1)

    draw_image(c, image, photo)

    # Caption strip sits between the photo region and the bottom margin
    cx = width / 2
    y = region.y - 8 * mm
    for i, line in enumerate(caption_lines(image)):
        font = palette.font_family if i == 0 else palette.italic_font
        color = palette.text if i == 0 else palette.muted
        draw_centred_text(c, line, font, palette.caption_size, color, cx, y, region.width)
        y -= palette.caption_size + 4

    c.setFillColor(palette.accent)
    c.setFont(palette.heading_font, palette.subtitle_size)
    c.drawString(PHOTO_MARGIN / 2, height - PHOTO_MARGIN / 2 - palette.subtitle_size / 2,
                 f"{spec.ordinal:02d}")


def compose_closing(doc, spec, palette, page_index):
    c = doc.canvas
    width, height = doc.page_width, doc.page_height
    cx, cy = width / 2, height / 2

    fill_background(c, width, height, palette.primary)

    text_width = 2 * (CLOSING_RING_RADIUS - 2 * CLOSING_ORNAMENT_SIZE)
    draw_centred_text(c, spec.message, palette.heading_font, palette.title_size,
                      palette.text, cx, cy + 4 * mm, text_width)
    draw_centred_text(c, spec.subtitle, palette.italic_font, palette.body_size,
                      palette.muted, cx, cy - 10 * mm, text_width)

    for x, y in ring_positions(cx, cy, CLOSING_RING_RADIUS, CLOSING_ORNAMENT_COUNT):
        draw_ornament(c, x, y, CLOSING_ORNAMENT_SIZE, palette)


COMPOSERS = {
    Cover: compose_cover,
    ContactSheet: compose_contact_sheet,
    SinglePhoto: compose_single_photo,
    Closing: compose_closing,
}


def compose_page(doc, spec, palette, page_index):
    composer = COMPOSERS.get(type(spec))
    if composer is None:
        raise TypeError(f"No composer for page type {type(spec).__name__}")
    composer(doc, spec, palette, page_index)
