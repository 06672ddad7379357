"""Build decorated PDF photo albums from a selection of images."""

from .album import (
    DEFAULT_FILENAME,
    MAX_IMAGES,
    AlbumBuild,
    AlbumDocument,
    BuildState,
    DocumentArtifact,
    build_album,
    export_album,
)
from .layout import InvalidLayoutError, LayoutRect, fit_within, partition_grid
from .loader import DecodeError, ImageResource, load_image
from .pages import Closing, ContactSheet, Cover, SinglePhoto
from .styles import DEFAULT_PALETTE, StylePalette

__version__ = "0.1.0"
