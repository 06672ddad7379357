# Assemble a selection of photos into a decorated landscape A4 album PDF
import io
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from .loader import load_all, load_image
from .pages import compose_page, plan_pages
from .styles import DEFAULT_PALETTE

# --- Configuration ---
MAX_IMAGES = 16                 # Hard cap on photos per album (bounds memory and page count)
PAGE_SIZE = landscape(A4)       # 297 × 210 mm
DEFAULT_FILENAME = "beautiful_moments_album.pdf"
DEFAULT_TITLE = "Beautiful Moments"
COVER_DATE_FORMAT = "%B %Y"
FOOTER_FONT_SIZE = 7


class BuildState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    COMPOSING = "composing"
    FINALIZED = "finalized"
    FAILED = "failed"


class NumberedCanvas(canvas.Canvas):
    """
    Canvas subclass that knows total page count.
    Stores page states first, then stamps 'n/total' on every inner page at save time.
    Cover and closing pages stay unnumbered.
    """
    def __init__(self, *args, palette=DEFAULT_PALETTE, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self.palette = palette
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_number(num_pages)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def draw_page_number(self, total_pages):
        page_num = self._pageNumber
        if page_num == 1 or page_num == total_pages:
            return
        self.setFillColor(self.palette.muted)
        self.setFont(self.palette.font_family, FOOTER_FONT_SIZE)
        self.drawRightString(self._pagesize[0] - 20, 12, f"{page_num}/{total_pages}")


@dataclass(frozen=True)
class DocumentArtifact:
    """A finished album. Nothing touches the disk until save() is called."""
    pdf_bytes: bytes = field(repr=False)
    page_count: int
    page_size: tuple
    filename: str = DEFAULT_FILENAME

    @property
    def size_bytes(self):
        return len(self.pdf_bytes)

    def save(self, path=None):
        """
        Write the PDF. `path` may be a file path, an existing directory (the
        default filename is used inside it) or None for the current directory.
        Returns the path written.
        """
        if path is None:
            path = self.filename
        elif os.path.isdir(path):
            path = os.path.join(path, self.filename)

        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'wb') as f:
            f.write(self.pdf_bytes)
        return path


class AlbumDocument:
    """
    The single in-progress PDF of one build. Pages are composed strictly one
    at a time: begin_page(), draw on .canvas, end_page().
    """
    def __init__(self, palette=DEFAULT_PALETTE, page_size=PAGE_SIZE, title=DEFAULT_TITLE,
                 filename=DEFAULT_FILENAME):
        self.page_size = page_size
        self.page_width, self.page_height = page_size
        self.filename = filename
        self._buffer = io.BytesIO()
        self.canvas = NumberedCanvas(self._buffer, pagesize=page_size, palette=palette,
                                     pageCompression=1)
        self.canvas.setTitle(title)
        self.canvas.setCreator("albumgen")
        self.page_count = 0
        self._in_page = False
        self._finalized = False

    def begin_page(self):
        if self._finalized:
            raise RuntimeError("Album document is already finalized")
        if self._in_page:
            raise RuntimeError(f"Page {self.page_count + 1} is still open")
        self._in_page = True

    def end_page(self):
        if not self._in_page:
            raise RuntimeError("end_page() without begin_page()")
        self.canvas.showPage()
        self.page_count += 1
        self._in_page = False

    def finalize(self):
        if self._finalized:
            raise RuntimeError("Album document is already finalized")
        if self._in_page:
            raise RuntimeError(f"Page {self.page_count + 1} is still open")
        self.canvas.save()
        self._finalized = True
        return DocumentArtifact(
            pdf_bytes=self._buffer.getvalue(),
            page_count=self.page_count,
            page_size=self.page_size,
            filename=self.filename,
        )


def _url_of(entry):
    if isinstance(entry, str):
        return entry
    return entry['url']


class AlbumBuild:
    """
    One album build: IDLE -> LOADING -> COMPOSING -> FINALIZED, or FAILED from
    either working state. Every build owns its own document and images.
    """
    def __init__(self, selection, loader=load_image, palette=DEFAULT_PALETTE,
                 title=DEFAULT_TITLE, subtitle=None, date_text=None, filename=DEFAULT_FILENAME):
        self.urls = [_url_of(entry) for entry in list(selection)[:MAX_IMAGES]]
        self.loader = loader
        self.palette = palette
        self.title = title
        self.subtitle = subtitle
        self.date_text = date_text or datetime.now().strftime(COVER_DATE_FORMAT)
        self.filename = filename
        self.state = BuildState.IDLE
        self.images = []
        self.pages = []
        self.error = None

    def _subtitle(self):
        if self.subtitle:
            return self.subtitle
        count = len(self.images)
        return f"{count} moment{'s' if count != 1 else ''} worth keeping"

    async def run(self):
        if self.state is not BuildState.IDLE:
            raise RuntimeError(f"Album build already ran (state: {self.state.value})")

        start = time.time()
        try:
            self.state = BuildState.LOADING
            print(f"📸 Loading {len(self.urls)} image(s)...")
            self.images = await load_all(self.urls, self.loader)

            self.state = BuildState.COMPOSING
            self.pages = plan_pages(self.images, self.title, self._subtitle(), self.date_text)
            print(f"📄 Composing {len(self.pages)} pages...")
            doc = AlbumDocument(palette=self.palette, title=self.title, filename=self.filename)
            for page_index, spec in enumerate(self.pages, start=1):
                doc.begin_page()
                compose_page(doc, spec, self.palette, page_index)
                doc.end_page()
            artifact = doc.finalize()
        except Exception as e:
            self.state = BuildState.FAILED
            self.error = e
            print(f"❌ Album build failed: {e}")
            raise
        finally:
            for image in self.images:
                image.release()

        self.state = BuildState.FINALIZED
        print(f"✓ Album ready: {artifact.page_count} pages, {format_file_size(artifact.size_bytes)}")
        print(f"⏱️  Build time: {format_duration(time.time() - start)}")
        return artifact


async def build_album(selection, **kwargs):
    """Build an album from a fresh AlbumBuild. See AlbumBuild for keyword options."""
    return await AlbumBuild(selection, **kwargs).run()


async def export_album(selection, output_path=None, **kwargs):
    """Build and save in one step. Nothing is written if the build fails."""
    artifact = await build_album(selection, **kwargs)
    path = artifact.save(output_path)
    print(f"✓ PDF successfully created: {path}")
    return path


def format_duration(seconds):
    """Format duration in a human-readable format"""
    if seconds < 1:
        return f"{seconds*1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds % 60:.1f}s"


def format_file_size(bytes_size):
    """Format file size in human-readable format"""
    for unit, scale in (("GB", 1024 ** 3), ("MB", 1024 ** 2), ("KB", 1024)):
        if bytes_size >= scale:
            return f"{bytes_size/scale:.1f}{unit}"
    return f"{bytes_size}B"
