import asyncio
import os

import pytest
from PIL import Image as PILImage

from albumgen.loader import DecodeError, ImageResource

COLOURS = [(200, 80, 60), (60, 140, 200), (90, 170, 90), (230, 200, 80), (120, 90, 160)]


def make_resource(name="photo.jpg", size=(60, 40), captured_at=None, location=None):
    """An in-memory ImageResource with a real raster."""
    raster = PILImage.new("RGB", size, COLOURS[len(name) % len(COLOURS)])
    return ImageResource(
        source_url=f"/photos/{name}",
        pixel_width=size[0],
        pixel_height=size[1],
        raster=raster,
        captured_at=captured_at,
        location=location,
    )


class FakeLoader:
    """Async loader that builds in-memory resources and records what it handed out."""

    def __init__(self, fail_on=(), size=(60, 40), delays=None):
        self.fail_on = set(fail_on)
        self.size = size
        self.delays = delays or {}
        self.calls = []
        self.loaded = []

    async def __call__(self, url):
        self.calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        if url in self.fail_on:
            raise DecodeError(f"Not a valid image: {url}")
        resource = make_resource(os.path.basename(url), self.size)
        resource.source_url = url
        self.loaded.append(resource)
        return resource


@pytest.fixture
def image_file(tmp_path):
    """Factory writing a small JPEG, optionally with an EXIF DateTime."""
    def _make(name="photo.jpg", size=(80, 60), color=(180, 120, 90), exif_datetime=None):
        path = tmp_path / name
        img = PILImage.new("RGB", size, color)
        if exif_datetime:
            exif = PILImage.Exif()
            exif[306] = exif_datetime
            img.save(path, exif=exif)
        else:
            img.save(path)
        return str(path)
    return _make


@pytest.fixture
def selection():
    def _make(count):
        return [{"url": f"/photos/img_{i:02d}.jpg"} for i in range(1, count + 1)]
    return _make
