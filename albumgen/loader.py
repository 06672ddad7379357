# Resolve selected image URLs into decoded rasters plus capture metadata
import asyncio
import io
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests
from PIL import Image as PILImage
from PIL import ImageOps, UnidentifiedImageError

# --- Configuration ---
MAX_RASTER_DIMENSION = 2000     # Longest edge embedded in the PDF (~170 DPI across A4 landscape)
FETCH_TIMEOUT = 30              # Seconds per HTTP fetch
UNKNOWN_DATE_LABEL = "Unknown date"
CAPTION_DATE_FORMAT = "%d %B %Y"
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

# EXIF tag ids (see PIL.ExifTags)
EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825
TAG_DATETIME = 306
TAG_DATETIME_ORIGINAL = 36867
TAG_DATETIME_DIGITIZED = 36868
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


class DecodeError(Exception):
    """Raised when a selected image cannot be fetched or decoded as a raster."""
    pass


@dataclass
class ImageResource:
    """One selected photo, decoded and ready for page composition."""
    source_url: str
    pixel_width: int
    pixel_height: int
    raster: Optional[PILImage.Image] = field(default=None, repr=False)
    captured_at: Optional[datetime] = None
    location: Optional[Tuple[float, float]] = None

    @property
    def display_name(self):
        path = urlparse(self.source_url).path or self.source_url
        path = unquote(path).replace('\\', '/').rstrip('/')
        return path.rsplit('/', 1)[-1]

    @property
    def date_label(self):
        if self.captured_at is None:
            return UNKNOWN_DATE_LABEL
        return self.captured_at.strftime(CAPTION_DATE_FORMAT)

    @property
    def location_label(self):
        """'lat, lon' to 4 decimals, or None when the location is unknown."""
        if self.location is None:
            return None
        lat, lon = self.location
        return f"{lat:.4f}, {lon:.4f}"

    def release(self):
        if self.raster is not None:
            self.raster.close()
            self.raster = None


def _is_remote(parsed):
    return parsed.scheme in ('http', 'https')


def fetch_bytes(url):
    """Read the encoded bytes behind `url`: http(s), file:// or a plain local path."""
    parsed = urlparse(url)
    if _is_remote(parsed):
        try:
            response = requests.get(url, timeout=FETCH_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DecodeError(f"Could not fetch {url}: {e}") from e
        return response.content

    path = url2pathname(parsed.path) if parsed.scheme == 'file' else url
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise DecodeError(f"Could not read {url}: {e}") from e


def flatten_to_rgb(img):
    """Composite transparent images onto white and convert everything else to RGB."""
    if img.mode == 'P' and 'transparency' in img.info:
        img = img.convert('RGBA')
    if img.mode in ('RGBA', 'LA'):
        background = PILImage.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    if img.mode != 'RGB':
        return img.convert('RGB')
    return img


def downscale(img, max_dimension=MAX_RASTER_DIMENSION):
    """Shrink so the longest edge is at most max_dimension. Never upscales."""
    width, height = img.size
    if width <= max_dimension and height <= max_dimension:
        return img
    scale = min(max_dimension / width, max_dimension / height)
    new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
    return img.resize(new_size, PILImage.Resampling.LANCZOS)


def decode_raster(data, max_dimension=MAX_RASTER_DIMENSION):
    """
    Decode encoded image bytes into an upright RGB raster.

    Returns (raster, width, height) where width/height are the intrinsic size
    of the upright image before any downscaling.
    """
    try:
        with PILImage.open(io.BytesIO(data)) as img:
            img.load()
            upright = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError, ValueError, PILImage.DecompressionBombError) as e:
        raise DecodeError(f"Not a valid image: {e}") from e

    width, height = upright.size
    if width <= 0 or height <= 0:
        raise DecodeError(f"Image has no pixels ({width}x{height})")

    raster = downscale(flatten_to_rgb(upright), max_dimension)
    return raster, width, height


def parse_exif_timestamp(value):
    """Parse an EXIF 'YYYY:MM:DD HH:MM:SS' string. Anything unparsable gives None."""
    if not value:
        return None
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='ignore')
    value = str(value).strip().rstrip('\x00')
    try:
        return datetime.strptime(value, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def _dms_to_degrees(dms):
    if isinstance(dms, (tuple, list)):
        if len(dms) != 3:
            return None
        degrees, minutes, seconds = (float(part) for part in dms)
        value = degrees + minutes / 60 + seconds / 3600
    else:
        value = float(dms)
    if math.isnan(value):
        return None
    return value


def _ref(value):
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='ignore')
    return str(value or '').strip().rstrip('\x00').upper()


def parse_gps(gps):
    """
    Convert a GPS IFD mapping into (latitude, longitude) in signed decimal degrees.
    Returns None if either coordinate is missing or out of range.
    """
    if not gps:
        return None
    try:
        lat = _dms_to_degrees(gps[GPS_LATITUDE])
        lon = _dms_to_degrees(gps[GPS_LONGITUDE])
    except (KeyError, TypeError, ValueError, ZeroDivisionError):
        return None
    if lat is None or lon is None:
        return None

    if _ref(gps.get(GPS_LATITUDE_REF)) == 'S':
        lat = -lat
    if _ref(gps.get(GPS_LONGITUDE_REF)) == 'W':
        lon = -lon

    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return lat, lon


def extract_metadata(data):
    """
    Best-effort capture timestamp and GPS location from encoded image bytes.

    Never raises: missing, partial or broken metadata gives None for that field.
    """
    captured_at = None
    location = None
    try:
        with PILImage.open(io.BytesIO(data)) as img:
            exif = img.getexif()
            exif_ifd = exif.get_ifd(EXIF_IFD_POINTER)
            gps_ifd = exif.get_ifd(GPS_IFD_POINTER)
    except Exception:
        return captured_at, location

    try:
        for value in (exif_ifd.get(TAG_DATETIME_ORIGINAL),
                      exif_ifd.get(TAG_DATETIME_DIGITIZED),
                      exif.get(TAG_DATETIME)):
            captured_at = parse_exif_timestamp(value)
            if captured_at:
                break
    except Exception as e:
        print(f"   ⚠️  Could not read capture date: {e}")

    try:
        location = parse_gps(gps_ifd)
    except Exception as e:
        print(f"   ⚠️  Could not read GPS location: {e}")

    return captured_at, location


async def load_image(url, fetch=fetch_bytes):
    """
    Fetch and decode one image, extracting its metadata alongside the decode.

    Raises DecodeError when the raster cannot be produced. Metadata problems
    never raise; they leave captured_at/location as None.
    """
    data = await asyncio.to_thread(fetch, url)
    (raster, width, height), (captured_at, location) = await asyncio.gather(
        asyncio.to_thread(decode_raster, data),
        asyncio.to_thread(extract_metadata, data),
    )
    resource = ImageResource(
        source_url=url,
        pixel_width=width,
        pixel_height=height,
        raster=raster,
        captured_at=captured_at,
        location=location,
    )
    print(f"      - Loaded: {resource.display_name} ({width}×{height})")
    return resource


async def load_all(urls, loader=load_image):
    """
    Load every URL concurrently and return the resources in input order.

    If any load fails, every raster that did load is released and the first
    failure (in input order) is raised.
    """
    results = await asyncio.gather(*(loader(url) for url in urls), return_exceptions=True)

    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        for r in results:
            if isinstance(r, ImageResource):
                r.release()
        raise failures[0]
    return list(results)
