# Pre-generate gallery thumbnails: upright, fixed width, same filename
import os

from PIL import Image as PILImage
from PIL import ImageOps

from .manifest import list_images

THUMBNAIL_WIDTH = 400           # Width in pixels; height follows the aspect ratio
THUMBNAIL_QUALITY = 85


def make_thumbnail(src_path, dest_path, width=THUMBNAIL_WIDTH, quality=THUMBNAIL_QUALITY):
    """Rotate per EXIF orientation, resize to `width` and save to dest_path."""
    with PILImage.open(src_path) as img:
        upright = ImageOps.exif_transpose(img)
        src_w, src_h = upright.size
        height = max(1, round(src_h * width / src_w))
        thumb = upright.resize((width, height), PILImage.Resampling.LANCZOS)

        save_kwargs = {}
        if dest_path.lower().endswith(('.jpg', '.jpeg')):
            if thumb.mode not in ('RGB', 'L'):
                thumb = thumb.convert('RGB')
            save_kwargs = {'quality': quality, 'optimize': True}
        thumb.save(dest_path, **save_kwargs)
    return width, height


def generate_thumbnails(src_folder, dest_folder, width=THUMBNAIL_WIDTH):
    """
    Write a thumbnail for every image in src_folder into dest_folder.

    A file that fails is reported and skipped. Returns (written, failed)
    lists of filenames.
    """
    os.makedirs(dest_folder, exist_ok=True)
    written = []
    failed = []

    for name in list_images(src_folder):
        try:
            make_thumbnail(os.path.join(src_folder, name), os.path.join(dest_folder, name), width)
            written.append(name)
        except Exception as e:
            print(f"   ❌ Error: {name}: {e}")
            failed.append(name)

    print(f"✓ Thumbnails generated: {len(written)} written, {len(failed)} failed")
    return written, failed
