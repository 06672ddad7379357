# Rasterise album pages to image files for sharing or a quick look
import os

from pdf2image import convert_from_path


def album_to_images(pdf_path, output_folder, dpi=150, image_format="JPEG"):
    """
    Converts each page of an album PDF into an image.

    Args:
        pdf_path (str): Path to the album PDF.
        output_folder (str): Directory where images will be saved.
        dpi (int): Resolution in DPI (higher = sharper).
        image_format (str): "JPEG" or "PNG".

    Returns:
        list of written file paths, in page order.
    """
    if image_format not in ("JPEG", "PNG"):
        raise ValueError(f"Unsupported preview format: {image_format}")
    os.makedirs(output_folder, exist_ok=True)

    print(f"Converting {pdf_path} to {image_format} previews...")
    pages = convert_from_path(pdf_path, dpi=dpi)

    written = []
    ext = "jpg" if image_format == "JPEG" else "png"
    for i, page in enumerate(pages, start=1):
        output_filename = os.path.join(output_folder, f"page_{i:04d}.{ext}")
        if image_format == "JPEG":
            page.save(output_filename, image_format, quality=95, subsampling=0)
        else:
            page.save(output_filename, image_format)
        written.append(output_filename)

    print(f"✓ {len(written)} preview(s) saved to {output_folder}")
    return written
