# images.json manifest for the gallery: a flat JSON array of bare image filenames
import json
import os
import random
import re

IMAGE_EXTENSIONS = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)
MANIFEST_NAME = "images.json"
GALLERY_WINDOW = 32             # Images shown in the browsing grid
LAYOUT_RANDOM_SEED = None       # Set to an integer for a reproducible gallery window


def list_images(folder):
    """Bare filenames of the images directly inside `folder`, sorted."""
    return sorted(
        name for name in os.listdir(folder)
        if IMAGE_EXTENSIONS.search(name) and os.path.isfile(os.path.join(folder, name))
    )


def generate_manifest(folder, output_path=None):
    """Write the manifest for `folder` and return the filenames it lists."""
    if not os.path.isdir(folder):
        raise FileNotFoundError(f"Image folder not found: {folder}")

    output_path = output_path or os.path.join(os.path.dirname(os.path.abspath(folder)), MANIFEST_NAME)
    filenames = list_images(folder)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(filenames, f)

    print(f"✓ {output_path} generated with {len(filenames)} image(s)")
    return filenames


def read_manifest(path):
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list) or not all(isinstance(name, str) for name in data):
        raise ValueError(f"{path} is not a flat JSON array of filenames")
    return data


def pick_random(filenames, count=GALLERY_WINDOW, seed=LAYOUT_RANDOM_SEED):
    """A random window of up to `count` filenames. Same seed, same window."""
    rng = random.Random(seed)
    filenames = list(filenames)
    if len(filenames) <= count:
        rng.shuffle(filenames)
        return filenames
    return rng.sample(filenames, count)


def selection_from_filenames(filenames, image_root):
    """Turn bare filenames into the [{'url': ...}] records an album build takes."""
    return [{'url': os.path.join(image_root, name)} for name in filenames]
