import io
import json

import pytest
from PIL import Image

VALID_UUID = "eed6005f-f8c8-451f-98d0-4088e2b40eb6"
OTHER_UUID = "599344f4-3c5c-4cca-b914-2210e3b3312f"


def make_image(color=(200, 30, 30), size=(8, 8), mode="RGB"):
    return Image.new(mode, size, color)


def image_bytes(fmt="JPEG", **kwargs):
    buf = io.BytesIO()
    make_image(**kwargs).save(buf, format=fmt)
    return buf.getvalue()


def recipe_record(uuid=VALID_UUID, **overrides):
    record = {
        "uuid": uuid,
        "cuisine": "Malaysian",
        "name": "Apam Balik",
        "photo_url_large": "https://some.url/large.jpg",
        "photo_url_small": "https://some.url/small.jpg",
        "source_url": "https://www.nyonyacooking.com/recipes/apam-balik",
        "youtube_url": "https://www.youtube.com/watch?v=6R8ffRRJcrg",
    }
    record.update(overrides)
    return record


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config, env and cache dirs out of every test."""
    import os

    from recipebox.config import hierarchy

    for name in list(os.environ):
        if name.startswith("RECIPEBOX_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def jpeg_bytes():
    return image_bytes("JPEG")


@pytest.fixture
def png_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    import base64
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "ImageCache"


@pytest.fixture
def image_cache(cache_dir):
    from recipebox.cache.manager import ImageCache

    return ImageCache(directory=cache_dir)


@pytest.fixture
def sample_feed():
    return {
        "recipes": [
            recipe_record(),
            recipe_record(
                uuid=OTHER_UUID,
                cuisine="British",
                name="Apple & Blackberry Crumble",
                photo_url_large="https://some.url/large2.jpg",
                photo_url_small="https://some.url/small2.jpg",
                youtube_url=None,
            ),
        ]
    }


@pytest.fixture
def feed_file(tmp_path, sample_feed):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps(sample_feed))
    return path


@pytest.fixture
def new_image():
    """Factory for small in-memory PIL images."""
    return make_image


@pytest.fixture
def new_record():
    """Factory for raw feed records (dicts)."""
    return recipe_record
