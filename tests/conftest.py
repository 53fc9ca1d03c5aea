import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Ensure project root is on sys.path so `import slide_editor` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from slide_editor.config import EditorSettings, bundled_font_path  # noqa: E402


def make_image_bytes(fmt: str = "PNG", size=(8, 6), color=(200, 30, 30)) -> bytes:
    """Small in-memory image in the given Pillow format."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, fmt)
    return buf.getvalue()


def data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")


@pytest.fixture
def png_uri(png_bytes):
    return data_uri(png_bytes, "image/png")


@pytest.fixture
def gif_uri():
    return data_uri(make_image_bytes("GIF"), "image/gif")


@pytest.fixture
def settings():
    """Default page size with the font bundled in reportlab, so tests never depend on system fonts."""
    return EditorSettings(font_path=bundled_font_path())


@pytest.fixture
def make_image():
    return make_image_bytes


@pytest.fixture
def to_data_uri():
    return data_uri
