"""
Pytest configuration for streampdf
"""

import logging
import sys
from pathlib import Path

import pytest
from PIL import Image

from streampdf.fonts import FontMetricsProvider, StaticFontResolver


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Only show warnings and errors during tests
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def font_provider():
    """Provider that never touches system fonts: unknown families fall back to Helvetica."""
    with FontMetricsProvider(StaticFontResolver({}), fallback_font="Helvetica") as provider:
        yield provider


@pytest.fixture
def vera_ttf():
    """TrueType font bundled with reportlab."""
    import reportlab

    path = Path(reportlab.__file__).parent / "fonts" / "Vera.ttf"
    if not path.exists():
        pytest.skip("reportlab bundled Vera.ttf not available")
    return path


@pytest.fixture
def jpeg_path(temp_dir):
    """200x100 RGB JPEG."""
    path = temp_dir / "image.jpg"
    Image.new("RGB", (200, 100), (200, 30, 30)).save(path, "JPEG")
    return path


@pytest.fixture
def png_path(temp_dir):
    """40x20 RGBA PNG with a transparent half."""
    path = temp_dir / "image.png"
    image = Image.new("RGBA", (40, 20), (0, 0, 255, 255))
    image.paste((0, 0, 0, 0), (0, 0, 20, 20))
    image.save(path, "PNG")
    return path


@pytest.fixture
def make_document(temp_dir, font_provider):
    """Factory for documents writing into the temp dir with the test font provider."""
    from streampdf import Document

    def factory(name="out.pdf", **options):
        return Document(temp_dir / name, options=options or None, font_provider=font_provider)

    return factory
