#!/usr/bin/env python3
"""
Hello world example for streampdf.

Draws on one landscape Letter page: a small right-aligned note inside a
rectangle, a centered title, a wrapped paragraph and, when an image file is
available, a scaled image centered at the bottom.

Usage:
    python examples/hello_world.py output.pdf [image.jpg]
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from streampdf import Alignment, Document, DocumentOptions, Painter, PageSize, VerticalAlignment, page_guard
from streampdf.exceptions import StreamPdfError
from streampdf.utils.logger import configure_logging

logger = logging.getLogger(__name__)

LEFT_MARGIN = 20
RIGHT_MARGIN = 20
TOP_MARGIN = 20
BOTTOM_MARGIN = 30

PARAGRAPH = "A paragraph a paragraph a paragraph a paragraph a paragraph a paragraph a paragraph. " * 8 + " End"


def hello_world(output: Union[str, Path], image_path: Optional[Union[str, Path]] = None) -> Path:
    """Write the demonstration page to *output* and return its path."""
    output = Path(output)
    painter = Painter()

    with Document(output, options=DocumentOptions.from_env()) as document:
        page = document.create_page(PageSize.LETTER, landscape=True)
        painter.set_page(page)
        font = document.create_font("Arial")

        with page_guard(painter):
            # Note in the bottom-right corner, framed by a rectangle
            font.size = 8.0
            painter.set_font(font)
            note = "Some text here."
            text_width = font.string_width(note)
            text_height = font.line_spacing()
            note_x = page.width - RIGHT_MARGIN - text_width
            painter.draw_text(note_x, BOTTOM_MARGIN + text_height, note)
            painter.rectangle(note_x, BOTTOM_MARGIN + text_height - 3, text_width, text_height)
            painter.stroke()

            box_width = page.width - (LEFT_MARGIN + RIGHT_MARGIN)

            font.size = 18.0
            painter.set_font(font)
            painter.draw_text_aligned(
                LEFT_MARGIN, page.height - TOP_MARGIN - 20, box_width, "Title of This Page", Alignment.CENTER
            )

            font.size = 11.0
            painter.set_font(font)
            box_height = 150
            painter.draw_multiline_text(
                LEFT_MARGIN,
                page.height - TOP_MARGIN - box_height - 30,
                box_width,
                box_height,
                PARAGRAPH,
                Alignment.LEFT,
                VerticalAlignment.TOP,
            )

            if image_path is not None:
                image = document.create_image(image_path)
                scale = 0.5
                image_x = LEFT_MARGIN + (box_width - image.width * scale) / 2
                painter.draw_image(image_x, BOTTOM_MARGIN, image, scale, scale)

        document.set_metadata(
            creator="hello_world - a streampdf example",
            author="streampdf",
            title="Hello World",
            subject="Testing the streampdf library",
            keywords="Test;PDF;Hello World;",
        )

    logger.info("Created %s", output)
    return output


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or len(argv) > 2:
        print(__doc__)
        return 1

    configure_logging("INFO")
    try:
        hello_world(argv[0], argv[1] if len(argv) > 1 else None)
    except StreamPdfError as exc:
        logger.error("Failed to create PDF: %s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
