from __future__ import annotations

import logging
from typing import Any, Callable

import pymupdf as fitz

from guestform.errors import RenderError
from guestform.render.layout import DrawKind, FontRef, PlacementDescriptor


logger = logging.getLogger(__name__)

FONT_RESOURCE_NAMES: dict[FontRef, str] = {
    FontRef.body: 'GFBody',
    FontRef.symbol: 'GFMark',
}

DEFAULT_LINE_HEIGHT_FACTOR = 1.2


def to_display_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def wrap_text(text: str, *, measure: Callable[[str], float], max_width: float | None) -> list[str]:
    paragraphs = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    if max_width is None or max_width <= 0:
        return paragraphs

    lines: list[str] = []
    for paragraph in paragraphs:
        words = paragraph.split()
        if not words:
            lines.append('')
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f'{current} {word}'
            if measure(candidate) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines


class FieldRenderer:
    """Draws single placement descriptors onto an open PyMuPDF document."""

    def __init__(
        self,
        document: fitz.Document,
        *,
        body_font: bytes,
        symbol_font: bytes,
        checkmark_glyph: str = 'P',
    ):
        self.document = document
        self.checkmark_glyph = checkmark_glyph
        self._font_buffers: dict[FontRef, bytes] = {
            FontRef.body: body_font,
            FontRef.symbol: symbol_font,
        }
        self._metrics: dict[FontRef, fitz.Font] = {}
        self._fonts_registered = False

    def register_fonts(self) -> None:
        for page in self.document:
            for ref, buffer in self._font_buffers.items():
                try:
                    page.insert_font(fontname=FONT_RESOURCE_NAMES[ref], fontbuffer=buffer)
                except Exception as exc:
                    raise RenderError(f'Failed to embed {ref.value} font on page {page.number}: {exc}') from exc
        self._fonts_registered = True
        logger.debug('Registered body and symbol fonts on %d page(s)', self.document.page_count)

    def measure(self, text: str, *, font: FontRef, size: float) -> float:
        metrics = self._metrics.get(font)
        if metrics is None:
            metrics = fitz.Font(fontbuffer=self._font_buffers[font])
            self._metrics[font] = metrics
        return float(metrics.text_length(text, fontsize=size))

    def draw(self, descriptor: PlacementDescriptor, value: Any = None) -> bool:
        if descriptor.kind == DrawKind.image:
            raise RenderError('image placements are drawn with draw_image()')
        if descriptor.kind == DrawKind.glyph:
            self._insert_line(descriptor, self.checkmark_glyph, y=descriptor.y)
            return True

        text = to_display_text(value)
        if not text:
            return False

        lines = wrap_text(
            text,
            measure=lambda line: self.measure(line, font=descriptor.font, size=descriptor.size),
            max_width=descriptor.max_width,
        )
        line_height = descriptor.line_height or descriptor.size * DEFAULT_LINE_HEIGHT_FACTOR
        for offset, line in enumerate(lines):
            if line:
                self._insert_line(descriptor, line, y=descriptor.y - offset * line_height)
        return True

    def draw_image(self, descriptor: PlacementDescriptor, image_bytes: bytes) -> None:
        if descriptor.width is None or descriptor.height is None:
            raise RenderError('image placement requires width and height')
        page = self._page(descriptor.page_index)
        top = page.rect.height - descriptor.y - descriptor.height
        rect = fitz.Rect(
            descriptor.x,
            top,
            descriptor.x + descriptor.width,
            top + descriptor.height,
        )
        try:
            page.insert_image(rect, stream=image_bytes, keep_proportion=False, overlay=True)
        except Exception as exc:
            raise RenderError(f'Failed to embed image on page {descriptor.page_index}: {exc}') from exc

    def _page(self, index: int) -> fitz.Page:
        if index < 0 or index >= self.document.page_count:
            raise RenderError(
                f'Placement targets page {index} but the template has {self.document.page_count} page(s)'
            )
        return self.document[index]

    def _insert_line(self, descriptor: PlacementDescriptor, text: str, *, y: float) -> None:
        if not self._fonts_registered:
            raise RenderError('fonts must be registered before drawing')
        page = self._page(descriptor.page_index)
        point = fitz.Point(descriptor.x, page.rect.height - y)
        try:
            page.insert_text(
                point,
                text,
                fontsize=descriptor.size,
                fontname=FONT_RESOURCE_NAMES[descriptor.font],
                color=descriptor.color,
                overlay=True,
            )
        except Exception as exc:
            raise RenderError(f'Failed to draw {text!r} on page {descriptor.page_index}: {exc}') from exc
