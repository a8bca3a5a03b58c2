from __future__ import annotations

import base64
import binascii
import logging
from enum import Enum

from guestform.errors import RenderError
from guestform.render.fields import FieldRenderer, to_display_text
from guestform.render.layout import FIELD_LAYOUT
from guestform.types import Signature, SignatureType


logger = logging.getLogger(__name__)


class SignatureOutcome(str, Enum):
    skipped = 'skipped'
    image = 'image'
    text = 'text'
    failed = 'failed'


def decode_signature_image(data: bytes | str | None) -> bytes:
    """Return raw image bytes from a data URL, a bare base64 string or raw bytes."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        payload = bytes(data)
        if not payload:
            raise RenderError('signature image is empty')
        return payload

    token = str(data or '').strip()
    if not token:
        raise RenderError('signature image is empty')

    if token.startswith('data:'):
        header, _, encoded = token.partition(',')
        if not header.startswith('data:image'):
            raise RenderError(f'unsupported signature data URL: {header[:40]}')
        if not encoded:
            raise RenderError('signature data URL has no payload')
        if ';base64' not in header:
            raise RenderError('signature data URL is not base64 encoded')
        token = encoded

    try:
        decoded = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RenderError(f'signature image is not valid base64: {exc}') from exc
    if not decoded:
        raise RenderError('signature image decoded to nothing')
    return decoded


class SignatureEmbedder:
    def __init__(self, renderer: FieldRenderer):
        self.renderer = renderer

    def embed(self, signature: Signature | None) -> SignatureOutcome:
        if signature is None:
            return SignatureOutcome.skipped

        if signature.type == SignatureType.image.value:
            try:
                image_bytes = decode_signature_image(signature.data)
                self.renderer.draw_image(FIELD_LAYOUT['signature_image'], image_bytes)
            except RenderError as exc:
                logger.warning('Error embedding signature image, leaving region blank: %s', exc)
                return SignatureOutcome.failed
            return SignatureOutcome.image

        if signature.type == SignatureType.text.value:
            text = signature.data.decode('utf-8', 'replace') if isinstance(signature.data, bytes) else signature.data
            drawn = self.renderer.draw(FIELD_LAYOUT['signature_text'], to_display_text(text))
            return SignatureOutcome.text if drawn else SignatureOutcome.skipped

        logger.info('Ignoring signature of unknown type %r', signature.type)
        return SignatureOutcome.skipped
