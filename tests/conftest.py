"""
Shared fixtures: a two-page template and font buffers built with PyMuPDF.
"""

import base64
from pathlib import Path

import pymupdf as fitz
import pytest

from guestform.adapters.resources import ResourceConfig, ResourceLoader
from guestform.config import Settings
from guestform.render.assembler import DocumentAssembler

A4_WIDTH = 595
A4_HEIGHT = 842


@pytest.fixture
def template_bytes():
    """Blank two-page A4 template."""
    doc = fitz.open()
    for _ in range(2):
        page = doc.new_page(width=A4_WIDTH, height=A4_HEIGHT)
        page.insert_text((72, 72), 'GUEST ROOM REGISTER FORM', fontsize=10, fontname='helv')
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def body_font_bytes():
    return fitz.Font('helv').buffer


@pytest.fixture
def symbol_font_bytes():
    """Courier stands in for Wingdings 2: it maps the 'P' checkmark letter."""
    return fitz.Font('cour').buffer


@pytest.fixture
def png_bytes():
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 4), False)
    pix.clear_with(40)
    return pix.tobytes('png')


@pytest.fixture
def png_data_url(png_bytes):
    return 'data:image/png;base64,' + base64.b64encode(png_bytes).decode('ascii')


@pytest.fixture
def resource_dir(tmp_path: Path, template_bytes, body_font_bytes, symbol_font_bytes) -> Path:
    (tmp_path / 'forms').mkdir()
    (tmp_path / 'fonts').mkdir()
    (tmp_path / 'forms' / 'Revised_Register_Form.pdf').write_bytes(template_bytes)
    (tmp_path / 'fonts' / 'Ubuntu-R.ttf').write_bytes(body_font_bytes)
    (tmp_path / 'fonts' / 'Wingdings2.ttf').write_bytes(symbol_font_bytes)
    return tmp_path


@pytest.fixture
def resource_config(resource_dir: Path) -> ResourceConfig:
    return ResourceConfig(
        template_location=str(resource_dir / 'forms' / 'Revised_Register_Form.pdf'),
        body_font_location=str(resource_dir / 'fonts' / 'Ubuntu-R.ttf'),
        symbol_font_location=str(resource_dir / 'fonts' / 'Wingdings2.ttf'),
        base_url=None,
        timeout_seconds=None,
    )


@pytest.fixture
def assembler(resource_config: ResourceConfig) -> DocumentAssembler:
    return DocumentAssembler(ResourceLoader(resource_config), settings=Settings())


@pytest.fixture
def record_payload():
    """Reservation as sent by the booking UI."""
    return {
        'guestName': 'Ravi Kumar',
        'guestGender': 'MALE',
        'address': '12 MG Road, Bengaluru',
        'numberOfGuests': 2,
        'numberOfRooms': 1,
        'roomType': 'Double Suite Room',
        'arrivalDate': '2024-03-05T00:00:00Z',
        'arrivalTime': '10:00',
        'departureDate': '2024-03-07T00:00:00Z',
        'departureTime': '12:00',
        'purpose': 'Official visit',
        'category': 'ES-A',
        'payment': {'source': 'GUEST'},
        'applicant': {
            'name': 'Anita Rao',
            'designation': 'Professor',
            'department': 'Physics',
            'code': 'EMP-104',
            'mobile': '9876543210',
        },
    }
