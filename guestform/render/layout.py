"""
Placement table for the Guest Room Register Form template.

Coordinates are PDF points with the origin at the bottom-left corner of the
page, i.e. the numbers can be measured straight off the printed form. The
renderer converts them to PyMuPDF's top-left space.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class FontRef(str, Enum):
    body = 'body'
    symbol = 'symbol'


class DrawKind(str, Enum):
    text = 'text'
    glyph = 'glyph'
    image = 'image'


BLACK = (0.0, 0.0, 0.0)

FIRST_PAGE = 0
SECOND_PAGE = 1


@dataclass(frozen=True)
class PlacementDescriptor:
    page_index: int
    x: float
    y: float
    font: FontRef = FontRef.body
    size: float = 12.0
    color: tuple[float, float, float] = BLACK
    max_width: float | None = None
    line_height: float | None = None
    kind: DrawKind = DrawKind.text
    width: float | None = None
    height: float | None = None


def _text(x: float, y: float, *, page: int = FIRST_PAGE, **extra) -> PlacementDescriptor:
    return PlacementDescriptor(page_index=page, x=x, y=y, **extra)


def _mark(x: float, y: float) -> PlacementDescriptor:
    return PlacementDescriptor(
        page_index=FIRST_PAGE,
        x=x,
        y=y,
        font=FontRef.symbol,
        kind=DrawKind.glyph,
    )


FIELD_LAYOUT: dict[str, PlacementDescriptor] = {
    # Guest block
    'guest_name': _text(210, 698),
    'guest_gender': _text(470, 698),
    'address': _text(210, 680),
    'contact_mobile': _text(160, 661),
    'number_of_guests': _text(330, 661),
    'number_of_rooms': _text(520, 661),
    'room_type': _text(365, 643),
    # Stay table
    'arrival_date': _text(88, 605),
    'arrival_time': _text(200, 605),
    'departure_date': _text(330, 605),
    'departure_time': _text(450, 605),
    'purpose': _text(200, 575),
    # (c) Boarding/Lodging charges paid by the guest or not
    'payment_by_guest': _text(385, 339),
    'payment_source_name': _text(400, 325),
    # Office use
    'approval_attached': _text(450, 311),
    'confirmed_room_no': _text(70, 100),
    'entry_serial_no': _text(130, 100),
    'entry_page_no': _text(180, 100),
    'entry_date': _text(213, 100),
    'booking_date': _text(285, 105),
    'check_in_time': _text(355, 107),
    'check_out_time': _text(355, 94),
    'remarks': _text(420, 105, size=11, max_width=350, line_height=14),
    # Applicant row
    'applicant_name': _text(55, 215),
    'applicant_designation': _text(155, 215),
    'applicant_department': _text(255, 215),
    'applicant_code': _text(340, 215),
    'applicant_mobile': _text(440, 215),
    'application_date': _text(88, 190),
    # Applicant signature
    'signature_text': _text(440, 185),
    'signature_image': PlacementDescriptor(
        page_index=FIRST_PAGE,
        x=415,
        y=173,
        kind=DrawKind.image,
        width=120,
        height=40,
    ),
}

# Room class: Executive Suite vs Business Room.
CLASS_MARKS: dict[str, PlacementDescriptor] = {
    'ES': _mark(260, 550),
    'BR': _mark(395, 550),
}

# Category tier, one box per category code.
TIER_MARKS: dict[str, PlacementDescriptor] = {
    'ES-A': _mark(260, 483),
    'ES-B': _mark(260, 465),
    'BR-A': _mark(480, 482),
    'BR-B1': _mark(480, 462),
    'BR-B2': _mark(480, 445),
}

REVIEWER_LINE = _text(55, 600, page=SECOND_PAGE)
REVIEWER_STEP = 20.0


def reviewer_line(index: int) -> PlacementDescriptor:
    return replace(REVIEWER_LINE, y=REVIEWER_LINE.y - index * REVIEWER_STEP)
