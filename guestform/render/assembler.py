from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import pymupdf as fitz
from pydantic import ValidationError

from guestform.adapters.resources import ResourceLoader, TemplateResource, build_resource_config
from guestform.config import Settings, get_settings
from guestform.errors import FormFillError, GenerationError, ResourceFetchError
from guestform.render.dates import format_display_date, today_display
from guestform.render.fields import FieldRenderer
from guestform.render.layout import FIELD_LAYOUT, PlacementDescriptor, reviewer_line
from guestform.render.marks import active_marks, resolve_category, resolve_payment
from guestform.render.signature import SignatureEmbedder, SignatureOutcome
from guestform.types import DocumentBlob, Gender, ReservationRecord


logger = logging.getLogger(__name__)

_GENDER_LABELS = {
    Gender.MALE.value: 'Male',
    Gender.FEMALE.value: 'Female',
    Gender.OTHER.value: 'Other',
}


@dataclass(frozen=True)
class DrawOp:
    field: str
    descriptor: PlacementDescriptor
    value: str | None = None


def coerce_record(record: ReservationRecord | dict[str, Any]) -> ReservationRecord:
    if isinstance(record, ReservationRecord):
        return record
    return ReservationRecord.model_validate(record)


def _with_suffix(value: Any, suffix: str) -> str | None:
    if value is None or value == '':
        return None
    return f'{value}{suffix}'


def resolve_field_values(record: ReservationRecord, *, today: str) -> dict[str, Any]:
    """Logical field name -> display value for every plain-text field."""
    applicant = record.applicant
    gender = record.guest_gender
    values: dict[str, Any] = {
        'guest_name': record.guest_name,
        'guest_gender': _GENDER_LABELS.get(gender or '', gender),
        'address': record.address,
        'contact_mobile': applicant.mobile if applicant else None,
        'number_of_guests': record.number_of_guests,
        'number_of_rooms': record.number_of_rooms,
        'room_type': record.room_type,
        'arrival_date': format_display_date(record.arrival_date),
        'arrival_time': record.arrival_time,
        'departure_date': format_display_date(record.departure_date),
        'departure_time': record.departure_time,
        'purpose': record.purpose,
        'applicant_name': applicant.name if applicant else None,
        'applicant_designation': applicant.designation if applicant else None,
        'applicant_department': applicant.department if applicant else None,
        'applicant_code': applicant.code if applicant else None,
        'applicant_mobile': applicant.mobile if applicant else None,
        'application_date': today,
    }

    annotation = record.admin_annotation
    if annotation is not None:
        # Office-use fields are only drawn when filled in.
        admin_values = {
            'approval_attached': annotation.approval_attached,
            'confirmed_room_no': annotation.confirmed_room_no,
            'entry_serial_no': _with_suffix(annotation.entry_serial_no, ' and '),
            'entry_page_no': annotation.entry_page_no,
            'entry_date': format_display_date(annotation.entry_date) if annotation.entry_date else None,
            'booking_date': (
                _with_suffix(format_display_date(annotation.booking_date), ' ,')
                if annotation.booking_date
                else None
            ),
            'check_in_time': _with_suffix(annotation.check_in_time, ' ,'),
            'check_out_time': annotation.check_out_time,
            'remarks': annotation.remarks,
        }
        values.update({key: value for key, value in admin_values.items() if value})
    return values


def build_draw_plan(record: ReservationRecord, *, today: str | None = None) -> list[DrawOp]:
    """Everything that gets drawn for a record except the signature."""
    if today is None:
        today = today_display(get_settings().display_timezone)

    ops: list[DrawOp] = []
    for field, value in resolve_field_values(record, today=today).items():
        if value is None or value == '':
            continue
        ops.append(DrawOp(field=field, descriptor=FIELD_LAYOUT[field], value=value))

    selection = resolve_category(record.category)
    for field, descriptor in active_marks(selection):
        ops.append(DrawOp(field=field, descriptor=descriptor))

    payment = resolve_payment(record.payment)
    ops.append(DrawOp(field='payment_by_guest', descriptor=FIELD_LAYOUT['payment_by_guest'], value=payment.label))
    if payment.source_name:
        ops.append(
            DrawOp(
                field='payment_source_name',
                descriptor=FIELD_LAYOUT['payment_source_name'],
                value=payment.source_name,
            )
        )

    for index, reviewer in enumerate(record.reviewers or []):
        if reviewer.approved and reviewer.role:
            ops.append(DrawOp(field=f'reviewer:{index}', descriptor=reviewer_line(index), value=reviewer.role))

    seen: set[str] = set()
    for op in ops:
        if op.field in seen:
            raise GenerationError(f'field {op.field} is placed more than once')
        seen.add(op.field)
    return ops


class DocumentAssembler:
    def __init__(self, loader: ResourceLoader | None = None, *, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.loader = loader or ResourceLoader(build_resource_config(self.settings))

    async def assemble(self, record: ReservationRecord, *, today: str | None = None) -> bytes:
        resources = await self.loader.load()
        try:
            return await self._render(resources, record, today=today)
        except GenerationError:
            raise
        except Exception as exc:
            raise GenerationError(f'Error generating filled PDF: {exc}') from exc

    async def _render(self, resources: TemplateResource, record: ReservationRecord, *, today: str | None) -> bytes:
        if today is None:
            today = today_display(self.settings.display_timezone)
        plan = build_draw_plan(record, today=today)

        document = fitz.open(stream=resources.template, filetype='pdf')
        try:
            page_count = document.page_count
            renderer = FieldRenderer(
                document,
                body_font=resources.body_font,
                symbol_font=resources.symbol_font,
                checkmark_glyph=self.settings.checkmark_glyph,
            )
            renderer.register_fonts()

            for op in plan:
                renderer.draw(op.descriptor, op.value)

            outcome = SignatureEmbedder(renderer).embed(record.signature)
            if outcome == SignatureOutcome.failed:
                logger.info('Signature region left blank for guest %r', record.guest_name)

            output = await asyncio.to_thread(document.tobytes, garbage=3, deflate=True)
        finally:
            document.close()

        logger.info('Generated register form: %d page(s), %d field(s), %d bytes', page_count, len(plan), len(output))
        return output


async def generate_async(
    record: ReservationRecord | dict[str, Any],
    *,
    assembler: DocumentAssembler | None = None,
    today: str | None = None,
) -> bytes:
    try:
        parsed = coerce_record(record)
    except ValidationError as exc:
        raise GenerationError(f'Invalid reservation record: {exc}') from exc

    logger.debug(
        'Generating PDF: guest=%r category=%r payment=%r',
        parsed.guest_name,
        parsed.category,
        parsed.payment.model_dump() if parsed.payment else None,
    )
    assembler = assembler or DocumentAssembler()
    try:
        return await assembler.assemble(parsed, today=today)
    except ResourceFetchError as exc:
        logger.error('Resource fetch failed; no document generated: %s', exc)
        raise


def missing_update_fields(record: ReservationRecord) -> list[str]:
    missing: list[str] = []
    if not record.guest_name:
        missing.append('guestName')
    if not record.arrival_date:
        missing.append('arrivalDate')
    if not record.departure_date:
        missing.append('departureDate')
    if record.applicant is None:
        missing.append('applicant')
    return missing


async def update_async(
    record: ReservationRecord | dict[str, Any] | None,
    *,
    assembler: DocumentAssembler | None = None,
    today: str | None = None,
) -> DocumentBlob | None:
    """Regenerate the whole form for an edited reservation.

    There is no incremental path: a category or signature change can flip
    several independent regions, so the template is refilled from scratch.
    Returns None when the record cannot produce a form.
    """
    if record is None:
        logger.error('Missing required form data for PDF generation')
        return None
    try:
        parsed = coerce_record(record)
    except ValidationError as exc:
        logger.error('Invalid reservation record for PDF generation: %s', exc)
        return None

    missing = missing_update_fields(parsed)
    if missing:
        logger.error('Missing required form data for PDF generation: %s', ', '.join(missing))
        return None

    assembler = assembler or DocumentAssembler()
    try:
        content = await generate_async(parsed, assembler=assembler, today=today)
    except FormFillError as exc:
        logger.error('Error updating filled PDF: %s', exc)
        return None

    return DocumentBlob(
        content=content,
        media_type=assembler.settings.output_media_type,
        filename=assembler.settings.output_filename,
    )


def generate(record: ReservationRecord | dict[str, Any], **kwargs: Any) -> bytes:
    return asyncio.run(generate_async(record, **kwargs))


def update(record: ReservationRecord | dict[str, Any] | None, **kwargs: Any) -> DocumentBlob | None:
    return asyncio.run(update_async(record, **kwargs))
