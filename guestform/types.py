from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# Payment source meaning "boarding/lodging is paid by the guest".
GUEST_PAYS_SOURCE = 'GUEST'

DateValue = datetime | date | str | None
DisplayValue = str | int | float | None


def _number_to_text(value: Any) -> Any:
    # The booking UI sends numbers for names, times and codes alike.
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


Text = Annotated[str | None, BeforeValidator(_number_to_text)]


class Gender(str, Enum):
    MALE = 'MALE'
    FEMALE = 'FEMALE'
    OTHER = 'OTHER'


class SignatureType(str, Enum):
    image = 'image'
    text = 'text'


class ReviewerStatus(str, Enum):
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'


class RecordModel(BaseModel):
    """Accepts the camelCase payload of the booking UI as well as snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra='ignore',
    )


class Applicant(RecordModel):
    name: Text = None
    designation: Text = None
    department: Text = None
    code: DisplayValue = None
    mobile: DisplayValue = None


class Payment(RecordModel):
    source: Text = None
    source_name: Text = None


class AdminAnnotation(RecordModel):
    approval_attached: bool | str | None = None
    confirmed_room_no: DisplayValue = None
    entry_serial_no: DisplayValue = None
    entry_page_no: DisplayValue = None
    entry_date: DateValue = None
    booking_date: DateValue = None
    check_in_time: Text = None
    check_out_time: Text = None
    remarks: Text = None


class Signature(RecordModel):
    type: str
    data: Annotated[bytes | str | None, BeforeValidator(_number_to_text)] = None


class Reviewer(RecordModel):
    role: Text = None
    status: Text = None

    @property
    def approved(self) -> bool:
        return self.status == ReviewerStatus.APPROVED.value


class ReservationRecord(RecordModel):
    guest_name: Text = None
    guest_gender: Text = None
    address: Text = None
    number_of_guests: DisplayValue = None
    number_of_rooms: DisplayValue = None
    room_type: Text = None

    arrival_date: DateValue = None
    arrival_time: Text = None
    departure_date: DateValue = None
    departure_time: Text = None
    purpose: Text = None

    category: Text = None
    payment: Payment | None = None

    applicant: Applicant | None = None
    admin_annotation: AdminAnnotation | None = None
    signature: Signature | None = None
    reviewers: list[Reviewer] | None = None

    @model_validator(mode='before')
    @classmethod
    def _fold_legacy_payment(cls, data: Any) -> Any:
        # Older records carry source/sourceName at the top level. A non-empty
        # nested payment value always wins; each field is resolved on its own.
        if not isinstance(data, dict):
            return data
        data = dict(data)
        legacy_source = data.pop('source', None)
        legacy_camel = data.pop('sourceName', None)
        legacy_snake = data.pop('source_name', None)
        legacy_name = legacy_camel or legacy_snake
        if not legacy_source and not legacy_name:
            return data

        raw_payment = data.get('payment')
        if isinstance(raw_payment, Payment):
            payment = raw_payment.model_dump(by_alias=True)
        elif isinstance(raw_payment, dict):
            payment = dict(raw_payment)
        else:
            payment = {}

        if not payment.get('source') and legacy_source:
            payment['source'] = legacy_source
        if not (payment.get('sourceName') or payment.get('source_name')) and legacy_name:
            payment.pop('source_name', None)
            payment['sourceName'] = legacy_name

        data['payment'] = payment
        return data


@dataclass(frozen=True)
class DocumentBlob:
    """Download-ready wrapper around generated PDF bytes."""

    content: bytes
    media_type: str = 'application/pdf'
    filename: str = 'guest_room_register_form.pdf'

    def __bytes__(self) -> bytes:
        return self.content

    def __len__(self) -> int:
        return len(self.content)
