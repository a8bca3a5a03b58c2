from __future__ import annotations

from dataclasses import dataclass

from guestform.render.layout import CLASS_MARKS, TIER_MARKS, PlacementDescriptor
from guestform.types import GUEST_PAYS_SOURCE, Payment


@dataclass(frozen=True)
class ClassRule:
    prefix: str
    room_class: str

    def matches(self, category: str) -> bool:
        return category.startswith(self.prefix)


# Evaluated in order; the first match wins. Prefixes are disjoint.
CLASS_RULES: tuple[ClassRule, ...] = (
    ClassRule(prefix='ES-', room_class='ES'),
    ClassRule(prefix='BR-', room_class='BR'),
)

TIER_CODES: tuple[str, ...] = tuple(TIER_MARKS)


@dataclass(frozen=True)
class CategorySelection:
    room_class: str | None = None
    tier: str | None = None


@dataclass(frozen=True)
class PaymentLine:
    label: str
    source: str | None
    source_name: str | None = None

    @property
    def paid_by_guest(self) -> bool:
        return self.label == 'YES'


def resolve_category(category: object) -> CategorySelection:
    token = category if isinstance(category, str) else str(category or '')
    room_class = next((rule.room_class for rule in CLASS_RULES if rule.matches(token)), None)
    tier = token if token in TIER_MARKS else None
    return CategorySelection(room_class=room_class, tier=tier)


def active_marks(selection: CategorySelection) -> list[tuple[str, PlacementDescriptor]]:
    marks: list[tuple[str, PlacementDescriptor]] = []
    if selection.room_class is not None:
        marks.append((f'class_mark:{selection.room_class}', CLASS_MARKS[selection.room_class]))
    if selection.tier is not None:
        marks.append((f'tier_mark:{selection.tier}', TIER_MARKS[selection.tier]))
    return marks


def resolve_payment(payment: Payment | None) -> PaymentLine:
    source = (payment.source if payment else None) or None
    source_name = (payment.source_name if payment else None) or None
    if source == GUEST_PAYS_SOURCE:
        return PaymentLine(label='YES', source=source)
    return PaymentLine(label='NO', source=source, source_name=source_name)
