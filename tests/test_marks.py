import pytest

from guestform.render.layout import CLASS_MARKS, TIER_MARKS
from guestform.render.marks import (
    CategorySelection,
    TIER_CODES,
    active_marks,
    resolve_category,
    resolve_payment,
)
from guestform.types import Payment


@pytest.mark.parametrize('code', TIER_CODES)
def test_each_tier_code_activates_exactly_its_own_mark(code):
    marks = active_marks(resolve_category(code))
    tier_marks = [descriptor for name, descriptor in marks if name.startswith('tier_mark:')]
    assert tier_marks == [TIER_MARKS[code]]


def test_tier_positions_are_unique():
    positions = {(d.page_index, d.x, d.y) for d in TIER_MARKS.values()}
    assert len(positions) == len(TIER_MARKS) == 5


@pytest.mark.parametrize('category', ['ES-C', 'BR-B3', 'es-a', 'ES-A ', '', None, 'SUITE', 42])
def test_other_categories_activate_no_tier_mark(category):
    assert resolve_category(category).tier is None


@pytest.mark.parametrize(
    'category, room_class',
    [('ES-A', 'ES'), ('ES-B', 'ES'), ('ES-anything', 'ES'), ('BR-A', 'BR'), ('BR-B2', 'BR'), ('BR-X', 'BR')],
)
def test_class_prefix_selects_one_class_mark(category, room_class):
    marks = dict(active_marks(resolve_category(category)))
    other = 'BR' if room_class == 'ES' else 'ES'
    assert marks[f'class_mark:{room_class}'] == CLASS_MARKS[room_class]
    assert f'class_mark:{other}' not in marks


@pytest.mark.parametrize('category', ['EX-A', 'ES', 'BRA', '', None])
def test_no_prefix_no_class_mark(category):
    selection = resolve_category(category)
    assert selection == CategorySelection(room_class=None, tier=None)
    assert active_marks(selection) == []


def test_payment_label_yes_only_for_guest():
    assert resolve_payment(Payment(source='GUEST')).label == 'YES'
    assert resolve_payment(Payment(source='OFFICE')).label == 'NO'
    assert resolve_payment(Payment(source='guest')).label == 'NO'
    assert resolve_payment(Payment()).label == 'NO'
    assert resolve_payment(None).label == 'NO'


def test_source_name_only_when_not_guest():
    line = resolve_payment(Payment(source='OFFICE', source_name='Acme Corp'))
    assert line.label == 'NO'
    assert line.source_name == 'Acme Corp'

    guest = resolve_payment(Payment(source='GUEST', source_name='Acme Corp'))
    assert guest.paid_by_guest
    assert guest.source_name is None

    no_name = resolve_payment(Payment(source='PROJECT', source_name=''))
    assert no_name.source_name is None
