"""Tests for the HuntItem record."""

import uuid
from datetime import datetime, timezone

from hunt.models import HuntItem


def test_defaults() -> None:
    item = HuntItem(title="City Hall", hint="Statue out front.")
    assert item.found is False
    assert item.photo_data is None
    assert item.found_at is None
    assert item.address is None
    assert isinstance(item.id, uuid.UUID)


def test_ids_are_unique_per_item() -> None:
    ids = {HuntItem(title="x", hint="y").id for _ in range(50)}
    assert len(ids) == 50


def test_equality_is_by_id() -> None:
    item_id = uuid.uuid4()
    a = HuntItem(id=item_id, title="A", hint="a")
    b = HuntItem(id=item_id, title="A", hint="a", found=True, address="1 Main St")
    c = HuntItem(title="A", hint="a")
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_copy_is_independent() -> None:
    item = HuntItem(title="Tech Hub", hint="2nd floor", photo_data=b"abc")
    clone = item.copy()
    clone.found = True
    clone.photo_data = None
    assert clone.id == item.id
    assert item.found is False
    assert item.photo_data == b"abc"


def test_clear_progress_keeps_identity() -> None:
    item = HuntItem(
        title="Art Gallery",
        hint="Red abstract piece",
        found=True,
        photo_data=b"img",
        found_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        address="5 Gallery Rd",
    )
    item_id = item.id
    item.clear_progress()
    assert (item.id, item.title, item.hint) == (item_id, "Art Gallery", "Red abstract piece")
    assert item.found is False
    assert item.photo_data is None and item.found_at is None and item.address is None
