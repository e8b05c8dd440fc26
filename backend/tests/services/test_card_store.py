"""SQL Card Store — tests against an in-memory SQLite card store.

Tests cover:
    - Slug lookup only returns published cards
    - Domain lookup is case-insensitive
    - Card-by-id ignores status; malformed ids are "not found"
    - Endorsement count
    - SQLAlchemy failures surface as DatabaseError
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from cardpreview.core.errors import DatabaseError
from cardpreview.services.card_store import SqlCardStore


async def test_slug_lookup_returns_flat_record(test_db, seed_card):
    card = await seed_card("jane-doe", full_name="Jane Doe", title="CEO")
    record = await SqlCardStore(test_db).get_active_card_by_slug("jane-doe")
    assert record["id"] == card.id
    assert record["full_name"] == "Jane Doe"
    assert record["company"] is None


async def test_slug_lookup_skips_unpublished(test_db, seed_card):
    await seed_card("draft-card", status="draft", full_name="Draft")
    assert await SqlCardStore(test_db).get_active_card_by_slug("draft-card") is None


async def test_unknown_slug_is_none(test_db):
    assert await SqlCardStore(test_db).get_active_card_by_slug("nobody") is None


async def test_domain_lookup_is_case_insensitive(test_db, seed_card):
    card = await seed_card("jane-doe", domains=("jane.example.com",))
    store = SqlCardStore(test_db)
    assert await store.get_card_id_for_domain("Jane.Example.COM") == str(card.id)
    assert await store.get_card_id_for_domain("other.example.com") is None


async def test_card_by_id_ignores_status(test_db, seed_card):
    card = await seed_card("hidden", status="draft", full_name="Hidden")
    record = await SqlCardStore(test_db).get_card_by_id(str(card.id))
    assert record["full_name"] == "Hidden"


async def test_card_by_malformed_id_is_none(test_db):
    store = SqlCardStore(test_db)
    assert await store.get_card_by_id("not-a-uuid") is None
    assert await store.count_endorsements("not-a-uuid") == 0


async def test_count_endorsements(test_db, seed_card):
    card = await seed_card("maria-silva", endorsements=3)
    other = await seed_card("other", endorsements=1)
    store = SqlCardStore(test_db)
    assert await store.count_endorsements(str(card.id)) == 3
    assert await store.count_endorsements(str(other.id)) == 1
    assert await store.count_endorsements(str(uuid.uuid4())) == 0


async def test_query_failure_raises_database_error():
    db = AsyncMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))
    with pytest.raises(DatabaseError) as exc_info:
        await SqlCardStore(db).get_active_card_by_slug("jane-doe")
    assert exc_info.value.code == "RENDER_FAILURE"
    assert exc_info.value.context.identifier == "jane-doe"
