"""Test cases for the user resource manager"""
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from resource_api.core.errors import DataError, ResourceNotFound
from resource_api.core.management import Searchable
from resource_api.models.schemas import NewUser, QuerySearch
from resource_api.services.user_management import UserManagement


management = UserManagement()


def new_user(index: int = 0, **fields) -> NewUser:
    data = {
        "first_name": f"First{index}",
        "last_name": f"Last{index}",
        "email": f"user{index}@example.com",
    }
    data.update(fields)
    return NewUser(**data)


class RawSearch(Searchable):
    """Search passing values through without normalization"""

    def __init__(self, page=1, per_page=25):
        self.page = page
        self.per_page = per_page

    def get_id(self):
        return None

    def get_pattern(self):
        return None

    def get_date_range(self):
        return None

    def get_page(self):
        return self.page

    def get_per_page(self):
        return self.per_page


async def create(session, data):
    async with session.begin():
        return await management.create(data, session)


async def read(session, **criteria):
    async with session.begin():
        found = await management.read(QuerySearch(**criteria), session)
        return found.num_pages, list(found.results())


@pytest.mark.asyncio
async def test_create_returns_input_and_fresh_id(session):
    """Created users echo their fields and get distinct identifiers"""
    data = NewUser(first_name="Jules", last_name="RAKOTOBE", email="jules.rak@example.com")
    first = await create(session, data)
    second = await create(session, new_user(1))

    assert first.first_name == "Jules"
    assert first.last_name == "RAKOTOBE"
    assert first.email == "jules.rak@example.com"
    assert isinstance(first.id, uuid.UUID)
    assert first.id.int != 0
    assert first.id != second.id
    assert first.created_at is not None


@pytest.mark.asyncio
async def test_create_missing_fields_is_data_error(session):
    """Missing required fields are rejected by the store"""
    with pytest.raises(DataError):
        await create(session, SimpleNamespace(first_name="Jules"))


@pytest.mark.asyncio
async def test_create_duplicate_email_is_data_error(session):
    await create(session, new_user(1))
    with pytest.raises(DataError) as exc_info:
        await create(session, new_user(2, email="user1@example.com"))
    assert "UNIQUE" in exc_info.value.message


@pytest.mark.asyncio
async def test_read_empty_backend(session):
    num_pages, users = await read(session)
    assert num_pages == 0
    assert users == []


@pytest.mark.asyncio
async def test_create_then_read_by_id(session):
    created = await create(session, new_user(1))
    await create(session, new_user(2))

    num_pages, users = await read(session, id=str(created.id))

    assert num_pages == 1
    assert len(users) == 1
    assert users[0].id == created.id
    assert users[0].model_dump(include={"first_name", "last_name", "email"}) == \
        new_user(1).model_dump()


@pytest.mark.asyncio
async def test_read_unknown_id_is_empty(session):
    await create(session, new_user(1))
    num_pages, users = await read(session, id=str(uuid.uuid4()))
    assert num_pages == 0
    assert users == []


@pytest.mark.asyncio
@pytest.mark.parametrize("total, per_page, expected_pages", [(7, 3, 3), (6, 3, 2), (1, 25, 1)])
async def test_pagination_page_count(session, total, per_page, expected_pages):
    """Page count is the ceiling of total over page size"""
    for index in range(total):
        await create(session, new_user(index))

    num_pages, users = await read(session, per_page=per_page)
    assert num_pages == expected_pages
    assert len(users) == min(per_page, total)

    num_pages, users = await read(session, page=expected_pages, per_page=per_page)
    assert len(users) == total - (expected_pages - 1) * per_page

    num_pages, users = await read(session, page=expected_pages + 1, per_page=per_page)
    assert num_pages == expected_pages
    assert users == []


@pytest.mark.asyncio
async def test_pages_do_not_overlap(session):
    for index in range(5):
        await create(session, new_user(index))

    _, first_page = await read(session, page=1, per_page=2)
    _, second_page = await read(session, page=2, per_page=2)
    _, third_page = await read(session, page=3, per_page=2)

    ids = [user.id for user in first_page + second_page + third_page]
    assert len(ids) == 5
    assert len(set(ids)) == 5


@pytest.mark.asyncio
async def test_pattern_matches_any_field_exactly(session):
    await create(session, new_user(1, first_name="Jean", last_name="Luc"))
    await create(session, new_user(2, first_name="Luc", last_name="Joseph"))
    await create(session, new_user(3, email="luc@example.com"))

    _, users = await read(session, pattern="Luc")
    assert {user.email for user in users} == {"user1@example.com", "user2@example.com"}

    _, users = await read(session, pattern="luc@example.com")
    assert [user.email for user in users] == ["luc@example.com"]

    # Equality, not substring
    num_pages, users = await read(session, pattern="Lu")
    assert num_pages == 0
    assert users == []


@pytest.mark.asyncio
async def test_date_range_filters_on_timestamps(session):
    await create(session, new_user(1))
    now = datetime.now(timezone.utc)

    _, users = await read(
        session,
        start_date=now - timedelta(hours=1),
        end_date=now + timedelta(hours=1),
    )
    assert len(users) == 1

    _, users = await read(
        session,
        start_date=now - timedelta(days=2),
        end_date=now - timedelta(days=1),
    )
    assert users == []

    # A single bound is ignored
    _, users = await read(session, start_date=now + timedelta(days=1))
    assert len(users) == 1


@pytest.mark.asyncio
async def test_invalid_pagination_is_data_error(session):
    for page, per_page in [(0, 25), (1, 0), (-1, -1)]:
        with pytest.raises(DataError):
            async with session.begin():
                await management.read(RawSearch(page=page, per_page=per_page), session)


@pytest.mark.asyncio
async def test_results_are_single_pass(session):
    await create(session, new_user(1))
    async with session.begin():
        found = await management.read(QuerySearch(), session)
    assert len(list(found.results())) == 1
    assert list(found.results()) == []


@pytest.mark.asyncio
async def test_update_replaces_fields_and_keeps_id(session):
    created = await create(session, new_user(1))
    async with session.begin():
        updated = await management.update(
            str(created.id), new_user(9, first_name="Jane"), session
        )

    assert updated.id == created.id
    assert updated.first_name == "Jane"
    assert updated.last_name == "Last9"
    assert updated.email == "user9@example.com"

    _, users = await read(session, id=str(created.id))
    assert users[0].first_name == "Jane"


@pytest.mark.asyncio
async def test_update_to_taken_email_is_data_error(session):
    await create(session, new_user(1))
    second = await create(session, new_user(2))
    with pytest.raises(DataError):
        async with session.begin():
            await management.update(second.id, new_user(2, email="user1@example.com"), session)


@pytest.mark.asyncio
async def test_update_absent_id_is_not_found(session):
    with pytest.raises(ResourceNotFound):
        async with session.begin():
            await management.update(uuid.uuid4(), new_user(1), session)


@pytest.mark.asyncio
async def test_delete_then_delete_again(session):
    created = await create(session, new_user(1))

    async with session.begin():
        assert await management.delete(str(created.id), session) is None

    num_pages, users = await read(session)
    assert num_pages == 0

    with pytest.raises(ResourceNotFound):
        async with session.begin():
            await management.delete(str(created.id), session)


@pytest.mark.asyncio
@pytest.mark.parametrize("malformed", ["not-a-uuid", "1234", ""])
async def test_malformed_id_is_data_error(session, malformed):
    """Unparseable identifiers are client errors, not absences"""
    with pytest.raises(DataError):
        async with session.begin():
            await management.read(QuerySearch(id=malformed), session)
    with pytest.raises(DataError):
        async with session.begin():
            await management.update(malformed, new_user(1), session)
    with pytest.raises(DataError) as exc_info:
        async with session.begin():
            await management.delete(malformed, session)
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert "Malformed identifier" in exc_info.value.message


@pytest.mark.asyncio
async def test_seeded_user_is_searchable(seeded, session):
    num_pages, users = await read(session, pattern="Doe")
    assert num_pages == 1
    assert users[0].email == "johndoe@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("page, per_page, expected_count", [
    (10**19, None, 0),
    (2**62, 25, 0),
    (None, 10**19, 1),
    (10**19, 10**19, 0),
])
async def test_huge_pagination_values_never_reach_the_store(session, page, per_page, expected_count):
    """Pages past the end are empty and oversized pages hold everything"""
    await create(session, new_user(1))

    num_pages, users = await read(session, page=page, per_page=per_page)

    assert num_pages == 1
    assert len(users) == expected_count


@pytest.mark.asyncio
async def test_page_past_end_on_empty_backend(session):
    num_pages, users = await read(session, page=10**19, per_page=10**19)
    assert num_pages == 0
    assert users == []
