"""User resource manager over an SQLAlchemy async session"""
import uuid
from typing import Any, Iterator, List, Optional, Protocol

from sqlalchemy import func, or_, select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from resource_api.core.errors import DataError, classify_errors
from resource_api.core.management import Manageable, Searchable, SearchResult, count_pages
from resource_api.db.models.user import User as UserModel
from resource_api.models.schemas import User
from resource_api.utils.logger import logger


class Userable(Protocol):
    """Anything carrying the mutable user fields"""
    first_name: str
    last_name: str
    email: str


class UserSearchResult(SearchResult[User]):
    """A page of users, iterable once"""

    def __init__(self, num_pages: int, users: List[User]):
        self._num_pages = num_pages
        self._users = iter(users)

    @property
    def num_pages(self) -> int:
        return self._num_pages

    def results(self) -> Iterator[User]:
        return self._users


def _parse_id(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError) as exc:
        raise DataError(f"Malformed identifier {value!r}: {exc}") from exc


def _assign(model: UserModel, data: Userable) -> None:
    # Absent fields reach the store as NULL and fail its NOT NULL constraints
    model.first_name = getattr(data, "first_name", None)
    model.last_name = getattr(data, "last_name", None)
    model.email = getattr(data, "email", None)


class UserManagement(Manageable[AsyncSession, Any, Userable, Searchable, UserSearchResult]):
    """
    CRUD for users.

    The manager never commits: it flushes inside whatever transaction the
    caller holds on ``backend``, so the caller decides the atomicity scope.
    Fetch-then-mutate in update/delete takes no row lock; concurrent updates
    of the same user may overwrite each other.
    """

    @classify_errors
    async def create(self, data: Userable, backend: AsyncSession) -> User:
        user = UserModel(id=uuid.uuid4())
        _assign(user, data)
        backend.add(user)
        await backend.flush()
        await backend.refresh(user)
        logger.info(f"User created: {user.id}")
        return User.model_validate(user)

    @classify_errors
    async def read(self, search: Searchable, backend: AsyncSession) -> UserSearchResult:
        page = search.get_page()
        per_page = search.get_per_page()
        if page < 1 or per_page < 1:
            raise DataError(f"Invalid pagination: page={page}, per_page={per_page}")

        query = select(UserModel)

        user_id = search.get_id()
        if user_id is not None:
            query = query.where(UserModel.id == _parse_id(user_id))

        pattern: Optional[str] = search.get_pattern()
        if pattern is not None:
            pattern = str(pattern)
            query = query.where(
                or_(
                    UserModel.first_name == pattern,
                    UserModel.last_name == pattern,
                    UserModel.email == pattern,
                )
            )

        date_range = search.get_date_range()
        if date_range is not None:
            start, end = date_range
            query = query.where(
                or_(
                    UserModel.created_at.between(start, end),
                    UserModel.updated_at.between(start, end),
                )
            )

        total = await backend.scalar(select(func.count()).select_from(query.subquery()))
        total = total or 0
        num_pages = count_pages(total, per_page)
        if page > num_pages:
            return UserSearchResult(num_pages=num_pages, users=[])

        # page <= num_pages keeps the offset below total
        rows = await backend.scalars(
            query.order_by(UserModel.created_at, UserModel.id)
            .limit(min(per_page, total))
            .offset((page - 1) * per_page)
        )
        users = [User.model_validate(row) for row in rows]
        logger.debug(f"User search: {len(users)} on page {page}/{num_pages}")
        return UserSearchResult(num_pages=num_pages, users=users)

    async def _get_or_404(self, id: Any, backend: AsyncSession) -> UserModel:
        user = await backend.get(UserModel, _parse_id(id))
        if user is None:
            raise NoResultFound(f"User {id} not found")
        return user

    @classify_errors
    async def update(self, id: Any, data: Userable, backend: AsyncSession) -> User:
        user = await self._get_or_404(id, backend)
        _assign(user, data)
        await backend.flush()
        await backend.refresh(user)
        logger.info(f"User updated: {user.id}")
        return User.model_validate(user)

    @classify_errors
    async def delete(self, id: Any, backend: AsyncSession) -> None:
        user = await self._get_or_404(id, backend)
        user_id = user.id
        await backend.delete(user)
        await backend.flush()
        logger.info(f"User deleted: {user_id}")
