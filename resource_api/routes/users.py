"""User CRUD endpoints"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from resource_api.core.management import Manageable
from resource_api.core.security import verify_bearer_token
from resource_api.db.session import get_session
from resource_api.models.schemas import ErrorResponse, NewUser, QuerySearch, User, UserSearchPage
from resource_api.services.user_management import UserManagement
from resource_api.utils.logger import logger

router = APIRouter(
    prefix="/user",
    tags=["Users"],
    dependencies=[Depends(verify_bearer_token)],
    responses={
        400: {"model": ErrorResponse, "description": "Data sent not correct"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        403: {"model": ErrorResponse, "description": "Token does not identify a subject"},
        500: {"model": ErrorResponse, "description": "Unexpected backend failure"},
    },
)


def get_user_management() -> Manageable:
    """Manager serving the user resource"""
    return UserManagement()


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    summary="Create User"
)
async def create_user(
    user: NewUser,
    management: Manageable = Depends(get_user_management),
    session: AsyncSession = Depends(get_session)
):
    """
    Create a user. The identifier is assigned by the server.

    **Returns:** the stored user, including its `id`.
    """
    async with session.begin():
        created = await management.create(user, session)
    return created


@router.get(
    "",
    response_model=UserSearchPage,
    summary="List Users"
)
async def read_users(
    search: QuerySearch = Depends(),
    management: Manageable = Depends(get_user_management),
    session: AsyncSession = Depends(get_session)
):
    """
    List users matching the query.

    **Filters:**
    - `id`: exact identifier
    - `pattern`: exact first name, last name or email
    - `start_date` / `end_date`: inclusive range on creation or update time, both required
    - `page` (default 1) and `per_page` (default 25)
    """
    async with session.begin():
        found = await management.read(search, session)
        page = UserSearchPage(num_pages=found.num_pages, result=list(found.results()))
    logger.info(f"Listed {len(page.result)} users (page {search.get_page()} of {page.num_pages})")
    return page


@router.put(
    "/{user_id}",
    response_model=User,
    summary="Update User",
    responses={404: {"model": ErrorResponse, "description": "User not found"}}
)
async def update_user(
    user_id: str,
    user: NewUser,
    management: Manageable = Depends(get_user_management),
    session: AsyncSession = Depends(get_session)
):
    """Replace first name, last name and email of a user."""
    async with session.begin():
        updated = await management.update(user_id, user, session)
    return updated


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    responses={404: {"model": ErrorResponse, "description": "User not found"}}
)
async def delete_user(
    user_id: str,
    management: Manageable = Depends(get_user_management),
    session: AsyncSession = Depends(get_session)
):
    """Delete a user permanently."""
    async with session.begin():
        await management.delete(user_id, session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
