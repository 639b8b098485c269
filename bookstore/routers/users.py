"""
Users Router (auth service)

Plain user management, called by the gateway's user administration
endpoints. Password hashes never leave the service.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select

from bookstore.dependencies import DbSession
from bookstore.models import User
from bookstore.schemas import UserCreate, UserResponse
from bookstore.services.credentials import SqlCredentialStore
from bookstore.services.security import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        404: {"description": "User not found"},
    },
)


def get_user_or_404(db: DbSession, user_id: int) -> User:
    """Get a user by ID or raise 404."""
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with id {user_id} not found",
        )
    return user


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
    description="List users, optionally only those holding a given role.",
)
def list_users(
    db: DbSession,
    role: str | None = Query(default=None, description="Only users with this role"),
    limit: int | None = Query(default=None, ge=1, description="Maximum number of users"),
    skip: int = Query(default=0, ge=0, description="Number of users to skip"),
) -> List[UserResponse]:
    stmt = select(User).order_by(User.id)
    if role:
        stmt = stmt.where(User.role == role)
    stmt = stmt.offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    users = db.execute(stmt).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user by ID",
)
def get_user(user_id: int, db: DbSession) -> UserResponse:
    return UserResponse.model_validate(get_user_or_404(db, user_id))


@router.post(
    "",
    response_model=UserResponse,
    summary="Create a user",
    description="Create a user with an explicit role. Does not sign the user in.",
)
def create_user(user_data: UserCreate, db: DbSession) -> UserResponse:
    """
    Create a user.

    Raises:
        409: Name already taken
    """
    existing = db.execute(
        select(User).where(User.name == user_data.name)
    ).scalar_one_or_none()
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        )

    # A concurrent insert of the same name surfaces as Conflict (409)
    user = SqlCredentialStore(db).create_user(
        name=user_data.name,
        email=str(user_data.email),
        password_hash=hash_password(user_data.password),
        role=user_data.role,
    )

    logger.info(f"Created user {user.id} with role {user.role}")
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    description="Delete a user together with their refresh tokens.",
)
def delete_user(user_id: int, db: DbSession) -> None:
    user = get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")
