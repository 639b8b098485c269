"""
Gateway Users Router

User administration proxied to the auth service.

- GET /users (ViewUser) and DELETE /users/{id} (DeleteUser) require a
  principal with the matching permission.
- POST /users and POST /admin create accounts with a forced role and are
  open, as they were before the gateway existed.
"""

import logging
from typing import Annotated, Any, List

from fastapi import APIRouter, Depends

from bookstore.dependencies import Clients, require_permissions
from bookstore.models.user import Role
from bookstore.schemas import MessageResponse, SignupRequest, UserResponse
from bookstore.services.downstream import DownstreamError, DownstreamResponseError
from bookstore.services.errors import InternalServerError, NotFound
from bookstore.services.permissions import PermissionKey
from bookstore.services.tokens import AccessClaims

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Gateway Users"],
    responses={
        401: {"description": "Missing or invalid credentials"},
        403: {"description": "Role lacks the required permission"},
    },
)


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List users",
)
async def list_users(
    clients: Clients,
    _: Annotated[AccessClaims, Depends(require_permissions(PermissionKey.VIEW_USER))],
) -> Any:
    """
    List every user.

    Raises:
        404: There are no users
    """
    try:
        users = await clients.auth.get("/users")
    except DownstreamError as e:
        logger.error(f"Error during list users: {e.detail}")
        if isinstance(e, DownstreamResponseError) and e.status_code == 404:
            raise NotFound("No users found.")
        raise InternalServerError(f"Failed to get all users: {e.detail}")

    if not users:
        raise NotFound("No users found.")
    return users


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user",
)
async def delete_user(
    user_id: int,
    clients: Clients,
    principal: Annotated[AccessClaims, Depends(require_permissions(PermissionKey.DELETE_USER))],
) -> MessageResponse:
    try:
        await clients.auth.delete(f"/users/{user_id}")
    except DownstreamError as e:
        if isinstance(e, DownstreamResponseError) and e.status_code == 404:
            raise NotFound(f"User with ID {user_id} not found.")
        raise InternalServerError(f"Failed to delete user with ID {user_id}: {e.detail}")

    logger.info(f"User {principal.user_id} deleted user {user_id}")
    return MessageResponse(message=f"User with id {user_id} has been deleted successfully.")


async def _create_with_role(clients: Clients, user_data: SignupRequest, role: Role) -> Any:
    payload = user_data.model_dump(mode="json")
    payload["role"] = role.value
    try:
        created = await clients.auth.post("/users", json=payload)
    except DownstreamError as e:
        logger.error(f"Error during create user: {e.detail}")
        raise InternalServerError("Failed to create user")

    if not created:
        raise InternalServerError("Failed to create user.")
    return created


@router.post(
    "/users",
    response_model=UserResponse,
    summary="Create a user",
    description="Create an account with the `user` role. A role in the body is ignored.",
)
async def create_user(user_data: SignupRequest, clients: Clients) -> Any:
    return await _create_with_role(clients, user_data, Role.USER)


@router.post(
    "/admin",
    response_model=UserResponse,
    summary="Create an admin",
    description="Create an account with the `admin` role. A role in the body is ignored.",
)
async def create_admin(user_data: SignupRequest, clients: Clients) -> Any:
    return await _create_with_role(clients, user_data, Role.ADMIN)
