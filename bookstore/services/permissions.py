"""
Permission Resolver

Maps a role to the set of permission keys it grants. Each gateway route
declares the keys it requires; a request passes only if the caller's role
grants all of them.

The table is built once by the gateway factory and handed to the
authorization dependency through app.state. Nothing looks it up globally.
"""

from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType


class PermissionKey(StrEnum):
    """Atomic capabilities, one per gated controller action."""

    VIEW_BOOK = "ViewBook"
    POST_BOOK = "PostBook"
    UPDATE_BOOK = "UpdateBook"
    DELETE_BOOK = "DeleteBook"
    VIEW_AUTHOR = "ViewAuthor"
    POST_AUTHOR = "PostAuthor"
    UPDATE_AUTHOR = "UpdateAuthor"
    DELETE_AUTHOR = "DeleteAuthor"
    VIEW_CATEGORY = "ViewCategory"
    POST_CATEGORY = "PostCategory"
    UPDATE_CATEGORY = "UpdateCategory"
    DELETE_CATEGORY = "DeleteCategory"
    VIEW_USER = "ViewUser"
    DELETE_USER = "DeleteUser"


DEFAULT_ROLE_PERMISSIONS: Mapping[str, frozenset[PermissionKey]] = MappingProxyType({
    "admin": frozenset(PermissionKey),
    "user": frozenset({
        PermissionKey.VIEW_BOOK,
        PermissionKey.VIEW_AUTHOR,
        PermissionKey.VIEW_CATEGORY,
    }),
})


class PermissionResolver:
    """
    Read-only role -> permissions lookup.

    An unknown role resolves to the empty set: the caller is authenticated
    but authorized for nothing.

    Example:
        >>> resolver = PermissionResolver(DEFAULT_ROLE_PERMISSIONS)
        >>> PermissionKey.VIEW_BOOK in resolver.resolve("user")
        True
        >>> resolver.resolve("guest")
        frozenset()
    """

    def __init__(self, table: Mapping[str, Iterable[PermissionKey]]) -> None:
        # Copy so later changes to the caller's mapping cannot leak in
        self._table: Mapping[str, frozenset[PermissionKey]] = MappingProxyType(
            {role: frozenset(keys) for role, keys in table.items()}
        )

    @property
    def roles(self) -> frozenset[str]:
        return frozenset(self._table)

    def resolve(self, role: str | None) -> frozenset[PermissionKey]:
        if role is None:
            return frozenset()
        return self._table.get(role, frozenset())
