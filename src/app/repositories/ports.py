"""
Persistence port contracts consumed by the services.

The services only talk to these protocols; ``app.repositories`` ships the
SQLAlchemy implementations and tests may substitute their own.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from app.models import Menu, Role, UIElement, User
from app.utils.pagination import Page, PageRequest, SortSpec

# ---------------------------------------------------------------------------
# Display rows for join relations (pair of ids + the opposite side's labels)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MenuRoleView:
    menu_id: int
    role_id: int
    menu_title: str | None = None
    menu_key: str | None = None
    role_name: str | None = None


@dataclass(frozen=True)
class UserRoleView:
    user_id: int
    role_id: int
    user_name: str | None = None
    role_name: str | None = None


@dataclass(frozen=True)
class GrantView:
    element_id: int
    user_id: int
    element_key: str | None = None
    element_name: str | None = None
    user_name: str | None = None
    name: str | None = None
    email: str | None = None


# ---------------------------------------------------------------------------
# Entity ports
# ---------------------------------------------------------------------------


@runtime_checkable
class EntityPort(Protocol):
    def get_by_id(self, entity_id: int) -> Any | None: ...

    def get_all(self) -> list[Any]: ...

    def insert(self, entity: Any) -> int: ...

    def update(self, entity: Any) -> bool: ...

    def delete(self, entity_id: int) -> bool: ...

    def count(self) -> int: ...

    def get_page(self, request: PageRequest, sort: SortSpec | None = None) -> Page: ...


class MenuPort(EntityPort, Protocol):
    def get_by_key(self, menu_key: str) -> Menu | None: ...

    def get_all_for_tree(self) -> list[Menu]: ...

    def get_children_of(self, menu_id: int) -> list[Menu]: ...

    def has_children(self, menu_id: int) -> bool: ...


class RolePort(EntityPort, Protocol):
    def get_by_name(self, role_name: str) -> Role | None: ...


class UserPort(EntityPort, Protocol):
    def get_by_user_name(self, user_name: str) -> User | None: ...


class UIElementPort(EntityPort, Protocol):
    def get_by_key(self, element_key: str) -> UIElement | None: ...

    def get_by_type(self, element_type: str) -> list[UIElement]: ...

    def existing_ids(self, element_ids: Sequence[int]) -> set[int]: ...


# ---------------------------------------------------------------------------
# Join ports
# ---------------------------------------------------------------------------


@runtime_checkable
class MenuRolePort(Protocol):
    def exists(self, menu_id: int, role_id: int) -> bool: ...

    def insert(self, menu_id: int, role_id: int) -> None: ...

    def delete(self, menu_id: int, role_id: int) -> bool: ...

    def delete_all_for_menu(self, menu_id: int) -> int: ...

    def delete_all_for_role(self, role_id: int) -> int: ...

    def list_for_menu(self, menu_id: int) -> list[MenuRoleView]: ...

    def list_for_role(self, role_id: int) -> list[MenuRoleView]: ...

    def menus_for_role(self, role_id: int) -> list[Menu]: ...

    def roles_for_menu(self, menu_id: int) -> list[Role]: ...

    def menus_for_user(self, user_id: int) -> list[Menu]: ...

    def menus_for_role_page(self, role_id: int, request: PageRequest) -> Page[Menu]: ...

    def get_page(self, request: PageRequest) -> Page[MenuRoleView]: ...


@runtime_checkable
class UserRolePort(Protocol):
    def exists(self, user_id: int, role_id: int) -> bool: ...

    def insert(self, user_id: int, role_id: int) -> None: ...

    def delete(self, user_id: int, role_id: int) -> bool: ...

    def delete_all_for_user(self, user_id: int) -> int: ...

    def delete_all_for_role(self, role_id: int) -> int: ...

    def list_for_user(self, user_id: int) -> list[UserRoleView]: ...

    def list_for_role(self, role_id: int) -> list[UserRoleView]: ...

    def roles_for_user(self, user_id: int) -> list[Role]: ...

    def users_for_role(self, role_id: int) -> list[User]: ...

    def users_for_role_page(self, role_id: int, request: PageRequest) -> Page[User]: ...

    def get_page(
        self, request: PageRequest, user_id: int | None = None, role_id: int | None = None
    ) -> Page[UserRoleView]: ...


@runtime_checkable
class ElementPermissionPort(Protocol):
    def exists(self, element_id: int, user_id: int) -> bool: ...

    def get(self, element_id: int, user_id: int) -> GrantView | None: ...

    def insert(self, element_id: int, user_id: int) -> None: ...

    def delete(self, element_id: int, user_id: int) -> bool: ...

    def delete_all_for_user(self, user_id: int) -> int: ...

    def delete_all_for_element(self, element_id: int) -> int: ...

    def list_for_user(self, user_id: int) -> list[GrantView]: ...

    def list_for_element(self, element_id: int) -> list[GrantView]: ...

    def granted_element_ids(self, user_id: int) -> set[int]: ...


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@runtime_checkable
class TransactionScope(Protocol):
    def begin(self) -> Any: ...

    def commit(self, handle: Any) -> None: ...

    def rollback(self, handle: Any) -> None: ...

    def transaction(self) -> AbstractContextManager[Any]: ...


__all__ = [
    "ElementPermissionPort",
    "EntityPort",
    "GrantView",
    "MenuPort",
    "MenuRolePort",
    "MenuRoleView",
    "RolePort",
    "TransactionScope",
    "UIElementPort",
    "UserPort",
    "UserRolePort",
    "UserRoleView",
]
