"""
Menu tree management.

Menus are stored flat (``id`` + ``parent_id``); every hierarchical view is
rebuilt on demand from an id-indexed map instead of live object references.
Writes keep the parent graph acyclic: a new parent must exist, and reparenting
walks the new parent's ancestor chain before anything is written.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from app.config import Settings, get_settings
from app.errors import ConflictError, InvalidOperationError, NotFoundError
from app.models import Menu
from app.repositories.ports import MenuPort, MenuRolePort, TransactionScope
from app.schemas.menu_schemas import MenuCreate, MenuUpdate
from app.utils.helpers import utc_now
from app.utils.pagination import Page, PageRequest, SortSpec, paginate_sequence

logger = logging.getLogger(__name__)

# parent_id value that legacy rows use for "no parent"
ROOT_SENTINEL = 0
PATH_DELIMITER = "."


def is_root_parent(parent_id: int | None) -> bool:
    return parent_id is None or parent_id == ROOT_SENTINEL


@dataclass
class TreeNode:
    menu: Any
    children: list[TreeNode] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.menu.id


def build_tree(menus: Iterable[Any]) -> list[TreeNode]:
    """Attach every node to its parent and return the roots.

    Input order is kept among siblings. Children may appear before their
    parent. A node whose parent is not in the input is dropped: it is neither
    attached anywhere nor promoted to a root.
    """
    index: dict[int, TreeNode] = {}
    ordered: list[TreeNode] = []
    for menu in menus:
        node = TreeNode(menu)
        index[menu.id] = node
        ordered.append(node)

    roots: list[TreeNode] = []
    for node in ordered:
        parent_id = node.menu.parent_id
        if is_root_parent(parent_id):
            roots.append(node)
        elif parent_id != node.id and parent_id in index:
            index[parent_id].children.append(node)
    return roots


def would_create_cycle(
    menu_id: int,
    new_parent_id: int | None,
    parent_of: Callable[[int], int | None],
    limit: int,
) -> bool:
    """Walk up from ``new_parent_id`` and report whether ``menu_id`` (or any repeat) shows up.

    ``parent_of`` returns the parent id of a node, or ``None`` for roots and
    missing nodes. The walk takes at most ``limit`` steps; running past it means
    the stored chain is already corrupted and is reported as a cycle.
    """
    visited: set[int] = set()
    current = new_parent_id
    while not is_root_parent(current):
        if current == menu_id or current in visited:
            return True
        visited.add(current)
        if len(visited) > limit:
            return True
        current = parent_of(current)
    return False


@dataclass(frozen=True)
class HierarchicalMenu:
    menu: Any
    path_key: tuple[int, ...]
    depth: int

    @property
    def path(self) -> str:
        return PATH_DELIMITER.join(str(order) for order in self.path_key)


def materialize_paths(menus: Iterable[Any]) -> list[HierarchicalMenu]:
    """Compute the ancestor ``menu_order`` path (root first) for every menu.

    Menus whose chain hits a missing parent start their path at the topmost
    ancestor that exists; a corrupted loop stops at the first repeated id.
    """
    menus = list(menus)
    index = {menu.id: menu for menu in menus}
    result: list[HierarchicalMenu] = []
    for menu in menus:
        orders = [menu.menu_order or 0]
        seen = {menu.id}
        parent_id = menu.parent_id
        while not is_root_parent(parent_id) and parent_id in index and parent_id not in seen:
            seen.add(parent_id)
            parent = index[parent_id]
            orders.append(parent.menu_order or 0)
            parent_id = parent.parent_id
        orders.reverse()
        result.append(HierarchicalMenu(menu=menu, path_key=tuple(orders), depth=len(orders)))
    return result


_HIERARCHY_SEARCHABLE = {
    "menu_key": lambda item: item.menu.menu_key,
    "title": lambda item: item.menu.title,
}

_HIERARCHY_SORTABLE = {
    "id": lambda item: item.menu.id,
    "parent_id": lambda item: item.menu.parent_id,
    "menu_order": lambda item: item.menu.menu_order,
    "menu_key": lambda item: item.menu.menu_key,
    "title": lambda item: item.menu.title,
    "url": lambda item: item.menu.url,
    "levels": lambda item: item.menu.levels,
    "created_at": lambda item: item.menu.created_at,
    "updated_at": lambda item: item.menu.updated_at,
    "path": lambda item: item.path_key,
    "depth": lambda item: item.depth,
}


class MenuTreeService:
    def __init__(
        self,
        menus: MenuPort,
        menu_roles: MenuRolePort,
        tx: TransactionScope,
        settings: Settings | None = None,
    ):
        self.menus = menus
        self.menu_roles = menu_roles
        self.tx = tx
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_menu(self, data: MenuCreate) -> int:
        parent_id = None if is_root_parent(data.parent_id) else data.parent_id
        if parent_id is not None and self.menus.get_by_id(parent_id) is None:
            logger.warning("Rejecting menu %r: parent %s does not exist", data.menu_key, parent_id)
            raise NotFoundError("Menu", parent_id)
        if self.menus.get_by_key(data.menu_key) is not None:
            raise ConflictError(f"menu key {data.menu_key!r} already exists")

        now = utc_now()
        menu = Menu(
            parent_id=parent_id,
            menu_order=data.menu_order,
            menu_key=data.menu_key,
            title=data.title,
            url=data.url,
            levels=data.levels,
            use_new_icon=bool(data.use_new_icon),
            created_at=now,
            updated_at=now,
        )
        menu_id = self.menus.insert(menu)
        logger.info("Created menu %s (%s) under parent %s", menu_id, data.menu_key, parent_id)
        return menu_id

    def update_menu(self, menu_id: int, data: MenuUpdate) -> bool:
        menu = self.menus.get_by_id(menu_id)
        if menu is None:
            raise NotFoundError("Menu", menu_id)

        new_parent_id = None if is_root_parent(data.parent_id) else data.parent_id
        if new_parent_id != menu.parent_id and new_parent_id is not None:
            if self.menus.get_by_id(new_parent_id) is None:
                logger.warning("Rejecting update of menu %s: parent %s does not exist", menu_id, new_parent_id)
                raise NotFoundError("Menu", new_parent_id)
            if would_create_cycle(menu_id, new_parent_id, self._parent_of, limit=self.menus.count()):
                logger.warning("Rejecting update of menu %s: parent %s would create a cycle", menu_id, new_parent_id)
                raise InvalidOperationError(f"moving menu {menu_id} under {new_parent_id} would create a cycle")

        if data.menu_key != menu.menu_key:
            other = self.menus.get_by_key(data.menu_key)
            if other is not None and other.id != menu_id:
                raise ConflictError(f"menu key {data.menu_key!r} already exists")

        menu.parent_id = new_parent_id
        menu.menu_order = data.menu_order
        menu.menu_key = data.menu_key
        menu.title = data.title
        menu.url = data.url
        menu.levels = data.levels
        menu.use_new_icon = bool(data.use_new_icon)
        menu.updated_at = utc_now()
        updated = self.menus.update(menu)
        logger.info("Updated menu %s", menu_id)
        return updated

    def delete_menu(self, menu_id: int) -> bool:
        """Delete a menu, its whole subtree and every role link pointing at them."""
        if self.menus.get_by_id(menu_id) is None:
            logger.debug("Menu %s not found, nothing to delete", menu_id)
            return False

        with self.tx.transaction():
            deleted = self._delete_subtree(menu_id)
        logger.info("Deleted menu %s with %d descendant(s)", menu_id, deleted - 1)
        return True

    def _delete_subtree(self, root_id: int) -> int:
        # reversed pre-order visits every child before its parent
        order: list[int] = []
        seen: set[int] = set()
        stack = [root_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            order.append(current)
            stack.extend(child.id for child in self.menus.get_children_of(current))

        for current in reversed(order):
            self.menu_roles.delete_all_for_menu(current)
            if not self.menus.delete(current):
                logger.debug("Menu %s already gone during cascade delete", current)
        return len(order)

    def _parent_of(self, menu_id: int) -> int | None:
        menu = self.menus.get_by_id(menu_id)
        return None if menu is None else menu.parent_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_menu(self, menu_id: int) -> Menu:
        menu = self.menus.get_by_id(menu_id)
        if menu is None:
            raise NotFoundError("Menu", menu_id)
        return menu

    def get_all_menus(self) -> list[Menu]:
        return self.menus.get_all()

    def get_all_for_tree(self) -> list[Menu]:
        return self.menus.get_all_for_tree()

    def get_menu_tree(self) -> list[TreeNode]:
        return build_tree(self.menus.get_all_for_tree())

    def has_children(self, menu_id: int) -> bool:
        return self.menus.has_children(menu_id)

    def get_children(self, menu_id: int) -> list[Menu]:
        return self.menus.get_children_of(menu_id)

    def get_menus_page(self, request: PageRequest, sort: SortSpec | None = None) -> Page[Menu]:
        return self.menus.get_page(request.normalized(self.settings.max_page_size), sort)

    def get_hierarchical_page(
        self,
        page: int = 1,
        page_size: int | None = None,
        search_term: str | None = None,
        sort_column: str | None = None,
        ascending: bool = True,
    ) -> Page[HierarchicalMenu]:
        request = PageRequest(
            page=page,
            page_size=page_size or self.settings.default_page_size,
            search_term=search_term,
        ).normalized(self.settings.max_page_size)
        logger.debug("Hierarchical menu page %s", request)
        return paginate_sequence(
            materialize_paths(self.menus.get_all()),
            request,
            searchable=_HIERARCHY_SEARCHABLE,
            id_getter=lambda item: item.menu.id,
            sortable=_HIERARCHY_SORTABLE,
            sort=SortSpec(sort_column, ascending) if sort_column else None,
            default_sort=_HIERARCHY_SORTABLE["menu_order"],
        )

    def get_menus_for_user(self, user_id: int) -> list[Menu]:
        """Distinct menus reachable through any of the user's roles."""
        return self.menu_roles.menus_for_user(user_id)

    def get_menu_tree_for_user(self, user_id: int) -> list[TreeNode]:
        return build_tree(self.menu_roles.menus_for_user(user_id))
