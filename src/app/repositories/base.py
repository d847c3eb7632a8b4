import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy.orm import Session

from app.repositories.transaction import commit_unless_scoped
from app.utils.pagination import Page, PageRequest, SortSpec, paginate_query

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class SqlAlchemyRepository(Generic[ModelT]):
    """CRUD + paged search for one mapped entity with an integer ``id``."""

    model: ClassVar[type]
    searchable: ClassVar[Mapping[str, Any]] = {}
    sortable: ClassVar[Mapping[str, Any]] = {}
    default_order: ClassVar[Sequence[Any]] = ()

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, entity_id: int) -> ModelT | None:
        return self.session.get(self.model, entity_id)

    def get_all(self) -> list[ModelT]:
        return self.session.query(self.model).order_by(*self.default_order, self.model.id).all()

    def insert(self, entity: ModelT) -> int:
        self.session.add(entity)
        self.session.flush()
        entity_id = entity.id
        commit_unless_scoped(self.session)
        logger.debug("INSERT %s id=%s", self.model.__tablename__, entity_id)
        return entity_id

    def update(self, entity: ModelT) -> bool:
        if entity not in self.session:
            entity = self.session.merge(entity)
        self.session.flush()
        commit_unless_scoped(self.session)
        logger.debug("UPDATE %s id=%s", self.model.__tablename__, entity.id)
        return True

    def delete(self, entity_id: int) -> bool:
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self.session.flush()
        commit_unless_scoped(self.session)
        logger.debug("DELETE %s id=%s", self.model.__tablename__, entity_id)
        return True

    def count(self) -> int:
        return self.session.query(self.model).count()

    def get_page(self, request: PageRequest, sort: SortSpec | None = None) -> Page[ModelT]:
        return paginate_query(
            self.session.query(self.model),
            request,
            searchable=self.searchable,
            id_column=self.model.id,
            sortable=self.sortable,
            sort=sort,
            default_order=self.default_order,
        )
