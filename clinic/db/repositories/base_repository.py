# clinic/db/repositories/base_repository.py
"""
Generic data access over one mapped model.

Lookups that must succeed go through ``get_or_raise``, which turns an absent
row into ``NotFoundError`` so callers never test for None.
"""

from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import ColumnElement, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.base import ExecutableOption

from clinic.db.models import DbBaseModel
from clinic.domain.errors import NotFoundError

ModelT = TypeVar("ModelT", bound=DbBaseModel)


class Repository(Generic[ModelT]):
    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelT],
        entity_name: Optional[str] = None,
    ):
        self.db = db
        self.model = model
        self.entity_name = entity_name or model.__name__
        self._pk: InstrumentedAttribute[Any] = getattr(
            model, model.__mapper__.primary_key[0].key
        )

    def _token(self, operation: str) -> str:
        return f"{self.model.__name__}Repository.{operation}"

    async def find_one(
        self,
        *where: ColumnElement[bool],
        options: Sequence[ExecutableOption] = (),
        for_update: bool = False,
    ) -> Optional[ModelT]:
        query = (
            select(self.model)
            .where(*where)
            .options(*options)
            .execution_options(logging_token=self._token("find_one"))
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalars().first()

    async def get(
        self,
        entity_id: int,
        *where: ColumnElement[bool],
        options: Sequence[ExecutableOption] = (),
        for_update: bool = False,
    ) -> Optional[ModelT]:
        """Fetch by primary key; extra ``where`` clauses scope it to the caller."""
        return await self.find_one(
            self._pk == entity_id, *where, options=options, for_update=for_update
        )

    async def get_or_raise(
        self,
        entity_id: int,
        *where: ColumnElement[bool],
        options: Sequence[ExecutableOption] = (),
        for_update: bool = False,
    ) -> ModelT:
        entity = await self.get(
            entity_id, *where, options=options, for_update=for_update
        )
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    async def find_all(
        self,
        *where: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        options: Sequence[ExecutableOption] = (),
    ) -> list[ModelT]:
        query = (
            select(self.model)
            .where(*where)
            .options(*options)
            .order_by(*(order_by or (self._pk,)))
            .execution_options(logging_token=self._token("find_all"))
        )
        result = await self.db.execute(query)
        return list(result.scalars().unique().all())

    async def exists(self, *where: ColumnElement[bool]) -> bool:
        query = select(exists().where(*where)).execution_options(
            logging_token=self._token("exists")
        )
        result = await self.db.execute(query)
        return bool(result.scalar())

    async def add(self, entity: ModelT) -> ModelT:
        """Stage ``entity`` and flush so generated ids are available."""
        self.db.add(entity)
        await self.db.flush()
        return entity


__all__ = ["Repository"]
