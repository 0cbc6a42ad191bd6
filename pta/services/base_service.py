# pta/services/base_service.py
import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence, Type, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pta.core.context import RequestContext
from pta.core.errors import (
    BaseAPIError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from pta.core.logging import logger
from pta.core.permissions import Entity, require_same_school, require_visibility, require_write
from pta.services.scoping import scope_statement

# Raised when the database cannot be reached at all. Drivers such as asyncpg
# let socket failures through unwrapped on connect.
STORE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, OSError, asyncio.TimeoutError)


def validation_fields(error: PydanticValidationError) -> List[str]:
    fields = []
    for err in error.errors():
        name = ".".join(str(part) for part in err.get("loc", ())) or "body"
        if name not in fields:
            fields.append(name)
    return fields


class BaseService:
    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def transaction(self):
        """Commit on success; roll back and translate database failures otherwise"""
        try:
            yield
            await self.db.commit()
        except BaseAPIError:
            await self.db.rollback()
            raise
        except STORE_UNAVAILABLE_ERRORS as e:
            await self.db.rollback()
            logger.error(f"Database unavailable during write: {type(e).__name__}", exc_info=True)
            raise StoreUnavailableError() from e
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Integrity error during write: {e.orig}")
            raise ConflictError("The change conflicts with existing records") from e
        except DBAPIError as e:
            await self.db.rollback()
            if e.connection_invalidated:
                raise StoreUnavailableError() from e
            logger.error(f"Database error during write: {type(e).__name__}", exc_info=True)
            raise ConflictError() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error during write: {type(e).__name__}", exc_info=True)
            raise ConflictError() from e
        except Exception:
            await self.db.rollback()
            raise

    async def fetch_all(self, stmt) -> list:
        try:
            result = await self.db.execute(stmt)
        except STORE_UNAVAILABLE_ERRORS as e:
            logger.error(f"Database unavailable during read: {type(e).__name__}")
            raise StoreUnavailableError() from e
        return list(result.scalars().unique().all())

    async def fetch_one(self, stmt):
        rows = await self.fetch_all(stmt)
        return rows[0] if rows else None

    async def fetch_rows(self, stmt) -> list:
        """Rows of a multi-column select (aggregates, groupings)"""
        try:
            result = await self.db.execute(stmt)
        except STORE_UNAVAILABLE_ERRORS as e:
            logger.error(f"Database unavailable during read: {type(e).__name__}")
            raise StoreUnavailableError() from e
        return list(result.all())

    @staticmethod
    def validate(schema: Type[BaseModel], data: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
        """Coerce ``data`` into ``schema``; field errors become ValidationError"""
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError("Invalid request data", fields=validation_fields(e)) from e


class CRUDService(BaseService):
    """
    Generic list/get/create/update/delete over one model.

    Every public method takes the caller's ``RequestContext`` first and
    narrows reads to what the caller's role may see. Rows outside that
    scope are indistinguishable from rows that do not exist.
    """
    model = None
    entity: Entity = None
    create_schema: Type[BaseModel] = None
    update_schema: Type[BaseModel] = None
    filter_fields: Sequence[str] = ()
    label = "Resource"

    def list_options(self) -> Sequence:
        return ()

    def detail_options(self) -> Sequence:
        return self.list_options()

    def ordering(self) -> Sequence:
        return (self.model.name, self.model.id)

    def apply_filters(self, stmt, filters: Dict[str, Any]):
        for key, value in filters.items():
            if value is None:
                continue
            if key not in self.filter_fields:
                raise ValidationError(f"Unsupported filter: {key}", fields=[key])
            stmt = stmt.where(getattr(self.model, key) == value)
        return stmt

    def scoped_select(self, context: RequestContext, options: Sequence = ()):
        visibility = require_visibility(context, self.entity)
        stmt = select(self.model).options(*options)
        return scope_statement(stmt, self.entity, visibility, context)

    async def get_all(self, context: RequestContext, **filters) -> list:
        stmt = self.scoped_select(context, self.list_options())
        stmt = self.apply_filters(stmt, filters)
        stmt = stmt.order_by(*self.ordering())
        return await self.fetch_all(stmt)

    async def get_by_id(self, context: RequestContext, id: Any):
        stmt = (
            self.scoped_select(context, self.detail_options())
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        obj = await self.fetch_one(stmt)
        if obj is None:
            raise NotFoundError(f"{self.label} with ID {id} not found")
        return obj

    async def reload(self, id: Any):
        """Unscoped re-read of a row this service just wrote, with its relations"""
        stmt = (
            select(self.model)
            .options(*self.detail_options())
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        obj = await self.fetch_one(stmt)
        if obj is None:
            raise NotFoundError(f"{self.label} with ID {id} not found")
        return obj

    async def prepare_create(self, context: RequestContext, payload: BaseModel) -> Dict[str, Any]:
        return payload.model_dump()

    async def prepare_update(self, context: RequestContext, obj, changes: Dict[str, Any]) -> Dict[str, Any]:
        return changes

    async def create(self, context: RequestContext, data):
        require_write(context, self.entity)
        payload = self.validate(self.create_schema, data)
        values = await self.prepare_create(context, payload)

        async with self.transaction():
            obj = self.model(**values)
            self.db.add(obj)
            await self.db.flush()
            new_id = obj.id

        logger.info(f"{self.label} {new_id} created by {context.user_id}")
        return await self.reload(new_id)

    async def update(self, context: RequestContext, id: Any, data):
        require_write(context, self.entity)
        payload = self.validate(self.update_schema, data)
        obj = await self.get_by_id(context, id)
        changes = await self.prepare_update(context, obj, payload.model_dump(exclude_unset=True))

        async with self.transaction():
            for key, value in changes.items():
                setattr(obj, key, value)

        logger.info(f"{self.label} {id} updated by {context.user_id}: {sorted(changes)}")
        return await self.reload(obj.id)

    async def delete(self, context: RequestContext, id: Any) -> None:
        require_write(context, self.entity)
        stmt = self.scoped_select(context).where(self.model.id == id)
        obj = await self.fetch_one(stmt)
        if obj is None:
            raise NotFoundError(f"{self.label} with ID {id} not found")

        async with self.transaction():
            await self.db.delete(obj)

        logger.info(f"{self.label} {id} deleted by {context.user_id}")

    @staticmethod
    def school_for_write(context: RequestContext, school_id: Optional[int]) -> int:
        """Default a payload's school to the caller's and refuse any other"""
        school_id = context.school_id if school_id is None else school_id
        require_same_school(context, school_id)
        return school_id
