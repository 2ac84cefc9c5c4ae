from sqlalchemy.exc import DBAPIError, OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork, DEFAULT_MAX_ATTEMPTS

# PostgreSQL serialization_failure / deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.session = session
        self.max_attempts = max_attempts

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    def is_contention(self, exc: BaseException) -> bool:
        if super().is_contention(exc):
            return True
        if isinstance(exc, OperationalError) and "database is locked" in str(exc):
            return True
        if isinstance(exc, DBAPIError):
            sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
            return sqlstate in RETRYABLE_SQLSTATES
        return False
