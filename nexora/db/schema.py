from sqlmodel import SQLModel
from nexora.db.connection import async_engine
from nexora.schema.seller import Seller  # noqa: F401  registers the table on SQLModel.metadata


async def create_tables(engine=async_engine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def drop_tables(engine=async_engine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
