from sqlalchemy import text

from app.db.migrations import CURRENT_DB_VERSION, REQUIRED_UNIQUE_INDEXES, run_migrations


async def test_first_run_records_version(session):
    result = await run_migrations(session)
    assert result["old_version"] is None
    assert result["new_version"] == CURRENT_DB_VERSION
    # 建表时已创建全部索引
    assert result["indexes_created"] == []

    again = await run_migrations(session)
    assert again["old_version"] == CURRENT_DB_VERSION


async def test_missing_index_is_recreated(session):
    await session.execute(text("DROP INDEX uq_products_sku"))
    await session.commit()

    result = await run_migrations(session)
    assert result["indexes_created"] == ["uq_products_sku"]

    names = {row[0] for row in (await session.execute(
        text("SELECT name FROM sqlite_master WHERE type='index'")
    )).all()}
    assert {index for index, _, _ in REQUIRED_UNIQUE_INDEXES} <= names
