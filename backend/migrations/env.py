import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from tranquil.config import Settings
from tranquil.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_db_url() -> str:
    """
    ALEMBIC_DB_URL이 있으면 그대로 쓰고, 없으면 앱 설정의 URL을 씁니다.
    마이그레이션은 동기 드라이버로 실행하므로 async 드라이버 표기를 떼어냅니다.
    """
    url = os.getenv("ALEMBIC_DB_URL") or Settings.from_env().database_url
    return url.replace("+asyncpg", "").replace("+aiosqlite", "")


if context.is_offline_mode():
    context.configure(url=get_db_url(), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    connectable = engine_from_config(
        {"sqlalchemy.url": get_db_url()}, prefix="sqlalchemy.", poolclass=pool.NullPool
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
