"""Alembic environment — runs migrations against the sync database URL."""

from alembic import context
from sqlalchemy import engine_from_config, pool

from briefrec.models.base import Base, sync_database_url
from briefrec.models.user import User  # noqa: F401
from briefrec.models.category import Category  # noqa: F401
from briefrec.models.brief import Brief, BriefSource  # noqa: F401
from briefrec.models.engagement import Review, BriefUpvote, SavedBrief, BriefView  # noqa: F401
from briefrec.models.recommendation_profile import RecommendationProfile  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", sync_database_url)
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(url=sync_database_url, target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
