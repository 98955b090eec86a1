from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

import contactbook.models
from contactbook.models import Base

MIGRATIONS = Path(contactbook.models.__file__).resolve().parents[1] / "migrations"


def _config(url):
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_creates_schema_matching_models(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"

    command.upgrade(_config(url), "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert {"contacts", "preferences", "notes"} <= set(inspector.get_table_names())
        for table in Base.metadata.sorted_tables:
            migrated = {c["name"] for c in inspector.get_columns(table.name)}
            assert migrated == set(table.columns.keys()), table.name
        uniques = {u["name"] for u in inspector.get_unique_constraints("contacts")}
        assert "uq_contacts_email" in uniques
    finally:
        engine.dispose()


def test_downgrade_removes_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = _config(url)

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
