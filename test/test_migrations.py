"""
Tests that the Alembic migrations build the same schema as the ORM models.
"""

import sqlite3
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def alembic_config(tmp_path: Path) -> tuple[Config, Path]:
    db_path = tmp_path / "migrations.db"
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    config.attributes["configure_logger"] = False
    return config, db_path


def _tables(db_path: Path) -> set[str]:
    with sqlite3.connect(db_path) as conn:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {name for (name,) in rows}


def test_upgrade_creates_tables(alembic_config: tuple[Config, Path]) -> None:
    config, db_path = alembic_config

    command.upgrade(config, "head")

    assert {"users", "orphanages", "images"} <= _tables(db_path)
    with sqlite3.connect(db_path) as conn:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(orphanages)")}
    assert {
        "name",
        "latitude",
        "longitude",
        "about",
        "instructions",
        "opening_hours",
        "open_on_weekends",
        "pending",
    } <= columns


def test_latitude_check_constraint(alembic_config: tuple[Config, Path]) -> None:
    config, db_path = alembic_config
    command.upgrade(config, "head")

    with sqlite3.connect(db_path) as conn, pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO orphanages (name, latitude, longitude, about, instructions, opening_hours) "
            "VALUES ('x', 95, 0, 'a', 'i', 'h')"
        )


def test_downgrade_drops_tables(alembic_config: tuple[Config, Path]) -> None:
    config, db_path = alembic_config
    command.upgrade(config, "head")

    command.downgrade(config, "base")

    assert not {"users", "orphanages", "images"} & _tables(db_path)
