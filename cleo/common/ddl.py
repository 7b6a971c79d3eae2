"""DDL helpers for the Cleo schema."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine

DDL_DIR = Path(__file__).resolve().parent.parent / "sql" / "ddl"

DDL_ORDER = [
    "instance_info.sql",
    "cleo_users.sql",
    "user_api_tokens.sql",
    "user_posts.sql",
    "extra_content_fields.sql",
    "user_files.sql",
    "user_keys.sql",
    "email_tokens.sql",
]

SCHEMA_TABLES = tuple(name.removesuffix(".sql") for name in DDL_ORDER)


def apply_schema_ddl(engine: Engine, ddl_dir: Path | None = None) -> None:
    """Apply schema DDL files in deterministic order. Each file holds one statement."""

    ddl_path = ddl_dir or DDL_DIR
    with engine.begin() as connection:
        for ddl_file in DDL_ORDER:
            sql_text = (ddl_path / ddl_file).read_text(encoding="utf-8")
            connection.exec_driver_sql(sql_text)
