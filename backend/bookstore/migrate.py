from __future__ import annotations
import hashlib
from pathlib import Path
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.engine import Connection

from bookstore.config import load_settings
from bookstore.db import make_engine

MIGRATIONS_DIR = Path(__file__).with_name("migrations")


def sha256(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def ensure_schema_table(conn: Connection):
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
          filename TEXT PRIMARY KEY,
          checksum TEXT NOT NULL,
          applied_at TIMESTAMP NOT NULL
        )
    """))


def already_applied(conn: Connection, filename: str) -> bool:
    return bool(conn.execute(
        text("SELECT 1 FROM schema_migrations WHERE filename = :f"),
        {"f": filename}
    ).scalar())


def record_applied(conn: Connection, filename: str, checksum: str):
    conn.execute(
        text("INSERT INTO schema_migrations (filename, checksum, applied_at) VALUES (:f, :c, :t)"),
        {"f": filename, "c": checksum, "t": datetime.utcnow()}
    )


def run(database_url: str | None = None, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending *.sql files in name order; returns the filenames applied."""
    url = database_url or load_settings().db_uri
    files = sorted(p for p in migrations_dir.glob("*.sql"))
    applied: list[str] = []
    if not files:
        print("No migrations found.")
        return applied

    engine = make_engine(url)
    try:
        with engine.begin() as conn:
            ensure_schema_table(conn)

            for f in files:
                filename = f.name
                sql = f.read_text()
                if already_applied(conn, filename):
                    print(f"Skip {filename} (already applied)")
                    continue

                conn.execute(text(sql))
                record_applied(conn, filename, sha256(sql))
                applied.append(filename)
                print(f"Applied {filename}")
    finally:
        engine.dispose()

    print("All migrations up to date.")
    return applied


if __name__ == "__main__":
    run()
