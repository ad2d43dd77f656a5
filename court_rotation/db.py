"""
SQLite roster storage (aiosqlite).

The roster is saved and loaded as a whole, as the persisted record field set
produced by ``Player.to_record()``.
"""

import json
from datetime import datetime, timezone
from typing import Any, Iterable

import aiosqlite

from .logging_config import get_logger

log = get_logger(__name__)

# Global variable for database path (will be set by init_db)
DB_PATH = "court_rotation.sqlite"


# Helper to check if a table exists
async def table_exists(table: str, db_path: str = DB_PATH) -> bool:
    async with aiosqlite.connect(db_path) as db:
        async with db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table,)
        ) as cursor:
            row = await cursor.fetchone()
            return row is not None


# Helper to check if a table has a column
async def table_has_column(table: str, column: str, db_path: str = DB_PATH) -> bool:
    if not await table_exists(table, db_path):
        return False
    async with aiosqlite.connect(db_path) as db:
        async with db.execute(f"PRAGMA table_info({table})") as cursor:
            async for row in cursor:
                if row[1] == column:
                    return True
    return False


async def init_db(db_path: str = DB_PATH) -> None:
    """Initialize the database with the players table and any missing columns."""
    global DB_PATH
    DB_PATH = db_path

    async with aiosqlite.connect(DB_PATH) as db:
        # NUMERIC keeps whole ratings as integers and overrides like 1512.5 as reals
        await db.execute("""
            CREATE TABLE IF NOT EXISTS players (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                ranking INTEGER NOT NULL,
                rating NUMERIC NOT NULL DEFAULT 1500,
                updated_at TEXT NOT NULL
            )
        """)
        await db.commit()

    # Counters were added after the first schema; bring older files up to date
    columns = {
        "waiting_time": "INTEGER NOT NULL DEFAULT 0",
        "games_played": "INTEGER NOT NULL DEFAULT 0",
        "partners": "TEXT NOT NULL DEFAULT '[]'",
    }
    for column, ddl in columns.items():
        if not await table_has_column("players", column, DB_PATH):
            async with aiosqlite.connect(DB_PATH) as db:
                await db.execute(f"ALTER TABLE players ADD COLUMN {column} {ddl}")
                await db.commit()
            log.debug("Added players.%s column", column)
    log.debug("Database ready at %s", DB_PATH)


async def save_players(records: Iterable[dict[str, Any]]) -> None:
    """Replace the stored roster with ``records`` in one transaction."""
    now = datetime.now(timezone.utc).isoformat()
    rows = [
        (
            r["id"],
            r["name"],
            r["ranking"],
            r["rating"],
            r["waitingTime"],
            r["gamesPlayed"],
            json.dumps(r["partners"]),
            now,
        )
        for r in records
    ]
    async with aiosqlite.connect(DB_PATH) as db:
        await db.execute("DELETE FROM players")
        await db.executemany(
            """
            INSERT INTO players (id, name, ranking, rating, waiting_time, games_played, partners, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            rows,
        )
        await db.commit()
    log.debug("Saved %s players to %s", len(rows), DB_PATH)


async def load_players() -> list[dict[str, Any]]:
    """Return the stored roster as persisted records, ordered by id."""
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            """
            SELECT id, name, ranking, rating, waiting_time, games_played, partners
            FROM players ORDER BY id
            """
        ) as cursor:
            rows = await cursor.fetchall()
    out = [
        {
            "id": row["id"],
            "name": row["name"],
            "ranking": row["ranking"],
            "rating": row["rating"],
            "waitingTime": row["waiting_time"],
            "gamesPlayed": row["games_played"],
            "partners": json.loads(row["partners"] or "[]"),
        }
        for row in rows
    ]
    log.debug("Loaded %s players from %s", len(out), DB_PATH)
    return out
