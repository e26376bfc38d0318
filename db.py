import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple

import aiosqlite

from errors import ExerciseNotFoundError, ExerciseValidationError, StoreError
from exercise_schema import FIELDS, validate_exercise
from filters import compile_filter, parse_filter, parse_projection

logger = logging.getLogger(__name__)

SQLITE_INT_MIN = -2**63
SQLITE_INT_MAX = 2**63 - 1


class ExerciseDatabase:
    """Owns the long-lived aiosqlite connection to the exercise store.

    Create one instance during start-up, ``await connect()`` it (or use it
    as an async context manager) and hand it to the repositories that need
    it. All repositories built on the same instance share the connection.
    """

    _TABLE_DEFINITIONS = {
        "exercises": """CREATE TABLE IF NOT EXISTS exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL CHECK (length(name) > 0),
                    reps INTEGER NOT NULL,
                    weight REAL NOT NULL,
                    unit TEXT NOT NULL CHECK (length(unit) > 0),
                    date TEXT NOT NULL CHECK (length(date) > 0)
                );""",
    }

    def __init__(self, db_path: str = "exercises.db") -> None:
        self._db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def connected(self) -> bool:
        return self._conn is not None

    async def connect(self) -> "ExerciseDatabase":
        if self._conn is not None:
            return self
        try:
            conn = await aiosqlite.connect(self._db_path)
        except sqlite3.Error as e:
            logger.error("Could not open %s: %s", self._db_path, e)
            raise StoreError(f"could not connect to {self._db_path}: {e}") from e
        try:
            await self._ensure_schema(conn)
        except sqlite3.Error as e:
            await conn.close()
            logger.error("Could not prepare schema in %s: %s", self._db_path, e)
            raise StoreError(f"could not prepare schema: {e}") from e
        self._conn = conn
        logger.info("Successfully connected to exercise store at %s", self._db_path)
        return self

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()
        logger.info("Closed exercise store at %s", self._db_path)

    async def __aenter__(self) -> "ExerciseDatabase":
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        for sql in self._TABLE_DEFINITIONS.values():
            await conn.execute(sql)
        await conn.commit()

    @asynccontextmanager
    async def _connection(self):
        if self._conn is None:
            raise StoreError("exercise store is not connected")
        try:
            yield self._conn
        except sqlite3.IntegrityError as e:
            logger.error("Constraint violation: %s", e)
            raise ExerciseValidationError(str(e)) from e
        except OverflowError as e:
            logger.error("Value out of range: %s", e)
            raise ExerciseValidationError(str(e)) from e
        except sqlite3.Error as e:
            logger.error("Exercise store failure: %s", e)
            raise StoreError(str(e)) from e

    async def execute(self, query: str, params: Tuple = ()) -> Tuple[int, int]:
        """Run a write statement and return ``(lastrowid, rowcount)``."""
        async with self._connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            result = cursor.lastrowid, cursor.rowcount
            await cursor.close()
            return result

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            await cursor.close()
            return list(rows)


def _coerce_id(exercise_id) -> Optional[int]:
    """Return ``exercise_id`` as a rowid or ``None`` when it cannot be one."""
    if isinstance(exercise_id, bool):
        return None
    if isinstance(exercise_id, float) and not exercise_id.is_integer():
        return None
    try:
        rowid = int(exercise_id)
    except (TypeError, ValueError, OverflowError):
        return None
    if not SQLITE_INT_MIN <= rowid <= SQLITE_INT_MAX:
        return None
    return rowid


class AsyncExerciseRepository:
    """Asynchronous repository for exercise records."""

    def __init__(self, database: ExerciseDatabase) -> None:
        self.db = database

    async def create(self, name, reps, weight, unit, date) -> dict:
        record = validate_exercise(
            name=name, reps=reps, weight=weight, unit=unit, date=date
        )
        exercise_id, _ = await self.db.execute(
            "INSERT INTO exercises (name, reps, weight, unit, date) VALUES (?, ?, ?, ?, ?);",
            tuple(record[f] for f in FIELDS),
        )
        logger.debug("Created exercise %s (%s)", exercise_id, record["name"])
        return {"id": exercise_id, **record}

    async def find(
        self,
        filter: Optional[dict] = None,
        projection=None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        columns = parse_projection(projection)
        where, params = compile_filter(parse_filter(filter))
        query = f"SELECT {', '.join(columns)} FROM exercises{where} ORDER BY id"
        if limit is not None:
            if isinstance(limit, bool) or not isinstance(limit, int):
                raise ExerciseValidationError("limit must be an integer")
            if limit < 0:
                raise ExerciseValidationError("limit must not be negative")
            if limit:
                query += " LIMIT ?"
                params = params + (limit,)
        rows = await self.db.fetch_all(query + ";", params)
        return [dict(zip(columns, row)) for row in rows]

    async def find_by_id(self, exercise_id) -> dict:
        rowid = _coerce_id(exercise_id)
        if rowid is None:
            raise ExerciseNotFoundError(exercise_id)
        rows = await self.find({"id": rowid}, limit=1)
        if not rows:
            raise ExerciseNotFoundError(exercise_id)
        return rows[0]

    async def delete_by_id(self, exercise_id) -> int:
        rowid = _coerce_id(exercise_id)
        if rowid is None:
            return 0
        _, deleted = await self.db.execute(
            "DELETE FROM exercises WHERE id = ?;", (rowid,)
        )
        logger.debug("Deleted %d exercise(s) with id %s", deleted, rowid)
        return deleted

    async def replace(self, exercise_id, name, reps, weight, unit, date) -> int:
        """Overwrite every field of the exercise and return the matched count.

        Returns 0 when no exercise has ``exercise_id``; the id itself never
        changes.
        """
        record = validate_exercise(
            name=name, reps=reps, weight=weight, unit=unit, date=date
        )
        rowid = _coerce_id(exercise_id)
        if rowid is None:
            return 0
        _, matched = await self.db.execute(
            "UPDATE exercises SET name = ?, reps = ?, weight = ?, unit = ?, date = ? WHERE id = ?;",
            tuple(record[f] for f in FIELDS) + (rowid,),
        )
        logger.debug("Replaced %d exercise(s) with id %s", matched, rowid)
        return matched
