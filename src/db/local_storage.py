# string-keyed persistent storage, the terminal counterpart of a browser's localStorage
from __future__ import annotations

from typing import Dict, Iterable, Optional

from db.database import connect


async def get_item(key: str) -> Optional[str]:
    """Return the stored value for key, or None."""
    async with connect() as conn:
        cur = await conn.execute(
            "SELECT value FROM local_storage WHERE key = ?;", (key,)
        )
        row = await cur.fetchone()
        await cur.close()
    return row[0] if row else None


async def get_items(keys: Iterable[str]) -> Dict[str, Optional[str]]:
    """Return {key: value or None} for each requested key, in one connection."""
    keys = list(keys)
    result: Dict[str, Optional[str]] = {k: None for k in keys}
    if not keys:
        return result
    placeholders = ", ".join("?" * len(keys))
    async with connect() as conn:
        cur = await conn.execute(
            f"SELECT key, value FROM local_storage WHERE key IN ({placeholders});",
            tuple(keys),
        )
        rows = await cur.fetchall()
        await cur.close()
    for row in rows:
        result[row[0]] = row[1]
    return result


async def set_items(items: Dict[str, str]) -> None:
    """Insert or replace several keys atomically."""
    async with connect() as conn:
        await conn.executemany(
            """
            INSERT INTO local_storage(key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value;
            """,
            list(items.items()),
        )
        await conn.commit()


async def set_item(key: str, value: str) -> None:
    await set_items({key: value})


async def remove_items(keys: Iterable[str]) -> None:
    """Delete the given keys; missing keys are ignored."""
    keys = list(keys)
    if not keys:
        return
    placeholders = ", ".join("?" * len(keys))
    async with connect() as conn:
        await conn.execute(
            f"DELETE FROM local_storage WHERE key IN ({placeholders});", tuple(keys)
        )
        await conn.commit()


async def remove_item(key: str) -> None:
    await remove_items([key])
