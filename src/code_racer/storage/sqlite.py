"""TrackStorage: persists generated tracks to SQLite.

Schema design notes:
  - ``track_json`` holds the full renderer contract from
    :meth:`Track.to_json`; the summary columns duplicate a few metadata
    fields so listings never have to parse JSON.
  - ``seed`` is nullable: tracks generated from OS entropy cannot be
    regenerated and are stored without one.
"""

from __future__ import annotations

import logging
import sqlite3

from code_racer.track.models import Track

_logger = logging.getLogger(__name__)

_DDL = """
PRAGMA journal_mode = WAL;
PRAGMA synchronous  = NORMAL;

CREATE TABLE IF NOT EXISTS tracks (
    id                  INTEGER PRIMARY KEY,
    repo                TEXT    NOT NULL DEFAULT '',
    seed                INTEGER,
    complexity          TEXT    NOT NULL,
    length              REAL    NOT NULL,
    turns               INTEGER NOT NULL,
    width               REAL    NOT NULL,
    approximately_closed INTEGER NOT NULL DEFAULT 0,
    created_at          TEXT    NOT NULL
                        DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    track_json          TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_tracks_repo
    ON tracks (repo);
"""

_INSERT_TRACK = """
INSERT INTO tracks
    (repo, seed, complexity, length, turns, width, approximately_closed, track_json)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

_SELECT_TRACK = "SELECT * FROM tracks WHERE id = ?"

_LIST_COLUMNS = """
SELECT id, repo, seed, complexity, length, turns, width,
       approximately_closed, created_at
FROM   tracks
"""


class TrackStorage:
    """Stores and retrieves generated tracks from a SQLite database.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Pass ``":memory:"`` for in-process testing.
    """

    def __init__(self, db_path: str = "tracks.db") -> None:
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        for stmt in _DDL.strip().split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def save_track(self, track: Track, repo: str = "", seed: int | None = None) -> int:
        """Persist *track* and return the new row id."""
        meta = track.metadata
        cursor = self._conn.execute(
            _INSERT_TRACK,
            (
                repo,
                seed,
                meta.complexity,
                meta.length,
                meta.turns,
                meta.width,
                int(meta.approximately_closed),
                track.to_json(),
            ),
        )
        self._conn.commit()
        _logger.info("Saved track %d (repo=%r, seed=%r)", cursor.lastrowid, repo, seed)
        return cursor.lastrowid  # type: ignore[return-value]

    def get_track(self, track_id: int) -> dict | None:
        """Return a single track row as a dict, or None if not found."""
        row = self._conn.execute(_SELECT_TRACK, (track_id,)).fetchone()
        return _row_to_dict(row) if row else None

    def list_tracks(self, repo: str = "") -> list[dict]:
        """Return track summaries, newest first; filter by *repo* when given.

        Rows do not include ``track_json``.
        """
        if repo:
            rows = self._conn.execute(
                _LIST_COLUMNS + " WHERE repo = ? ORDER BY created_at DESC, id DESC",
                (repo,),
            ).fetchall()
        else:
            rows = self._conn.execute(
                _LIST_COLUMNS + " ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def close(self) -> None:
        self._conn.close()


def _row_to_dict(row: sqlite3.Row) -> dict:
    d = dict(row)
    d["approximately_closed"] = bool(d["approximately_closed"])
    return d
