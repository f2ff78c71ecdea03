import sqlite3
from datetime import datetime, timezone


class ManifestStore:
    """
    Per-source-file history of split runs.

    File names still carry the chunk/backup markers; this table records
    what happened to each source so the history survives renames.
    """

    def __init__(self, db_path: str = "manifest.db"):
        self.db_path = db_path

    # ---------- DB INIT ----------
    def init_db(self) -> None:
        conn = sqlite3.connect(self.db_path)
        cur = conn.cursor()

        cur.execute("""
            CREATE TABLE IF NOT EXISTS split_manifest (
                source_file TEXT PRIMARY KEY,
                state TEXT NOT NULL,
                duration_seconds REAL,
                chunk_count INTEGER,
                backup_path TEXT,
                error TEXT,
                updated_at TEXT NOT NULL
            )
        """)

        conn.commit()
        conn.close()

    # ---------- WRITES ----------
    def record(
        self,
        source_file: str,
        state: str,
        duration_seconds: float | None = None,
        chunk_count: int | None = None,
        backup_path: str | None = None,
        error: str | None = None,
    ) -> None:
        conn = sqlite3.connect(self.db_path)
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO split_manifest
                (source_file, state, duration_seconds, chunk_count, backup_path, error, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(source_file) DO UPDATE SET
                state = excluded.state,
                duration_seconds = COALESCE(excluded.duration_seconds, split_manifest.duration_seconds),
                chunk_count = COALESCE(excluded.chunk_count, split_manifest.chunk_count),
                backup_path = COALESCE(excluded.backup_path, split_manifest.backup_path),
                error = excluded.error,
                updated_at = excluded.updated_at
            """,
            (
                source_file,
                state,
                duration_seconds,
                chunk_count,
                backup_path,
                error,
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        conn.commit()
        conn.close()

    # ---------- READS ----------
    def get(self, source_file: str) -> dict | None:
        rows = self._select("WHERE source_file = ?", (source_file,))
        return rows[0] if rows else None

    def list_entries(self) -> list[dict]:
        return self._select("ORDER BY updated_at DESC, source_file", ())

    def _select(self, clause: str, params: tuple) -> list[dict]:
        conn = sqlite3.connect(self.db_path)
        cur = conn.cursor()
        cur.execute(
            f"""
            SELECT source_file, state, duration_seconds, chunk_count, backup_path, error, updated_at
            FROM split_manifest
            {clause}
            """,
            params,
        )
        rows = cur.fetchall()
        conn.close()

        return [
            {
                "source_file": str(r[0]),
                "state": str(r[1]),
                "duration_seconds": None if r[2] is None else float(r[2]),
                "chunk_count": None if r[3] is None else int(r[3]),
                "backup_path": r[4],
                "error": r[5],
                "updated_at": str(r[6]),
            }
            for r in rows
        ]
