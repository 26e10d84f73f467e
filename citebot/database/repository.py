"""Citation cache backed by SQLite."""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from citebot.models.paper import CitationCount, Paper

_COLUMNS = "url, title, citations, arxiv_abs_url, google_scholar_url, arxiv_summary, timestamp"

# Known counts first (highest first), unknown counts last
_ORDER_SQL = "ORDER BY CASE WHEN citations IS NULL THEN 1 ELSE 0 END, citations DESC, title ASC"


class CitationCache:
    """Resolved papers keyed by their source URL.

    A single connection is opened on construction and reused for every
    read and write.  Writes replace the whole row; nothing is merged.
    """

    def __init__(self, db_path: Union[str, Path]):
        """Open (and if needed create) the cache database.

        Args:
            db_path: Path to SQLite database file, or ``":memory:"``
        """
        self.db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        cursor = self._conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS paper_cache (
                url TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                citations INTEGER,
                arxiv_abs_url TEXT,
                google_scholar_url TEXT,
                arxiv_summary TEXT,
                timestamp TEXT NOT NULL
            );
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_citations ON paper_cache(citations);")
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "CitationCache":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get(self, url: str) -> Optional[Paper]:
        """Return the cached paper for *url*, or None if it was never stored."""
        cursor = self._conn.execute(
            f"SELECT {_COLUMNS} FROM paper_cache WHERE url = ?",
            (url,),
        )
        row = cursor.fetchone()
        return self._row_to_paper(row) if row is not None else None

    def put(self, paper: Paper) -> None:
        """Insert or replace the cache entry for ``paper.url``.

        An unknown citation count is stored as NULL, never as 0.
        """
        now = datetime.now(timezone.utc).isoformat(timespec="seconds")
        self._conn.execute(
            f"""
            INSERT OR REPLACE INTO paper_cache ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                paper.url,
                paper.title,
                paper.citations.value,
                paper.arxiv_abs_url,
                paper.scholar_url,
                paper.abstract,
                now,
            ),
        )
        self._conn.commit()
        paper.updated_at = now

    def count(self, query: str = "") -> int:
        """Number of cached papers, optionally filtered by *query*."""
        where_sql, params = self._search_clause(query)
        cursor = self._conn.execute(
            f"SELECT COUNT(*) AS cnt FROM paper_cache {where_sql}",
            params,
        )
        return cursor.fetchone()["cnt"]

    def find_page(self, query: str = "", limit: int = 25, offset: int = 0) -> list[Paper]:
        """One page of cached papers in report order.

        Args:
            query: Substring matched against title and abstract (case-insensitive)
            limit: Page size
            offset: Number of rows to skip

        Returns:
            List of Paper objects
        """
        where_sql, params = self._search_clause(query)
        cursor = self._conn.execute(
            f"""
            SELECT {_COLUMNS}
            FROM paper_cache
            {where_sql}
            {_ORDER_SQL}
            LIMIT ? OFFSET ?
            """,
            (*params, limit, offset),
        )
        return [self._row_to_paper(row) for row in cursor.fetchall()]

    def find_all(self) -> list[Paper]:
        """All cached papers in report order."""
        cursor = self._conn.execute(f"SELECT {_COLUMNS} FROM paper_cache {_ORDER_SQL}")
        return [self._row_to_paper(row) for row in cursor.fetchall()]

    @staticmethod
    def _search_clause(query: str) -> tuple[str, tuple[str, ...]]:
        query = query.strip()
        if not query:
            return "", ()
        pattern = f"%{query}%"
        return "WHERE title LIKE ? OR arxiv_summary LIKE ?", (pattern, pattern)

    @staticmethod
    def _row_to_paper(row: sqlite3.Row) -> Paper:
        citations = row["citations"]
        return Paper(
            title=row["title"],
            url=row["url"],
            arxiv_abs_url=row["arxiv_abs_url"],
            scholar_url=row["google_scholar_url"],
            abstract=row["arxiv_summary"],
            citations=CitationCount(citations) if citations is not None else CitationCount(),
            updated_at=row["timestamp"],
        )
