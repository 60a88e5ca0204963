"""
Index storage backends over SQLAlchemy Core.

Three tables, all keyed by a 16-byte binary content id:
- search_index (content_id, token): one row per phonetic token, indexed on token
- direct_link (content_id, direct_link, title, description): display data
- read_roles (content_id, role_id): authorized roles, indexed on role_id

Every value is a bound parameter; table names are reduced to [A-Za-z0-9_].
"""

import logging
import re
import threading
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import (
    BigInteger,
    Column,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    Text,
    and_,
    case,
    delete,
    func,
    or_,
    select,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from phonetic.tokens import SearchTerm

from .content_ids import content_id_hex
from .errors import StorageUnavailable

logger = logging.getLogger(__name__)

SEARCH_TABLE = "search_index"
DIRECT_LINK_TABLE = "direct_link"
READ_ROLES_TABLE = "read_roles"

# Deletion targets, in the order maintenance runs them
TARGETS = ("search_index", "direct_link", "read_roles")

_IDENT = re.compile(r"[^a-zA-Z0-9_]")

_ContentId = LargeBinary(16).with_variant(mysql.BINARY(16), "mysql", "mariadb")


def clean_identifier(name: Optional[str], default: str) -> str:
    """Table name restricted to letters, digits and underscore."""
    clean = _IDENT.sub("", name or "")
    return clean or default


class IndexBackend:
    """Abstract storage capability for the phonetic search index."""

    def connect(self) -> None:
        """Ensure the database is reachable and tables exist; raise StorageUnavailable otherwise."""
        raise NotImplementedError

    def ensure_tables(self) -> None:
        raise NotImplementedError

    def insert_tokens(self, content_id: bytes, tokens: Iterable[int]) -> int:
        """Insert (content_id, token) pairs; existing pairs are ignored."""
        raise NotImplementedError

    def upsert_direct_link(self, content_id: bytes, link: str, title: str = "", description: str = "") -> None:
        raise NotImplementedError

    def replace_read_roles(self, content_id: bytes, role_ids: Sequence[int]) -> None:
        """Delete all roles of content_id, then insert role_ids."""
        raise NotImplementedError

    def find_matches(self, terms: Sequence[SearchTerm], limit: int) -> List[Dict[str, str]]:
        """Content rows matching every term, ordered by title."""
        raise NotImplementedError

    def delete_rows(self, target: str, content_id: bytes) -> int:
        """Delete rows of one target table for content_id; return rowcount."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources."""
        pass


class SqlIndexBackend(IndexBackend):
    """
    SQL-backed index via a SQLAlchemy engine (SQLite, PostgreSQL, MySQL/MariaDB).
    Matching runs in the database: token % 10**len = term token, grouped per content id.
    """

    def __init__(
        self,
        engine: Engine,
        search_table: str = SEARCH_TABLE,
        direct_link_table: str = DIRECT_LINK_TABLE,
        read_roles_table: str = READ_ROLES_TABLE,
    ) -> None:
        self._engine = engine
        self._metadata = MetaData()
        self._tables_ready = False
        self._lock = threading.Lock()

        self.search = Table(
            clean_identifier(search_table, SEARCH_TABLE),
            self._metadata,
            Column("content_id", _ContentId, primary_key=True),
            Column("token", BigInteger, primary_key=True, autoincrement=False),
        )
        Index(f"idx_{self.search.name}_token", self.search.c.token)

        self.links = Table(
            clean_identifier(direct_link_table, DIRECT_LINK_TABLE),
            self._metadata,
            Column("content_id", _ContentId, primary_key=True),
            Column("direct_link", String(512), nullable=False),
            Column("title", String(512), nullable=False, default=""),
            Column("description", Text, nullable=False, default=""),
        )

        self.roles = Table(
            clean_identifier(read_roles_table, READ_ROLES_TABLE),
            self._metadata,
            Column("content_id", _ContentId, primary_key=True),
            Column("role_id", Integer, primary_key=True, autoincrement=False),
        )
        Index(f"idx_{self.roles.name}_role", self.roles.c.role_id)

        self._targets = {"search_index": self.search, "direct_link": self.links, "read_roles": self.roles}

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    # ---- lifecycle ----

    def connect(self) -> None:
        try:
            with self._engine.connect():
                pass
            self.ensure_tables()
        except SQLAlchemyError as e:
            raise StorageUnavailable(f"Database unavailable: {e}") from e

    def ensure_tables(self) -> None:
        if self._tables_ready:
            return
        with self._lock:
            if self._tables_ready:
                return
            self._metadata.create_all(self._engine)
            self._tables_ready = True
        logger.info(
            "Index tables ready: %s, %s, %s", self.search.name, self.links.name, self.roles.name
        )

    def close(self) -> None:
        self._engine.dispose()

    # ---- writes ----

    def _insert_ignore(self, table: Table):
        if self.dialect == "sqlite":
            return sqlite_insert(table).on_conflict_do_nothing()
        if self.dialect == "postgresql":
            return pg_insert(table).on_conflict_do_nothing()
        if self.dialect in ("mysql", "mariadb"):
            return table.insert().prefix_with("IGNORE")
        return None

    def _insert_missing(self, conn, table: Table, column: str, content_id: bytes, values: List[int]) -> None:
        """Portable fallback for dialects without insert-ignore."""
        col = table.c[column]
        existing = set(
            conn.execute(select(col).where(table.c.content_id == content_id)).scalars()
        )
        rows = [{"content_id": content_id, column: v} for v in values if v not in existing]
        if rows:
            conn.execute(table.insert(), rows)

    def insert_tokens(self, content_id: bytes, tokens: Iterable[int]) -> int:
        values = list(dict.fromkeys(int(t) for t in tokens if int(t) > 0))
        if not values:
            return 0
        stmt = self._insert_ignore(self.search)
        with self._engine.begin() as conn:
            if stmt is None:
                self._insert_missing(conn, self.search, "token", content_id, values)
            else:
                conn.execute(stmt, [{"content_id": content_id, "token": v} for v in values])
        return len(values)

    def upsert_direct_link(self, content_id: bytes, link: str, title: str = "", description: str = "") -> None:
        values = {
            "content_id": content_id,
            "direct_link": link,
            "title": title or "",
            "description": description or "",
        }
        t = self.links
        with self._engine.begin() as conn:
            if self.dialect in ("sqlite", "postgresql"):
                insert = sqlite_insert if self.dialect == "sqlite" else pg_insert
                stmt = insert(t).values(**values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[t.c.content_id],
                    set_={
                        "direct_link": stmt.excluded.direct_link,
                        "title": stmt.excluded.title,
                        "description": stmt.excluded.description,
                    },
                )
                conn.execute(stmt)
            elif self.dialect in ("mysql", "mariadb"):
                stmt = mysql_insert(t).values(**values)
                stmt = stmt.on_duplicate_key_update(
                    direct_link=stmt.inserted.direct_link,
                    title=stmt.inserted.title,
                    description=stmt.inserted.description,
                )
                conn.execute(stmt)
            else:
                conn.execute(delete(t).where(t.c.content_id == content_id))
                conn.execute(t.insert().values(**values))

    def replace_read_roles(self, content_id: bytes, role_ids: Sequence[int]) -> None:
        t = self.roles
        values = list(dict.fromkeys(int(r) for r in role_ids))
        with self._engine.begin() as conn:
            conn.execute(delete(t).where(t.c.content_id == content_id))
            if values:
                conn.execute(t.insert(), [{"content_id": content_id, "role_id": r} for r in values])

    def delete_rows(self, target: str, content_id: bytes) -> int:
        table = self._targets.get(target)
        if table is None:
            raise ValueError(f"Unknown delete target: {target!r}")
        with self._engine.begin() as conn:
            result = conn.execute(delete(table).where(table.c.content_id == content_id))
        return max(result.rowcount or 0, 0)

    # ---- reads ----

    def find_matches(self, terms: Sequence[SearchTerm], limit: int) -> List[Dict[str, str]]:
        """
        AND over terms, OR over a content's tokens per term:
        WHERE any term matches, GROUP BY content_id, HAVING every term matched at least once.
        """
        if not terms or limit <= 0:
            return []
        s, dl = self.search, self.links
        conds = [(s.c.token % term.modulus) == term.token for term in terms]
        hit = (
            select(s.c.content_id)
            .where(or_(*conds))
            .group_by(s.c.content_id)
            .having(and_(*[func.sum(case((c, 1), else_=0)) > 0 for c in conds]))
            .subquery("hit")
        )
        stmt = (
            select(hit.c.content_id, dl.c.direct_link, dl.c.title, dl.c.description)
            .select_from(hit.outerjoin(dl, dl.c.content_id == hit.c.content_id))
            .order_by(func.coalesce(dl.c.title, ""), hit.c.content_id)
            .limit(limit)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [
            {
                "content_id": content_id_hex(r.content_id),
                "direct_link": r.direct_link or "",
                "title": r.title or "",
                "description": r.description or "",
            }
            for r in rows
        ]

    def tokens(self, content_id: bytes) -> List[int]:
        s = self.search
        with self._engine.connect() as conn:
            return list(
                conn.execute(select(s.c.token).where(s.c.content_id == content_id).order_by(s.c.token)).scalars()
            )

    def read_roles(self, content_id: bytes) -> List[int]:
        t = self.roles
        with self._engine.connect() as conn:
            return list(
                conn.execute(select(t.c.role_id).where(t.c.content_id == content_id).order_by(t.c.role_id)).scalars()
            )

    def direct_link(self, content_id: bytes) -> Optional[Dict[str, str]]:
        t = self.links
        with self._engine.connect() as conn:
            row = conn.execute(
                select(t.c.direct_link, t.c.title, t.c.description).where(t.c.content_id == content_id)
            ).first()
        if row is None:
            return None
        return {"direct_link": row.direct_link, "title": row.title, "description": row.description}
