"""
SQLite repositories for the editorial core.

Content rows are written whole on every save. Saves are guarded by the
row version: an update only lands when the stored version matches the one
the entity was loaded at, otherwise ConflictError is raised. Tag set
replacement runs its delete and insert inside one transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from src.domain.content import AnalysisEntity, ContentEntity, NewsEntity
from src.domain.errors import ConflictError, DomainError, StorageError, ValidationError
from src.domain.taxonomy import CategoryEntity, TagEntity
from src.domain.user import UserEntity
from src.domain.value_objects import Slug
from src.ports.repo import ContentQuery, TagUsage

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=ContentEntity)

SORTABLE_COLUMNS = frozenset({"created_at", "published_at", "updated_at", "view_count", "title"})


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def utc_iso(dt: datetime) -> str:
    """Filter bound in the stored form; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC).isoformat()
    return dt.astimezone(UTC).isoformat()


def integrity_error(e: sqlite3.IntegrityError) -> DomainError:
    """Only uniqueness clashes are conflicts; other constraint failures are not."""
    message = str(e)
    if message.startswith("UNIQUE"):
        return ConflictError(f"Constraint violation: {message}")
    if message.startswith("FOREIGN KEY"):
        return ValidationError("Referenced record does not exist")
    logger.error("Integrity failure: %s", message)
    return StorageError(f"Database error: {message}")


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    @contextmanager
    def _tx(self) -> Iterator[sqlite3.Connection]:
        """One transaction; sqlite errors surface as domain errors."""
        conn = self._get_conn()
        try:
            with conn:
                yield conn
        except sqlite3.IntegrityError as e:
            raise integrity_error(e) from e
        except sqlite3.Error as e:
            logger.error("SQLite failure in %s: %s", type(self).__name__, e)
            raise StorageError(f"Database error: {e}") from e
        finally:
            if self._should_close():
                conn.close()


# -----------------------------------------------------------------------------
# Content repositories (news, analysis)
# -----------------------------------------------------------------------------


class SQLiteContentRepo(SQLiteRepoBase, Generic[E]):
    """Shared persistence for content aggregates. Subclasses name their tables."""

    table: str
    tag_table: str
    tag_fk: str
    label: str

    def _columns(self, entity: E) -> dict[str, Any]:
        return {
            "id": entity.id,
            "slug": entity.slug.value,
            "title": entity.title,
            "subtitle": entity.subtitle,
            "content": entity.content,
            "excerpt": entity.excerpt,
            "status": entity.status.value,
            "is_featured": int(entity.is_featured),
            "category_id": entity.category_id,
            "featured_image_url": entity.featured_image_url,
            "featured_image_alt": entity.featured_image_alt,
            "meta_title": entity.meta_title,
            "meta_description": entity.meta_description,
            "meta_keywords": entity.meta_keywords,
            "author_id": entity.author_id,
            "editor_id": entity.editor_id,
            "created_at": iso(entity.created_at),
            "updated_at": iso(entity.updated_at),
            "published_at": iso(entity.published_at),
            "archived_at": iso(entity.archived_at),
            "view_count": entity.view_count,
        }

    def _map_row(self, row: Mapping[str, Any]) -> E:
        raise NotImplementedError

    # --- Writes ---

    def save(self, entity: E) -> None:
        columns = self._columns(entity)
        with self._tx() as conn:
            if entity.version == 0:
                names = ", ".join(columns)
                marks = ", ".join("?" for _ in columns)
                conn.execute(
                    f"INSERT INTO {self.table} ({names}, version) VALUES ({marks}, 1)",
                    tuple(columns.values()),
                )
                new_version = 1
            else:
                assignments = ", ".join(f"{name} = ?" for name in columns if name != "id")
                values = [v for k, v in columns.items() if k != "id"]
                cursor = conn.execute(
                    f"UPDATE {self.table} SET {assignments}, version = version + 1 "
                    "WHERE id = ? AND version = ?",
                    (*values, entity.id, entity.version),
                )
                if cursor.rowcount == 0:
                    raise ConflictError(
                        f"{self.label} {entity.id} was modified concurrently; reload and retry"
                    )
                new_version = entity.version + 1

        entity.mark_persisted(new_version)
        logger.info("%s saved: %s (version %d)", self.label, entity.id, new_version)

    def delete(self, entity_id: str) -> None:
        with self._tx() as conn:
            conn.execute(
                f"UPDATE {self.table} SET deleted_at = ? WHERE id = ? AND deleted_at IS NULL",
                (utc_now_iso(), entity_id),
            )
        logger.info("%s soft deleted: %s", self.label, entity_id)

    def hard_delete(self, entity_id: str) -> None:
        with self._tx() as conn:
            conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (entity_id,))
        logger.warning("%s hard deleted: %s", self.label, entity_id)

    def replace_tags(self, entity_id: str, tag_ids: list[str]) -> None:
        unique_ids = list(dict.fromkeys(tag_ids))
        with self._tx() as conn:
            conn.execute(f"DELETE FROM {self.tag_table} WHERE {self.tag_fk} = ?", (entity_id,))
            conn.executemany(
                f"INSERT OR IGNORE INTO {self.tag_table} ({self.tag_fk}, tag_id) VALUES (?, ?)",
                [(entity_id, tag_id) for tag_id in unique_ids],
            )
        logger.info("Tags updated for %s: %s", self.label.lower(), entity_id)

    # --- Reads ---

    def find_by_id(self, entity_id: str, include_deleted: bool = False) -> E | None:
        return self._find_one("id = ?", entity_id, include_deleted)

    def find_by_slug(self, slug: str, include_deleted: bool = False) -> E | None:
        return self._find_one("slug = ?", slug, include_deleted)

    def _find_one(self, clause: str, value: str, include_deleted: bool) -> E | None:
        sql = f"SELECT * FROM {self.table} WHERE {clause}"
        if not include_deleted:
            sql += " AND deleted_at IS NULL"
        # Soft-deleted rows may share a slug with a live row; prefer the newest.
        sql += " ORDER BY created_at DESC LIMIT 1"
        with self._tx() as conn:
            row = conn.execute(sql, (value,)).fetchone()
        return self._map_row(row) if row else None

    def find_many(self, query: ContentQuery) -> list[E]:
        where, params = self._where(query)
        sort_by = query.sort_by if query.sort_by in SORTABLE_COLUMNS else "created_at"
        order = "ASC" if query.sort_order == "asc" else "DESC"
        sql = (
            f"SELECT * FROM {self.table} {where} "
            f"ORDER BY {sort_by} {order}, id ASC LIMIT ? OFFSET ?"
        )
        with self._tx() as conn:
            rows = conn.execute(sql, (*params, query.limit, query.offset)).fetchall()
        return [self._map_row(r) for r in rows]

    def count(self, query: ContentQuery) -> int:
        where, params = self._where(query)
        with self._tx() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS n FROM {self.table} {where}", params).fetchone()
        return int(row["n"])

    def exists_by_slug(self, slug: str) -> bool:
        with self._tx() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) AS n FROM {self.table} WHERE slug = ? AND deleted_at IS NULL",
                (slug,),
            ).fetchone()
        return int(row["n"]) > 0

    def get_tag_ids(self, entity_id: str) -> list[str]:
        with self._tx() as conn:
            rows = conn.execute(
                f"SELECT tag_id FROM {self.tag_table} WHERE {self.tag_fk} = ?", (entity_id,)
            ).fetchall()
        return [r["tag_id"] for r in rows]

    def _where(self, query: ContentQuery) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []

        if query.status:
            clauses.append("status = ?")
            params.append(query.status.upper())
        if query.author_id:
            clauses.append("author_id = ?")
            params.append(query.author_id)
        if query.category_id:
            clauses.append("category_id = ?")
            params.append(query.category_id)
        if query.tag_id:
            clauses.append(f"id IN (SELECT {self.tag_fk} FROM {self.tag_table} WHERE tag_id = ?)")
            params.append(query.tag_id)
        if query.search_term:
            clauses.append("(title LIKE ? OR content LIKE ?)")
            pattern = f"%{query.search_term}%"
            params.extend([pattern, pattern])
        if query.is_featured is not None:
            clauses.append("is_featured = ?")
            params.append(int(query.is_featured))
        if query.date_from:
            clauses.append("created_at >= ?")
            params.append(utc_iso(query.date_from))
        if query.date_to:
            clauses.append("created_at <= ?")
            params.append(utc_iso(query.date_to))
        if not query.include_deleted:
            clauses.append("deleted_at IS NULL")

        extra_clauses, extra_params = self._extra_filters(query)
        clauses.extend(extra_clauses)
        params.extend(extra_params)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    def _extra_filters(self, query: ContentQuery) -> tuple[list[str], list[Any]]:
        return [], []


class SQLiteNewsRepo(SQLiteContentRepo[NewsEntity]):
    table = "news"
    tag_table = "news_tags"
    tag_fk = "news_id"
    label = "News"

    def _map_row(self, row: Mapping[str, Any]) -> NewsEntity:
        return NewsEntity.reconstitute(row)


class SQLiteAnalysisRepo(SQLiteContentRepo[AnalysisEntity]):
    table = "analysis"
    tag_table = "analysis_tags"
    tag_fk = "analysis_id"
    label = "Analysis"

    def _columns(self, entity: AnalysisEntity) -> dict[str, Any]:
        columns = super()._columns(entity)
        columns.update(
            {
                "stock_ticker": entity.stock_ticker.value,
                "analysis_type": entity.analysis_type.value,
                "target_price": entity.target_price,
            }
        )
        return columns

    def _map_row(self, row: Mapping[str, Any]) -> AnalysisEntity:
        return AnalysisEntity.reconstitute(row)

    def _extra_filters(self, query: ContentQuery) -> tuple[list[str], list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        if query.stock_tickers:
            marks = ", ".join("?" for _ in query.stock_tickers)
            clauses.append(f"UPPER(stock_ticker) IN ({marks})")
            params.extend(t.strip().upper() for t in query.stock_tickers)
        elif query.stock_ticker:
            clauses.append("UPPER(stock_ticker) = ?")
            params.append(query.stock_ticker.strip().upper())
        if query.analysis_type:
            clauses.append("analysis_type = ?")
            params.append(query.analysis_type.upper())
        return clauses, params


# -----------------------------------------------------------------------------
# Categories
# -----------------------------------------------------------------------------


class SQLiteCategoryRepo(SQLiteRepoBase):
    def save(self, category: CategoryEntity) -> None:
        with self._tx() as conn:
            conn.execute(
                """
                INSERT INTO categories (
                    id, slug, name, description, color, icon, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    slug=excluded.slug,
                    name=excluded.name,
                    description=excluded.description,
                    color=excluded.color,
                    icon=excluded.icon,
                    updated_at=excluded.updated_at
                """,
                (
                    category.id,
                    category.slug.value,
                    category.name,
                    category.description,
                    category.color,
                    category.icon,
                    iso(category.created_at),
                    iso(category.updated_at),
                ),
            )
        logger.info("Category saved: %s", category.id)

    def find_by_id(self, category_id: str) -> CategoryEntity | None:
        with self._tx() as conn:
            row = conn.execute("SELECT * FROM categories WHERE id = ?", (category_id,)).fetchone()
        return CategoryEntity.reconstitute(row) if row else None

    def find_by_slug(self, slug: str) -> CategoryEntity | None:
        with self._tx() as conn:
            row = conn.execute("SELECT * FROM categories WHERE slug = ?", (slug,)).fetchone()
        return CategoryEntity.reconstitute(row) if row else None

    def find_all(self) -> list[CategoryEntity]:
        with self._tx() as conn:
            rows = conn.execute("SELECT * FROM categories ORDER BY name ASC").fetchall()
        return [CategoryEntity.reconstitute(r) for r in rows]

    def exists_by_name(self, name: str) -> bool:
        with self._tx() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM categories WHERE LOWER(name) = LOWER(?)",
                (name.strip(),),
            ).fetchone()
        return int(row["n"]) > 0

    def delete(self, category_id: str) -> None:
        with self._tx() as conn:
            conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        logger.info("Category deleted: %s", category_id)


# -----------------------------------------------------------------------------
# Tags
# -----------------------------------------------------------------------------


class SQLiteTagRepo(SQLiteRepoBase):
    def save(self, tag: TagEntity) -> None:
        with self._tx() as conn:
            self._upsert(conn, tag)
        logger.info("Tag saved: %s", tag.id)

    def _upsert(self, conn: sqlite3.Connection, tag: TagEntity) -> None:
        conn.execute(
            """
            INSERT INTO tags (id, slug, name, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                slug=excluded.slug,
                name=excluded.name,
                updated_at=excluded.updated_at
            """,
            (tag.id, tag.slug.value, tag.name, iso(tag.created_at), iso(tag.updated_at)),
        )

    def find_by_id(self, tag_id: str) -> TagEntity | None:
        with self._tx() as conn:
            row = conn.execute("SELECT * FROM tags WHERE id = ?", (tag_id,)).fetchone()
        return TagEntity.reconstitute(row) if row else None

    def find_by_slug(self, slug: str) -> TagEntity | None:
        with self._tx() as conn:
            row = conn.execute("SELECT * FROM tags WHERE slug = ?", (slug,)).fetchone()
        return TagEntity.reconstitute(row) if row else None

    def find_by_ids(self, tag_ids: list[str]) -> list[TagEntity]:
        if not tag_ids:
            return []
        marks = ", ".join("?" for _ in tag_ids)
        with self._tx() as conn:
            rows = conn.execute(
                f"SELECT * FROM tags WHERE id IN ({marks}) ORDER BY name ASC", tuple(tag_ids)
            ).fetchall()
        return [TagEntity.reconstitute(r) for r in rows]

    def find_all(self) -> list[TagEntity]:
        with self._tx() as conn:
            rows = conn.execute("SELECT * FROM tags ORDER BY name ASC").fetchall()
        return [TagEntity.reconstitute(r) for r in rows]

    def exists_by_name(self, name: str) -> bool:
        with self._tx() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM tags WHERE LOWER(name) = LOWER(?)", (name.strip(),)
            ).fetchone()
        return int(row["n"]) > 0

    def delete(self, tag_id: str) -> None:
        with self._tx() as conn:
            conn.execute("DELETE FROM news_tags WHERE tag_id = ?", (tag_id,))
            conn.execute("DELETE FROM analysis_tags WHERE tag_id = ?", (tag_id,))
            conn.execute("DELETE FROM tags WHERE id = ?", (tag_id,))
        logger.info("Tag deleted: %s", tag_id)

    def find_or_create_by_names(self, names: list[str]) -> list[TagEntity]:
        """
        Resolve free-text tag names to tags, creating the missing ones.

        Matching is case-insensitive on name, then on the derived slug.
        Blank names and duplicates are skipped; order of first appearance is kept.
        """
        tags: list[TagEntity] = []
        seen: set[str] = set()

        with self._tx() as conn:
            for raw in names:
                name = raw.strip()
                if not name or name.lower() in seen:
                    continue
                seen.add(name.lower())

                slug = Slug.from_title(name)
                row = conn.execute(
                    "SELECT * FROM tags WHERE LOWER(name) = LOWER(?) OR slug = ? "
                    "ORDER BY (LOWER(name) = LOWER(?)) DESC LIMIT 1",
                    (name, slug.value, name),
                ).fetchone()

                if row:
                    tag = TagEntity.reconstitute(row)
                else:
                    tag = TagEntity.create(slug=slug, name=name)
                    self._upsert(conn, tag)
                    logger.info("Auto-created tag: %s", name)

                if tag.id not in {t.id for t in tags}:
                    tags.append(tag)

        return tags

    def get_popular_tags(self, limit: int) -> list[TagUsage]:
        with self._tx() as conn:
            rows = conn.execute(
                """
                SELECT t.*,
                    (SELECT COUNT(*) FROM news_tags nt
                        JOIN news n ON n.id = nt.news_id
                        WHERE nt.tag_id = t.id AND n.deleted_at IS NULL)
                  + (SELECT COUNT(*) FROM analysis_tags at
                        JOIN analysis a ON a.id = at.analysis_id
                        WHERE at.tag_id = t.id AND a.deleted_at IS NULL) AS usage_count
                FROM tags t
                ORDER BY usage_count DESC, t.name ASC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()
        return [TagUsage(tag=TagEntity.reconstitute(r), count=int(r["usage_count"])) for r in rows]


# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------


class SQLiteUserRepo(SQLiteRepoBase):
    def save(self, user: UserEntity) -> None:
        with self._tx() as conn:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, password_hash, first_name, last_name, role,
                    is_active, created_at, updated_at, last_login
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    password_hash=excluded.password_hash,
                    first_name=excluded.first_name,
                    last_name=excluded.last_name,
                    role=excluded.role,
                    is_active=excluded.is_active,
                    updated_at=excluded.updated_at,
                    last_login=excluded.last_login
                """,
                (
                    user.id,
                    user.email,
                    user.password_hash,
                    user.first_name,
                    user.last_name,
                    user.role.value,
                    int(user.is_active),
                    iso(user.created_at),
                    iso(user.updated_at),
                    iso(user.last_login),
                ),
            )

    def find_by_id(self, user_id: str) -> UserEntity | None:
        with self._tx() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return UserEntity.reconstitute(row) if row else None

    def find_by_email(self, email: str) -> UserEntity | None:
        with self._tx() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
        return UserEntity.reconstitute(row) if row else None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def count(self) -> int:
        with self._tx() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
        return int(row["n"])
