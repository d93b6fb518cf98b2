import json
import sqlite3
from datetime import datetime
from typing import Any
from uuid import UUID

from workflow_embargo.core.entities import (
    ContentItem,
    JobKind,
    ScheduledJob,
    WorkflowActionConfig,
    WorkflowDefinition,
)
from workflow_embargo.core.ports.db import RecordValidationError
from workflow_embargo.core.ports.jobs import JobCreationError


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def _uuid(value: UUID | None) -> str | None:
    return str(value) if value else None


def _parse_uuid(s: str | None) -> UUID | None:
    return UUID(s) if s else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteContentRepo(_SQLiteRepo):
    def save(self, item: ContentItem) -> ContentItem:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO content_items (
                    id, type, slug, title, status, published_at, parent_id,
                    workflow_definition_id, desired_publish_at, desired_unpublish_at,
                    publish_on_at, unpublish_on_at, publish_job_id, unpublish_job_id,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    type=excluded.type,
                    slug=excluded.slug,
                    title=excluded.title,
                    status=excluded.status,
                    published_at=excluded.published_at,
                    parent_id=excluded.parent_id,
                    workflow_definition_id=excluded.workflow_definition_id,
                    desired_publish_at=excluded.desired_publish_at,
                    desired_unpublish_at=excluded.desired_unpublish_at,
                    publish_on_at=excluded.publish_on_at,
                    unpublish_on_at=excluded.unpublish_on_at,
                    publish_job_id=excluded.publish_job_id,
                    unpublish_job_id=excluded.unpublish_job_id,
                    updated_at=excluded.updated_at
            """,
                (
                    str(item.id),
                    item.type,
                    item.slug,
                    item.title,
                    item.status,
                    _dt(item.published_at),
                    _uuid(item.parent_id),
                    _uuid(item.workflow_definition_id),
                    _dt(item.desired_publish_at),
                    _dt(item.desired_unpublish_at),
                    _dt(item.publish_on_at),
                    _dt(item.unpublish_on_at),
                    _uuid(item.publish_job_id),
                    _uuid(item.unpublish_job_id),
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return item
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise RecordValidationError(f"Could not save content {item.id}: {e}") from e
        finally:
            conn.close()

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM content_items WHERE id = ?", (str(item_id),)
            ).fetchone()
            if not row:
                return None
            return self._map_row(row)
        finally:
            conn.close()

    def delete(self, item_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM content_items WHERE id = ?", (str(item_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> ContentItem:
        return ContentItem(
            id=UUID(row["id"]),
            type=row["type"],
            slug=row["slug"],
            title=row["title"],
            status=row["status"],
            published_at=_parse_dt(row["published_at"]),
            parent_id=_parse_uuid(row["parent_id"]),
            workflow_definition_id=_parse_uuid(row["workflow_definition_id"]),
            desired_publish_at=_parse_dt(row["desired_publish_at"]),
            desired_unpublish_at=_parse_dt(row["desired_unpublish_at"]),
            publish_on_at=_parse_dt(row["publish_on_at"]),
            unpublish_on_at=_parse_dt(row["unpublish_on_at"]),
            publish_job_id=_parse_uuid(row["publish_job_id"]),
            unpublish_job_id=_parse_uuid(row["unpublish_job_id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLiteScheduledJobRepo(_SQLiteRepo):
    def _map_row(self, row: dict[str, Any]) -> ScheduledJob:
        return ScheduledJob(
            id=UUID(row["id"]),
            content_id=UUID(row["content_id"]),
            kind=row["kind"],
            run_at_utc=datetime.fromisoformat(row["run_at_utc"]),
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def get_by_id(self, job_id: UUID) -> ScheduledJob | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM scheduled_jobs WHERE id = ?", (str(job_id),)
            ).fetchone()
            if not row:
                return None
            return self._map_row(row)
        finally:
            conn.close()

    def get_queued_for_content(self, content_id: UUID, kind: JobKind) -> ScheduledJob | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM scheduled_jobs "
                "WHERE content_id = ? AND kind = ? AND status = 'queued'",
                (str(content_id), kind),
            ).fetchone()
            if not row:
                return None
            return self._map_row(row)
        finally:
            conn.close()

    def list_for_content(self, content_id: UUID) -> list[ScheduledJob]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM scheduled_jobs WHERE content_id = ? ORDER BY created_at",
                (str(content_id),),
            ).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def save(self, job: ScheduledJob) -> ScheduledJob:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO scheduled_jobs (
                    id, content_id, kind, run_at_utc, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    run_at_utc=excluded.run_at_utc,
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(job.id),
                    str(job.content_id),
                    job.kind,
                    job.run_at_utc.isoformat(),
                    job.status,
                    job.created_at.isoformat(),
                    job.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return job
        except sqlite3.Error as e:
            conn.rollback()
            raise JobCreationError(job.content_id, job.kind, str(e)) from e
        finally:
            conn.close()

    def delete(self, job_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM scheduled_jobs WHERE id = ?", (str(job_id),))
            conn.commit()
        finally:
            conn.close()


class SQLiteWorkflowDefinitionRepo(_SQLiteRepo):
    def _map_row(self, row: dict[str, Any]) -> WorkflowDefinition:
        actions = [WorkflowActionConfig.model_validate(a) for a in json.loads(row["actions_json"])]
        return WorkflowDefinition(id=UUID(row["id"]), title=row["title"], actions=actions)

    def get_by_id(self, definition_id: UUID) -> WorkflowDefinition | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM workflow_definitions WHERE id = ?", (str(definition_id),)
            ).fetchone()
            if not row:
                return None
            return self._map_row(row)
        finally:
            conn.close()

    def save(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        actions_json = json.dumps([a.model_dump(mode="json") for a in definition.actions])
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO workflow_definitions (id, title, actions_json)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    actions_json=excluded.actions_json
            """,
                (str(definition.id), definition.title, actions_json),
            )
            conn.commit()
            return definition
        finally:
            conn.close()

    def list_all(self) -> list[WorkflowDefinition]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM workflow_definitions ORDER BY title").fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()
