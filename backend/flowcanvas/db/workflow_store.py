"""WorkflowStore - Storage abstraction layer for workflow definitions."""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

import aiosqlite

from flowcanvas.db.database import get_db
from flowcanvas.models import (
    Network,
    Workflow,
    WorkflowCreate,
    WorkflowDefinition,
    WorkflowSummary,
    WorkflowUpdate,
)

logger = logging.getLogger(__name__)


def _generate_id() -> str:
    """Generate a unique ID."""
    return str(uuid.uuid4())


def _now() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def _load_definition(raw: str, workflow_id: str) -> WorkflowDefinition:
    """Parse a stored definition; unreadable JSON becomes an empty graph."""
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Stored definition of workflow {workflow_id} is not valid JSON: {e}")
        data = {}
    return WorkflowDefinition.model_validate(data)


class WorkflowStore:
    """Storage abstraction for workflow definitions.

    The execution backend and the editor only ever exchange whole
    definitions: load replaces the graph, save writes it back in full.
    """

    async def create_workflow(self, workflow: WorkflowCreate) -> Workflow:
        """Create a new workflow."""
        db = await get_db()
        workflow_id = _generate_id()
        now = _now()

        await db.execute(
            """
            INSERT INTO workflows (id, name, network, definition_json, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                workflow_id,
                workflow.name,
                workflow.network.value,
                workflow.definition.model_dump_json(),
                now,
                now,
            ),
        )
        await db.commit()
        logger.info(f"Created workflow {workflow_id} ({workflow.name})")

        return Workflow(
            id=workflow_id,
            name=workflow.name,
            network=workflow.network,
            definition=workflow.definition,
            created_at=now,
            updated_at=now,
        )

    async def list_workflows(self) -> list[WorkflowSummary]:
        """List all workflows, most recently updated first."""
        db = await get_db()
        cursor = await db.execute(
            "SELECT id, name, network, definition_json, created_at, updated_at "
            "FROM workflows ORDER BY updated_at DESC"
        )
        rows = await cursor.fetchall()

        summaries = []
        for row in rows:
            definition = _load_definition(row["definition_json"], row["id"])
            summaries.append(
                WorkflowSummary(
                    id=row["id"],
                    name=row["name"],
                    network=Network(row["network"]),
                    node_count=len(definition.nodes),
                    edge_count=len(definition.edges),
                    created_at=row["created_at"],
                    updated_at=row["updated_at"],
                )
            )
        return summaries

    async def get_workflow(self, workflow_id: str) -> Workflow | None:
        """Get a workflow by ID."""
        db = await get_db()
        cursor = await db.execute(
            "SELECT id, name, network, definition_json, created_at, updated_at "
            "FROM workflows WHERE id = ?",
            (workflow_id,),
        )
        row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_workflow(row)

    async def update_workflow(
        self, workflow_id: str, update: WorkflowUpdate
    ) -> Workflow | None:
        """Apply a partial update; a given definition replaces the stored one."""
        existing = await self.get_workflow(workflow_id)
        if existing is None:
            return None

        db = await get_db()
        name = update.name if update.name is not None else existing.name
        network = update.network if update.network is not None else existing.network
        definition = (
            update.definition if update.definition is not None else existing.definition
        )
        now = _now()

        await db.execute(
            """
            UPDATE workflows
            SET name = ?, network = ?, definition_json = ?, updated_at = ?
            WHERE id = ?
            """,
            (name, network.value, definition.model_dump_json(), now, workflow_id),
        )
        await db.commit()

        return Workflow(
            id=workflow_id,
            name=name,
            network=network,
            definition=definition,
            created_at=existing.created_at,
            updated_at=now,
        )

    async def save_definition(
        self, workflow_id: str, definition: WorkflowDefinition
    ) -> Workflow | None:
        """Write back the definition staged by an editor session."""
        return await self.update_workflow(workflow_id, WorkflowUpdate(definition=definition))

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Delete a workflow."""
        db = await get_db()
        cursor = await db.execute(
            "DELETE FROM workflows WHERE id = ?",
            (workflow_id,),
        )
        await db.commit()
        return cursor.rowcount > 0

    def _row_to_workflow(self, row: aiosqlite.Row) -> Workflow:
        return Workflow(
            id=row["id"],
            name=row["name"],
            network=Network(row["network"]),
            definition=_load_definition(row["definition_json"], row["id"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


# Global instance
workflow_store = WorkflowStore()
