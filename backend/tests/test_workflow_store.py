"""Tests for WorkflowStore persistence."""

from flowcanvas.db import get_db, workflow_store
from flowcanvas.models import Network, WorkflowCreate, WorkflowDefinition, WorkflowUpdate


class TestWorkflowStore:
    """Tests for workflow persistence."""

    async def test_create_and_get(self, test_db, linear_definition):
        created = await workflow_store.create_workflow(
            WorkflowCreate(name="DCA", network=Network.DEVNET, definition=linear_definition)
        )

        loaded = await workflow_store.get_workflow(created.id)

        assert loaded.name == "DCA"
        assert loaded.network == Network.DEVNET
        assert loaded.definition == linear_definition

    async def test_get_unknown(self, test_db):
        assert await workflow_store.get_workflow("missing") is None

    async def test_list_most_recent_first(self, test_db, linear_definition):
        first = await workflow_store.create_workflow(WorkflowCreate(name="first"))
        second = await workflow_store.create_workflow(WorkflowCreate(name="second"))
        await workflow_store.save_definition(first.id, linear_definition)

        summaries = await workflow_store.list_workflows()

        assert [s.id for s in summaries] == [first.id, second.id]
        assert summaries[0].node_count == 3

    async def test_partial_update(self, test_db, linear_definition):
        created = await workflow_store.create_workflow(
            WorkflowCreate(name="DCA", definition=linear_definition)
        )

        updated = await workflow_store.update_workflow(created.id, WorkflowUpdate(name="Renamed"))

        assert updated.name == "Renamed"
        assert updated.definition == linear_definition
        assert updated.created_at == created.created_at

    async def test_update_unknown(self, test_db):
        assert await workflow_store.update_workflow("missing", WorkflowUpdate(name="x")) is None

    async def test_delete(self, test_db):
        created = await workflow_store.create_workflow(WorkflowCreate(name="DCA"))

        assert await workflow_store.delete_workflow(created.id)
        assert not await workflow_store.delete_workflow(created.id)

    async def test_corrupt_definition_loads_empty(self, test_db):
        created = await workflow_store.create_workflow(WorkflowCreate(name="DCA"))
        db = await get_db()
        await db.execute(
            "UPDATE workflows SET definition_json = ? WHERE id = ?",
            ("{not json", created.id),
        )
        await db.commit()

        loaded = await workflow_store.get_workflow(created.id)

        assert loaded.definition == WorkflowDefinition()
