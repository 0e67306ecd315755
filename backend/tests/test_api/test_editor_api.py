"""Tests for the editor session API."""

from httpx import AsyncClient

from flowcanvas.db import workflow_store
from flowcanvas.services.editor_sessions import get_session_manager


async def _open(client: AsyncClient, definition=None, network: str = "mainnet") -> tuple[str, dict]:
    """Create a workflow and open an editor session on it."""
    payload = {"name": "Editor test", "network": network}
    if definition is not None:
        payload["definition"] = definition.model_dump(mode="json")
    workflow = (await client.post("/api/v1/workflows", json=payload)).json()

    response = await client.post(f"/api/v1/workflows/{workflow['id']}/editor/sessions")
    assert response.status_code == 200
    return workflow["id"], response.json()


def _pairs(view: dict) -> set[tuple[str, str]]:
    return {(e["source"], e["target"]) for e in view["definition"]["edges"]}


class TestEditorSessionsAPI:
    """Tests for opening, listing, saving and closing sessions."""

    async def test_open_session(self, client: AsyncClient, branching_definition):
        workflow_id, view = await _open(client, branching_definition)

        assert view["workflow_id"] == workflow_id
        assert view["reachable"] == ["T", "A", "B", "C"]
        assert view["terminals"] == ["C", "B"]
        assert view["anchor"]["node_id"] == "B"
        assert view["dirty"] is False

    async def test_open_for_unknown_workflow(self, client: AsyncClient):
        response = await client.post("/api/v1/workflows/missing/editor/sessions")
        assert response.status_code == 404

    async def test_list_and_get(self, client: AsyncClient, linear_definition):
        workflow_id, view = await _open(client, linear_definition)

        response = await client.get(f"/api/v1/workflows/{workflow_id}/editor/sessions")
        assert [s["session_id"] for s in response.json()] == [view["session_id"]]

        response = await client.get(f"/api/v1/editor/sessions/{view['session_id']}")
        assert response.status_code == 200
        assert response.json()["session_id"] == view["session_id"]

    async def test_unknown_session(self, client: AsyncClient):
        response = await client.get("/api/v1/editor/sessions/missing")
        assert response.status_code == 404

        response = await client.post(
            "/api/v1/editor/sessions/missing/nodes", json={"step_type": "log"}
        )
        assert response.status_code == 404

    async def test_close_session(self, client: AsyncClient):
        _, view = await _open(client)
        sid = view["session_id"]

        response = await client.delete(f"/api/v1/editor/sessions/{sid}")
        assert response.status_code == 200

        response = await client.delete(f"/api/v1/editor/sessions/{sid}")
        assert response.status_code == 404

    async def test_save_writes_definition_back(self, client: AsyncClient, linear_definition):
        workflow_id, view = await _open(client, linear_definition)
        sid = view["session_id"]

        view = (await client.delete(f"/api/v1/editor/sessions/{sid}/nodes/A")).json()
        assert view["dirty"] is True

        response = await client.post(f"/api/v1/editor/sessions/{sid}/save")
        assert response.status_code == 200
        assert [n["id"] for n in response.json()["definition"]["nodes"]] == ["T", "B"]

        stored = (await client.get(f"/api/v1/workflows/{workflow_id}")).json()
        assert stored["definition"]["edges"] == []

        view = (await client.get(f"/api/v1/editor/sessions/{sid}")).json()
        assert view["dirty"] is False

    async def test_gesture_during_save_stays_dirty(
        self, client: AsyncClient, linear_definition, monkeypatch
    ):
        _, view = await _open(client, linear_definition)
        sid = view["session_id"]
        await client.delete(f"/api/v1/editor/sessions/{sid}/nodes/B")

        save_definition = workflow_store.save_definition

        async def save_then_edit(workflow_id, definition):
            workflow = await save_definition(workflow_id, definition)
            get_session_manager().get_session(sid).add_step("log")
            return workflow

        monkeypatch.setattr(workflow_store, "save_definition", save_then_edit)

        response = await client.post(f"/api/v1/editor/sessions/{sid}/save")
        assert response.status_code == 200
        assert len(response.json()["definition"]["nodes"]) == 2

        view = (await client.get(f"/api/v1/editor/sessions/{sid}")).json()
        assert view["dirty"] is True
        assert len(view["definition"]["nodes"]) == 3

    async def test_unsaved_changes_are_not_persisted(self, client: AsyncClient, linear_definition):
        workflow_id, view = await _open(client, linear_definition)

        await client.delete(f"/api/v1/editor/sessions/{view['session_id']}/nodes/A")

        stored = (await client.get(f"/api/v1/workflows/{workflow_id}")).json()
        assert len(stored["definition"]["nodes"]) == 3

    async def test_deleting_workflow_closes_sessions(self, client: AsyncClient):
        workflow_id, view = await _open(client)

        await client.delete(f"/api/v1/workflows/{workflow_id}")

        response = await client.get(f"/api/v1/editor/sessions/{view['session_id']}")
        assert response.status_code == 404


class TestEditorNodesAPI:
    """Tests for node gestures."""

    async def test_add_step(self, client: AsyncClient):
        _, view = await _open(client)
        sid = view["session_id"]

        response = await client.post(
            f"/api/v1/editor/sessions/{sid}/nodes", json={"step_type": "timer_trigger"}
        )

        view = response.json()
        node = view["definition"]["nodes"][0]
        assert node["id"] == "n1"
        assert node["position"] == {"x": 260, "y": 120}
        assert node["data"] == {
            "type": "timer_trigger",
            "label": "timer_trigger",
            "intervalSeconds": 60,
        }
        assert view["anchor"]["node_id"] == "n1"

    async def test_second_trigger_is_refused(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)
        sid = view["session_id"]

        response = await client.post(
            f"/api/v1/editor/sessions/{sid}/nodes", json={"step_type": "price_trigger"}
        )

        view = response.json()
        assert view["message"] == "only one trigger node is allowed"
        assert len(view["definition"]["nodes"]) == 3

        # The message belongs to the refused gesture only
        view = (await client.get(f"/api/v1/editor/sessions/{sid}")).json()
        assert view["message"] is None

    async def test_add_after_terminal(self, client: AsyncClient, branching_definition):
        _, view = await _open(client, branching_definition)
        sid = view["session_id"]

        response = await client.post(
            f"/api/v1/editor/sessions/{sid}/nodes/after-terminal", json={"step_type": "log"}
        )

        view = response.json()
        assert ("B", "n1") in _pairs(view)
        assert view["anchor"]["node_id"] == "n1"
        assert view["anchor"]["position"] == {"x": 100, "y": 360}

    async def test_patch_node(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)
        sid = view["session_id"]

        response = await client.patch(
            f"/api/v1/editor/sessions/{sid}/nodes/B",
            json={"patch": {"message": "{{nodes.A.output.priceUsd}}"}},
        )

        node = response.json()["definition"]["nodes"][2]
        assert node["data"]["message"] == "{{nodes.A.output.priceUsd}}"
        assert node["data"]["type"] == "log"

    async def test_patch_unknown_node_returns_view(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.patch(
            f"/api/v1/editor/sessions/{view['session_id']}/nodes/missing",
            json={"patch": {"label": "x"}},
        )

        assert response.status_code == 200
        assert response.json()["dirty"] is False

    async def test_patch_with_invalid_value_is_ignored(
        self, client: AsyncClient, linear_definition
    ):
        _, view = await _open(client, linear_definition)

        response = await client.patch(
            f"/api/v1/editor/sessions/{view['session_id']}/nodes/B",
            json={"patch": {"label": None}},
        )

        assert response.status_code == 200
        view = response.json()
        assert view["definition"]["nodes"][2]["data"]["label"] == "B"
        assert view["dirty"] is False

    async def test_move_node(self, client: AsyncClient, branching_definition):
        _, view = await _open(client, branching_definition)

        response = await client.patch(
            f"/api/v1/editor/sessions/{view['session_id']}/nodes/C/position",
            json={"x": 400, "y": 600},
        )

        assert response.status_code == 200
        view = response.json()
        assert view["terminals"] == ["B", "C"]
        assert view["anchor"]["node_id"] == "C"
        assert view["anchor"]["position"] == {"x": 400, "y": 600}

    async def test_move_unknown_node_returns_view(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.patch(
            f"/api/v1/editor/sessions/{view['session_id']}/nodes/missing/position",
            json={"x": 1, "y": 1},
        )

        assert response.status_code == 200
        assert response.json()["dirty"] is False

    async def test_delete_node(self, client: AsyncClient, branching_definition):
        _, view = await _open(client, branching_definition)

        response = await client.delete(
            f"/api/v1/editor/sessions/{view['session_id']}/nodes/T"
        )

        view = response.json()
        assert _pairs(view) == {("A", "B")}
        # Without a trigger every node counts as reachable
        assert view["reachable"] == ["A", "B", "C"]

    async def test_reference_options(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)
        sid = view["session_id"]

        response = await client.get(f"/api/v1/editor/sessions/{sid}/nodes/B/references")

        body = response.json()
        assert body["free_text"] is False
        templates = [o["template"] for o in body["options"]]
        assert "{{nodes.A.output.priceUsd}}" in templates
        assert "{{nodes.T.output}}" in templates

    async def test_reference_options_without_ancestors(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)
        sid = view["session_id"]

        response = await client.get(f"/api/v1/editor/sessions/{sid}/nodes/T/references")

        assert response.json() == {"node_id": "T", "options": [], "free_text": True}

    async def test_reference_options_unknown_node(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.get(
            f"/api/v1/editor/sessions/{view['session_id']}/nodes/missing/references"
        )

        assert response.status_code == 404


class TestEditorEdgesAPI:
    """Tests for edge gestures."""

    async def test_toggle(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)
        sid = view["session_id"]
        url = f"/api/v1/editor/sessions/{sid}/edges/toggle"

        view = (await client.post(url, json={"source": "T", "target": "B"})).json()
        assert ("T", "B") in _pairs(view)

        view = (await client.post(url, json={"source": "T", "target": "B"})).json()
        assert _pairs(view) == {("T", "A"), ("A", "B")}

    async def test_toggle_self_loop(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.post(
            f"/api/v1/editor/sessions/{view['session_id']}/edges/toggle",
            json={"source": "A", "target": "A"},
        )

        assert _pairs(response.json()) == {("T", "A"), ("A", "B")}

    async def test_reconnect(self, client: AsyncClient, branching_definition):
        _, view = await _open(client, branching_definition)

        response = await client.post(
            f"/api/v1/editor/sessions/{view['session_id']}/edges/e-A-B/reconnect",
            json={"target": "C"},
        )

        assert _pairs(response.json()) == {("T", "A"), ("A", "C"), ("T", "C")}

    async def test_reconnect_dropped_on_canvas(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.post(
            f"/api/v1/editor/sessions/{view['session_id']}/edges/e-A-B/reconnect"
        )

        assert response.status_code == 200
        assert _pairs(response.json()) == {("T", "A")}

    async def test_insert_on_edge(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.post(
            f"/api/v1/editor/sessions/{view['session_id']}/edges/e-A-B/insert",
            json={"step_type": "delay"},
        )

        view = response.json()
        assert _pairs(view) == {("T", "A"), ("A", "n1"), ("n1", "B")}
        positions = {n["id"]: n["position"]["y"] for n in view["definition"]["nodes"]}
        assert positions == {"T": 0, "A": 120, "n1": 240, "B": 360}

    async def test_stale_edge_returns_view(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition)

        response = await client.post(
            f"/api/v1/editor/sessions/{view['session_id']}/edges/missing/insert",
            json={"step_type": "delay"},
        )

        assert response.status_code == 200
        assert len(response.json()["definition"]["nodes"]) == 3

    async def test_devnet_warnings(self, client: AsyncClient, linear_definition):
        _, view = await _open(client, linear_definition, network="devnet")

        assert [w["node_id"] for w in view["warnings"]] == ["A"]
