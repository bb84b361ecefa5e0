import pytest
from fastapi.testclient import TestClient

from main import app

PNG_MAGIC = b"\x89PNG"

# Default data at scale 20: cfg-if is 2.4px wide on the first row, so (51, 10)
# lands on it. Its only edge is the metadata unlock of libc(lib).
POINTER_ON_CFG_IF = {"x": 51, "y": 10}


@pytest.fixture
def client():
    with TestClient(app) as c:
        c.post("/timings/reset")
        yield c


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_state_describes_default_build(client):
    state = client.get("/timings/state").json()
    assert state["controls"] == {"min_unit_time": 0.0, "scale": 20}
    assert state["duration"] == 5.0
    assert state["summary"]["units"] == 7
    assert state["highlighted"] is None
    assert state["edges"] == []
    assert state["errors"] == {}

    pipeline = state["pipeline"]
    assert pipeline["px_per_sec"] == 20
    assert len(pipeline["units"]) == 7
    assert pipeline["hit_boxes"][0] == {"x": 50, "y": 5, "x2": pytest.approx(52.4), "y2": 30, "i": 0}
    assert state["timing"] == {"width": 300, "height": 400}


def test_pointer_highlights_unit_and_reports_edges(client):
    body = client.post("/timings/pointer", json=POINTER_ON_CFG_IF).json()
    assert body["changed"] is True
    assert body["highlighted"] == 0
    assert [(e["source"], e["target"], e["rmeta"]) for e in body["edges"]] == [(0, 3, True)]

    again = client.post("/timings/pointer", json={"x": 52, "y": 20}).json()
    assert again["changed"] is False
    assert again["highlighted"] == 0

    # empty space keeps the highlight
    away = client.post("/timings/pointer", json={"x": 1, "y": 1}).json()
    assert away["changed"] is False
    assert away["highlighted"] == 0

    assert client.get("/timings/state").json()["highlighted"] == 0


def test_pointer_requires_coordinates(client):
    assert client.post("/timings/pointer", json={"x": 10}).status_code == 422
    assert client.post("/timings/pointer", json={"x": "left", "y": 1}).status_code == 422


def test_controls_filter_rerenders_pipeline_and_clears_highlight(client):
    client.post("/timings/pointer", json=POINTER_ON_CFG_IF)
    state = client.post("/timings/controls", json={"min_unit_time": 1.0}).json()
    assert state["controls"]["min_unit_time"] == 1.0
    assert [u["i"] for u in state["pipeline"]["units"]] == [3, 5, 6]
    assert state["highlighted"] is None
    assert state["pipeline"]["height"] == 3 * 27 + 40


def test_controls_scale_resizes_both_graphs(client):
    state = client.post("/timings/controls", json={"scale": 100}).json()
    assert state["pipeline"]["graph_width"] == 500
    assert state["pipeline"]["width"] == 580
    assert state["timing"]["width"] == 580


def test_controls_reject_out_of_range(client):
    resp = client.post("/timings/controls", json={"scale": 0})
    assert resp.status_code == 422
    assert client.get("/timings/state").json()["controls"]["scale"] == 20


def test_units_table(client):
    body = client.get("/timings/units").json()
    assert [r["i"] for r in body["rows"]] == [6, 3, 5, 4, 1, 2, 0]
    assert body["summary"]["pipelined_units"] == 4


@pytest.mark.parametrize("name", ["pipeline", "timing", "overlay"])
def test_graph_png(client, name):
    resp = client.get(f"/timings/graph/{name}.png")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(PNG_MAGIC)


def test_graph_png_unknown_name(client):
    assert client.get("/timings/graph/gantt.png").status_code == 404


def test_load_custom_trace(client):
    trace = {
        "duration": 4,
        "units": [
            {"name": "a", "target": "(lib)", "start": 0, "duration": 2, "unlocked_units": [1]},
            {"name": "b", "target": "(bin)", "start": 2, "duration": 2},
        ],
        "concurrency": [{"t": 0, "active": 1, "inactive": 1}, {"t": 2, "active": 1}],
    }
    state = client.post("/timings/load", json={"timings": trace, "scale": 10}).json()
    assert state["summary"]["units"] == 2
    assert state["controls"]["scale"] == 10
    assert [u["label"] for u in state["pipeline"]["units"]] == ["a(lib) 2s", "b(bin) 2s"]

    body = client.post("/timings/pointer", json={"x": 60, "y": 10}).json()
    assert body["highlighted"] == 0
    assert [(e["source"], e["target"]) for e in body["edges"]] == [(0, 1)]


def test_load_empty_trace_has_no_graphs(client):
    state = client.post("/timings/load", json={"timings": {"units": []}}).json()
    assert state["pipeline"] is None
    assert state["timing"] is None
    assert client.get("/timings/graph/pipeline.png").status_code == 204
    assert client.get("/timings/graph/timing.png").status_code == 204
    assert client.post("/timings/pointer", json={"x": 60, "y": 10}).json()["changed"] is False


@pytest.mark.parametrize("payload", [
    {"timings": {"units": [{"duration": 1}]}},
    {"timings": {"units": [{"name": "a", "unlocked_units": [9]}]}},
    {"scale": 500},
    {"dpr": "retina"},
    {"dpr": 10},
])
def test_load_rejects_bad_payload_and_keeps_session(client, payload):
    resp = client.post("/timings/load", json=payload)
    assert resp.status_code == 422
    assert client.get("/timings/state").json()["summary"]["units"] == 7


def test_reset_restores_defaults(client):
    client.post("/timings/controls", json={"scale": 50, "min_unit_time": 0.5})
    state = client.post("/timings/reset").json()
    assert state["controls"] == {"min_unit_time": 0.0, "scale": 20}
    assert len(state["pipeline"]["units"]) == 7


def test_websocket_session(client):
    with client.websocket_connect("/ws/timings") as ws:
        first = ws.receive_json()
        assert first["type"] == "state"
        assert first["data"]["summary"]["units"] == 7

        ws.send_json({"type": "pointer", **POINTER_ON_CFG_IF})
        msg = ws.receive_json()
        assert msg["type"] == "highlight"
        assert msg["data"]["highlighted"] == 0

        ws.send_json({"type": "controls", "scale": 40})
        msg = ws.receive_json()
        assert msg["type"] == "state"
        assert msg["data"]["controls"]["scale"] == 40
        assert msg["data"]["highlighted"] is None

        ws.send_json({"type": "controls", "scale": "wide"})
        msg = ws.receive_json()
        assert msg["type"] == "error"

        ws.send_json({"type": "reset"})
        msg = ws.receive_json()
        assert msg["data"]["controls"]["scale"] == 20


def test_timing_planning_failure_keeps_pipeline(client):
    # a peak of 9000 units has no tick step within 100 tries on a 350px axis
    trace = {
        "duration": 1,
        "units": [{"name": "a", "start": 0, "duration": 1}],
        "concurrency": [{"t": 0, "inactive": 9000}],
    }
    resp = client.post("/timings/load", json={"timings": trace})
    assert resp.status_code == 200
    state = resp.json()
    assert [u["label"] for u in state["pipeline"]["units"]] == ["a 1s"]
    assert state["timing"] is None
    assert set(state["errors"]) == {"timing"}

    assert client.get("/timings/graph/pipeline.png").status_code == 200
    assert client.get("/timings/graph/timing.png").status_code == 204
    assert client.post("/timings/pointer", json={"x": 55, "y": 10}).json()["highlighted"] == 0

    # the failure belongs to the session that hit it
    assert client.post("/timings/reset").json()["errors"] == {}


def test_cors_is_off_unless_configured(monkeypatch):
    from main import cors_origins_from_env, create_app

    preflight = {"Origin": "http://viewer.test", "Access-Control-Request-Method": "GET"}
    closed = TestClient(create_app())
    assert "access-control-allow-origin" not in closed.options("/health", headers=preflight).headers

    monkeypatch.setenv("TIMINGS_CORS_ORIGINS", "http://viewer.test, http://other.test")
    origins = cors_origins_from_env()
    assert origins == ["http://viewer.test", "http://other.test"]
    opened = TestClient(create_app(origins))
    resp = opened.options("/health", headers=preflight)
    assert resp.headers["access-control-allow-origin"] == "http://viewer.test"
