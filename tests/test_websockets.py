import pytest

from roomgrow import app, socketio


@pytest.fixture()
def sio_client():
    # Flask-SocketIO provides a test client we can use against the global socketio instance
    test_client = socketio.test_client(app, flask_test_client=app.test_client())
    yield test_client
    test_client.disconnect()


def _extract(event_name, received):
    return [p["args"][0] for p in received if p["name"] == event_name]


def test_build_dungeon_streams_progress_then_completes(sio_client):
    sio_client.emit("build_dungeon", {"width": 30, "height": 24, "seed": 3, "ticks_per_frame": 2})
    received = sio_client.get_received()
    progress = _extract("build_progress", received)
    complete = _extract("build_complete", received)
    assert len(complete) == 1
    assert progress, "expected at least one progress frame"
    ticks = [p["tick"] for p in progress]
    assert ticks == sorted(ticks)
    assert all(t % 2 == 0 for t in ticks)
    assert all(len(p["tiles"]) == 24 for p in progress)
    done = complete[0]
    assert done["seed"] == 3
    assert len(done["tiles"]) == 24
    assert done["info"]["metrics"]["ticks"] > ticks[-1]
    # completion event is always emitted last
    assert received[-1]["name"] == "build_complete"


def test_build_dungeon_matches_http_build(sio_client, client):
    body = {"width": 28, "height": 20, "seed": 12}
    sio_client.emit("build_dungeon", body)
    done = _extract("build_complete", sio_client.get_received())[0]
    http = client.post("/api/dungeon/build", json=body).get_json()
    assert done["tiles"] == http["tiles"]
    assert done["info"]["doors"] == http["info"]["doors"]


def test_build_dungeon_invalid_payload_emits_error(sio_client):
    sio_client.emit("build_dungeon", {"width": -1})
    received = sio_client.get_received()
    errors = _extract("error", received)
    assert errors and errors[0]["field"] == "width"
    assert errors[0]["code"] == "min"
    assert not _extract("build_complete", received)
