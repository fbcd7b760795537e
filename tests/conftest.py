import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from roomgrow import create_app  # noqa: E402
from roomgrow.dungeon import DungeonBuilder, RasterSurface  # noqa: E402
from roomgrow.routes import dungeon_api  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clear_build_cache():
    """Keep cached HTTP builds from leaking between tests."""
    dungeon_api._build_cache.clear()
    yield


@pytest.fixture()
def two_room_builder():
    """A 20x9 surface seeded at (0,0) and (10,0), grown to completion.

    Room 0 ends up covering columns 0..5 and room 1 columns 6..19, with one door
    carved through their shared wall.
    """
    builder = DungeonBuilder(RasterSurface(20, 9))
    builder.seed(10, 0, 1.0, rng=lambda: 0.5)
    builder.generate_rooms()
    return builder
