import pytest

import app as app_module


@pytest.fixture
def client():
    app_module.app.config.update(TESTING=True)
    app_module.games.clear()
    with app_module.app.test_client() as c:
        yield c
    app_module.games.clear()


@pytest.fixture
def game_id(client):
    return client.post("/api/new").get_json()["game_id"]
