import random
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from codenames.deps.services import get_board_generator, get_hint_advisor, get_store
from codenames.main import app, install_front
from codenames.models.game import Team
from codenames.services.board_generator import BoardGenerator
from codenames.services.game_store import GameStore
from codenames.services.hint_advisor import HintAdvisor
from codenames.routes.game import router as game_router
from codenames.services.llm_engine import LLMServiceError, LLMTextGenerator

from conftest import BLUE_FIRST_TYPES, WORDS, FakeClock, FakeGenerator

TTL_MS = 6 * 60 * 60 * 1000


@pytest.fixture
def env():
    clock = FakeClock()
    store = GameStore(ttl_ms=TTL_MS, clock=clock)
    generator = FakeGenerator(hint={"clue": "travel", "count": 2, "targets": ["bridge", "harbor"]})
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_board_generator] = lambda: BoardGenerator(generator, rng=random.Random(3))
    app.dependency_overrides[get_hint_advisor] = lambda: HintAdvisor(generator)
    try:
        yield {"client": TestClient(app), "store": store, "clock": clock, "generator": generator}
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(env):
    return env["client"]


@pytest.fixture
def blue_game_id(env):
    return env["store"].create(WORDS, BLUE_FIRST_TYPES, Team.BLUE).id


def test_new_game_returns_full_record(client, env):
    response = client.post("/game/new", json={"aiTeam": "red"})
    assert response.status_code == 201
    data = response.json()

    assert data["id"].startswith("g_")
    assert data["words"] == WORDS
    assert len(data["types"]) == 25
    assert data["revealed"] == [False] * 25
    assert data["types"].count(data["startingPlayer"]) == 9
    assert data["aiTeam"] == "red"
    assert data["createdAt"] == env["clock"].now
    assert env["store"].count() == 1


def test_new_game_without_body(client):
    response = client.post("/game/new")
    assert response.status_code == 201
    assert response.json()["aiTeam"] is None


def test_new_game_generation_failure(client, env):
    env["generator"].words = WORDS[:20]
    response = client.post("/game/new")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create game"}
    assert env["store"].count() == 0


def test_new_game_generator_down(client, env):
    env["generator"].error = LLMServiceError("timeout")
    assert client.post("/game/new").status_code == 500


def test_get_game(client, blue_game_id):
    data = client.get(f"/game/{blue_game_id}").json()
    assert data["id"] == blue_game_id
    assert data["types"] == [t.value for t in BLUE_FIRST_TYPES]
    assert data["startingPlayer"] == "blue"


def test_unknown_and_expired_games_look_the_same(client, env, blue_game_id):
    missing = client.get("/game/g_nope")
    env["clock"].advance(TTL_MS)
    expired = client.get(f"/game/{blue_game_id}")

    assert missing.status_code == expired.status_code == 404
    assert missing.json() == expired.json() == {"error": "not found"}


def test_get_game_just_before_expiry(client, env, blue_game_id):
    env["clock"].advance(TTL_MS - 1)
    assert client.get(f"/game/{blue_game_id}").status_code == 200


def test_red_spymaster_view(client, blue_game_id):
    response = client.get(f"/game/{blue_game_id}/spymaster/red")
    assert response.status_code == 200
    data = response.json()

    assert data["team"] == "red"
    assert data["words"] == WORDS
    assert data["types"][:9] == ["neutral"] * 9
    assert data["types"][9:17] == ["red"] * 8
    assert data["types"][17:24] == ["neutral"] * 7
    assert data["types"][24] == "assassin"


def test_spymaster_unknown_team(client, blue_game_id):
    response = client.get(f"/game/{blue_game_id}/spymaster/green")
    assert response.status_code == 400
    assert "team" in response.json()["error"].lower()


def test_spymaster_unknown_game(client):
    assert client.get("/game/g_nope/spymaster/blue").status_code == 404


def test_operative_view(client, blue_game_id):
    client.post(f"/game/{blue_game_id}/reveal", json={"index": 10})
    data = client.get(f"/game/{blue_game_id}/operative").json()

    assert data["types"][10] == "red"
    assert [t for i, t in enumerate(data["types"]) if i != 10] == [None] * 24
    assert data["revealed"][10] is True
    assert "createdAt" not in data


def test_reveal_is_idempotent(client, blue_game_id):
    first = client.post(f"/game/{blue_game_id}/reveal", json={"index": 4}).json()
    second = client.post(f"/game/{blue_game_id}/reveal", json={"index": 4}).json()
    assert first["revealed"] == second["revealed"]
    assert sum(second["revealed"]) == 1


def test_reveal_out_of_range(client, blue_game_id):
    response = client.post(f"/game/{blue_game_id}/reveal", json={"index": 25})
    assert response.status_code == 400


def test_hint(client, env, blue_game_id):
    client.post(f"/game/{blue_game_id}/reveal", json={"index": 0})
    response = client.post(f"/game/{blue_game_id}/hint", json={"team": "blue"})

    assert response.status_code == 200
    assert response.json() == {"clue": "travel", "count": 2, "targets": ["bridge", "harbor"]}
    context = env["generator"].hint_contexts[-1]
    assert "apple" not in context.my_words
    assert context.assassin == "zipper"


def test_hint_ignores_client_board(client, env, blue_game_id):
    body = {"team": "blue", "words": ["x"] * 25, "types": ["red"] * 25, "revealed": [True] * 25}
    assert client.post(f"/game/{blue_game_id}/hint", json=body).status_code == 200
    assert env["generator"].hint_contexts[-1].my_words == WORDS[:9]


def test_hint_without_targets_omits_key(client, env, blue_game_id):
    env["generator"].hint = {"clue": "travel", "count": 1}
    assert client.post(f"/game/{blue_game_id}/hint", json={"team": "blue"}).json() == {"clue": "travel", "count": 1}


def test_hint_rejects_board_word(client, env, blue_game_id):
    env["generator"].hint = {"clue": "apple", "count": 1}
    response = client.post(f"/game/{blue_game_id}/hint", json={"team": "blue"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to get AI hint"}


def test_hint_errors(client, blue_game_id):
    assert client.post("/game/g_nope/hint", json={"team": "blue"}).status_code == 404
    assert client.post(f"/game/{blue_game_id}/hint", json={"team": "purple"}).status_code == 400


def test_health_reports_game_count(client, blue_game_id):
    data = client.get("/health").json()
    assert data["ok"] is True
    assert data["games"] == 1


def test_health_llm_never_raises(client, env):
    env["generator"].error = LLMServiceError("down")
    data = client.get("/health/llm").json()
    assert data["ok"] is False
    assert "error" in data


def test_health_llm_reports_misshapen_answer(client):
    llm = SimpleNamespace(chat=Mock(return_value={"choices": ["oops"]}))
    app.dependency_overrides[get_board_generator] = lambda: BoardGenerator(LLMTextGenerator(llm))

    response = client.get("/health/llm")

    assert response.status_code == 200
    assert response.json()["ok"] is False


@pytest.mark.parametrize(
    "path,body",
    [
        ("/game/{id}/reveal", {"index": "abc"}),
        ("/game/{id}/reveal", {}),
        ("/game/{id}/hint", {"words": WORDS}),
        ("/game/new", {"aiTeam": "green"}),
    ],
)
def test_malformed_bodies_use_error_shape(client, env, blue_game_id, path, body):
    response = client.post(path.format(id=blue_game_id), json=body)

    assert response.status_code == 422
    data = response.json()
    assert set(data) == {"error"}
    assert data["error"].startswith("Invalid request")
    assert env["store"].get(blue_game_id).revealed == [False] * 25


def test_root_is_the_ping_without_front(client):
    assert client.get("/").json() == {"ok": True, "service": "codenames-backend"}
    assert client.get("/ping").json()["ok"] is True


def test_front_owns_root_when_static_dir_exists(tmp_path, env):
    (tmp_path / "index.html").write_text("<!doctype html><title>Codenames</title>")
    front_app = FastAPI()
    front_app.include_router(game_router)
    front_app.dependency_overrides[get_store] = lambda: env["store"]
    install_front(front_app, str(tmp_path))
    front = TestClient(front_app)
    game_id = env["store"].create(WORDS, BLUE_FIRST_TYPES, Team.BLUE).id

    page = front.get(f"/?view=spymaster&id={game_id}&team=blue")
    assert page.status_code == 200
    assert "Codenames" in page.text
    assert page.headers["content-type"].startswith("text/html")

    assert front.get("/ping").json()["ok"] is True
    assert front.get(f"/game/{game_id}").json()["id"] == game_id


def test_missing_static_dir_keeps_the_ping(tmp_path):
    front_app = FastAPI()
    install_front(front_app, str(tmp_path / "dist"))
    assert TestClient(front_app).get("/").json()["ok"] is True
