import json
import random
from unittest.mock import MagicMock

import pytest
import requests

from app import create_app
from metaphors_lucky_dip import CACHE_KEY, AppState, MemoryStore, Phase


def _response(html):
    resp = MagicMock()
    resp.json.return_value = {"parse": {"text": {"*": html}}}
    return resp


@pytest.fixture
def state():
    return AppState(store=MemoryStore({CACHE_KEY: json.dumps(["белая ворона"])}),
                    http=MagicMock(), rng=random.Random(3))


@pytest.fixture
def client(state):
    app = create_app(state)
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_index_renders_a_random_expression(client, state):
    state.http.get.return_value = _response('<div class="mw-parser-output"><p>Un original.</p></div>')

    resp = client.get("/")

    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert '<div id="app">' in body
    assert "белая ворона" in body
    assert "<p>Un original.</p>" in body
    assert 'action="/reload"' in body


def test_reload_dispatches_the_reload_control(client, state):
    state.http.get.side_effect = [_response("<p>un</p>"), _response("<p>deux</p>")]
    client.get("/")

    resp = client.post("/reload")

    assert resp.status_code == 200
    assert "<p>deux</p>" in resp.get_data(as_text=True)
    assert state.generation == 2


def test_reload_after_an_error_starts_over(client, state):
    state.http.get.side_effect = [requests.ConnectionError("network down"), _response("<p>ok</p>")]

    body = client.get("/").get_data(as_text=True)
    assert "Erreur de chargement : " in body
    assert "network down" in body
    assert state.phase is Phase.ERRORED

    body = client.post("/reload").get_data(as_text=True)
    assert "<p>ok</p>" in body
    assert state.phase is Phase.DISPLAYED


def test_api_random_returns_cleaned_definition(client, state):
    state.http.get.return_value = _response(
        '<div class="mw-parser-output"><table>x</table><p>hello</p></div>')

    resp = client.get("/api/random")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["title"] == "белая ворона"
    assert data["definition"] == "<p>hello</p>"
    assert data["url"].startswith("https://fr.wiktionary.org/wiki/")


def test_api_random_reports_remote_failure(client, state):
    state.http.get.side_effect = requests.Timeout("read timed out")

    resp = client.get("/api/random")

    assert resp.status_code == 502
    assert "read timed out" in resp.get_json()["error"]
