"""End-to-end tests of the draw pages through the Flask test client."""

import pytest

from cacahuete.extensions import db
from cacahuete.models import StoredRecord
from cacahuete.services.store import PersistedState, RecordStore

from .conftest import RESET_CODE


SELECTION_ERROR = "Ce choix n’est pas possible."


def _page(response):
    assert response.status_code == 200
    return response.get_data(as_text=True)


def _state(app):
    with app.app_context():
        return RecordStore(app.config["CACAHUETE_STORAGE_KEY"]).load()


def _seed(app, state):
    with app.app_context():
        RecordStore(app.config["CACAHUETE_STORAGE_KEY"]).save(state)


def _commit(client, giver, receiver):
    return client.post("/confirm", data={"giver": giver, "selected": receiver})


def test_home_renders_counter_and_names(client):
    html = _page(client.get("/"))

    assert "Cacahuète de Noël" in html
    assert "0 / 8 participants ont déjà encodé leur cacahuète." in html
    assert html.count('name="giver"') == 8
    assert "Valérie" in html


def test_pick_then_self_choice_stays_on_selection(client):
    html = _page(client.post("/pick", data={"giver": "Arnaud"}))
    assert "Tu es : Arnaud" in html
    assert html.count('name="candidate"') == 8
    assert SELECTION_ERROR not in html

    html = _page(client.post("/choose", data={"giver": "Arnaud", "candidate": "Arnaud"}))
    assert "Tu es : Arnaud" in html
    assert SELECTION_ERROR in html


def test_full_draw_is_persisted(app, client):
    html = _page(client.post("/choose", data={"giver": "Arnaud", "candidate": "Julie"}))
    assert "Tu es : Arnaud" in html
    assert "Tu as sélectionné : Julie" in html
    assert 'name="selected" value="Julie"' in html

    html = _page(_commit(client, "Arnaud", "Julie"))
    assert "Merci !" in html

    state = _state(app)
    assert state.assignments == {"Arnaud": "Julie"}
    assert state.taken == {"Julie"}
    assert state.completed_count == 1
    assert "1 / 8 participants" in _page(client.get("/"))


def test_taken_receiver_is_refused(app, client):
    _commit(client, "Arnaud", "Julie")

    html = _page(client.post("/choose", data={"giver": "Fanny", "candidate": "Julie"}))

    assert "Tu es : Fanny" in html
    assert SELECTION_ERROR in html
    assert _state(app).completed_count == 1


def test_assigned_giver_click_is_ignored(client):
    _commit(client, "Arnaud", "Julie")

    html = _page(client.post("/pick", data={"giver": "Arnaud"}))

    assert "Qui es-tu ?" in html
    assert "Tu es : Arnaud" not in html


def test_cancel_returns_to_selection(app, client):
    html = _page(client.post("/cancel", data={"giver": "Arnaud", "selected": "Julie"}))

    assert "Tu es : Arnaud" in html
    assert "Choisis une personne à gâter" in html
    assert _state(app) == PersistedState.empty()


def test_stale_confirm_goes_back_to_selection(app, client):
    _commit(client, "Arnaud", "Julie")

    html = _page(_commit(client, "Fanny", "Julie"))

    assert "Tu es : Fanny" in html
    assert "Merci !" not in html
    assert _state(app).assignments == {"Arnaud": "Julie"}


def test_replayed_pages_cannot_redraw_assigned_giver(app, client):
    _commit(client, "Arnaud", "Julie")

    html = _page(client.post("/choose", data={"giver": "Arnaud", "candidate": "Fanny"}))
    assert "Qui es-tu ?" in html

    html = _page(_commit(client, "Arnaud", "Fanny"))
    assert "Qui es-tu ?" in html
    assert "Merci !" not in html

    state = _state(app)
    assert state.assignments == {"Arnaud": "Julie"}
    assert state.taken == {"Julie"}
    assert state.completed_count == 1


def test_unknown_giver_goes_home(app, client):
    html = _page(client.post("/choose", data={"giver": "Mallory", "candidate": "Julie"}))
    assert "Qui es-tu ?" in html

    html = _page(_commit(client, "", "Julie"))
    assert "Qui es-tu ?" in html
    assert _state(app) == PersistedState.empty()


def test_corrupt_record_renders_like_empty(app, client):
    with app.app_context():
        db.session.add(StoredRecord(storage_key=app.config["CACAHUETE_STORAGE_KEY"], payload="}{"))
        db.session.commit()

    assert "0 / 8 participants" in _page(client.get("/"))
    _page(_commit(client, "Arnaud", "Julie"))
    assert _state(app).completed_count == 1


def test_secret_reset_wipes_and_offers_reload(app, client):
    _commit(client, "Arnaud", "Julie")

    html = _page(client.get(f"/?reset={RESET_CODE}"))

    assert "Réinitialisation effectuée" in html
    assert "Recharger la page" in html
    assert 'href="/"' in html
    assert "Qui es-tu ?" not in html
    assert _state(app) == PersistedState.empty()


def test_wrong_reset_code_shows_home(app, client):
    _commit(client, "Arnaud", "Julie")

    html = _page(client.get("/?reset=nope"))

    assert "Qui es-tu ?" in html
    assert _state(app).completed_count == 1


@pytest.fixture
def expired_app(app_factory):
    return app_factory(CACAHUETE_EXPIRES_AT="2020-01-01T00:00:00Z")


def test_expired_app_wipes_even_with_reset(expired_app):
    _seed(expired_app, PersistedState(assignments={"Arnaud": "Julie"}, taken={"Julie"}, completed_count=1))
    client = expired_app.test_client()

    html = _page(client.get(f"/?reset={RESET_CODE}"))

    assert "Cacahuète expirée" in html
    assert "31/12/2019" in html
    assert "Réinitialisation effectuée" not in html
    assert "Qui es-tu ?" not in html
    assert _state(expired_app) == PersistedState.empty()


def test_expired_app_refuses_posted_draws(expired_app):
    client = expired_app.test_client()

    html = _page(_commit(client, "Arnaud", "Julie"))

    assert "Cacahuète expirée" in html
    assert _state(expired_app) == PersistedState.empty()


def test_csrf_protects_posts(app_factory):
    app = app_factory(WTF_CSRF_ENABLED=True)
    client = app.test_client()

    assert client.post("/pick", data={"giver": "Arnaud"}).status_code == 400
    assert 'name="csrf_token"' in _page(client.get("/"))
