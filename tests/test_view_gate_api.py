"""
Tests for the view-list navigation gate endpoint.
"""

import httpx
import orjson
from catalog_fakes import SAMPLE_VIEWS, MockCatalogClient, html_transport

from viewgate.core.rules import CURRENT_CONFIG_KEY, LEGACY_CONFIG_KEY
from viewgate.external_services.view_catalog_client import ViewCatalogClient
from viewgate.services.config_store import save_config

GATE_URL = "/api/apps/42/view-gate"


def _conditional(view_id, match_type, *codes):
    return {"viewId": view_id, "alwaysHidden": False, "conditionalHidden": {"enabled": True, "matchType": match_type, "groupCodes": list(codes)}}


def test_gate_without_config_stays(api_client, override_catalog):
    mock = override_catalog(MockCatalogClient(views=SAMPLE_VIEWS))

    resp = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"action": "stay", "target_view_id": None, "location": None, "hidden_views": {}}
    assert mock.view_calls == []
    assert mock.user_group_calls == []


def test_gate_redirects_from_hidden_view(api_client, db_session, override_catalog):
    override_catalog(MockCatalogClient(views=SAMPLE_VIEWS))
    save_config(db_session, "42", {LEGACY_CONFIG_KEY: '["5001"]'})

    resp = api_client.post(
        GATE_URL,
        json={"current_view_id": 5001, "user_code": "alice", "current_url": "https://host.test/k/m/42/?view=5001"},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["action"] == "redirect"
    assert body["target_view_id"] == "5002"
    assert body["location"] == "https://host.test/k/m/42/?view=5002"
    assert body["hidden_views"] == {"5001": "HIDDEN"}


def test_gate_uses_user_groups_for_conditions(api_client, db_session, override_catalog):
    mock = override_catalog(MockCatalogClient(views=SAMPLE_VIEWS, user_groups={"alice": ["sales"], "bob": ["ops"]}))
    rules = [_conditional("5001", "includes", "sales"), _conditional("5002", "notIncludes", "sales")]
    save_config(db_session, "42", {CURRENT_CONFIG_KEY: orjson.dumps(rules).decode()})

    alice = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"}).json()
    bob = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "bob"}).json()

    assert alice["action"] == "redirect"
    assert alice["target_view_id"] == "5002"
    assert alice["hidden_views"] == {"5001": "HIDDEN"}
    assert bob["action"] == "stay"
    assert bob["hidden_views"] == {"5002": "HIDDEN"}
    assert mock.user_group_calls == ["alice", "bob"]


def test_gate_sends_user_to_default_location_when_nothing_is_visible(api_client, db_session, override_catalog):
    override_catalog(MockCatalogClient(views=SAMPLE_VIEWS))
    save_config(db_session, "42", {LEGACY_CONFIG_KEY: '["5001", "5002", "5003"]'})

    body = api_client.post(GATE_URL, json={"current_view_id": "5003", "user_code": "alice"}).json()
    assert body["action"] == "redirect_default"
    assert body["target_view_id"] is None
    assert body["location"] == "/k/"


def test_gate_filters_menu_when_catalog_is_unavailable(api_client, db_session, override_catalog):
    override_catalog(MockCatalogClient(fail_views=True))
    save_config(db_session, "42", {LEGACY_CONFIG_KEY: '["5001", "5003"]'})

    resp = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["action"] == "filter_menu"
    assert body["location"] is None
    assert body["hidden_views"] == {"5001": "HIDDEN", "5003": "HIDDEN"}


def test_gate_reports_user_group_lookup_failure(api_client, db_session, override_catalog):
    override_catalog(MockCatalogClient(views=SAMPLE_VIEWS, fail_user_groups=True))
    save_config(db_session, "42", {CURRENT_CONFIG_KEY: orjson.dumps([_conditional("5001", "includes", "sales")]).decode()})

    resp = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"})
    assert resp.status_code == 502
    assert resp.json()["detail"] == "could not load user groups"


def test_gate_requires_user_code(api_client):
    resp = api_client.post(GATE_URL, json={"current_view_id": "5001"})
    assert resp.status_code == 422


def test_health(api_client):
    resp = api_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"


def test_gate_location_is_relative_without_current_url(api_client, db_session, override_catalog):
    override_catalog(MockCatalogClient(views=SAMPLE_VIEWS))
    save_config(db_session, "42", {LEGACY_CONFIG_KEY: '["5001"]'})

    body = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"}).json()
    assert body["action"] == "redirect"
    assert body["location"] == "?view=5002"


def _login_page_client():
    http = httpx.AsyncClient(base_url="https://host.test", transport=html_transport())
    return ViewCatalogClient("https://host.test", client=http)


def test_gate_filters_menu_when_catalog_answers_with_html(api_client, db_session, override_catalog):
    override_catalog(_login_page_client())
    save_config(db_session, "42", {LEGACY_CONFIG_KEY: '["5001"]'})

    resp = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["action"] == "filter_menu"
    assert resp.json()["hidden_views"] == {"5001": "HIDDEN"}


def test_gate_reports_html_user_group_response(api_client, db_session, override_catalog):
    override_catalog(_login_page_client())
    save_config(db_session, "42", {CURRENT_CONFIG_KEY: orjson.dumps([_conditional("5001", "includes", "sales")]).decode()})

    resp = api_client.post(GATE_URL, json={"current_view_id": "5001", "user_code": "alice"})
    assert resp.status_code == 502
    assert resp.json()["detail"] == "could not load user groups"
