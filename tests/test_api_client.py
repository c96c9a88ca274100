from datetime import date, timedelta

import pytest
import requests

from conftest import API_URL, PASSWORD, UnreachableAdapter, signup
from rentflow.client import ApiClient, MemorySessionStore, QueryCache
from rentflow.client.errors import ApiError, NetworkError, describe_error

PROPERTY = {
    "name": "Sunset View", "address": "12 Ngong Road", "city": "Nairobi", "state": "Nairobi",
    "zipCode": "00100", "type": "apartment", "units": 2, "monthlyRent": 45000,
}


@pytest.fixture
def logged_in(api, client):
    signup(client)
    api.auth.login("landlord@example.com", PASSWORD)
    return api


def test_login_stores_session(logged_in):
    session = logged_in.session_store.get_session()
    assert session.email == "landlord@example.com"
    assert session.role == "landlord"
    assert session.access_token
    assert logged_in.auth.me()["email"] == "landlord@example.com"


def test_bad_credentials(api, client):
    signup(client)
    with pytest.raises(ApiError) as info:
        api.auth.login("landlord@example.com", "Wrong12345")
    assert info.value.status == 401
    assert str(info.value) == "401: Authentication failed. Please log in again."
    assert api.session_store.get_session() is None


def test_gets_are_cached_until_a_write(logged_in, adapter):
    assert logged_in.properties.list() == []
    assert logged_in.properties.list() == []
    gets = [c for c in adapter.calls if c == ("GET", "/api/properties")]
    assert len(gets) == 1

    created = logged_in.properties.create(PROPERTY)
    listed = logged_in.properties.list()
    assert [p["id"] for p in listed] == [created["id"]]
    gets = [c for c in adapter.calls if c == ("GET", "/api/properties")]
    assert len(gets) == 2


def test_creating_a_tenant_refreshes_properties(logged_in):
    prop = logged_in.properties.create(PROPERTY)
    assert logged_in.properties.get(prop["id"])["occupiedUnits"] == 0

    today = date.today()
    logged_in.tenants.create({
        "firstName": "Sarah", "lastName": "Johnson", "email": "sarah@example.com",
        "phone": "+254700000001", "propertyId": prop["id"],
        "leaseStart": today.isoformat(), "leaseEnd": (today + timedelta(days=365)).isoformat(),
        "rentAmount": 45000,
    })
    assert logged_in.properties.get(prop["id"])["occupiedUnits"] == 1


def test_not_found_message(logged_in):
    with pytest.raises(ApiError) as info:
        logged_in.properties.get("missing")
    assert info.value.status == 404
    assert str(info.value) == "404: The requested resource was not found."


def test_validation_message_comes_from_body(logged_in):
    with pytest.raises(ApiError) as info:
        logged_in.properties.create({"name": "x"})
    assert str(info.value) == "400: Invalid property data"
    assert "address" in info.value.body["details"]


def test_unauthenticated_request(api):
    with pytest.raises(ApiError) as info:
        api.dashboard.metrics()
    assert info.value.status == 401


def test_logout_clears_session_and_cache(logged_in):
    logged_in.properties.list()
    logged_in.auth.logout()
    assert logged_in.session_store.get_session() is None
    assert len(logged_in.cache) == 0


def test_refresh_replaces_access_token(logged_in):
    before = logged_in.session_store.get_session()
    token = logged_in.auth.refresh()
    after = logged_in.session_store.get_session()
    assert after.access_token == token
    assert after.refresh_token == before.refresh_token


def test_notifications_are_built_locally(logged_in, adapter):
    feed = logged_in.dashboard.notifications()
    assert feed.state == "empty"
    assert feed.message == "No new notifications"
    assert ("GET", "/api/dashboard/upcoming-payments") in adapter.calls
    assert ("GET", "/api/dashboard/expiring-leases") in adapter.calls


def test_unreachable_server():
    http = requests.Session()
    http.mount(API_URL, UnreachableAdapter())
    api = ApiClient(base_url=API_URL, session_store=MemorySessionStore(), cache=QueryCache(), http=http)
    with pytest.raises(NetworkError) as info:
        api.properties.list()

    report = describe_error(info.value)
    assert report.network is True
    assert report.title == "Something went wrong"
    assert report.message.startswith("Unable to connect to the server")


def test_describe_plain_error():
    report = describe_error(ValueError("boom"))
    assert report.network is False
    assert report.message == "boom"
    assert report.actions == ("retry", "reload")


def test_tenant_links_account_with_invite(logged_in, api, client):
    prop = logged_in.properties.create(PROPERTY)
    today = date.today()
    tenant = logged_in.tenants.create({
        "firstName": "Sarah", "lastName": "Johnson", "email": "sarah@example.com",
        "phone": "+254700000001", "propertyId": prop["id"],
        "leaseStart": today.isoformat(), "leaseEnd": (today + timedelta(days=365)).isoformat(),
        "rentAmount": 45000,
    })
    invite = logged_in.tenants.invite(tenant["id"])
    assert invite["tenantId"] == tenant["id"]

    logged_in.auth.logout()
    api.auth.signup({"username": "sarah", "email": "sarah@example.com", "password": PASSWORD,
                     "role": "tenant"})
    with pytest.raises(ApiError) as info:
        api.tenant_portal.me()
    assert info.value.status == 404

    api.tenant_portal.link(invite["inviteCode"])
    assert api.tenant_portal.me()["id"] == tenant["id"]
