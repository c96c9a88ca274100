from datetime import date, timedelta
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from rentflow import create_app
from rentflow.client import ApiClient, MemorySessionStore, QueryCache
from rentflow.config import TestConfig
from rentflow.extensions import db as _db

API_URL = "http://rentflow.test"
PASSWORD = "Sup3rSecret"


class FlaskAdapter(BaseAdapter):
    """requests transport that hands every request to a Flask test client."""

    def __init__(self, flask_client):
        super().__init__()
        self.flask_client = flask_client
        self.calls = []

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        headers = {k: v for k, v in request.headers.items()
                   if k.lower() not in ("content-length", "content-type")}
        self.calls.append((request.method, parts.path))
        resp = self.flask_client.open(
            parts.path,
            method=request.method,
            query_string=parts.query,
            headers=headers,
            data=request.body,
            content_type=request.headers.get("Content-Type"),
        )
        out = requests.Response()
        out.status_code = resp.status_code
        out.reason = resp.status.split(" ", 1)[1] if " " in resp.status else ""
        out.headers = CaseInsensitiveDict(dict(resp.headers.items()))
        out._content = resp.get_data()
        out.encoding = "utf-8"
        out.url = request.url
        out.request = request
        return out

    def close(self):
        pass


class UnreachableAdapter(BaseAdapter):
    def send(self, request, **kwargs):
        raise requests.ConnectionError("Failed to establish a new connection")

    def close(self):
        pass


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def signup(client, email="landlord@example.com", username=None, role="landlord", **extra):
    body = {
        "username": username or email.split("@")[0],
        "email": email,
        "password": PASSWORD,
        "role": role,
    }
    body.update(extra)
    resp = client.post("/api/auth/signup", json=body)
    assert resp.status_code == 201, resp.get_json()
    data = resp.get_json()
    return {"Authorization": f"Bearer {data['accessToken']}"}, data["user"]


@pytest.fixture
def auth(client):
    headers, _ = signup(client)
    return headers


@pytest.fixture
def other_auth(client):
    headers, _ = signup(client, email="someone.else@example.com")
    return headers


def make_property(client, headers, **overrides):
    body = {
        "name": "Sunset View",
        "address": "12 Ngong Road",
        "city": "Nairobi",
        "state": "Nairobi",
        "zipCode": "00100",
        "type": "apartment",
        "units": 4,
        "monthlyRent": 45000,
    }
    body.update(overrides)
    resp = client.post("/api/properties", json=body, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def make_tenant(client, headers, property_id, **overrides):
    today = date.today()
    body = {
        "firstName": "Sarah",
        "lastName": "Johnson",
        "email": "sarah@example.com",
        "phone": "+254700000001",
        "propertyId": property_id,
        "unit": "A1",
        "leaseStart": (today - timedelta(days=300)).isoformat(),
        "leaseEnd": (today + timedelta(days=65)).isoformat(),
        "rentAmount": 45000,
    }
    body.update(overrides)
    resp = client.post("/api/tenants", json=body, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def make_payment(client, headers, tenant, **overrides):
    body = {
        "tenantId": tenant["id"],
        "propertyId": tenant["propertyId"],
        "amount": 1000,
        "dueDate": (date.today() + timedelta(days=5)).isoformat(),
    }
    body.update(overrides)
    resp = client.post("/api/payments", json=body, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def adapter(client):
    return FlaskAdapter(client)


@pytest.fixture
def api(adapter):
    http = requests.Session()
    http.mount(API_URL, adapter)
    return ApiClient(base_url=API_URL, session_store=MemorySessionStore(), cache=QueryCache(), http=http)
