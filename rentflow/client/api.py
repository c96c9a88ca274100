"""Authenticated access to the RentFlow HTTP API."""
import json
import logging
import os
from urllib.parse import urlencode

import requests

from ..notifications import build_feed
from .cache import QueryCache
from .errors import ApiError, NetworkError, status_message
from .session import FileSessionStore, Session

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"
DASHBOARD = "/api/dashboard"


def _extract_message(resp):
    """`error` or `message` from a JSON body, else the body text, else the reason phrase."""
    text = resp.text
    if not text:
        return resp.reason
    try:
        body = json.loads(text)
    except ValueError:
        return text
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or text
    return text


class ApiClient:
    """Thin request facade.

    The bearer token is read from `session_store` before every call, never
    cached here. GETs go through `cache`; writes invalidate the keys they
    affect. Nothing is retried.
    """

    def __init__(self, base_url=None, session_store=None, cache=None, timeout=None, http=None):
        self.base_url = (base_url or os.getenv("RENTFLOW_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.session_store = session_store or FileSessionStore()
        self.cache = cache if cache is not None else QueryCache()
        self.timeout = timeout
        self.http = http or requests.Session()

        self.properties = Resource(self, "/api/properties")
        self.tenants = TenantsResource(self, "/api/tenants", also=("/api/properties",))
        self.payments = PaymentsResource(self, "/api/payments")
        self.maintenance = Resource(self, "/api/maintenance")
        self.expenses = ExpensesResource(self, "/api/expenses")
        self.dashboard = Dashboard(self)
        self.auth = Auth(self)
        self.tenant_portal = TenantPortal(self)

    # -- transport ---------------------------------------------------------
    def request(self, method, path, body=None, params=None, raw=False, authenticated=True, token=None):
        headers = {"Accept": "application/json"}
        if authenticated and token is None:
            session = self.session_store.get_session()
            token = session.access_token if session else None
        if authenticated and token:
            headers["Authorization"] = f"Bearer {token}"
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body)

        url = self.base_url + path
        log.debug("%s %s", method, url)
        try:
            resp = self.http.request(method, url, params=params, data=data, headers=headers,
                                     timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise NetworkError() from e

        if not resp.ok:
            message = status_message(resp.status_code, _extract_message(resp))
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            raise ApiError(resp.status_code, message, body=payload)

        if raw:
            return resp.content
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    @staticmethod
    def cache_key(path, params=None):
        if not params:
            return path
        return path + "?" + urlencode(sorted(params.items()))

    def get(self, path, params=None):
        params = {k: v for k, v in (params or {}).items() if v is not None}
        return self.cache.fetch(self.cache_key(path, params), lambda: self.request("GET", path, params=params))

    def mutate(self, method, path, body=None, invalidate=()):
        result = self.request(method, path, body=body)
        self.cache.invalidate(*invalidate)
        return result


class Resource:
    """list/get/create/update/delete against one collection endpoint."""

    def __init__(self, client, path, also=()):
        self.client = client
        self.path = path
        self.affects = (path, DASHBOARD) + tuple(also)

    def list(self, **filters):
        return self.client.get(self.path, params=filters)

    def get(self, record_id):
        return self.client.get(f"{self.path}/{record_id}")

    def create(self, data):
        return self.client.mutate("POST", self.path, body=data, invalidate=self.affects)

    def update(self, record_id, data):
        return self.client.mutate("PATCH", f"{self.path}/{record_id}", body=data, invalidate=self.affects)

    def delete(self, record_id):
        return self.client.mutate("DELETE", f"{self.path}/{record_id}", invalidate=self.affects)


class TenantsResource(Resource):
    def invite(self, tenant_id):
        return self.client.mutate("POST", f"{self.path}/{tenant_id}/invite", invalidate=(self.path,))


class PaymentsResource(Resource):
    def transactions(self, payment_id):
        return self.client.get(f"{self.path}/{payment_id}/transactions")

    def record_transaction(self, payment_id, data):
        return self.client.mutate(
            "POST", f"{self.path}/{payment_id}/transactions", body=data, invalidate=self.affects
        )

    def invoice(self, payment_id):
        return self.client.get(f"{self.path}/{payment_id}/invoice")

    def invoice_pdf(self, payment_id) -> bytes:
        return self.client.request("GET", f"{self.path}/{payment_id}/invoice",
                                   params={"format": "pdf"}, raw=True)

    def receipt_pdf(self, payment_id) -> bytes:
        return self.client.request("GET", f"{self.path}/{payment_id}/receipt", raw=True)


class ExpensesResource(Resource):
    def report(self, start_date=None, end_date=None):
        return self.client.get(f"{self.path}/report", params={"startDate": start_date, "endDate": end_date})


class Dashboard:
    def __init__(self, client):
        self.client = client

    def metrics(self):
        return self.client.get(f"{DASHBOARD}/metrics")

    def revenue(self):
        return self.client.get(f"{DASHBOARD}/revenue")

    def activities(self):
        return self.client.get(f"{DASHBOARD}/activities")

    def upcoming_payments(self):
        return self.client.get(f"{DASHBOARD}/upcoming-payments")

    def expiring_leases(self):
        return self.client.get(f"{DASHBOARD}/expiring-leases")

    def notifications(self):
        """Feed assembled locally from the two cached dashboard collections."""
        return build_feed(self.upcoming_payments(), self.expiring_leases())


class TenantPortal:
    def __init__(self, client):
        self.client = client

    def me(self):
        return self.client.get("/api/tenant/me")

    def dashboard(self):
        return self.client.get("/api/tenant/dashboard")

    def link(self, invite_code):
        return self.client.mutate("POST", "/api/tenant/link", body={"inviteCode": invite_code},
                                  invalidate=("/api/tenant",))


class Auth:
    def __init__(self, client):
        self.client = client

    def _start_session(self, result):
        user = result["user"]
        self.client.session_store.save(Session(
            access_token=result["accessToken"],
            refresh_token=result.get("refreshToken"),
            email=user.get("email"),
            role=user.get("role"),
        ))
        self.client.cache.invalidate()
        return user

    def login(self, email, password, remember_me=False):
        body = {"email": email, "password": password, "rememberMe": remember_me}
        return self._start_session(self.client.request("POST", "/api/auth/login", body=body,
                                                       authenticated=False))

    def signup(self, data):
        return self._start_session(self.client.request("POST", "/api/auth/signup", body=data,
                                                       authenticated=False))

    def refresh(self):
        session = self.client.session_store.get_session()
        if session is None or not session.refresh_token:
            raise ApiError(401, status_message(401, None))
        access = self.client.request("POST", "/api/auth/refresh", token=session.refresh_token)["accessToken"]
        self.client.session_store.save(Session(access, session.refresh_token, session.email, session.role))
        return access

    def logout(self):
        self.client.session_store.clear()
        self.client.cache.invalidate()

    def me(self):
        return self.client.get("/api/auth/me")["user"]

    def update_profile(self, data):
        result = self.client.mutate("PATCH", "/api/auth/profile", body=data,
                                    invalidate=("/api/auth/me", DASHBOARD, "/api/payments"))
        return result["user"]
