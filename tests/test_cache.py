from rentflow.client.cache import QueryCache


def test_fetch_calls_loader_once():
    cache = QueryCache()
    calls = []

    def loader():
        calls.append(1)
        return ["row"]

    assert cache.fetch("/api/properties", loader) == ["row"]
    assert cache.fetch("/api/properties", loader) == ["row"]
    assert len(calls) == 1


def test_entries_never_expire_by_default():
    now = [0.0]
    cache = QueryCache(clock=lambda: now[0])
    cache.set("/api/tenants", [])
    now[0] = 10 ** 9
    assert "/api/tenants" in cache


def test_finite_stale_time():
    now = [0.0]
    cache = QueryCache(stale_time=30, clock=lambda: now[0])
    cache.set("/api/tenants", [])
    now[0] = 31
    assert cache.get("/api/tenants", "miss") == "miss"


def test_prefix_invalidation():
    cache = QueryCache()
    for key in ("/api/payments", "/api/payments/1", "/api/payments?status=paid",
                "/api/payments-archive", "/api/dashboard/metrics"):
        cache.set(key, key)

    assert cache.invalidate("/api/payments") == 3
    assert "/api/payments-archive" in cache
    assert "/api/dashboard/metrics" in cache

    assert cache.invalidate() == 2
    assert len(cache) == 0
