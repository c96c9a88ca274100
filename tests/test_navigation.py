from rentflow.client.navigation import build_navigation, is_permitted


def test_landlord_navigation():
    nav = build_navigation("landlord")
    assert [i.title for i in nav.main] == [
        "Dashboard", "Properties", "Tenants", "Payments", "Maintenance", "Expenses",
    ]
    assert [i.title for i in nav.support] == ["Settings", "Help"]


def test_tenant_navigation():
    nav = build_navigation("tenant")
    assert [(i.title, i.url) for i in nav.main] == [("My Home", "/tenant")]
    assert [i.title for i in nav.support] == ["Settings", "Help"]


def test_unknown_role_gets_support_only():
    for role in ("admin", None, ""):
        nav = build_navigation(role)
        assert nav.main == ()
        assert nav.paths == {"/settings", "/help"}


def test_is_permitted():
    assert is_permitted("landlord", "/payments")
    assert is_permitted("landlord", "payments/")
    assert is_permitted("landlord", "/")
    assert not is_permitted("tenant", "/payments")
    assert is_permitted("tenant", "/tenant")
    assert is_permitted("tenant", "/help")
    assert not is_permitted("admin", "/")
