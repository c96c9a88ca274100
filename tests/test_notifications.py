from rentflow.notifications import EMPTY, LOADING, READY, build_feed

OVERDUE = {"id": "p1", "status": "overdue", "tenantName": "Amanda Lee", "amount": 2900,
           "propertyName": "Oak Street", "dueDate": "2026-01-01"}
PENDING = {"id": "p2", "status": "pending", "tenantName": "Sarah Johnson", "amount": 2500,
           "propertyName": "Sunset View", "dueDate": "2026-02-01"}
LEASE = {"id": "t1", "firstName": "Emily", "lastName": "Rodriguez", "propertyName": "Oak Street",
         "leaseEnd": "2026-02-15"}


def test_loading_until_both_inputs_arrive():
    assert build_feed(None, []).state == LOADING
    assert build_feed([], None).state == LOADING
    assert build_feed(None, None).badge_count == 0


def test_empty_feed():
    feed = build_feed([], [])
    assert feed.state == EMPTY
    assert feed.message == "No new notifications"
    assert not feed.show_badge


def test_badge_counts_overdue_and_leases_only():
    feed = build_feed([PENDING, OVERDUE], [LEASE])
    assert feed.state == READY
    assert feed.badge_count == 2


def test_pending_only_is_listed_without_badge():
    feed = build_feed([PENDING], [])
    assert feed.state == READY
    assert feed.badge_count == 0
    assert [i.kind for i in feed.items] == ["pending_payment"]


def test_ordering_and_separator():
    second_overdue = dict(OVERDUE, id="p3")
    feed = build_feed([PENDING, OVERDUE, second_overdue], [LEASE])
    assert [i.kind for i in feed.items] == [
        "overdue_payment", "overdue_payment", "pending_payment", "separator", "expiring_lease",
    ]
    # fetch order within a group is preserved
    assert [i.id for i in feed.items[:2]] == ["p1", "p3"]
    assert feed.items[-1].message == "Emily Rodriguez's lease is ending"
    assert feed.items[0].message == "Amanda Lee owes 2900"


def test_no_separator_without_leases():
    feed = build_feed([OVERDUE], [])
    assert "separator" not in [i.kind for i in feed.items]


def test_to_dict_shape():
    body = build_feed([OVERDUE], [LEASE]).to_dict()
    assert body["state"] == "ready"
    assert body["badgeCount"] == 2
    assert body["items"][0]["kind"] == "overdue_payment"
