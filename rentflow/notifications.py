"""Aggregates upcoming payments and expiring leases into one notification feed."""
from dataclasses import asdict, dataclass, field
from typing import List, Optional

LOADING = "loading"
EMPTY = "empty"
READY = "ready"

EMPTY_MESSAGE = "No new notifications"


@dataclass(frozen=True)
class Notification:
    kind: str  # overdue_payment, pending_payment, separator, expiring_lease
    id: Optional[str] = None
    title: str = ""
    message: str = ""
    detail: str = ""
    date: Optional[str] = None


SEPARATOR = Notification(kind="separator")


@dataclass(frozen=True)
class NotificationFeed:
    state: str
    badge_count: int = 0
    items: List[Notification] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def show_badge(self):
        return self.badge_count > 0

    def to_dict(self):
        return {
            "state": self.state,
            "badgeCount": self.badge_count,
            "message": self.message,
            "items": [asdict(item) for item in self.items],
        }


def _payment_item(payment, kind, title):
    return Notification(
        kind=kind,
        id=payment.get("id"),
        title=title,
        message=f"{payment.get('tenantName')} owes {payment.get('amount')}",
        detail=payment.get("propertyName") or "",
        date=payment.get("dueDate"),
    )


def _lease_item(lease):
    return Notification(
        kind="expiring_lease",
        id=lease.get("id"),
        title="Lease Expiring",
        message=f"{lease.get('firstName')} {lease.get('lastName')}'s lease is ending",
        detail=lease.get("propertyName") or "",
        date=lease.get("leaseEnd"),
    )


def build_feed(upcoming_payments, expiring_leases) -> NotificationFeed:
    """Either input is None while it is still being fetched.

    Pending payments are listed but never counted in the badge. Groups keep
    the order they were fetched in.
    """
    if upcoming_payments is None or expiring_leases is None:
        return NotificationFeed(state=LOADING)

    overdue = [p for p in upcoming_payments if p.get("status") == "overdue"]
    pending = [p for p in upcoming_payments if p.get("status") == "pending"]

    items = [_payment_item(p, "overdue_payment", "Overdue Payment") for p in overdue]
    items += [_payment_item(p, "pending_payment", "Payment Due") for p in pending]
    if expiring_leases:
        items.append(SEPARATOR)
        items += [_lease_item(lease) for lease in expiring_leases]

    badge = len(overdue) + len(expiring_leases)
    if not items:
        return NotificationFeed(state=EMPTY, message=EMPTY_MESSAGE)
    return NotificationFeed(state=READY, badge_count=badge, items=items)
