from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class NavItem:
    title: str
    url: str


@dataclass(frozen=True)
class Navigation:
    main: Tuple[NavItem, ...]
    support: Tuple[NavItem, ...]

    @property
    def paths(self):
        return {item.url for item in self.main + self.support}


SUPPORT_ITEMS = (
    NavItem("Settings", "/settings"),
    NavItem("Help", "/help"),
)

NAVIGATION: Dict[str, Tuple[NavItem, ...]] = {
    "landlord": (
        NavItem("Dashboard", "/"),
        NavItem("Properties", "/properties"),
        NavItem("Tenants", "/tenants"),
        NavItem("Payments", "/payments"),
        NavItem("Maintenance", "/maintenance"),
        NavItem("Expenses", "/expenses"),
    ),
    "tenant": (
        NavItem("My Home", "/tenant"),
    ),
}


def build_navigation(role) -> Navigation:
    """Unknown or missing roles get the support section only."""
    return Navigation(main=NAVIGATION.get(role, ()), support=SUPPORT_ITEMS)


def is_permitted(role, path) -> bool:
    path = "/" + path.strip("/") if path != "/" else path
    return path in build_navigation(role).paths
