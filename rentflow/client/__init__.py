from .api import ApiClient
from .cache import QueryCache
from .errors import ApiError, ClientError, NetworkError, describe_error
from .guard import RouteGuard
from .navigation import build_navigation, is_permitted
from .session import FileSessionStore, MemorySessionStore, Session, SessionStore
