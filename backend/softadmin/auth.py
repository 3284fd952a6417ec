from softadmin.errors import Forbidden, Unauthenticated
from softadmin.models.session import Identity
from softadmin.models.user import ADMIN
from softadmin.sessions import SessionStore

ADMIN_HOME = "/admin-list.html"
USER_HOME = "/user-index.html"
LOGIN_PAGE = "/index.html"


def require_session(sessions: SessionStore, token: str | None) -> Identity:
    identity = sessions.lookup(token)
    if identity is None:
        raise Unauthenticated()
    return identity


def require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise Forbidden()


def home_page(role: str) -> str:
    return ADMIN_HOME if role == ADMIN else USER_HOME
