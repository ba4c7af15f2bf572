"""The caller's identity, resolved once per request from the signed session."""

from dataclasses import dataclass

from storefront.identity.user import ADMIN_ROLES

SESSION_USER_KEY = "user_id"
SESSION_ROLE_KEY = "role"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @classmethod
    def from_session(cls, session) -> "Actor | None":
        user_id = session.get(SESSION_USER_KEY)
        role = session.get(SESSION_ROLE_KEY)
        if not user_id or not role:
            return None
        return cls(user_id=str(user_id), role=role)


def sign_in(request, user) -> Actor:
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)
    request.session[SESSION_ROLE_KEY] = user.role
    actor = Actor(user_id=str(user.id), role=user.role)
    request.state.actor = actor
    return actor


def sign_out(request) -> None:
    request.session.clear()
    request.state.actor = None
