from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..core.policy import RolePolicy, policy_for
from ..users.model import User

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class RequestContext:
    """Who is calling. Built per request from the session id and the user store."""

    user: User

    @property
    def user_id(self) -> int:
        return self.user.user_id

    @property
    def role(self) -> Role:
        return self.user.role

    @property
    def policy(self) -> RolePolicy:
        return policy_for(self.user.role)


def make_guard(container):
    """Decorator factory: authenticate, check the role policy, pass the context as first argument.

    Missing or stale sessions raise AuthenticationError (401); roles whose policy
    does not list the endpoint raise AuthorizationError (403).
    """

    def guard(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                user = container.auth_service.resolve_session_user(session.get(SESSION_USER_KEY))
            except AuthenticationError:
                session.clear()
                raise
            ctx = RequestContext(user=user)
            if not ctx.policy.allows(request.endpoint):
                raise AuthorizationError("You do not have permission to access this endpoint")
            return view(ctx, *args, **kwargs)

        return wrapper

    return guard
