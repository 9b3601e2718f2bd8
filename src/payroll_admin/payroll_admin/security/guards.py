from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.exceptions import AuthenticationError
from .resolver import AuthContext, AuthorizationResolver


def current_auth() -> AuthContext:
    ctx = g.get("auth")
    if ctx is None:
        raise AuthenticationError()
    return ctx


class Guards:
    """View decorators that run the resolver and gate on permission or role."""

    def __init__(self, resolver: AuthorizationResolver):
        self._resolver = resolver

    def _authenticate(self) -> AuthContext:
        ctx = self._resolver.resolve(request.headers.get("Authorization"))
        g.auth = ctx
        return ctx

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            self._authenticate()
            return view(*args, **kwargs)

        return wrapper

    def permission_required(self, permission_name: str):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                ctx = self._authenticate()
                self._resolver.require_permission(ctx, permission_name)
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def role_required(self, role_name: str):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                ctx = self._authenticate()
                self._resolver.require_role(ctx, role_name)
                return view(*args, **kwargs)

            return wrapper

        return decorator
