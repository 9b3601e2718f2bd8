from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.enums import AuthProvider


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(*, auth_provider: AuthProvider, password_hash: Optional[str], candidate: str) -> bool:
    """Compare a candidate password with the stored hash.

    Identities from an external provider have no local password and never match.
    """
    if auth_provider != AuthProvider.LOCAL or not password_hash or not candidate:
        return False
    try:
        return check_password_hash(password_hash, candidate)
    except (ValueError, TypeError):
        # e.g. placeholder or corrupted hashes
        return False
