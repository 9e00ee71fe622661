# smoothie_sync/app/services/identity.py
"""
Contributor identity resolution.
"""
from __future__ import annotations

from typing import Optional

from smoothie_sync.app.infra.auth.base import AuthSessionProvider


class IdentityResolver:
    """
    Resolves the contributor identity of the current actor.

    Nickname wins over email; anonymous sessions resolve to None. The value is
    recomputed on every call because sign-in, sign-out and nickname edits can
    happen without the catalog being reloaded.
    """

    def __init__(self, sessions: AuthSessionProvider):
        self._sessions = sessions

    def current(self) -> Optional[str]:
        user = self._sessions.current_user()
        if user is None:
            return None
        if user.nickname and user.nickname.strip():
            return user.nickname.strip()
        if user.email and user.email.strip():
            return user.email.strip()
        return None

    def contributor_for(self, guest_name: Optional[str] = None) -> Optional[str]:
        """Identity to write as `contributor`: the session identity, else the guest name."""
        identity = self.current()
        if identity:
            return identity
        if guest_name and guest_name.strip():
            return guest_name.strip()
        return None
