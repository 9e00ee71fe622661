# smoothie_sync/app/infra/auth/supabase_session.py
from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client, create_client

from smoothie_sync.app.config import Settings
from smoothie_sync.app.domain.models import AuthUser
from smoothie_sync.app.infra.auth.base import AuthSessionProvider

logger = logging.getLogger(__name__)


def _user_to_auth_user(user: Any) -> Optional[AuthUser]:
    if user is None:
        return None
    nickname = None
    meta = getattr(user, "user_metadata", None) or {}
    if isinstance(meta, dict):
        value = meta.get("nickname")
        if isinstance(value, str) and value.strip():
            nickname = value.strip()
    return AuthUser(email=getattr(user, "email", None), nickname=nickname)


class SupabaseAuthSession(AuthSessionProvider):
    """
    Session held by a supabase client (email/password auth, nickname in user_metadata).

    The user is cached from every auth response; current_user() only reads
    that cache. get_session() can refresh the token over HTTP, so it is only
    reached through load_session().
    """

    def __init__(self, client: Client):
        self.client = client
        self._user: Optional[AuthUser] = None

    def current_user(self) -> Optional[AuthUser]:
        return self._user

    def load_session(self) -> Optional[AuthUser]:
        try:
            session = self.client.auth.get_session()
        except Exception as exc:
            logger.warning("auth.session_unavailable error=%s", exc)
            session = None
        self._user = _user_to_auth_user(getattr(session, "user", None)) if session else None
        return self._user

    def sign_in(self, email: str, password: str) -> Optional[AuthUser]:
        res = self.client.auth.sign_in_with_password({"email": email, "password": password})
        self._user = _user_to_auth_user(res.user)
        return self._user

    def sign_up(self, email: str, password: str, nickname: str) -> Optional[AuthUser]:
        res = self.client.auth.sign_up(
            {
                "email": email,
                "password": password,
                "options": {"data": {"nickname": nickname.strip()}},
            }
        )
        user = _user_to_auth_user(res.user)
        # no session until the email is confirmed
        if getattr(res, "session", None) is not None:
            self._user = user
        return user

    def sign_out(self) -> None:
        self.client.auth.sign_out()
        self._user = None

    def update_nickname(self, nickname: str) -> Optional[AuthUser]:
        # existing recipes keep the contributor they were written with
        res = self.client.auth.update_user({"data": {"nickname": nickname.strip()}})
        self._user = _user_to_auth_user(res.user)
        return self._user

    def change_password(self, new_password: str) -> None:
        res = self.client.auth.update_user({"password": new_password})
        if res is not None and getattr(res, "user", None) is not None:
            self._user = _user_to_auth_user(res.user)


def create_supabase_client(config: Settings) -> Client:
    return create_client(config.supabase_base_url, config.SUPABASE_ANON_KEY)
