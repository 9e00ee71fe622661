# smoothie_sync/app/infra/auth/base.py
"""
Abstract base class for the auth session provider.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from smoothie_sync.app.domain.models import AuthUser


class AuthSessionProvider(ABC):
    """
    Implementations:
    - SupabaseAuthSession: Supabase GoTrue session held by the supabase client
    """

    @abstractmethod
    def current_user(self) -> Optional[AuthUser]:
        """
        Read the current session. Never touches the network, since it is
        called from the event loop on every identity decision.

        Returns:
            The signed-in user's email/nickname, or None when anonymous
        """
        pass

    def load_session(self) -> Optional[AuthUser]:
        """
        Re-read the session from its backing store.

        May block on the network (token refresh); async callers run it in a
        threadpool. The default simply returns current_user().
        """
        return self.current_user()
