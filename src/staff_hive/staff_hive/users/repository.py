from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User; services depend on this, not on MySQL."""

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError
