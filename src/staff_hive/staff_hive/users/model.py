from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Account that owns employees and their records.

    Plain data object; storage lives in the repositories.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
