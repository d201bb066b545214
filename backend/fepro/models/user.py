"""System user records. Row shape only, no authentication logic lives here."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"

    @property
    def description(self) -> str:
        return {
            UserRole.ADMIN: "Администратор",
            UserRole.MANAGER: "Менеджер",
            UserRole.USER: "Пользователь",
        }[self]


@dataclass
class User:
    id: UUID
    username: str
    email: str
    password_hash: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
