from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as listed by the user directory.

    Read-only to the attendance core.
    """

    user_id: int
    email: str
    name: str = ""
    is_manager: bool = False
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return self.name or self.email
