from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Employee


class UserDirectory(Protocol):
    """Read-only employee directory.

    Note (DIP): the services depend on this interface, never on a concrete DB.
    """

    def list_all(self) -> Sequence[Employee]:
        """Active employees only."""
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        """The employee if they exist and are active."""
        raise NotImplementedError

    def list_by_ids(self, user_ids: Iterable[int]) -> Sequence[Employee]:
        """Employees with the given ids, deactivated ones included (report labels)."""
        raise NotImplementedError
