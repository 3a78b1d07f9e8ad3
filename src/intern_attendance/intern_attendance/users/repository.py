from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository User (direktori pengguna, hanya-baca).

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role, *, active_only: bool = True) -> Sequence[User]:
        raise NotImplementedError

    def names_by_id(self, user_ids: Iterable[int]) -> Mapping[int, str]:
        raise NotImplementedError
