from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Entitas domain: peserta magang atau admin.

    Catatan: data pengguna dikelola sistem lain; modul ini hanya membacanya.
    """

    user_id: int
    full_name: str
    username: str
    role: Role
    email: Optional[str] = None
    instansi: Optional[str] = None
    is_active: bool = True
