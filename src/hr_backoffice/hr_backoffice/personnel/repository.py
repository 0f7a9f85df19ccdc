from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Personnel


class PersonnelRepository(Protocol):
    def list_active_personnel(self) -> Sequence[Personnel]:
        raise NotImplementedError

    def get_personnel(self, user_id: int) -> Optional[Personnel]:
        raise NotImplementedError
