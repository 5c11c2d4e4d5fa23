from __future__ import annotations

from typing import Optional, Protocol

from .model import OfficeLocation


class OfficeLocationRepository(Protocol):
    def get_primary(self) -> Optional[OfficeLocation]:
        """The active location marked as primary, if any."""

        raise NotImplementedError
