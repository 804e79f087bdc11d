from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import QRStatus
from .model import Visitor, VisitorDetails


class VisitorRepository(Protocol):
    def list_all(self) -> Sequence[Visitor]:
        raise NotImplementedError

    def get_by_id(self, visitor_id: int) -> Optional[Visitor]:
        raise NotImplementedError

    def create(self, *, details: VisitorDetails, image: Optional[str] = None) -> int:
        """Insert a visitor with ``qr_status='unused'`` and return the new id."""

        raise NotImplementedError

    def update(self, *, visitor_id: int, details: VisitorDetails, image: Optional[str] = None) -> bool:
        """Overwrite descriptive fields; ``image`` is only replaced when given."""

        raise NotImplementedError

    def update_qr_status(
        self,
        *,
        visitor_id: int,
        value: QRStatus,
        expected_prior: Optional[QRStatus] = None,
    ) -> int:
        """Set ``qr_status`` and return the number of rows affected.

        With ``expected_prior`` the update only applies when the current value matches.
        """

        raise NotImplementedError

    def toggle_status(self, visitor_id: int) -> int:
        raise NotImplementedError
