from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import QRStatus, RedemptionOutcome


@dataclass(frozen=True)
class VisitorDetails:
    """Descriptive fields of a visit, as entered at the front desk."""

    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    company_id: Optional[int] = None
    department_id: Optional[int] = None
    designation_id: Optional[int] = None
    whom_to_meet: Optional[int] = None
    purpose: Optional[str] = None
    aadhar_no: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class Visitor:
    """Thực thể miền (domain): một lượt khách đến thăm."""

    id: int
    details: VisitorDetails
    qr_status: QRStatus
    status: bool
    image: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def signed_out(self) -> bool:
        return self.qr_status == QRStatus.USED

    def to_dict(self) -> dict:
        data = {"id": self.id}
        data.update(asdict(self.details))
        data.update(
            {
                "image": self.image,
                "qr_status": self.qr_status.value,
                "status": 1 if self.status else 0,
                "created_at": self.created_at.isoformat() if self.created_at else None,
            }
        )
        return data


@dataclass(frozen=True)
class TokenPayload:
    visitor_id: int
    url: str
    data_url: str


@dataclass(frozen=True)
class RedemptionResult:
    visitor_id: int
    outcome: RedemptionOutcome

    @property
    def first_redemption(self) -> bool:
        return self.outcome == RedemptionOutcome.SIGNED_OUT
