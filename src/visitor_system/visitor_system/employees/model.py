from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import RecordStatus


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): nhân viên, cũng là người khách đến gặp."""

    id: int
    first_name: str
    last_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    joining_date: Optional[date]
    gender: Optional[str]
    company_id: Optional[int]
    department_id: Optional[int]
    designation_id: Optional[int]
    status: RecordStatus
    password_hash: str
    remarks: Optional[str] = None
    image: Optional[str] = None
    company_name: Optional[str] = None
    department_name: Optional[str] = None
    designation_name: Optional[str] = None

    def to_public_dict(self) -> dict:
        """Everything except the password hash."""

        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "joining_date": self.joining_date.isoformat() if self.joining_date else None,
            "gender": self.gender,
            "company_id": self.company_id,
            "department_id": self.department_id,
            "designation_id": self.designation_id,
            "status": self.status.value,
            "remarks": self.remarks,
            "image": self.image,
            "company_name": self.company_name,
            "department_name": self.department_name,
            "designation_name": self.designation_name,
        }
