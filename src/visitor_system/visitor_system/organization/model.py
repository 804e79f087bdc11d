from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from ..core.enums import RecordStatus


@dataclass(frozen=True)
class Company:
    id: int
    name: str
    status: RecordStatus

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class Department:
    id: int
    company_id: int
    name: str
    status: RecordStatus
    company_name: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class Designation:
    id: int
    company_id: int
    department_id: int
    name: str
    status: RecordStatus
    company_name: Optional[str] = None
    department_name: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class Option:
    """Cặp id/name dùng cho dropdown."""

    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
