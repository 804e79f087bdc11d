from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RecordStatus
from .model import Company, Department, Designation, Option


class CompanyRepository(Protocol):
    def list_all(self) -> Sequence[Company]:
        raise NotImplementedError

    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def create(self, *, name: str, status: RecordStatus) -> int:
        raise NotImplementedError

    def update(self, *, company_id: int, name: str, status: RecordStatus) -> bool:
        raise NotImplementedError

    def list_active_options(self) -> Sequence[Option]:
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        """Departments joined with their company name."""

        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, company_id: int, name: str, status: RecordStatus) -> int:
        raise NotImplementedError

    def update(self, *, department_id: int, company_id: int, name: str, status: RecordStatus) -> bool:
        raise NotImplementedError

    def list_active_options(self, *, company_id: Optional[int] = None) -> Sequence[Option]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[Department]:
        raise NotImplementedError


class DesignationRepository(Protocol):
    def list_all(self) -> Sequence[Designation]:
        """Designations joined with company and department names."""

        raise NotImplementedError

    def get_by_id(self, designation_id: int) -> Optional[Designation]:
        raise NotImplementedError

    def create(self, *, company_id: int, department_id: int, name: str, status: RecordStatus) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        designation_id: int,
        company_id: int,
        department_id: int,
        name: str,
        status: RecordStatus,
    ) -> bool:
        raise NotImplementedError

    def list_for_department(self, department_id: int) -> Sequence[Designation]:
        raise NotImplementedError
