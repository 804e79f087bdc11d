from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.validators import require_choice, require_int, require_non_empty
from ..core.enums import RecordStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Company, Department, Designation, Option
from .repository import CompanyRepository, DepartmentRepository, DesignationRepository


class OrganizationService:
    """Use cases for the company > department > designation catalogue."""

    def __init__(
        self,
        companies: CompanyRepository,
        departments: DepartmentRepository,
        designations: DesignationRepository,
    ):
        self._companies = companies
        self._departments = departments
        self._designations = designations

    # Companies
    def list_companies(self) -> Sequence[Company]:
        return self._companies.list_all()

    def get_company(self, company_id: int) -> Company:
        company = self._companies.get_by_id(company_id)
        if not company:
            raise NotFoundError(f"Không tìm thấy công ty #{company_id}")
        return company

    def create_company(self, data: Mapping[str, object]) -> int:
        name = require_non_empty(data.get("name"), "Tên công ty")
        status = require_choice(data.get("status"), RecordStatus, "Trạng thái", default=RecordStatus.ACTIVE)
        return self._companies.create(name=name, status=status)

    def update_company(self, company_id: int, data: Mapping[str, object]) -> None:
        self.get_company(company_id)
        name = require_non_empty(data.get("name"), "Tên công ty")
        status = require_choice(data.get("status"), RecordStatus, "Trạng thái", default=RecordStatus.ACTIVE)
        self._companies.update(company_id=company_id, name=name, status=status)

    # Departments
    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def get_department(self, department_id: int) -> Department:
        department = self._departments.get_by_id(department_id)
        if not department:
            raise NotFoundError(f"Không tìm thấy phòng ban #{department_id}")
        return department

    def _department_fields(self, data: Mapping[str, object]):
        company_id = require_int(data.get("company_id"), "company_id")
        self.get_company(company_id)
        name = require_non_empty(data.get("name"), "Tên phòng ban")
        status = require_choice(data.get("status"), RecordStatus, "Trạng thái", default=RecordStatus.ACTIVE)
        return company_id, name, status

    def create_department(self, data: Mapping[str, object]) -> int:
        company_id, name, status = self._department_fields(data)
        return self._departments.create(company_id=company_id, name=name, status=status)

    def update_department(self, department_id: int, data: Mapping[str, object]) -> None:
        self.get_department(department_id)
        company_id, name, status = self._department_fields(data)
        self._departments.update(department_id=department_id, company_id=company_id, name=name, status=status)

    def departments_for_company(self, company_id: int) -> Sequence[Department]:
        return self._departments.list_for_company(company_id)

    # Designations
    def list_designations(self) -> Sequence[Designation]:
        return self._designations.list_all()

    def get_designation(self, designation_id: int) -> Designation:
        designation = self._designations.get_by_id(designation_id)
        if not designation:
            raise NotFoundError(f"Không tìm thấy chức danh #{designation_id}")
        return designation

    def _designation_fields(self, data: Mapping[str, object]):
        company_id = require_int(data.get("company_id"), "company_id")
        department_id = require_int(data.get("department_id"), "department_id")
        department = self.get_department(department_id)
        if department.company_id != company_id:
            raise ValidationError("Phòng ban không thuộc công ty đã chọn")
        name = require_non_empty(data.get("name"), "Tên chức danh")
        status = require_choice(data.get("status"), RecordStatus, "Trạng thái", default=RecordStatus.ACTIVE)
        return company_id, department_id, name, status

    def create_designation(self, data: Mapping[str, object]) -> int:
        company_id, department_id, name, status = self._designation_fields(data)
        return self._designations.create(
            company_id=company_id,
            department_id=department_id,
            name=name,
            status=status,
        )

    def update_designation(self, designation_id: int, data: Mapping[str, object]) -> None:
        self.get_designation(designation_id)
        company_id, department_id, name, status = self._designation_fields(data)
        self._designations.update(
            designation_id=designation_id,
            company_id=company_id,
            department_id=department_id,
            name=name,
            status=status,
        )

    def designations_for_department(self, department_id: int) -> Sequence[Designation]:
        return self._designations.list_for_department(department_id)

    # Dropdowns
    def active_company_options(self) -> Sequence[Option]:
        return self._companies.list_active_options()

    def active_department_options(self, *, company_id: int | None = None) -> Sequence[Option]:
        return self._departments.list_active_options(company_id=company_id)

    # References from visitors and employees
    def ensure_references(
        self,
        *,
        company_id: Optional[int] = None,
        department_id: Optional[int] = None,
        designation_id: Optional[int] = None,
    ) -> None:
        """Raise ValidationError when a given id points at no catalogue row."""

        if company_id is not None and not self._companies.get_by_id(company_id):
            raise ValidationError(f"Công ty #{company_id} không tồn tại")
        if department_id is not None and not self._departments.get_by_id(department_id):
            raise ValidationError(f"Phòng ban #{department_id} không tồn tại")
        if designation_id is not None and not self._designations.get_by_id(designation_id):
            raise ValidationError(f"Chức danh #{designation_id} không tồn tại")
