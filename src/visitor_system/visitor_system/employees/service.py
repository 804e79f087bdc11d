from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import (
    optional_choice,
    optional_date,
    optional_int,
    optional_str,
    require_choice,
    require_min_length,
    require_non_empty,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Gender, RecordStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..organization.service import OrganizationService
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("last_name", "email", "phone", "remarks")
_ID_FIELDS = ("company_id", "department_id", "designation_id")


def _hash_password(password: Optional[str], confirm_password: Optional[str]) -> str:
    if password != confirm_password:
        raise ValidationError("Mật khẩu xác nhận không khớp")
    require_min_length(password, "Mật khẩu", MIN_PASSWORD_LENGTH)
    return generate_password_hash(password)


class EmployeeService:
    """Use case: quản lý nhân viên (người được khách đến gặp)."""

    def __init__(self, employees: EmployeeRepository, *, organization: Optional[OrganizationService] = None):
        self._employees = employees
        self._organization = organization

    def _check_references(self, fields: Mapping[str, Any]) -> None:
        if self._organization is None:
            return
        self._organization.ensure_references(
            company_id=fields.get("company_id"),
            department_id=fields.get("department_id"),
            designation_id=fields.get("designation_id"),
        )

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Không tìm thấy nhân viên #{employee_id}")
        return employee

    def create_employee(self, form: Mapping[str, Any], *, image: Optional[str] = None) -> int:
        fields: Dict[str, Any] = {
            "first_name": require_non_empty(form.get("first_name"), "Tên nhân viên"),
            "joining_date": optional_date(form.get("joining_date"), "joining_date"),
            "status": require_choice(form.get("status"), RecordStatus, "Trạng thái", default=RecordStatus.ACTIVE).value,
            "password": _hash_password(form.get("password"), form.get("confirm_password")),
            "image": image,
        }
        gender = optional_choice(form.get("gender"), Gender, "Giới tính")
        fields["gender"] = gender.value if gender else None
        for name in _TEXT_FIELDS:
            fields[name] = optional_str(form.get(name))
        for name in _ID_FIELDS:
            fields[name] = optional_int(form.get(name), name)

        self._check_references(fields)
        employee_id = self._employees.create(fields=fields)
        logger.info("employee %s created", employee_id)
        return employee_id

    def update_employee(self, employee_id: int, form: Mapping[str, Any], *, image: Optional[str] = None) -> None:
        """Partial update: only fields present in ``form`` are written."""

        self.get_employee(employee_id)
        fields: Dict[str, Any] = {}

        if "first_name" in form:
            fields["first_name"] = require_non_empty(form.get("first_name"), "Tên nhân viên")
        if "joining_date" in form:
            fields["joining_date"] = optional_date(form.get("joining_date"), "joining_date")
        if "gender" in form:
            gender = optional_choice(form.get("gender"), Gender, "Giới tính")
            fields["gender"] = gender.value if gender else None
        if "status" in form:
            fields["status"] = require_choice(form.get("status"), RecordStatus, "Trạng thái").value
        for name in _TEXT_FIELDS:
            if name in form:
                fields[name] = optional_str(form.get(name))
        for name in _ID_FIELDS:
            if name in form:
                fields[name] = optional_int(form.get(name), name)

        if form.get("password"):
            fields["password"] = _hash_password(form.get("password"), form.get("confirm_password"))
        if image:
            fields["image"] = image

        if not fields:
            raise ValidationError("Không có thông tin nào để cập nhật")
        self._check_references(fields)
        self._employees.update(employee_id=employee_id, fields=fields)

    def delete_employee(self, employee_id: int) -> None:
        if not self._employees.delete(employee_id):
            raise NotFoundError(f"Không tìm thấy nhân viên #{employee_id}")
        logger.info("employee %s deleted", employee_id)
