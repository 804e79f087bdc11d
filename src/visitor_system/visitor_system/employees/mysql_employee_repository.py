from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.id, e.first_name, e.last_name, e.email, e.phone, e.joining_date, e.gender,
           e.company_id, e.department_id, e.designation_id, e.status, e.password,
           e.remarks, e.image,
           c.name AS company_name, d.name AS department_name, des.name AS designation_name
    FROM employees e
    LEFT JOIN companies c ON c.id = e.company_id
    LEFT JOIN departments d ON d.id = e.department_id
    LEFT JOIN designations des ON des.id = e.designation_id
"""

_WRITABLE = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "joining_date",
        "gender",
        "company_id",
        "department_id",
        "designation_id",
        "status",
        "password",
        "remarks",
        "image",
    }
)


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        id=int(r["id"]),
        first_name=r["first_name"],
        last_name=r.get("last_name"),
        email=r.get("email"),
        phone=r.get("phone"),
        joining_date=r.get("joining_date"),
        gender=r.get("gender"),
        company_id=r.get("company_id"),
        department_id=r.get("department_id"),
        designation_id=r.get("designation_id"),
        status=RecordStatus(r["status"]),
        password_hash=r["password"],
        remarks=r.get("remarks"),
        image=r.get("image"),
        company_name=r.get("company_name"),
        department_name=r.get("department_name"),
        designation_name=r.get("designation_name"),
    )


def _checked(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - _WRITABLE
    if unknown:
        raise ValueError(f"Unsupported employee columns: {sorted(unknown)}")
    return fields


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY e.id DESC")
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(self, *, fields: Dict[str, Any]) -> int:
        fields = _checked(fields)
        columns = ", ".join(fields)
        placeholders = ", ".join(["%s"] * len(fields))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO employees ({columns}) VALUES ({placeholders})", tuple(fields.values()))
            return int(cur.lastrowid)

    def update(self, *, employee_id: int, fields: Dict[str, Any]) -> bool:
        if not fields:
            return False
        assignments, params = build_update(_checked(fields))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {assignments} WHERE id=%s", (*params, int(employee_id)))
            return cur.rowcount > 0

    def delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_id),))
            return cur.rowcount > 0
