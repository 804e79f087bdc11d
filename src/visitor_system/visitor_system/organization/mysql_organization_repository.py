from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Company, Department, Designation, Option
from .repository import CompanyRepository, DepartmentRepository, DesignationRepository


def _to_department(r: Dict[str, Any]) -> Department:
    return Department(
        id=int(r["id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        status=RecordStatus(r["status"]),
        company_name=r.get("company_name"),
    )


def _to_designation(r: Dict[str, Any]) -> Designation:
    return Designation(
        id=int(r["id"]),
        company_id=int(r["company_id"]),
        department_id=int(r["department_id"]),
        name=r["name"],
        status=RecordStatus(r["status"]),
        company_name=r.get("company_name"),
        department_name=r.get("department_name"),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, status FROM companies ORDER BY name")
            return [Company(id=int(r["id"]), name=r["name"], status=RecordStatus(r["status"])) for r in fetchall(cur)]

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, status FROM companies WHERE id=%s", (int(company_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Company(id=int(r["id"]), name=r["name"], status=RecordStatus(r["status"]))

    def create(self, *, name: str, status: RecordStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO companies(name, status) VALUES(%s,%s)", (name, status.value))
            return int(cur.lastrowid)

    def update(self, *, company_id: int, name: str, status: RecordStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE companies SET name=%s, status=%s WHERE id=%s", (name, status.value, int(company_id)))
            return cur.rowcount > 0

    def list_active_options(self) -> Sequence[Option]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM companies WHERE status=%s ORDER BY name", (RecordStatus.ACTIVE.value,))
            return [Option(id=int(r["id"]), name=r["name"]) for r in fetchall(cur)]


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.id, d.company_id, d.name, d.status, c.name AS company_name
                FROM departments d
                LEFT JOIN companies c ON c.id = d.company_id
                ORDER BY d.id DESC
                """
            )
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, company_id, name, status FROM departments WHERE id=%s", (int(department_id),))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def create(self, *, company_id: int, name: str, status: RecordStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO departments(company_id, name, status) VALUES(%s,%s,%s)",
                (int(company_id), name, status.value),
            )
            return int(cur.lastrowid)

    def update(self, *, department_id: int, company_id: int, name: str, status: RecordStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET company_id=%s, name=%s, status=%s WHERE id=%s",
                (int(company_id), name, status.value, int(department_id)),
            )
            return cur.rowcount > 0

    def list_active_options(self, *, company_id: Optional[int] = None) -> Sequence[Option]:
        sql = "SELECT id, name FROM departments WHERE status=%s"
        params: list[object] = [RecordStatus.ACTIVE.value]
        if company_id is not None:
            sql += " AND company_id=%s"
            params.append(int(company_id))
        sql += " ORDER BY name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [Option(id=int(r["id"]), name=r["name"]) for r in fetchall(cur)]

    def list_for_company(self, company_id: int) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, company_id, name, status FROM departments WHERE company_id=%s ORDER BY name",
                (int(company_id),),
            )
            return [_to_department(r) for r in fetchall(cur)]


class MySQLDesignationRepository(DesignationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Designation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.id, d.company_id, d.department_id, d.name, d.status,
                       c.name AS company_name, dept.name AS department_name
                FROM designations d
                LEFT JOIN companies c ON c.id = d.company_id
                LEFT JOIN departments dept ON dept.id = d.department_id
                ORDER BY d.id DESC
                """
            )
            return [_to_designation(r) for r in fetchall(cur)]

    def get_by_id(self, designation_id: int) -> Optional[Designation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, company_id, department_id, name, status FROM designations WHERE id=%s",
                (int(designation_id),),
            )
            r = fetchone(cur)
            return _to_designation(r) if r else None

    def create(self, *, company_id: int, department_id: int, name: str, status: RecordStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO designations(company_id, department_id, name, status) VALUES(%s,%s,%s,%s)",
                (int(company_id), int(department_id), name, status.value),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        designation_id: int,
        company_id: int,
        department_id: int,
        name: str,
        status: RecordStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE designations
                SET company_id=%s, department_id=%s, name=%s, status=%s
                WHERE id=%s
                """,
                (int(company_id), int(department_id), name, status.value, int(designation_id)),
            )
            return cur.rowcount > 0

    def list_for_department(self, department_id: int) -> Sequence[Designation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, department_id, name, status
                FROM designations
                WHERE department_id=%s
                ORDER BY name
                """,
                (int(department_id),),
            )
            return [_to_designation(r) for r in fetchall(cur)]
