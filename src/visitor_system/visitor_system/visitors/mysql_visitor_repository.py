from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import QRStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Visitor, VisitorDetails
from .repository import VisitorRepository

_COLUMNS = """
    id, first_name, last_name, email, phone, gender,
    company_id, department_id, designation_id, whom_to_meet,
    purpose, aadhar_no, address, image, qr_status, status, created_at
"""


def _to_visitor(r: Dict[str, Any]) -> Visitor:
    return Visitor(
        id=int(r["id"]),
        details=VisitorDetails(
            first_name=r["first_name"],
            last_name=r.get("last_name"),
            email=r.get("email"),
            phone=r.get("phone"),
            gender=r.get("gender"),
            company_id=r.get("company_id"),
            department_id=r.get("department_id"),
            designation_id=r.get("designation_id"),
            whom_to_meet=r.get("whom_to_meet"),
            purpose=r.get("purpose"),
            aadhar_no=r.get("aadhar_no"),
            address=r.get("address"),
        ),
        qr_status=QRStatus(r["qr_status"]),
        status=bool(r["status"]),
        image=r.get("image"),
        created_at=r.get("created_at"),
    )


def _detail_fields(details: VisitorDetails) -> Dict[str, Any]:
    return {
        "first_name": details.first_name,
        "last_name": details.last_name,
        "email": details.email,
        "phone": details.phone,
        "gender": details.gender,
        "company_id": details.company_id,
        "department_id": details.department_id,
        "designation_id": details.designation_id,
        "whom_to_meet": details.whom_to_meet,
        "purpose": details.purpose,
        "aadhar_no": details.aadhar_no,
        "address": details.address,
    }


class MySQLVisitorRepository(VisitorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Visitor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM visitors ORDER BY id DESC")
            return [_to_visitor(r) for r in fetchall(cur)]

    def get_by_id(self, visitor_id: int) -> Optional[Visitor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM visitors WHERE id=%s", (int(visitor_id),))
            r = fetchone(cur)
            return _to_visitor(r) if r else None

    def create(self, *, details: VisitorDetails, image: Optional[str] = None) -> int:
        fields = _detail_fields(details)
        fields["image"] = image
        columns = ", ".join(fields)
        placeholders = ", ".join(["%s"] * len(fields))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO visitors ({columns}, qr_status) VALUES ({placeholders}, %s)",
                (*fields.values(), QRStatus.UNUSED.value),
            )
            return int(cur.lastrowid)

    def update(self, *, visitor_id: int, details: VisitorDetails, image: Optional[str] = None) -> bool:
        fields = _detail_fields(details)
        if image:
            fields["image"] = image
        assignments, params = build_update(fields)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE visitors SET {assignments} WHERE id=%s", (*params, int(visitor_id)))
            return cur.rowcount > 0

    def update_qr_status(
        self,
        *,
        visitor_id: int,
        value: QRStatus,
        expected_prior: Optional[QRStatus] = None,
    ) -> int:
        sql = "UPDATE visitors SET qr_status=%s WHERE id=%s"
        params: list[object] = [value.value, int(visitor_id)]
        if expected_prior is not None:
            sql += " AND qr_status=%s"
            params.append(expected_prior.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(cur.rowcount)

    def toggle_status(self, visitor_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE visitors SET status = NOT status WHERE id=%s", (int(visitor_id),))
            return int(cur.rowcount)
