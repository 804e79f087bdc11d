from __future__ import annotations

import sys
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

from src.visitor_system.visitor_system.auth.policy import AllowAllPolicy
from src.visitor_system.visitor_system.container import Container
from src.visitor_system.visitor_system.core.enums import QRStatus, RecordStatus, SignoutPolicy
from src.visitor_system.visitor_system.core.exceptions import StorageError
from src.visitor_system.visitor_system.employees.model import Employee
from src.visitor_system.visitor_system.employees.service import EmployeeService
from src.visitor_system.visitor_system.main import create_app
from src.visitor_system.visitor_system.organization.model import Company, Department, Designation, Option
from src.visitor_system.visitor_system.organization.service import OrganizationService
from src.visitor_system.visitor_system.uploads.storage import LocalImageStorage
from src.visitor_system.visitor_system.visitors.model import Visitor, VisitorDetails
from src.visitor_system.visitor_system.visitors.service import VisitorService
from src.visitor_system.visitor_system.visitors.tokens import QRTokenEncoder

BASE_URL = "http://testserver"


class InMemoryVisitors:
    """Visitor store whose conditional update is atomic, like a single UPDATE row lock."""

    def __init__(self):
        self.rows: dict[int, Visitor] = {}
        self.writes = 0
        self._next_id = 1
        self._lock = threading.Lock()

    def add(self, visitor_id: int, *, qr_status: QRStatus = QRStatus.UNUSED, status: bool = True) -> Visitor:
        visitor = Visitor(
            id=visitor_id,
            details=VisitorDetails(first_name=f"Khach {visitor_id}"),
            qr_status=qr_status,
            status=status,
        )
        self.rows[visitor_id] = visitor
        self._next_id = max(self._next_id, visitor_id + 1)
        return visitor

    def list_all(self):
        return sorted(self.rows.values(), key=lambda v: v.id, reverse=True)

    def get_by_id(self, visitor_id: int) -> Optional[Visitor]:
        return self.rows.get(int(visitor_id))

    def create(self, *, details: VisitorDetails, image: Optional[str] = None) -> int:
        with self._lock:
            self.writes += 1
            visitor_id = self._next_id
            self._next_id += 1
            self.rows[visitor_id] = Visitor(
                id=visitor_id,
                details=details,
                qr_status=QRStatus.UNUSED,
                status=True,
                image=image,
            )
            return visitor_id

    def update(self, *, visitor_id: int, details: VisitorDetails, image: Optional[str] = None) -> bool:
        with self._lock:
            self.writes += 1
            current = self.rows.get(int(visitor_id))
            if not current:
                return False
            self.rows[visitor_id] = replace(current, details=details, image=image or current.image)
            return True

    def update_qr_status(self, *, visitor_id: int, value: QRStatus, expected_prior: Optional[QRStatus] = None) -> int:
        with self._lock:
            self.writes += 1
            current = self.rows.get(int(visitor_id))
            if not current:
                return 0
            if expected_prior is not None and current.qr_status != expected_prior:
                return 0
            self.rows[visitor_id] = replace(current, qr_status=value)
            return 1

    def toggle_status(self, visitor_id: int) -> int:
        with self._lock:
            self.writes += 1
            current = self.rows.get(int(visitor_id))
            if not current:
                return 0
            self.rows[visitor_id] = replace(current, status=not current.status)
            return 1


class BrokenVisitors(InMemoryVisitors):
    def update_qr_status(self, **kwargs) -> int:
        raise StorageError("Lỗi truy vấn cơ sở dữ liệu")

    def get_by_id(self, visitor_id: int):
        raise StorageError("Lỗi truy vấn cơ sở dữ liệu")


class InMemoryCompanies:
    def __init__(self):
        self.rows: dict[int, Company] = {}

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, company_id: int):
        return self.rows.get(int(company_id))

    def create(self, *, name: str, status: RecordStatus) -> int:
        cid = len(self.rows) + 1
        self.rows[cid] = Company(id=cid, name=name, status=status)
        return cid

    def update(self, *, company_id: int, name: str, status: RecordStatus) -> bool:
        self.rows[company_id] = Company(id=company_id, name=name, status=status)
        return True

    def list_active_options(self):
        return [Option(id=c.id, name=c.name) for c in self.rows.values() if c.status == RecordStatus.ACTIVE]


class InMemoryDepartments:
    def __init__(self):
        self.rows: dict[int, Department] = {}

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, department_id: int):
        return self.rows.get(int(department_id))

    def create(self, *, company_id: int, name: str, status: RecordStatus) -> int:
        did = len(self.rows) + 1
        self.rows[did] = Department(id=did, company_id=company_id, name=name, status=status)
        return did

    def update(self, *, department_id: int, company_id: int, name: str, status: RecordStatus) -> bool:
        self.rows[department_id] = Department(id=department_id, company_id=company_id, name=name, status=status)
        return True

    def list_active_options(self, *, company_id: Optional[int] = None):
        return [
            Option(id=d.id, name=d.name)
            for d in self.rows.values()
            if d.status == RecordStatus.ACTIVE and (company_id is None or d.company_id == company_id)
        ]

    def list_for_company(self, company_id: int):
        return [d for d in self.rows.values() if d.company_id == company_id]


class InMemoryDesignations:
    def __init__(self):
        self.rows: dict[int, Designation] = {}

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, designation_id: int):
        return self.rows.get(int(designation_id))

    def create(self, *, company_id: int, department_id: int, name: str, status: RecordStatus) -> int:
        did = len(self.rows) + 1
        self.rows[did] = Designation(
            id=did, company_id=company_id, department_id=department_id, name=name, status=status
        )
        return did

    def update(self, *, designation_id: int, company_id: int, department_id: int, name: str, status: RecordStatus) -> bool:
        self.rows[designation_id] = Designation(
            id=designation_id, company_id=company_id, department_id=department_id, name=name, status=status
        )
        return True

    def list_for_department(self, department_id: int):
        return [d for d in self.rows.values() if d.department_id == department_id]


class InMemoryEmployees:
    def __init__(self):
        self.rows: dict[int, Dict[str, Any]] = {}
        self.last_update: Optional[Dict[str, Any]] = None

    def _to_employee(self, eid: int, f: Dict[str, Any]) -> Employee:
        return Employee(
            id=eid,
            first_name=f["first_name"],
            last_name=f.get("last_name"),
            email=f.get("email"),
            phone=f.get("phone"),
            joining_date=f.get("joining_date"),
            gender=f.get("gender"),
            company_id=f.get("company_id"),
            department_id=f.get("department_id"),
            designation_id=f.get("designation_id"),
            status=RecordStatus(f.get("status", "Active")),
            password_hash=f["password"],
            remarks=f.get("remarks"),
            image=f.get("image"),
        )

    def list_all(self):
        return [self._to_employee(eid, f) for eid, f in self.rows.items()]

    def get_by_id(self, employee_id: int):
        f = self.rows.get(int(employee_id))
        return self._to_employee(int(employee_id), f) if f else None

    def create(self, *, fields: Dict[str, Any]) -> int:
        eid = len(self.rows) + 1
        self.rows[eid] = dict(fields)
        return eid

    def update(self, *, employee_id: int, fields: Dict[str, Any]) -> bool:
        self.last_update = dict(fields)
        self.rows[int(employee_id)].update(fields)
        return True

    def delete(self, employee_id: int) -> bool:
        return self.rows.pop(int(employee_id), None) is not None


@pytest.fixture
def encoder():
    return QRTokenEncoder(BASE_URL)


@pytest.fixture
def visitors_repo():
    return InMemoryVisitors()


@pytest.fixture
def visitor_service(visitors_repo, encoder):
    return VisitorService(visitors_repo, encoder, signout_policy=SignoutPolicy.STRICT)


@pytest.fixture
def legacy_visitor_service(visitors_repo, encoder):
    return VisitorService(visitors_repo, encoder, signout_policy=SignoutPolicy.LEGACY)


@pytest.fixture
def org_service():
    return OrganizationService(InMemoryCompanies(), InMemoryDepartments(), InMemoryDesignations())


@pytest.fixture
def employees_repo():
    return InMemoryEmployees()


@pytest.fixture
def employee_service(employees_repo, org_service):
    return EmployeeService(employees_repo, organization=org_service)


@pytest.fixture
def make_container(tmp_path, encoder, org_service, employees_repo, employee_service):
    def _make(
        visitors=None,
        *,
        signout_policy: SignoutPolicy = SignoutPolicy.STRICT,
        auth_policy=None,
    ) -> Container:
        return Container(
            visitor_service=VisitorService(
                visitors if visitors is not None else InMemoryVisitors(),
                encoder,
                signout_policy=signout_policy,
                organization=org_service,
                employees=employees_repo,
            ),
            organization_service=org_service,
            employee_service=employee_service,
            auth_policy=auth_policy or AllowAllPolicy(),
            visitor_images=LocalImageStorage(tmp_path),
            employee_images=LocalImageStorage(tmp_path, subfolder="employees"),
        )

    return _make


@pytest.fixture
def make_client(make_container):
    def _make(visitors=None, **kwargs):
        app = create_app(make_container(visitors, **kwargs), settings_module="config.testing")
        return app.test_client()

    return _make


@pytest.fixture
def broken_visitors():
    return BrokenVisitors()


@pytest.fixture
def zbar():
    """Skip unless the native zbar library behind pyzbar can be loaded."""

    zbar_library = pytest.importorskip("pyzbar.zbar_library")
    try:
        zbar_library.load()
    except ImportError as e:
        pytest.skip(f"zbar shared library not available: {e}")


@pytest.fixture
def without_pyzbar(monkeypatch):
    """Make ``import pyzbar.pyzbar`` fail the way a missing zbar install does."""

    monkeypatch.setitem(sys.modules, "pyzbar.pyzbar", None)


@pytest.fixture
def uploaded_files(tmp_path):
    """Files currently present in the upload folder used by make_client."""

    def _list():
        return sorted(p.relative_to(tmp_path).as_posix() for p in Path(tmp_path).rglob("*") if p.is_file())

    return _list
