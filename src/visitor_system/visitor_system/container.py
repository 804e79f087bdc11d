from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.policy import AuthPolicy, build_auth_policy
from .core.enums import SignoutPolicy
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .organization.mysql_organization_repository import (
    MySQLCompanyRepository,
    MySQLDepartmentRepository,
    MySQLDesignationRepository,
)
from .organization.service import OrganizationService
from .uploads.storage import LocalImageStorage
from .visitors.mysql_visitor_repository import MySQLVisitorRepository
from .visitors.service import VisitorService
from .visitors.tokens import QRTokenEncoder


@dataclass(frozen=True)
class Container:
    visitor_service: VisitorService
    organization_service: OrganizationService
    employee_service: EmployeeService

    auth_policy: AuthPolicy
    visitor_images: LocalImageStorage
    employee_images: LocalImageStorage

    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    db_config: dict,
    public_base_url: str,
    upload_folder: str,
    signout_policy: str = SignoutPolicy.STRICT.value,
    auth_policy: str = "allow",
    api_token: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    visitors_repo = MySQLVisitorRepository(conn)
    companies_repo = MySQLCompanyRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    designations_repo = MySQLDesignationRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)

    organization_service = OrganizationService(companies_repo, departments_repo, designations_repo)
    employee_service = EmployeeService(employees_repo, organization=organization_service)
    visitor_service = VisitorService(
        visitors_repo,
        QRTokenEncoder(public_base_url),
        signout_policy=SignoutPolicy(signout_policy),
        organization=organization_service,
        employees=employees_repo,
    )

    return Container(
        visitor_service=visitor_service,
        organization_service=organization_service,
        employee_service=employee_service,
        auth_policy=build_auth_policy(auth_policy, api_token=api_token),
        visitor_images=LocalImageStorage(upload_folder),
        employee_images=LocalImageStorage(upload_folder, subfolder="employees"),
        conn=conn,
    )
