from __future__ import annotations

from dataclasses import dataclass

from .access.authorizer import RequestAuthorizer
from .access.integrity import IntegrityGuard
from .access.scope import ScopeResolver
from .core.enums import EntityType
from .database.connection import DatabaseConnection, DBConfig, TransactionManager
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .organization.mysql_organization_repository import (
    MySQLCompanyRepository,
    MySQLDepartmentRepository,
    MySQLPositionRepository,
)
from .organization.repository import CompanyRepository, DepartmentRepository, PositionRepository
from .organization.service import CompanyService, DepartmentService, PositionService
from .projects.mysql_project_repository import MySQLCommissionProjectRepository, MySQLProjectPermissionRepository
from .projects.repository import CommissionProjectRepository, ProjectPermissionRepository
from .projects.service import CommissionProjectService, ProjectPermissionService
from .reports.aggregation import AggregationEngine
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Repositories:
    companies: CompanyRepository
    departments: DepartmentRepository
    positions: PositionRepository
    permissions: ProjectPermissionRepository
    projects: CommissionProjectRepository
    employees: EmployeeRepository
    reports: ReportRepository
    users: UserRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories
    tx: TransactionManager
    authorizer: RequestAuthorizer

    scope_resolver: ScopeResolver
    integrity_guard: IntegrityGuard
    aggregation_engine: AggregationEngine

    company_service: CompanyService
    department_service: DepartmentService
    position_service: PositionService
    project_permission_service: ProjectPermissionService
    commission_project_service: CommissionProjectService
    employee_service: EmployeeService
    report_service: ReportService
    user_service: UserService
    auth_service: AuthService


def assemble(repos: Repositories, *, tx: TransactionManager, authorizer: RequestAuthorizer) -> Container:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""
    guard = IntegrityGuard(
        existence={
            EntityType.COMPANY: repos.companies,
            EntityType.DEPARTMENT: repos.departments,
            EntityType.POSITION: repos.positions,
            EntityType.PROJECT_PERMISSION: repos.permissions,
            EntityType.COMMISSION_PROJECT: repos.projects,
            EntityType.EMPLOYEE: repos.employees,
        },
        dependents={
            EntityType.DEPARTMENT: repos.departments,
            EntityType.EMPLOYEE: repos.employees,
            EntityType.COMMISSION_PROJECT: repos.projects,
            EntityType.REPORT: repos.reports,
        },
    )

    return Container(
        repos=repos,
        tx=tx,
        authorizer=authorizer,
        scope_resolver=ScopeResolver(repos.users, repos.employees),
        integrity_guard=guard,
        aggregation_engine=AggregationEngine(repos.reports),
        company_service=CompanyService(repos.companies, guard, tx),
        department_service=DepartmentService(repos.departments, guard, tx),
        position_service=PositionService(repos.positions, guard, tx),
        project_permission_service=ProjectPermissionService(repos.permissions, guard, tx),
        commission_project_service=CommissionProjectService(repos.projects, guard, tx),
        employee_service=EmployeeService(repos.employees, guard, tx),
        report_service=ReportService(repos.reports, repos.employees, guard, tx),
        user_service=UserService(repos.users),
        auth_service=AuthService(repos.users, authorizer),
    )


def build_container(*, db_config: dict, jwt_secret: str, jwt_expire_hours: int = 24) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection(config)

    repos = Repositories(
        companies=MySQLCompanyRepository(conn),
        departments=MySQLDepartmentRepository(conn),
        positions=MySQLPositionRepository(conn),
        permissions=MySQLProjectPermissionRepository(conn),
        projects=MySQLCommissionProjectRepository(conn),
        employees=MySQLEmployeeRepository(conn),
        reports=MySQLReportRepository(conn),
        users=MySQLUserRepository(conn),
    )
    return assemble(repos, tx=conn, authorizer=RequestAuthorizer(jwt_secret, expire_hours=jwt_expire_hours))
