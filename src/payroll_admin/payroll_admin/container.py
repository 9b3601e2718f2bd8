from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activity.mysql_activity_repository import MySQLActivityRepository
from .activity.repository import ActivityRepository
from .activity.service import ActivityService
from .core.constants import DEFAULT_TOKEN_HOURS
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.repository import PermissionRepository
from .permissions.service import PermissionService
from .roles.mysql_role_repository import MySQLRoleRepository
from .roles.repository import RoleRepository
from .roles.service import RoleService
from .security.guards import Guards
from .security.resolver import AuthorizationResolver
from .security.tokens import TokenCodec
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    roles_repo: RoleRepository
    permissions_repo: PermissionRepository
    employees_repo: EmployeeRepository
    payroll_repo: PayrollRepository
    activity_repo: ActivityRepository

    codec: TokenCodec
    resolver: AuthorizationResolver
    guards: Guards

    auth_service: AuthService
    user_service: UserService
    role_service: RoleService
    permission_service: PermissionService
    employee_service: EmployeeService
    payroll_service: PayrollService
    activity_service: ActivityService
    dashboard_service: DashboardService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    roles_repo: RoleRepository,
    permissions_repo: PermissionRepository,
    employees_repo: EmployeeRepository,
    payroll_repo: PayrollRepository,
    activity_repo: ActivityRepository,
    codec: TokenCodec,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""
    resolver = AuthorizationResolver(users_repo, roles_repo, permissions_repo, codec)
    activity_service = ActivityService(activity_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        roles_repo=roles_repo,
        permissions_repo=permissions_repo,
        employees_repo=employees_repo,
        payroll_repo=payroll_repo,
        activity_repo=activity_repo,
        codec=codec,
        resolver=resolver,
        guards=Guards(resolver),
        auth_service=AuthService(users_repo, roles_repo, permissions_repo, resolver, codec),
        user_service=UserService(users_repo, roles_repo, employees_repo),
        role_service=RoleService(roles_repo, permissions_repo, users_repo),
        permission_service=PermissionService(permissions_repo),
        employee_service=EmployeeService(employees_repo, users_repo),
        payroll_service=PayrollService(payroll_repo, employees_repo),
        activity_service=activity_service,
        dashboard_service=DashboardService(users_repo, roles_repo, permissions_repo, employees_repo, activity_service),
    )


def build_container(*, conn: DatabaseConnection, settings) -> Container:
    codec = TokenCodec(
        str(getattr(settings, "JWT_SECRET")),
        algorithm=str(getattr(settings, "JWT_ALGORITHM", "HS256")),
        expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", DEFAULT_TOKEN_HOURS)),
    )
    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        roles_repo=MySQLRoleRepository(conn),
        permissions_repo=MySQLPermissionRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        activity_repo=MySQLActivityRepository(conn),
        codec=codec,
    )
