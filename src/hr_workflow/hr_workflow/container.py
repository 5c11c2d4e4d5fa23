from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import AttendancePolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_APP_TIMEZONE, DEFAULT_TOLERANCE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .leaves.balance import LeaveBalanceLedger
from .leaves.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leaves.mysql_leave_request_repository import MySQLLeaveRequestRepository
from .leaves.mysql_leave_type_repository import MySQLLeaveTypeRepository
from .leaves.repository import LeaveBalanceRepository, LeaveRequestRepository, LeaveTypeRepository
from .leaves.workflow import LeaveRequestWorkflow
from .locations.geofence import Geofence
from .locations.mysql_office_location_repository import MySQLOfficeLocationRepository
from .locations.repository import OfficeLocationRepository
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .time_engine import Clock, TimeEngine


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeDirectory
    attendance_repo: AttendanceRepository
    leave_types_repo: LeaveTypeRepository
    leave_balances_repo: LeaveBalanceRepository
    leave_requests_repo: LeaveRequestRepository
    notifications_repo: NotificationRepository
    office_locations_repo: Optional[OfficeLocationRepository]

    time_engine: TimeEngine
    attendance_service: AttendanceService
    balance_ledger: LeaveBalanceLedger
    notification_service: NotificationService
    leave_workflow: LeaveRequestWorkflow


def wire(
    *,
    employees_repo: EmployeeDirectory,
    attendance_repo: AttendanceRepository,
    leave_types_repo: LeaveTypeRepository,
    leave_balances_repo: LeaveBalanceRepository,
    leave_requests_repo: LeaveRequestRepository,
    notifications_repo: NotificationRepository,
    office_locations_repo: Optional[OfficeLocationRepository] = None,
    app_timezone: str = DEFAULT_APP_TIMEZONE,
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
    geofence_enabled: bool = False,
    clock: Optional[Clock] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services on top of the given repositories."""
    time_engine = TimeEngine(app_timezone, clock=clock)

    geofence = None
    if geofence_enabled:
        if office_locations_repo is None:
            raise ValueError("geofence_enabled requires office_locations_repo")
        geofence = Geofence(office_locations_repo)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        time_engine,
        policy=AttendancePolicy(tolerance_minutes=int(tolerance_minutes)),
        geofence=geofence,
    )
    balance_ledger = LeaveBalanceLedger(leave_balances_repo, leave_types_repo)
    notification_service = NotificationService(notifications_repo, clock=time_engine.now_utc)
    leave_workflow = LeaveRequestWorkflow(
        leave_requests_repo,
        leave_types_repo,
        balance_ledger,
        time_engine,
        notification_service,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_types_repo=leave_types_repo,
        leave_balances_repo=leave_balances_repo,
        leave_requests_repo=leave_requests_repo,
        notifications_repo=notifications_repo,
        office_locations_repo=office_locations_repo,
        time_engine=time_engine,
        attendance_service=attendance_service,
        balance_ledger=balance_ledger,
        notification_service=notification_service,
        leave_workflow=leave_workflow,
    )


def build_container(
    *,
    db_config: dict,
    app_timezone: str = DEFAULT_APP_TIMEZONE,
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
    geofence_enabled: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        employees_repo=MySQLEmployeeDirectory(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_types_repo=MySQLLeaveTypeRepository(conn),
        leave_balances_repo=MySQLLeaveBalanceRepository(conn),
        leave_requests_repo=MySQLLeaveRequestRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        office_locations_repo=MySQLOfficeLocationRepository(conn),
        app_timezone=app_timezone,
        tolerance_minutes=tolerance_minutes,
        geofence_enabled=geofence_enabled,
        conn=conn,
    )
