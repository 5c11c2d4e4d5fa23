from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from hr_workflow.attendance.model import AttendanceRecord
from hr_workflow.container import wire
from hr_workflow.core.enums import ACTIVE_LEAVE_STATUSES, LeaveStatus, Role
from hr_workflow.core.exceptions import ActiveRequestExistsError, AlreadyCheckedInError, PersistenceError
from hr_workflow.employees.model import Employee
from hr_workflow.leaves.model import LeaveBalance, LeaveRequest, LeaveType
from hr_workflow.locations.model import OfficeLocation
from hr_workflow.notifications.model import Notification

APP_TZ = "Asia/Jakarta"
JAKARTA = ZoneInfo(APP_TZ)


def local(year, month, day, hour=0, minute=0, second=0) -> datetime:
    """UTC instant of a Jakarta wall-clock time."""
    return datetime(year, month, day, hour, minute, second, tzinfo=JAKARTA).astimezone(timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set_local(self, *args) -> None:
        self.now = local(*args)


class FakeEmployees:
    def __init__(self, employees=()):
        self._by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.employee_id] = employee

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def list_by_ids(self, employee_ids):
        return [self._by_id[i] for i in employee_ids if i in self._by_id]


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[tuple[int, date], AttendanceRecord] = {}

    def get_for_employee_and_date(self, employee_id, work_date):
        return self.records.get((int(employee_id), work_date))

    def get_recent_for_employee(self, employee_id, limit):
        mine = [r for (emp, _), r in self.records.items() if emp == int(employee_id)]
        return sorted(mine, key=lambda r: r.work_date, reverse=True)[:limit]

    def create_checkin(
        self, *, employee_id, work_date, check_in_time, status, latitude=None, longitude=None, accuracy=None, location_id=None
    ):
        key = (int(employee_id), work_date)
        if key in self.records:
            raise AlreadyCheckedInError()
        rec = AttendanceRecord(
            attendance_id=self._next_id,
            employee_id=int(employee_id),
            work_date=work_date,
            check_in_time=check_in_time,
            check_in_status=status,
            check_in_latitude=latitude,
            check_in_longitude=longitude,
            check_in_location_accuracy=accuracy,
            check_in_location_id=location_id,
        )
        self._next_id += 1
        self.records[key] = rec
        return rec

    def update_checkout(self, *, attendance_id, check_out_time, status, total_hours, overtime_hours):
        for key, rec in self.records.items():
            if rec.attendance_id != attendance_id:
                continue
            if rec.check_in_time is None or rec.check_out_time is not None:
                return None
            updated = replace(
                rec,
                check_out_time=check_out_time,
                check_out_status=status,
                total_hours=total_hours,
                overtime_hours=overtime_hours,
            )
            self.records[key] = updated
            return updated
        return None

    def list_open_for_date(self, work_date):
        return [r for (_, d), r in self.records.items() if d == work_date and r.is_checked_in and not r.is_checked_out]


class FakeOfficeLocations:
    def __init__(self, locations=()):
        self.locations = list(locations)

    def get_primary(self):
        for loc in self.locations:
            if loc.is_active and loc.is_primary:
                return loc
        return None


class FakeLeaveTypes:
    def __init__(self, types=()):
        self._by_id = {t.leave_type_id: t for t in types}

    def get(self, leave_type_id):
        return self._by_id.get(int(leave_type_id))

    def list_active(self):
        return [t for t in self._by_id.values() if t.is_active]


class FakeLeaveBalances:
    def __init__(self):
        self.rows: dict[tuple[int, int, int], LeaveBalance] = {}

    def put(self, employee_id, leave_type_id, year, allocated, used=0):
        allocated, used = Decimal(str(allocated)), Decimal(str(used))
        self.rows[(employee_id, leave_type_id, year)] = LeaveBalance(
            employee_id, leave_type_id, year, allocated, used, allocated - used
        )

    def get(self, employee_id, leave_type_id, year):
        return self.rows.get((int(employee_id), int(leave_type_id), int(year)))

    def list_for_employee(self, employee_id, year):
        return [b for (e, _, y), b in self.rows.items() if e == employee_id and y == year]

    def increment_used(self, *, employee_id, leave_type_id, year, days):
        key = (employee_id, leave_type_id, year)
        row = self.rows.get(key)
        if row is None:
            return False
        self.rows[key] = replace(row, used=row.used + days, balance=row.balance - days)
        return True

    def create(self, *, employee_id, leave_type_id, year, allocated):
        key = (employee_id, leave_type_id, year)
        if key in self.rows:
            return False
        self.rows[key] = LeaveBalance(employee_id, leave_type_id, year, allocated, Decimal("0"), allocated)
        return True


class FakeLeaveRequests:
    def __init__(self, clock):
        self._clock = clock
        self._next_id = 1
        self.requests: dict[int, LeaveRequest] = {}

    def add(self, **fields) -> LeaveRequest:
        """Insert a request directly, bypassing the active-request check."""
        fields.setdefault("created_at", self._clock())
        req = LeaveRequest(request_id=self._next_id, **fields)
        self._next_id += 1
        self.requests[req.request_id] = req
        return req

    def _active(self, employee_id, today):
        for req in sorted(self.requests.values(), key=lambda r: r.request_id, reverse=True):
            if req.employee_id == employee_id and req.status in ACTIVE_LEAVE_STATUSES and req.end_date >= today:
                return req
        return None

    def create_if_no_active(self, *, employee_id, leave_type_id, start_date, end_date, day_type, total_days, reason, today):
        active = self._active(employee_id, today)
        if active:
            raise ActiveRequestExistsError(active.request_id, active.status.value)
        return self.add(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            day_type=day_type,
            total_days=total_days,
            reason=reason,
            status=LeaveStatus.PENDING,
        )

    def get(self, request_id):
        return self.requests.get(int(request_id))

    def get_active_for_employee(self, employee_id, today):
        return self._active(int(employee_id), today)

    def decide(self, *, request_id, status, decided_by, decided_at, rejection_reason=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(
            req, status=status, approved_by=decided_by, approved_at=decided_at, rejection_reason=rejection_reason
        )
        return True

    def cancel(self, *, request_id, employee_id):
        req = self.requests.get(int(request_id))
        if not req or req.employee_id != employee_id or req.status != LeaveStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(req, status=LeaveStatus.CANCELLED)
        return True

    def list_pending(self, *, limit=200):
        pending = [r for r in self.requests.values() if r.status == LeaveStatus.PENDING]
        return sorted(pending, key=lambda r: (r.created_at, r.request_id))[:limit]

    def count_pending(self):
        return len([r for r in self.requests.values() if r.status == LeaveStatus.PENDING])

    def list_for_employee(self, employee_id, *, limit=50):
        mine = [r for r in self.requests.values() if r.employee_id == employee_id]
        return sorted(mine, key=lambda r: r.request_id, reverse=True)[:limit]


class FakeNotifications:
    def __init__(self, clock):
        self._clock = clock
        self._next_id = 1
        self.items: dict[int, Notification] = {}
        self.fail_for_users: set[int] = set()

    def create(self, *, user_id, kind, title, description, related_entity_type, related_entity_id):
        if user_id in self.fail_for_users:
            raise PersistenceError("Database operation failed")
        n = Notification(
            notification_id=self._next_id,
            user_id=user_id,
            kind=kind,
            title=title,
            description=description,
            created_at=self._clock(),
            related_entity_type=related_entity_type,
            related_entity_id=related_entity_id,
        )
        self._next_id += 1
        self.items[n.notification_id] = n
        return n

    def for_user(self, user_id):
        return [n for n in self.items.values() if n.user_id == user_id]

    def list_for_user(self, user_id, *, limit=50, unread_only=False):
        mine = [n for n in self.for_user(user_id) if not (unread_only and n.is_read)]
        return sorted(mine, key=lambda n: n.notification_id, reverse=True)[:limit]

    def count_unread(self, user_id):
        return len([n for n in self.for_user(user_id) if not n.is_read])

    def mark_read(self, *, notification_id, user_id, read_at):
        n = self.items.get(notification_id)
        if not n or n.user_id != user_id:
            return False
        if not n.is_read:
            self.items[notification_id] = replace(n, is_read=True, read_at=read_at)
        return True

    def mark_all_read(self, *, user_id, read_at):
        count = 0
        for n in self.for_user(user_id):
            if not n.is_read:
                self.items[n.notification_id] = replace(n, is_read=True, read_at=read_at)
                count += 1
        return count

    def delete(self, *, notification_id, user_id):
        n = self.items.get(notification_id)
        if not n or n.user_id != user_id:
            return False
        del self.items[notification_id]
        return True


EMPLOYEE_ID = 1
OTHER_EMPLOYEE_ID = 2
HR_ID = 10
ANNUAL = 1
SICK = 2
UNPAID = 3
OFFICE = (-6.373, 106.903)


@pytest.fixture
def clock():
    return FakeClock(local(2025, 12, 15, 8, 0))


@pytest.fixture
def employees():
    return FakeEmployees(
        [
            Employee(EMPLOYEE_ID, "Budi Santoso", shift_start_hour=9, shift_end_hour=18),
            Employee(OTHER_EMPLOYEE_ID, "Sari Dewi"),
            Employee(HR_ID, "Hana Pratiwi", role=Role.HR_ADMIN),
        ]
    )


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def leave_types():
    return FakeLeaveTypes(
        [
            LeaveType(ANNUAL, "Paid Time Off", max_days_per_year=12),
            LeaveType(SICK, "Sick Leave", max_days_per_year=5, requires_attachment=True),
            LeaveType(UNPAID, "Unpaid Leave", max_days_per_year=None),
            LeaveType(4, "Sabbatical", max_days_per_year=30, is_active=False),
        ]
    )


@pytest.fixture
def office_locations():
    return FakeOfficeLocations([OfficeLocation(1, "Head Office", *OFFICE, radius_meters=50, is_primary=True)])


@pytest.fixture
def balances():
    return FakeLeaveBalances()


@pytest.fixture
def leave_requests(clock):
    return FakeLeaveRequests(clock)


@pytest.fixture
def notifications(clock):
    return FakeNotifications(clock)


@pytest.fixture
def container(clock, employees, attendance_repo, leave_types, balances, leave_requests, notifications, office_locations):
    return wire(
        employees_repo=employees,
        attendance_repo=attendance_repo,
        leave_types_repo=leave_types,
        leave_balances_repo=balances,
        leave_requests_repo=leave_requests,
        notifications_repo=notifications,
        office_locations_repo=office_locations,
        app_timezone=APP_TZ,
        tolerance_minutes=1,
        clock=clock,
    )


@pytest.fixture
def app(monkeypatch, container):
    from hr_workflow.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id, role=Role.EMPLOYEE):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = Role(role).value
