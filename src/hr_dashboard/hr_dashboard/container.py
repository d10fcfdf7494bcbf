from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import GracePolicy, WorkWeek
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .reports.aggregator import MonthlyAggregator
from .reports.service import AttendanceOverviewService, MonthlyReportService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    clock: Clock

    attendance_service: AttendanceService
    monthly_report_service: MonthlyReportService
    attendance_overview_service: AttendanceOverviewService


def build_services(
    attendance_repo: AttendanceRepository,
    *,
    clock: Clock | None = None,
    policy: GracePolicy | None = None,
    work_week: WorkWeek | None = None,
) -> Container:
    clock = clock or SystemClock()
    attendance_service = AttendanceService(
        attendance_repo,
        clock=clock,
        policy=policy or GracePolicy(),
        strategy_factory=AttendanceStrategyFactory(),
    )
    monthly_report_service = MonthlyReportService(
        attendance_repo,
        aggregator=MonthlyAggregator(work_week=work_week or WorkWeek()),
        clock=clock,
    )
    return Container(
        attendance_repo=attendance_repo,
        clock=clock,
        attendance_service=attendance_service,
        monthly_report_service=monthly_report_service,
        attendance_overview_service=AttendanceOverviewService(attendance_repo, clock=clock),
    )


def build_container(*, db_config: dict, policy: GracePolicy | None = None, work_week: WorkWeek | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(MySQLAttendanceRepository(conn), policy=policy, work_week=work_week)
