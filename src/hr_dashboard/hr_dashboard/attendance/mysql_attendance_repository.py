from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus, BreakState
from ..core.exceptions import AlreadyClockedIn, BreakAlreadyActive
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceDay, BreakInterval
from .repository import AttendanceRepository

_DAY_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, check_out_time,
    status, notes, location, total_hours, total_break_minutes
"""

_BREAK_COLUMNS = """
    break_id, employee_id, work_date, start_time, end_time, state, reason, duration_minutes
"""


def _to_day(r: Dict[str, Any]) -> AttendanceDay:
    total_hours = r.get("total_hours")
    total_break = r.get("total_break_minutes")
    return AttendanceDay(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        location=r.get("location"),
        total_hours=float(total_hours) if total_hours is not None else None,
        total_break_minutes=int(total_break) if total_break is not None else None,
    )


def _to_break(r: Dict[str, Any]) -> BreakInterval:
    duration = r.get("duration_minutes")
    return BreakInterval(
        break_id=int(r["break_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        state=BreakState(r["state"]),
        reason=r.get("reason"),
        duration_minutes=int(duration) if duration is not None else None,
    )


def _is_duplicate(exc: IntegrityError) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_day(self, employee_id: int, work_date: date) -> Optional[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAY_COLUMNS}
                FROM attendance_days
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_day(r) if r else None

    def create_day(self, day: AttendanceDay) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_days(employee_id, work_date, check_in_time, status, notes, location)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (day.employee_id, day.work_date, day.check_in_time, day.status.value, day.notes, day.location),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if _is_duplicate(e):
                raise AlreadyClockedIn() from e
            raise

    def close_day(self, day: AttendanceDay) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_days
                SET check_out_time=%s, status=%s, notes=%s, location=%s,
                    total_hours=%s, total_break_minutes=%s
                WHERE attendance_id=%s
                  AND check_out_time IS NULL
                  AND NOT EXISTS (
                      SELECT 1 FROM attendance_breaks b
                      WHERE b.employee_id=%s AND b.work_date=%s AND b.state='active'
                  )
                """,
                (
                    day.check_out_time,
                    day.status.value,
                    day.notes,
                    day.location,
                    day.total_hours,
                    day.total_break_minutes,
                    day.attendance_id,
                    day.employee_id,
                    day.work_date,
                ),
            )
            return cur.rowcount > 0

    def mark_day(self, day: AttendanceDay) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Row lock so a concurrent clock-in cannot slip in between check and update.
                cur.execute(
                    """
                    SELECT attendance_id, check_in_time
                    FROM attendance_days
                    WHERE employee_id=%s AND work_date=%s
                    FOR UPDATE
                    """,
                    (day.employee_id, day.work_date),
                )
                r = fetchone(cur)
                if r is None:
                    cur.execute(
                        """
                        INSERT INTO attendance_days(employee_id, work_date, status, notes)
                        VALUES(%s,%s,%s,%s)
                        """,
                        (day.employee_id, day.work_date, day.status.value, day.notes),
                    )
                    return int(cur.lastrowid)
                if r.get("check_in_time") is not None:
                    return None
                cur.execute(
                    "UPDATE attendance_days SET status=%s, notes=%s WHERE attendance_id=%s",
                    (day.status.value, day.notes, r["attendance_id"]),
                )
                return int(r["attendance_id"])
        except IntegrityError as e:
            if _is_duplicate(e):
                raise AlreadyClockedIn() from e
            raise

    def list_all_days(
        self, start: date, end: date, status: Optional[AttendanceStatus] = None
    ) -> Sequence[AttendanceDay]:
        sql = f"""
            SELECT {_DAY_COLUMNS}
            FROM attendance_days
            WHERE work_date BETWEEN %s AND %s
        """
        params: list = [start, end]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        sql += " ORDER BY work_date ASC, employee_id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_day(r) for r in fetchall(cur)]

    def list_days(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAY_COLUMNS}
                FROM attendance_days
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (employee_id, start, end),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def get_recent_days(self, employee_id: int, limit: int) -> Sequence[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAY_COLUMNS}
                FROM attendance_days
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def list_breaks(self, employee_id: int, work_date: date) -> Sequence[BreakInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BREAK_COLUMNS}
                FROM attendance_breaks
                WHERE employee_id=%s AND work_date=%s
                ORDER BY start_time ASC
                """,
                (employee_id, work_date),
            )
            return [_to_break(r) for r in fetchall(cur)]

    def create_break(self, interval: BreakInterval) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # INSERT ... SELECT inserts nothing once the day has been closed.
                cur.execute(
                    """
                    INSERT INTO attendance_breaks(employee_id, work_date, start_time, state, reason)
                    SELECT %s, %s, %s, 'active', %s
                    FROM attendance_days
                    WHERE employee_id=%s AND work_date=%s AND check_out_time IS NULL
                    """,
                    (
                        interval.employee_id,
                        interval.work_date,
                        interval.start_time,
                        interval.reason,
                        interval.employee_id,
                        interval.work_date,
                    ),
                )
                if cur.rowcount == 0:
                    return None
                return int(cur.lastrowid)
        except IntegrityError as e:
            if _is_duplicate(e):
                raise BreakAlreadyActive() from e
            raise

    def close_break(self, interval: BreakInterval) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_breaks
                SET end_time=%s, state='completed', duration_minutes=%s
                WHERE break_id=%s AND state='active'
                """,
                (interval.end_time, interval.duration_minutes, interval.break_id),
            )
            return cur.rowcount > 0
