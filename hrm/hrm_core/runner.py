"""
Command-line entry point.
"""

import argparse
import getpass
import sys
from datetime import date, datetime

from .app import HrmApp
from .attendance import BiometricAuthenticator
from .config import log, safe_print, setup_logging
from .constants import CLIENT_VERSION, ROUTE_DASHBOARD
from .models import ReportParams


class ConsoleConfirm(BiometricAuthenticator):
    """Terminal stand-in for the fingerprint prompt: an explicit y/N."""

    def is_available(self):
        return sys.stdin.isatty(), "Console"

    def authenticate(self, prompt, cancel_text):
        try:
            answer = input(f"{prompt}? [y/N] ({cancel_text} = N) ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


def _parse_date(value):
    return datetime.strptime(value, "%Y-%m-%d").date()


def build_parser():
    parser = argparse.ArgumentParser(prog="hrm", description="Trusted HRM attendance client")
    parser.add_argument("--version", action="version", version=CLIENT_VERSION)
    parser.add_argument("--no-probe", action="store_true", help="skip the reachability probe")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="show session and connectivity")

    p = sub.add_parser("login", help="sign in")
    p.add_argument("email")
    p.add_argument("--password")

    sub.add_parser("logout", help="sign out and clear local session data")
    sub.add_parser("check", help="check in / check out")

    p = sub.add_parser("report", help="monthly attendance report")
    today = date.today()
    p.add_argument("--year", type=int, default=today.year)
    p.add_argument("--month", type=int, default=today.month)
    p.add_argument("--count", type=int)
    p.add_argument("--page", type=int)

    p = sub.add_parser("leaves", help="list my leave requests")
    p.add_argument("--status", default="all")

    p = sub.add_parser("leave-request", help="submit a leave request")
    p.add_argument("leave_type")
    p.add_argument("start", type=_parse_date)
    p.add_argument("end", type=_parse_date)
    p.add_argument("reason")

    p = sub.add_parser("notifications", help="list notifications")
    p.add_argument("--mark-all-read", action="store_true")
    return parser


def _print_error(result):
    safe_print(f"Error: {result.message}")
    if result.error.retryable:
        safe_print("This looks temporary. Try again in a moment.")
    return 1


def run(app, args):
    """Dispatch one command on a started app. Returns the process exit code."""
    if args.command == "status":
        safe_print(f"Route:          {app.navigator.current_route()}")
        safe_print(f"Authenticated:  {app.is_authenticated}")
        safe_print(f"Online:         {app.network.is_online()}")
        snapshot = app.storage.get_attendance_session()
        if snapshot:
            state = "checked in" if snapshot.is_checked_in else "checked out"
            safe_print(f"Attendance:     {state} (in {snapshot.check_in_time}, "
                       f"worked {snapshot.worked_time})")
        return 0

    if args.command == "login":
        password = args.password or getpass.getpass("Password: ")
        result = app.orchestrator.login(args.email, password)
        if not result.ok:
            return _print_error(result)
        safe_print(f"Welcome, {result.data.full_name or result.data.employee_id}.")
        return 0

    if not app.is_authenticated or app.navigator.current_route() != ROUTE_DASHBOARD:
        safe_print("Not signed in. Run: hrm login <email>")
        return 1

    if args.command == "logout":
        app.orchestrator.logout()
        safe_print("Signed out.")
        return 0

    if args.command == "check":
        result = app.attendance.toggle()
        if not result.ok:
            return _print_error(result)
        session = result.data
        if session.is_checked_in:
            safe_print(f"Checked in at {session.check_in_time}.")
        else:
            safe_print(f"Checked out. Worked {session.worked_time}.")
        return 0

    if args.command == "report":
        params = ReportParams(year=args.year, month=args.month,
                              count=args.count, page_no=args.page)
        result = app.attendance_api.report(params)
        if not result.ok:
            return _print_error(result)
        for row in result.data.items:
            records = row.get("attendance") or []
            safe_print(f"{row.get('fullName', '?'):30} {row.get('position', ''):20} "
                       f"{len(records)} records")
        safe_print(f"Total: {result.data.total}")
        return 0

    if args.command == "leaves":
        result = app.leaves.my_leaves(args.status)
        if not result.ok:
            return _print_error(result)
        for leave in result.data:
            safe_print(f"{leave.get('startDate', '')} → {leave.get('endDate', '')}  "
                       f"{leave.get('leaveType', ''):16} {leave.get('status', '')}")
        return 0

    if args.command == "leave-request":
        result = app.leaves.submit(args.leave_type, args.start, args.end, args.reason)
        if not result.ok:
            return _print_error(result)
        safe_print("Leave request submitted.")
        return 0

    if args.command == "notifications":
        user_id = app.storage.get_user_id()
        result = app.notifications_api.get_user_notifications(user_id)
        if not result.ok:
            return _print_error(result)
        if args.mark_all_read:
            done, failed = app.notifications_api.mark_all_as_read(user_id, result.data.items)
            safe_print(f"Marked {done} read ({failed} failed).")
            return 0 if not failed else 1
        for n in result.data.items:
            flag = " " if n.is_read else "*"
            safe_print(f"{flag} {n.created_at[:16]:16} {n.title}: {n.message}")
        return 0

    return 2


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(console=False)
    app = HrmApp(biometrics=ConsoleConfirm())
    try:
        app.start(probe=not args.no_probe)
        return run(app, args)
    except KeyboardInterrupt:
        safe_print("\nCancelled.")
        return 130
    except Exception as e:
        log.error("hrm crashed: %s", e, exc_info=True)
        safe_print(f"Unexpected error: {e}")
        return 1
    finally:
        app.shutdown()
