from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_user, json_body, login_required
from ..container import Container
from .engine import derive_daily_status
from .model import AttendanceRecord
from .service import lunch_to_dict, status_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _record_payload(record: AttendanceRecord) -> dict:
        return status_to_dict(derive_daily_status(record, is_today=True))

    @app.route("/api/staff/attendance", methods=["GET"], endpoint="staff_attendance")
    @login_required
    def staff_attendance():
        user = current_user()
        month = request.args.get("month")
        days = service.get_month(user.user_id, month)
        today = service.get_today_status(user.user_id)
        return jsonify(
            {
                "success": True,
                "attendanceRecords": [status_to_dict(d) for d in days],
                "todayStatus": status_to_dict(today),
            }
        )

    @app.route("/api/staff/punch-in", methods=["POST"], endpoint="punch_in")
    @login_required
    def punch_in():
        data = json_body()
        record = service.punch_in(
            current_user().user_id,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return jsonify({"success": True, "attendance": _record_payload(record)})

    @app.route("/api/staff/punch-out", methods=["POST"], endpoint="punch_out")
    @login_required
    def punch_out():
        data = json_body()
        record = service.punch_out(
            current_user().user_id,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            work_done=data.get("workDone"),
        )
        return jsonify({"success": True, "attendance": _record_payload(record)})

    @app.route("/api/staff/lunch-start", methods=["POST"], endpoint="lunch_start")
    @login_required
    def lunch_start():
        data = json_body()
        lb = service.start_lunch(
            current_user().user_id,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return jsonify({"success": True, "lunchBreak": lunch_to_dict(lb)})

    @app.route("/api/staff/lunch-end", methods=["POST"], endpoint="lunch_end")
    @login_required
    def lunch_end():
        data = json_body()
        lb = service.end_lunch(
            current_user().user_id,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return jsonify({"success": True, "lunchBreak": lunch_to_dict(lb)})

    @app.route("/api/staff/leave", methods=["POST"], endpoint="mark_leave")
    @login_required
    def mark_leave():
        data = json_body()
        record = service.mark_leave(current_user().user_id, reason=data.get("reason") or "")
        return jsonify({"success": True, "attendance": _record_payload(record)})

    @app.route("/api/staff/attendance/delete", methods=["DELETE"], endpoint="delete_attendance")
    @login_required
    def delete_attendance():
        service.delete_record(user_id=current_user().user_id, record_id=request.args.get("id"))
        return jsonify({"success": True, "message": "Attendance record deleted successfully"})

    @app.route("/api/admin/staff/<int:staff_id>/attendance", methods=["GET"], endpoint="admin_staff_attendance")
    @admin_required
    def admin_staff_attendance(staff_id: int):
        report = container.report_service.build_staff_month(
            current_role=current_user().role,
            staff_id=staff_id,
            month=request.args.get("month"),
        )
        return jsonify({"success": True, **report.to_dict()})
