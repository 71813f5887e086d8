from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import date_key, parse_iso_date
from ..common.web import admin_required, current_user, json_body
from ..container import Container
from .model import Holiday


def _to_dict(h: Holiday) -> dict:
    return {"id": h.holiday_id, "date": date_key(h.holiday_date), "name": h.name}


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays")
    def holidays():
        month = request.args.get("month")
        items = service.list_for_month(month) if month else service.list_all()
        return jsonify({"success": True, "holidays": [_to_dict(h) for h in items]})

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="admin_create_holiday")
    @admin_required
    def admin_create_holiday():
        data = json_body()
        holiday_id = service.create(
            current_role=current_user().role,
            holiday_date=parse_iso_date(data.get("date") or ""),
            name=data.get("name") or "",
        )
        return jsonify({"success": True, "id": holiday_id}), 201

    @app.route("/api/admin/holidays", methods=["DELETE"], endpoint="admin_delete_holiday")
    @admin_required
    def admin_delete_holiday():
        service.delete(current_role=current_user().role, holiday_id=request.args.get("id"))
        return jsonify({"success": True})
