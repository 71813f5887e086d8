from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_user, json_body, login_required, store_session_user
from ..container import Container
from .model import StaffProfile
from .service import StaffMember


def _profile_dict(profile: StaffProfile) -> dict:
    data = asdict(profile)
    data["working_days"] = list(profile.working_days)
    return data


def _member_dict(member: StaffMember) -> dict:
    return {
        "id": member.user.user_id,
        "email": member.user.email,
        "role": member.user.role.value,
        "isActive": member.user.is_active,
        "profile": _profile_dict(member.profile) if member.profile else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email") or "", data.get("password") or "")

        session.clear()
        session.permanent = bool(data.get("remember"))
        store_session_user(s_user)
        return jsonify({"success": True, "user": {"id": s_user.user_id, "role": s_user.role.value, "name": s_user.full_name}})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = current_user()
        profile = None
        if not user.is_admin:
            profile = _profile_dict(container.staff_directory.get_profile(user.user_id))
        return jsonify(
            {
                "success": True,
                "user": {"id": user.user_id, "email": user.email, "role": user.role.value, "name": user.full_name},
                "profile": profile,
            }
        )

    @app.route("/api/admin/staff", methods=["GET"], endpoint="admin_staff")
    @admin_required
    def admin_staff():
        staff = container.staff_directory.list_staff(current_role=current_user().role)
        return jsonify({"success": True, "staff": [_profile_dict(p) for p in staff]})

    @app.route("/api/admin/staff", methods=["POST"], endpoint="admin_create_staff")
    @admin_required
    def admin_create_staff():
        data = json_body()
        member = container.staff_directory.create_staff(
            current_role=current_user().role,
            email=data.get("email") or "",
            password=data.get("password") or "",
            full_name=data.get("fullName") or "",
            salary=data.get("salary"),
            working_days=data.get("workingDays"),
            office_time_in=data.get("officeTimeIn") or "",
            office_time_out=data.get("officeTimeOut") or "",
        )
        return jsonify({"success": True, "staff": _member_dict(member)}), 201

    @app.route("/api/admin/staff/<int:staff_id>", methods=["GET"], endpoint="admin_get_staff")
    @admin_required
    def admin_get_staff(staff_id: int):
        member = container.staff_directory.get_staff(current_role=current_user().role, staff_id=staff_id)
        return jsonify({"success": True, "staff": _member_dict(member)})

    @app.route("/api/admin/staff/<int:staff_id>", methods=["PUT"], endpoint="admin_update_staff")
    @admin_required
    def admin_update_staff(staff_id: int):
        data = json_body()
        member = container.staff_directory.update_staff(
            current_role=current_user().role,
            staff_id=staff_id,
            email=data.get("email"),
            password=data.get("password"),
            full_name=data.get("fullName"),
            salary=data.get("salary"),
            working_days=data.get("workingDays"),
            office_time_in=data.get("officeTimeIn"),
            office_time_out=data.get("officeTimeOut"),
        )
        return jsonify({"success": True, "staff": _member_dict(member)})

    @app.route("/api/admin/staff/<int:staff_id>", methods=["DELETE"], endpoint="admin_delete_staff")
    @admin_required
    def admin_delete_staff(staff_id: int):
        container.staff_directory.delete_staff(current_role=current_user().role, staff_id=staff_id)
        return jsonify({"success": True, "message": "Staff deleted successfully"})
