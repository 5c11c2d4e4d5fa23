from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, hr_required, json_body, login_required, warnings_payload
from ..container import Container
from ..core.exceptions import ValidationError


def _int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def register(app: Flask, container: Container) -> None:
    workflow = container.leave_workflow

    # -------- Employee --------
    @app.route("/api/leaves/balances", methods=["GET"], endpoint="leave_balances")
    @login_required
    def leave_balances():
        year = _int_arg("year", container.time_engine.current_year())
        balances = container.balance_ledger.list_balances(current_user_id(), year)
        return jsonify({"year": year, "items": [b.to_dict() for b in balances]})

    @app.route("/api/leaves/active", methods=["GET"], endpoint="leave_active")
    @login_required
    def leave_active():
        req = workflow.get_active_request(current_user_id())
        return jsonify({"request": req.to_dict() if req else None})

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="leave_mine")
    @login_required
    def leave_mine():
        items = workflow.list_for_employee(current_user_id(), limit=_int_arg("limit", 50))
        return jsonify({"items": [r.to_dict() for r in items]})

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_submit")
    @login_required
    def leave_submit():
        data = json_body()
        if data.get("leave_type_id") in (None, ""):
            raise ValidationError("leave_type_id is required")
        if data.get("total_days") in (None, ""):
            raise ValidationError("total_days is required")
        try:
            leave_type_id = int(data["leave_type_id"])
        except (TypeError, ValueError):
            raise ValidationError("leave_type_id must be an integer")

        outcome = workflow.submit(
            current_user_id(),
            leave_type_id=leave_type_id,
            start_date=data.get("start_date") or "",
            end_date=data.get("end_date") or "",
            day_type=data.get("day_type") or "full",
            total_days=data["total_days"],
            reason=data.get("reason"),
        )
        return (
            jsonify({"success": True, "request": outcome.value.to_dict(), "warnings": warnings_payload(outcome.warnings)}),
            201,
        )

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    @login_required
    def leave_cancel(request_id: int):
        req = workflow.cancel(request_id, current_user_id())
        return jsonify({"success": True, "request": req.to_dict()})

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(request_id: int):
        req = workflow.get_request(request_id, current_user_id(), current_role())
        return jsonify({"request": req.to_dict()})

    # -------- HR admin --------
    @app.route("/api/hr/leaves/pending", methods=["GET"], endpoint="hr_leaves_pending")
    @hr_required
    def hr_leaves_pending():
        items = workflow.list_pending(limit=_int_arg("limit", 200))
        return jsonify({"items": [r.to_dict() for r in items]})

    @app.route("/api/hr/leaves/pending/count", methods=["GET"], endpoint="hr_leaves_pending_count")
    @hr_required
    def hr_leaves_pending_count():
        return jsonify({"count": workflow.count_pending()})

    @app.route("/api/hr/leaves/<int:request_id>/approve", methods=["POST"], endpoint="hr_leave_approve")
    @hr_required
    def hr_leave_approve(request_id: int):
        outcome = workflow.approve(request_id, current_user_id())
        return jsonify(
            {"success": True, "request": outcome.value.to_dict(), "warnings": warnings_payload(outcome.warnings)}
        )

    @app.route("/api/hr/leaves/<int:request_id>/reject", methods=["POST"], endpoint="hr_leave_reject")
    @hr_required
    def hr_leave_reject(request_id: int):
        outcome = workflow.reject(request_id, current_user_id(), json_body().get("reason"))
        return jsonify(
            {"success": True, "request": outcome.value.to_dict(), "warnings": warnings_payload(outcome.warnings)}
        )
