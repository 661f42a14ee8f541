from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_str
from ..container import Container
from ..core.exceptions import ValidationError
from ..summaries.model import WeeklySummary

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/timesheets/run", methods=["POST"], endpoint="admin_timesheets_run")
    def admin_timesheets_run():
        """Manual trigger.

        Body: ``{"week_start": "YYYY-MM-DD"?, "employee_id": "..."?}``. Returns the
        single summary when ``employee_id`` is given, the batch list otherwise.
        """

        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        week_s = optional_str(payload.get("week_start"))
        week_start = parse_iso_date(week_s) if week_s else None
        employee_id = optional_str(payload.get("employee_id"))

        result = container.scheduler.trigger_manual(week_start=week_start, employee_id=employee_id)

        if isinstance(result, WeeklySummary):
            return jsonify({"success": True, "summary": result.to_dict()})

        logger.info("Manual timesheet calculation completed for %d employees", len(result))
        return jsonify(
            {
                "success": True,
                "message": f"Timesheet calculation completed for {len(result)} employees",
                "results": [s.to_dict() for s in result],
            }
        )

    @app.route("/admin/timesheets/scheduler", methods=["GET"], endpoint="admin_timesheets_scheduler_status")
    def admin_timesheets_scheduler_status():
        return jsonify(container.scheduler.status())

    @app.route("/admin/timesheets/scheduler", methods=["POST"], endpoint="admin_timesheets_scheduler_start")
    def admin_timesheets_scheduler_start():
        container.scheduler.start()
        return jsonify({"message": "Timesheet scheduler started", "status": container.scheduler.status()})
