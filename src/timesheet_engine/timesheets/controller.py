from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date, parse_iso_month, resolve_week_start, week_start_of
from ..common.validators import optional_str, require_non_empty
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/timesheets/daily", methods=["GET"], endpoint="timesheets_daily")
    def timesheets_daily():
        employee_id = require_non_empty(request.args.get("employee_id"), "employee_id")
        date_s = request.args.get("date")
        work_date = parse_iso_date(date_s) if date_s else now_local(container.tz).date()

        daily = container.daily_builder.build(employee_id, work_date)
        return jsonify(daily.to_dict())

    @app.route("/timesheets/weekly", methods=["GET"], endpoint="timesheets_weekly")
    def timesheets_weekly():
        """On-demand weekly view; nothing is persisted here."""

        employee_id = require_non_empty(request.args.get("employee_id"), "employee_id")
        week_s = request.args.get("week_start")
        if week_s:
            # any day of the week selects that week
            week_start = resolve_week_start(parse_iso_date(week_s))
        else:
            week_start = week_start_of(now_local(container.tz).date())

        weekly = container.weekly_aggregator.build(employee_id, week_start)
        return jsonify(weekly.to_dict())

    @app.route("/timesheets/monthly", methods=["GET"], endpoint="timesheets_monthly")
    def timesheets_monthly():
        month_s = request.args.get("month")
        if month_s:
            year, month = parse_iso_month(month_s)
        else:
            today = now_local(container.tz).date()
            year, month = today.year, today.month

        employee_id = optional_str(request.args.get("employee_id"))
        if employee_id:
            rollup = container.monthly_rollup_service.build(employee_id=employee_id, year=year, month=month)
            return jsonify(rollup.to_dict())

        rollups = container.monthly_rollup_service.build_for_all(year=year, month=month)
        return jsonify([r.to_dict() for r in rollups])
