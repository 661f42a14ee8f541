from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.exceptions import InvalidRangeError, StoreUnavailableError, TriggerTimeoutError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Map domain errors to JSON responses for every controller."""

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        kind = "invalid_range" if isinstance(e, InvalidRangeError) else "validation_error"
        return jsonify({"success": False, "error": kind, "message": str(e)}), 400

    @app.errorhandler(TriggerTimeoutError)
    def _trigger_timeout(e: TriggerTimeoutError):
        return (
            jsonify(
                {
                    "success": True,
                    "status": "running",
                    "week_start": e.week_start.isoformat(),
                    "message": str(e),
                }
            ),
            202,
        )

    @app.errorhandler(StoreUnavailableError)
    def _store_unavailable(e: StoreUnavailableError):
        logger.error("Store unavailable: %s", e)
        return jsonify({"success": False, "error": "store_unavailable", "message": str(e)}), 503
