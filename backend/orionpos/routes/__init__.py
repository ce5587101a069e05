# Overview: Shared helpers for the JSON blueprints.

from flask import current_app, jsonify, request

from ..errors import DuplicateScanCode, PosError, StorageFailure


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def pos_error_response(e: PosError, action: str, *, status: int | None = None):
    """
    Map a POS error to a JSON response.

    DuplicateScanCode -> 409, StorageFailure -> 500 (logged with traceback),
    everything else -> 400 unless the caller passes a status (404 for path
    lookups). Must be called from inside the except block.
    """
    if status is None:
        if isinstance(e, StorageFailure):
            current_app.logger.exception(action)
            status = 500
        elif isinstance(e, DuplicateScanCode):
            status = 409
        else:
            status = 400
    return jsonify(e.to_dict()), status


def internal_error(action: str):
    current_app.logger.exception(action)
    return jsonify({"error": "Internal server error"}), 500
