from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.validators import parse_flag, require_positive_number
from ..container import Container
from ..core.exceptions import ConflictError, DomainError, NotFoundError, StorageError, ValidationError
from .model import EarningsOverrides, PayPeriod, PreviewOptions

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 503),
)


def register(app: Flask, container: Container) -> None:
    payroll_service = container.payroll_service
    settings_service = container.settings_service
    scheduler = container.scheduler

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        code = next((c for kind, c in _STATUS_CODES if isinstance(e, kind)), 400)
        body = {"message": str(e)}
        if isinstance(e, ConflictError) and e.conflicting_period is not None:
            body["conflictingPeriod"] = e.conflicting_period.to_dict()
        if code >= 500:
            logger.error("Storage failure on %s %s: %s", request.method, request.path, e)
        return jsonify(body), code

    def _body() -> dict:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _period(data: dict) -> PayPeriod:
        raw = data.get("payPeriod") or {}
        if not isinstance(raw, dict):
            raise ValidationError("payPeriod must be an object with start and end")
        return PayPeriod.parse(raw.get("start") or data.get("startDate"), raw.get("end") or data.get("endDate"))

    @app.route("/api/payroll/preview", methods=["POST"], endpoint="payroll_preview")
    def preview():
        data = _body()
        result = payroll_service.compute_preview(
            data.get("employeeId"),
            _period(data),
            PreviewOptions.from_dict(data.get("options")),
        )
        return jsonify(result.to_dict())

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    def generate():
        data = _body()
        record = payroll_service.generate(
            data.get("employeeId"),
            _period(data),
            overrides=EarningsOverrides.from_dict(data.get("overrides")),
            options=PreviewOptions.from_dict(data.get("options")),
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/payroll/generate-all", methods=["POST"], endpoint="payroll_generate_all")
    def generate_all():
        data = _body()
        max_workers = data.get("maxWorkers")
        if max_workers is not None and max_workers != "":
            max_workers = int(require_positive_number(max_workers, "maxWorkers"))
        else:
            max_workers = None
        result = payroll_service.generate_all(
            data.get("month"),
            data.get("year"),
            overwrite=parse_flag(data, "overwrite", False),
            max_workers=max_workers,
        )
        return jsonify(result.to_dict())

    @app.route("/api/payroll/check-overlap", methods=["POST"], endpoint="payroll_check_overlap")
    def check_overlap():
        data = _body()
        result = payroll_service.check_overlap(data.get("employeeId"), _period(data))
        return jsonify(result.to_dict())

    @app.route("/api/payroll/history", methods=["GET"], endpoint="payroll_history")
    def history():
        records = payroll_service.history(request.args.get("limit", 20))
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/payroll/employee/<int:employee_id>", methods=["GET"], endpoint="payroll_for_employee")
    def for_employee(employee_id: int):
        return jsonify([r.to_dict() for r in payroll_service.list_for_employee(employee_id)])

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    def get_payroll(payroll_id: int):
        return jsonify(payroll_service.get(payroll_id).to_dict())

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    def update_payroll(payroll_id: int):
        overrides = EarningsOverrides.from_dict(_body())
        return jsonify(payroll_service.apply_overrides(payroll_id, overrides).to_dict())

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    def delete_payroll(payroll_id: int):
        return jsonify(payroll_service.delete(payroll_id).to_dict())

    @app.route("/api/payroll/<int:payroll_id>/recalculate", methods=["POST"], endpoint="payroll_recalculate")
    def recalculate(payroll_id: int):
        return jsonify(payroll_service.recalculate(payroll_id).to_dict())

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PATCH"], endpoint="payroll_status")
    def update_status(payroll_id: int):
        data = _body()
        record = payroll_service.update_payment_status(payroll_id, data.get("status"), data.get("paymentDate"))
        return jsonify(record.to_dict())

    @app.route("/api/payroll/<int:payroll_id>/payment", methods=["POST"], endpoint="payroll_payment")
    def record_payment(payroll_id: int):
        data = _body()
        record = payroll_service.record_payment(
            payroll_id,
            method=data.get("method"),
            status=data.get("status") or "Paid",
            payment_date=data.get("paymentDate"),
            transaction_id=data.get("transactionId"),
            remarks=data.get("remarks"),
        )
        return jsonify(record.to_dict())

    @app.route("/api/payroll-settings", methods=["GET"], endpoint="payroll_settings_get")
    def get_settings():
        return jsonify(settings_service.get_settings().to_dict())

    @app.route("/api/payroll-settings", methods=["PUT"], endpoint="payroll_settings_update")
    def update_settings():
        return jsonify(settings_service.update_settings(_body()).to_dict())

    @app.route("/api/payroll-settings/reset", methods=["POST"], endpoint="payroll_settings_reset")
    def reset_settings():
        return jsonify(settings_service.reset_settings().to_dict())

    @app.route("/api/payroll/auto/status", methods=["GET"], endpoint="payroll_auto_status")
    def auto_status():
        return jsonify({**scheduler.status().to_dict(), "running": scheduler.is_running})

    @app.route("/api/payroll/auto/enabled", methods=["POST"], endpoint="payroll_auto_enabled")
    def auto_enabled():
        data = _body()
        if "enabled" not in data:
            raise ValidationError("enabled is required")
        config = scheduler.enable() if bool(data["enabled"]) else scheduler.disable()
        return jsonify(config.to_dict())

    @app.route("/api/payroll/auto/run", methods=["POST"], endpoint="payroll_auto_run")
    def auto_run():
        data = _body()
        result = scheduler.run_now(data.get("month"), data.get("year"))
        return jsonify(result.to_dict())
