from __future__ import annotations

from flask import Flask, current_app, request

from ..common.datetime_utils import now_local
from ..common.http import admin_required, current_role, ok
from ..container import Container
from ..core.enums import EvaluationStatus


def _period_from_query() -> tuple:
    """bulan/tahun from the query string, defaulting to the current month."""
    today = now_local(current_app.config["ORG_TIMEZONE"])
    return request.args.get("bulan") or today.month, request.args.get("tahun") or today.year


def register(app: Flask, container: Container) -> None:
    @app.route("/api/performance/calculate/<int:user_id>", methods=["GET"], endpoint="performance_calculate")
    @admin_required
    def performance_calculate(user_id: int):
        month, year = _period_from_query()
        calc = container.performance_service.calculate(
            current_role=current_role(), user_id=user_id, month=month, year=year
        )
        return ok(calc.to_dict())

    @app.route("/api/performance", methods=["POST"], endpoint="performance_save")
    @admin_required
    def performance_save():
        data = request.get_json(silent=True) or {}
        evaluation = container.performance_service.save(
            current_role=current_role(),
            user_id=data.get("userId"),
            month=data.get("bulan"),
            year=data.get("tahun"),
            kuantitas=data.get("kuantitas"),
            kualitas=data.get("kualitas"),
            laporan=bool(data.get("laporan")),
            status=data.get("status") or EvaluationStatus.DRAFT.value,
            absen=data.get("absen"),
        )
        message = (
            "Penilaian berhasil difinalisasi."
            if evaluation.is_final
            else "Draft penilaian berhasil disimpan."
        )
        return ok(evaluation.to_dict(), message)

    @app.route("/api/performance", methods=["GET"], endpoint="performance_list")
    @admin_required
    def performance_list():
        month, year = _period_from_query()
        rows = container.performance_service.list_for_period(current_role=current_role(), month=month, year=year)
        return ok([e.to_dict() for e in rows])

    @app.route("/api/performance/ranking", methods=["GET"], endpoint="performance_ranking")
    @admin_required
    def performance_ranking():
        month, year = _period_from_query()
        rows = container.performance_service.ranking(current_role=current_role(), month=month, year=year)
        return ok([dict(e.to_dict(), rank=i) for i, e in enumerate(rows, start=1)])

    @app.route("/api/performance/<int:evaluation_id>", methods=["DELETE"], endpoint="performance_delete")
    @admin_required
    def performance_delete(evaluation_id: int):
        container.performance_service.delete_draft(current_role=current_role(), evaluation_id=evaluation_id)
        return ok(None, "Penilaian draft berhasil dihapus.")

    @app.route(
        "/api/performance/delete-all-finals/<int:bulan>/<int:tahun>",
        methods=["DELETE"],
        endpoint="performance_delete_all_finals",
    )
    @admin_required
    def performance_delete_all_finals(bulan: int, tahun: int):
        reset = container.performance_service.delete_all_finals_for_period(
            current_role=current_role(), month=bulan, year=tahun
        )
        return ok({"reset": reset}, f"{reset} penilaian final dikembalikan ke Draft.")

    @app.route("/api/performance/<int:evaluation_id>/reset", methods=["POST"], endpoint="performance_reset")
    @admin_required
    def performance_reset(evaluation_id: int):
        evaluation = container.performance_service.reset_to_draft(
            current_role=current_role(), evaluation_id=evaluation_id
        )
        return ok(evaluation.to_dict(), "Penilaian dikembalikan ke Draft.")
