from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import admin_required, current_role, current_user_id, fail, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/qrcode/generate", methods=["POST"], endpoint="qrcode_generate")
    @admin_required
    def qrcode_generate():
        service = container.qr_service
        token = service.generate(current_role=current_role(), admin_id=current_user_id())
        data = token.to_dict()
        data["qrPayload"] = service.scan_payload(token)
        return ok(data, "QR Code berhasil dibuat.", 201)

    @app.route("/api/qrcode/today", methods=["GET"], endpoint="qrcode_today")
    @admin_required
    def qrcode_today():
        data = container.qr_service.today(current_role=current_role())
        if data is None:
            return ok(None, "Belum ada QR Code untuk hari ini.")
        return ok(data)

    @app.route("/api/qrcode/today/image", methods=["GET"], endpoint="qrcode_today_image")
    @admin_required
    def qrcode_today_image():
        service = container.qr_service
        token = service.active_token()
        if token is None:
            return fail("Belum ada QR Code untuk hari ini.", 404)
        buf = io.BytesIO(service.render_png(token))
        return send_file(buf, mimetype="image/png", download_name=f"qr-absensi-{token.token_date.isoformat()}.png")

    @app.route("/api/qrcode/history", methods=["GET"], endpoint="qrcode_history")
    @admin_required
    def qrcode_history():
        try:
            days = int(request.args.get("days") or app.config["QR_HISTORY_DAYS"])
        except ValueError:
            raise ValidationError("days harus berupa angka.")
        tokens = container.qr_service.history(current_role=current_role(), limit_days=days)
        return ok([t.to_dict() for t in tokens])
