from __future__ import annotations

import json

from flask import Flask, request, send_from_directory

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, current_role, current_user_id, login_required, ok
from ..core.enums import CheckInModality
from ..core.exceptions import ValidationError
from ..container import Container
from .model import GeoSnapshot


def _payload() -> dict:
    """JSON body, or form fields for multipart uploads."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _geo(data: dict):
    location = data.get("location")
    if isinstance(location, str) and location.strip().startswith("{"):
        # multipart forms send the location object as a JSON string
        try:
            location = json.loads(location)
        except ValueError:
            location = None
    if isinstance(location, dict):
        data = location
    return GeoSnapshot.parse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        address=data.get("address"),
        accuracy=data.get("accuracy"),
    )


def register(app: Flask, container: Container) -> None:
    def proof_from_request(data: dict) -> str:
        upload = request.files.get("foto")
        if upload and upload.filename:
            return container.photo_store.save(upload)
        foto = data.get("foto")
        if not foto:
            raise ValidationError("Foto wajib diambil untuk absensi.")
        return str(foto)

    # -------- Check-in --------
    @app.route("/api/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @login_required
    def attendance_scan():
        data = _payload()
        record = container.qr_service.scan(
            str(data.get("token") or ""),
            user_id=current_user_id(),
            geo=_geo(data),
            client_timestamp=data.get("timestamp"),
            timezone=data.get("timezone"),
        )
        return ok(record.to_dict(), "Absensi berhasil dicatat.", 201)

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="attendance_scan_image")
    @login_required
    def attendance_scan_image():
        upload = request.files.get("image")
        if upload is None:
            raise ValidationError("File gambar wajib diunggah.")
        record = container.qr_service.scan_image(
            upload.read(),
            user_id=current_user_id(),
            geo=_geo(request.form.to_dict()),
        )
        return ok(record.to_dict(), "Absensi berhasil dicatat.", 201)

    @app.route("/api/attendance/photo-checkin", methods=["POST"], endpoint="attendance_photo_checkin")
    @login_required
    def attendance_photo_checkin():
        data = _payload()
        record = container.attendance_service.check_in(
            current_user_id(),
            modality=CheckInModality.PHOTO,
            proof=proof_from_request(data),
            client_timestamp=data.get("timestamp"),
            timezone=data.get("timezone"),
            geo=_geo(data),
        )
        return ok(record.to_dict(), "Absensi dengan foto berhasil dicatat.", 201)

    @app.route("/api/attendance/photo-upload", methods=["POST"], endpoint="attendance_photo_upload")
    @login_required
    def attendance_photo_upload():
        upload = request.files.get("foto")
        if upload is None or not upload.filename:
            raise ValidationError("File foto wajib diunggah.")
        return ok({"fotoUrl": container.photo_store.save(upload)}, "Foto berhasil diunggah.", 201)

    # -------- Check-out --------
    @app.route("/api/attendance/photo-checkout", methods=["POST"], endpoint="attendance_photo_checkout")
    @login_required
    def attendance_photo_checkout():
        data = _payload()
        record = container.attendance_service.check_out_today(
            user_id=current_user_id(),
            role=current_role(),
            client_timestamp=data.get("timestamp"),
            timezone=data.get("timezone"),
            proof=proof_from_request(data),
            geo=_geo(data),
        )
        return ok(record.to_dict(), "Absen pulang berhasil dicatat.")

    @app.route("/api/attendance/<int:attendance_id>/checkout", methods=["PUT"], endpoint="attendance_checkout")
    @login_required
    def attendance_checkout(attendance_id: int):
        data = _payload()
        record = container.attendance_service.check_out(
            actor_id=current_user_id(),
            actor_role=current_role(),
            attendance_id=attendance_id,
            client_timestamp=data.get("timestamp"),
            timezone=data.get("timezone"),
            proof=data.get("foto"),
            geo=_geo(data),
        )
        return ok(record.to_dict(), "Absen pulang berhasil dicatat.")

    # -------- Admin --------
    @app.route("/api/attendance/<int:attendance_id>/status", methods=["PUT"], endpoint="attendance_override_status")
    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_override")
    @admin_required
    def attendance_override(attendance_id: int):
        data = _payload()
        record = container.attendance_service.admin_override(
            current_role=current_role(),
            attendance_id=attendance_id,
            status=str(data.get("status") or ""),
            jam_masuk=data.get("jamMasuk") or None,
            jam_keluar=data.get("jamKeluar"),
        )
        return ok(record.to_dict(), "Data absensi berhasil diperbarui.")

    @app.route("/api/attendance/settings/late-threshold", methods=["GET"], endpoint="late_threshold_get")
    @login_required
    def late_threshold_get():
        return ok(container.threshold_service.get_current().to_dict())

    @app.route("/api/attendance/settings/late-threshold", methods=["POST"], endpoint="late_threshold_set")
    @admin_required
    def late_threshold_set():
        data = _payload()
        setting = container.threshold_service.set_threshold(
            current_role=current_role(),
            threshold=str(data.get("threshold") or ""),
            changed_by=current_user_id(),
            reason=data.get("alasan"),
        )
        return ok(setting.to_dict(), f"Batas jam terlambat diubah menjadi {setting.threshold}.")

    @app.route("/api/attendance/bulk-holiday", methods=["POST"], endpoint="attendance_bulk_holiday")
    @admin_required
    def attendance_bulk_holiday():
        data = _payload()
        if not data.get("tanggal"):
            raise ValidationError("Tanggal wajib diisi.")
        result = container.attendance_service.declare_holiday(
            current_role=current_role(),
            admin_id=current_user_id(),
            holiday_date=parse_iso_date(str(data["tanggal"])),
            description=data.get("keterangan"),
        )
        return ok(
            result.to_dict(),
            f"Hari libur berhasil ditetapkan untuk {result.total} peserta "
            f"({result.created} baru, {result.updated} diperbarui).",
        )

    @app.route("/api/attendance/cancel-holiday", methods=["POST"], endpoint="attendance_cancel_holiday")
    @admin_required
    def attendance_cancel_holiday():
        data = _payload()
        if not data.get("tanggal"):
            raise ValidationError("Tanggal wajib diisi.")
        deleted = container.attendance_service.cancel_holiday(
            current_role=current_role(),
            holiday_date=parse_iso_date(str(data["tanggal"])),
        )
        return ok({"deleted": deleted}, f"Hari libur dibatalkan ({deleted} data dihapus).")

    # -------- Queries --------
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        start = request.args.get("from")
        end = request.args.get("to")
        try:
            limit = int(request.args.get("limit") or 50)
        except ValueError:
            raise ValidationError("limit harus berupa angka.")
        records = container.attendance_service.history(
            actor_id=current_user_id(),
            actor_role=current_role(),
            start=parse_iso_date(start) if start else None,
            end=parse_iso_date(end) if end else None,
            limit=limit,
        )
        return ok([r.to_dict() for r in records])

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @admin_required
    def attendance_today():
        records = container.attendance_service.today_records(current_role=current_role())
        return ok([r.to_dict() for r in records])

    @app.route("/api/attendance/<int:attendance_id>/photo", methods=["GET"], endpoint="attendance_photo")
    @login_required
    def attendance_photo(attendance_id: int):
        return ok(
            container.attendance_service.get_photo(
                actor_id=current_user_id(), actor_role=current_role(), attendance_id=attendance_id
            )
        )

    @app.route("/api/attendance/<int:attendance_id>/photo-pulang", methods=["GET"], endpoint="attendance_photo_pulang")
    @login_required
    def attendance_photo_pulang(attendance_id: int):
        return ok(
            container.attendance_service.get_photo(
                actor_id=current_user_id(), actor_role=current_role(), attendance_id=attendance_id, checkout=True
            )
        )

    @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploaded_photo")
    @login_required
    def uploaded_photo(filename: str):
        return send_from_directory(container.photo_store.folder.resolve(), filename)
