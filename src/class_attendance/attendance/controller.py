from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_int, require_enum, require_int
from ..container import Container
from ..core.enums import AttendanceStatus
from ..gateway.context import RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import serialize_attendance, serialize_many, serialize_status_counts


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @guard
    def attendance_list(ctx: RequestContext):
        date_s = request.args.get("date")
        records = container.attendance_ledger.list(
            actor=ctx.user,
            student_id=optional_int(request.args.get("studentId"), "studentId"),
            subject_id=optional_int(request.args.get("subjectId"), "subjectId"),
            date=parse_iso_date(date_s) if date_s else None,
        )
        return jsonify(serialize_many(serialize_attendance, records))

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @guard
    def attendance_mark(ctx: RequestContext):
        data = json_body()
        record = container.attendance_ledger.mark(
            actor=ctx.user,
            student_id=require_int(data.get("studentId"), "studentId"),
            subject_id=require_int(data.get("subjectId"), "subjectId"),
            date=parse_iso_date(data.get("date")),
            status=require_enum(AttendanceStatus, data.get("status"), "status"),
            remarks=data.get("remarks"),
        )
        return jsonify(serialize_attendance(record)), 201

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @guard
    def attendance_checkin(ctx: RequestContext):
        record = container.attendance_ledger.check_in_with_code(actor=ctx.user, code=json_body().get("code"))
        return jsonify(serialize_attendance(record)), 201

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @guard
    def attendance_summary(ctx: RequestContext):
        subject_id = require_int(request.args.get("subjectId"), "subjectId")
        counts = container.attendance_ledger.summary(actor=ctx.user, subject_id=subject_id)
        return jsonify({"subjectId": subject_id, "counts": serialize_status_counts(counts)})
