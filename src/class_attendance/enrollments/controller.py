from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_int, require_int
from ..container import Container
from ..core.constants import SUBJECT_STUDENTS_CACHE_KEY
from ..gateway.context import RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import (
    serialize_enrollment,
    serialize_many,
    serialize_section_enrollment,
    serialize_user,
)

INVALIDATE_HEADER = "X-Invalidate"


def _stale_subject_students(response, subject_id: int):
    """Tell the client which cached lists this mutation made stale."""
    response.headers[INVALIDATE_HEADER] = SUBJECT_STUDENTS_CACHE_KEY.format(subject_id=subject_id)
    return response


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)

    @app.route("/api/subjects/<int:subject_id>/students", methods=["GET"], endpoint="subjects_students")
    @guard
    def subjects_students(ctx: RequestContext, subject_id: int):
        return jsonify(serialize_many(serialize_user, container.membership_service.list_enrolled(subject_id)))

    @app.route("/api/subjects/<int:subject_id>/available", methods=["GET"], endpoint="subjects_available")
    @guard
    def subjects_available(ctx: RequestContext, subject_id: int):
        section_id = optional_int(request.args.get("sectionId"), "sectionId")
        students = container.membership_service.list_available(subject_id, section_id=section_id)
        return jsonify(serialize_many(serialize_user, students))

    @app.route("/api/subjects/<int:subject_id>/enroll", methods=["POST"], endpoint="subjects_enroll")
    @guard
    def subjects_enroll(ctx: RequestContext, subject_id: int):
        student_id = require_int(json_body().get("studentId"), "studentId")
        enrollment = container.membership_service.enroll_one(actor=ctx.user, subject_id=subject_id, student_id=student_id)
        return _stale_subject_students(jsonify(serialize_enrollment(enrollment)), subject_id)

    @app.route("/api/subjects/<int:subject_id>/enroll/bulk", methods=["POST"], endpoint="subjects_enroll_bulk")
    @guard
    def subjects_enroll_bulk(ctx: RequestContext, subject_id: int):
        count = container.membership_service.enroll_bulk(
            actor=ctx.user,
            subject_id=subject_id,
            student_ids=json_body().get("studentIds"),
        )
        response = jsonify({"enrolled": count})
        response.status_code = 201
        return _stale_subject_students(response, subject_id)

    @app.route(
        "/api/subjects/<int:subject_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="subjects_unenroll",
    )
    @guard
    def subjects_unenroll(ctx: RequestContext, subject_id: int, student_id: int):
        container.membership_service.unenroll(actor=ctx.user, subject_id=subject_id, student_id=student_id)
        return _stale_subject_students(app.response_class(status=204), subject_id)

    @app.route("/api/sections/<int:section_id>/students", methods=["GET"], endpoint="sections_students")
    @guard
    def sections_students(ctx: RequestContext, section_id: int):
        students = container.membership_service.list_section_students(section_id)
        return jsonify(serialize_many(serialize_user, students))

    @app.route("/api/sections/<int:section_id>/enroll", methods=["POST"], endpoint="sections_enroll")
    @guard
    def sections_enroll(ctx: RequestContext, section_id: int):
        student_id = require_int(json_body().get("studentId"), "studentId")
        enrollment = container.membership_service.enroll_in_section(section_id=section_id, student_id=student_id)
        return jsonify(serialize_section_enrollment(enrollment)), 201

    @app.route(
        "/api/sections/<int:section_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="sections_unenroll",
    )
    @guard
    def sections_unenroll(ctx: RequestContext, section_id: int, student_id: int):
        container.membership_service.unenroll_from_section(section_id=section_id, student_id=student_id)
        return "", 204
