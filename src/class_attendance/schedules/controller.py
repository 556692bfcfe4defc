from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..gateway.context import RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import serialize_many, serialize_schedule


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)

    @app.route("/api/schedules/teacher", methods=["GET"], endpoint="schedules_teacher")
    @guard
    def schedules_teacher(ctx: RequestContext):
        schedules = container.schedule_service.list_for_teacher(ctx.user)
        return jsonify(serialize_many(serialize_schedule, schedules))

    @app.route("/api/subjects/<int:subject_id>/schedules", methods=["GET"], endpoint="schedules_by_subject")
    @guard
    def schedules_by_subject(ctx: RequestContext, subject_id: int):
        schedules = container.schedule_service.list_by_subject(subject_id)
        return jsonify(serialize_many(serialize_schedule, schedules))

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    @guard
    def schedules_create(ctx: RequestContext):
        schedule = container.schedule_service.create(actor=ctx.user, data=json_body())
        return jsonify(serialize_schedule(schedule)), 201

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @guard
    def schedules_delete(ctx: RequestContext, schedule_id: int):
        container.schedule_service.delete(actor=ctx.user, schedule_id=schedule_id)
        return "", 204
