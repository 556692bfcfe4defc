from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..gateway.context import RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import serialize_many, serialize_subject


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)

    @app.route("/api/subjects", methods=["GET"], endpoint="subjects_list")
    @guard
    def subjects_list(ctx: RequestContext):
        # Scope comes from the role policy: enrolled, owned or all.
        subjects = container.subject_service.list_for(ctx.user)
        return jsonify(serialize_many(serialize_subject, subjects))

    @app.route("/api/subjects/<int:subject_id>", methods=["GET"], endpoint="subjects_get")
    @guard
    def subjects_get(ctx: RequestContext, subject_id: int):
        return jsonify(serialize_subject(container.subject_service.get(subject_id)))

    @app.route("/api/subjects", methods=["POST"], endpoint="subjects_create")
    @guard
    def subjects_create(ctx: RequestContext):
        subject = container.subject_service.create(actor=ctx.user, data=json_body())
        return jsonify(serialize_subject(subject)), 201

    @app.route("/api/subjects/<int:subject_id>", methods=["PUT"], endpoint="subjects_update")
    @guard
    def subjects_update(ctx: RequestContext, subject_id: int):
        subject = container.subject_service.update(actor=ctx.user, subject_id=subject_id, data=json_body())
        return jsonify(serialize_subject(subject))

    @app.route("/api/subjects/<int:subject_id>", methods=["DELETE"], endpoint="subjects_delete")
    @guard
    def subjects_delete(ctx: RequestContext, subject_id: int):
        container.membership_service.delete_subject(actor=ctx.user, subject_id=subject_id)
        return "", 204
