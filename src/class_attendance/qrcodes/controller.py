from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..container import Container
from ..gateway.context import RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import serialize_qr_code


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)

    @app.route("/api/subjects/<int:subject_id>/qr", methods=["POST"], endpoint="qr_generate")
    @guard
    def qr_generate(ctx: RequestContext, subject_id: int):
        qr = container.qr_service.generate(actor=ctx.user, subject_id=subject_id, code=json_body().get("code"))
        return jsonify(serialize_qr_code(qr)), 201

    @app.route("/api/subjects/<int:subject_id>/qr", methods=["GET"], endpoint="qr_active")
    @guard
    def qr_active(ctx: RequestContext, subject_id: int):
        container.subject_service.require_manageable(ctx.user, subject_id)
        return jsonify(serialize_qr_code(container.qr_service.get_active(subject_id)))

    @app.route("/api/subjects/<int:subject_id>/qr.png", methods=["GET"], endpoint="qr_image")
    @guard
    def qr_image(ctx: RequestContext, subject_id: int):
        container.subject_service.require_manageable(ctx.user, subject_id)
        png = container.qr_service.render_png(subject_id)
        return send_file(io.BytesIO(png), mimetype="image/png")
