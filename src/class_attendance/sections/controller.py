from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..gateway.context import RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import serialize_many, serialize_section


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)

    @app.route("/api/sections", methods=["GET"], endpoint="sections_list")
    @guard
    def sections_list(ctx: RequestContext):
        return jsonify(serialize_many(serialize_section, container.section_service.list_all()))

    @app.route("/api/sections/<int:section_id>", methods=["GET"], endpoint="sections_get")
    @guard
    def sections_get(ctx: RequestContext, section_id: int):
        return jsonify(serialize_section(container.section_service.get(section_id)))

    @app.route("/api/sections", methods=["POST"], endpoint="sections_create")
    @guard
    def sections_create(ctx: RequestContext):
        return jsonify(serialize_section(container.section_service.create(json_body()))), 201

    @app.route("/api/sections/<int:section_id>", methods=["PUT"], endpoint="sections_update")
    @guard
    def sections_update(ctx: RequestContext, section_id: int):
        return jsonify(serialize_section(container.section_service.update(section_id, json_body())))

    @app.route("/api/sections/<int:section_id>", methods=["DELETE"], endpoint="sections_delete")
    @guard
    def sections_delete(ctx: RequestContext, section_id: int):
        container.membership_service.delete_section(section_id)
        return "", 204
