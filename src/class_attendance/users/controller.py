from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.validators import require_enum
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.logging import get_logger
from ..gateway.context import SESSION_USER_KEY, RequestContext, make_guard
from ..gateway.request_parsing import json_body
from ..gateway.serializers import serialize_many, serialize_user

log = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container)
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(str(data.get("username") or ""), str(data.get("password") or ""))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        session[SESSION_USER_KEY] = user.user_id
        log.info("user %s logged in", user.user_id)
        return jsonify(serialize_user(user))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out successfully"})

    @app.route("/api/user", methods=["GET"], endpoint="current_user")
    @guard
    def current_user(ctx: RequestContext):
        return jsonify(serialize_user(ctx.user))

    @app.route("/api/users/list", methods=["GET"], endpoint="users_list")
    @guard
    def users_list(ctx: RequestContext):
        role_s = request.args.get("role")
        role = require_enum(Role, role_s, "role") if role_s else None
        return jsonify(serialize_many(serialize_user, container.user_service.list_users(role)))

    @app.route("/api/users/create", methods=["POST"], endpoint="users_create")
    @guard
    def users_create(ctx: RequestContext):
        data = json_body()
        user = container.user_service.create_account(
            username=data.get("username"),
            email=data.get("email"),
            password=data.get("password"),
            full_name=data.get("fullName"),
            role=data.get("role") or Role.STUDENT.value,
            profile_picture=data.get("profilePicture"),
        )
        return jsonify(serialize_user(user)), 201

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="users_update")
    @guard
    def users_update(ctx: RequestContext, user_id: int):
        user = container.user_service.update_user(actor=ctx.user, user_id=user_id, updates=json_body())
        return jsonify(serialize_user(user))

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @guard
    def users_delete(ctx: RequestContext, user_id: int):
        container.user_service.delete_user(actor=ctx.user, user_id=user_id)
        return "", 204
