from __future__ import annotations

import logging

from flask import Flask, session

from ..common.http import json_body, ok
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        logger.info("User %s logged in", s_user.user_id)

        return ok({"userId": s_user.user_id, "name": s_user.name, "role": s_user.role.value}, "Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")
