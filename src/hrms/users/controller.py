from __future__ import annotations

from flask import Flask, g, jsonify, redirect, request, url_for

from ..common.web import json_response, request_data
from ..container import Container
from .guards import current_user, guarded
from .model import SessionUser


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    @app.route("/login", methods=["GET", "POST"])
    def login():
        if current_user() is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            data = request_data()
            remember = str(data.get("remember_me") or "").lower() in {"1", "true", "on", "yes"}
            if g.auth.login(data.get("email", ""), data.get("password", ""), remember=remember):
                return redirect(url_for("dashboard"))
            return jsonify({"error": "Invalid email or password"}), 401

        return jsonify({"message": "Sign in with your email and password"})

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        g.auth.logout()
        return redirect(url_for("login"))

    @app.route("/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = request_data()
        password = data.get("password", "")
        user = container.auth_service.sign_up(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=password,
        )
        g.auth.start(SessionUser.from_user(user))
        return redirect(url_for("employee_register"))

    @app.route("/me", endpoint="me")
    @guarded(require_active=False)
    def me():
        return json_response(current_user())

    @app.route("/pending-approval", endpoint="pending_approval")
    @guarded(require_active=False)
    def pending_approval():
        user = current_user()
        return json_response(
            user,
            message=(
                f"Thank you for registering, {user.name or user.email}! "
                "Your employee registration is awaiting approval from an administrator."
            ),
        )

    @app.route("/account-rejected", endpoint="account_rejected")
    def account_rejected():
        user = current_user()
        if user is None:
            return redirect(url_for("login"))
        return json_response(
            user,
            message="Your registration was not approved. Please contact HR for details.",
        )
