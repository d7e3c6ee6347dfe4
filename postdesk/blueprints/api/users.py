from __future__ import annotations

from flask import Blueprint, jsonify

from postdesk.blueprints.api import json_body
from postdesk.decorators import token_required
from postdesk.errors import Unauthenticated
from postdesk.extensions import limiter, tokens
from postdesk.schemas.auth import LoginRequest, RegisterRequest
from postdesk.services.auth import authenticate, current_user, register_user

bp = Blueprint("users", __name__, url_prefix="/api/users")


@bp.post("/register")
@limiter.limit("10 per minute; 50 per hour")
def register():
    payload = RegisterRequest.model_validate(json_body())
    user, token = register_user(payload)
    return jsonify({"success": True, "token": token, "user": user.to_public_dict()}), 201


@bp.post("/login")
@limiter.limit("10 per minute; 50 per hour")
def login():
    payload = LoginRequest.model_validate(json_body())
    user, error = authenticate(payload.email, payload.password)
    if error:
        raise Unauthenticated(error)
    return jsonify({"success": True, "token": tokens.issue(user), "user": user.to_public_dict()})


@bp.get("/me")
@token_required
def me():
    return jsonify({"success": True, "user": current_user().to_public_dict()})
