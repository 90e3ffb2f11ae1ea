from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import error_response
from ..common.serializers import actor_to_dict
from ..container import Container
from ..core.exceptions import StorageUnavailableError
from .session import login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/time-keeping/me", methods=["GET"], endpoint="tk_me")
    @login_required
    def tk_me():
        try:
            profile = container.staff_service.get_profile(g.actor.staff_id) if g.actor.staff_id else None
        except StorageUnavailableError as e:
            return error_response(e)
        body = actor_to_dict(g.actor, profile)
        body["canUseTimeKeeping"] = container.staff_service.is_eligible(profile)
        return jsonify(body)
