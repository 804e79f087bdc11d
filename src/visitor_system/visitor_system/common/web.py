from __future__ import annotations

from functools import wraps
from typing import Any, Dict

from flask import request

from ..container import Container


def make_token_required(container: Container):
    """Decorator factory applying the configured AuthPolicy to a view."""

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            # AuthenticationError is rendered by the app-level error handler.
            container.auth_policy.check(request.headers.get("Authorization"))
            return view(*args, **kwargs)

        return wrapper

    return token_required


def request_data() -> Dict[str, Any]:
    """JSON body if one was sent, otherwise the submitted form fields."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
