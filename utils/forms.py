"""
Binding Flask-WTF forms to JSON request bodies.
"""

from flask import request
from werkzeug.datastructures import ImmutableMultiDict

from utils.api_response import api_error
from utils.messages import MESSAGES


def json_payload() -> dict:
    """Request body as a dict; empty dict for missing or non-object bodies."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def bind_json_form(form_class):
    """
    Instantiate a form from the JSON body.

    Returns:
        Tuple of (form, payload)
    """
    payload = json_payload()
    # Nested values are not form fields; null means absent
    flat = {k: v for k, v in payload.items() if v is not None and not isinstance(v, (dict, list))}
    return form_class(formdata=ImmutableMultiDict(flat)), payload


def form_error(form) -> tuple:
    """Standard 400 answer for a form that failed validation."""
    return api_error(
        MESSAGES['invalid_payload'],
        status=400,
        code='VALIDATION_ERROR',
        fields=form.errors
    )
