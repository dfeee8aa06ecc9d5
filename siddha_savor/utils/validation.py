"""
Request field checks shared by routes and services.
"""
from flask import request

from siddha_savor.exceptions import ValidationError


def json_body():
    """
    The request's JSON object, or {} when there is no body.

    Raises:
        ValidationError: body is not JSON or not an object
    """
    if not request.get_data():
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def text_field(value, field, strip=True):
    """
    String value of a text field, stripped unless strip=False; '' when missing.

    Raises:
        ValidationError: the value is present but not a string
    """
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f'Field "{field}" must be a string')
    return value.strip() if strip else value


def full_name(form):
    """Registration name from "name", or "firstName" + "lastName"."""
    name = text_field(form.get('name'), 'name')
    if name:
        return name
    first = text_field(form.get('firstName'), 'firstName')
    last = text_field(form.get('lastName'), 'lastName')
    return f"{first} {last}".strip()
