"""
Logging Sanitizer Utility

Strips credentials out of request payloads before they reach the log files.
Route handlers log incoming form/JSON bodies through ``sanitize_payload``.
"""

from typing import Dict, Any, Mapping
from werkzeug.datastructures import MultiDict


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'senha',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'secret',
    'token',
    'api_key',
    'access_token',
    'refresh_token',
    'session_id',
    'csrf_token',
}


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Example:
        >>> sanitize_dict({'username': 'admin', 'senha': 'secret123'})
        {'username': 'admin', 'senha': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        else:
            sanitized[key] = value

    return sanitized


def sanitize_payload(payload: Mapping, redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a request payload (JSON dict or ``request.form``) for safe logging.
    """
    if isinstance(payload, MultiDict):
        payload = payload.to_dict()
    return sanitize_dict(dict(payload or {}), redact_text)
