"""
Input Validation Module for the navigation API

Validates query and body parameters before they reach the resolver.
"""

import re
from typing import Any, Dict, Optional

from sabq.menus import SUPPORTED_LOCALES


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(message)


MAX_PATH_LENGTH = 2048

# Validation patterns
PATTERNS = {
    # Role: lowercase with underscores, 2-50 chars
    'role': re.compile(r'^[a-z][a-z0-9_]{1,49}$'),

    # Menu node id: lowercase with hyphens, 1-100 chars
    'node_id': re.compile(r'^[a-z0-9][a-z0-9\-_]{0,99}$'),

    # Feature flag name: camelCase or snake_case, 1-100 chars
    'flag': re.compile(r'^[A-Za-z][A-Za-z0-9_]{0,99}$'),
}


def validate_locale(value: Any, field_name: str = 'locale') -> str:
    if not isinstance(value, str) or value not in SUPPORTED_LOCALES:
        raise ValidationError(
            f"{field_name} must be one of: {', '.join(SUPPORTED_LOCALES)}", field_name
        )
    return value


def validate_path(value: Any, field_name: str = 'path', required: bool = True) -> Optional[str]:
    """Route paths must be absolute, whitespace free and reasonably short."""
    if value is None or value == '':
        if required:
            raise ValidationError(f'{field_name} is required', field_name)
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field_name} must be a string', field_name)
    if not value.startswith('/'):
        raise ValidationError(f"{field_name} must start with '/'", field_name)
    if len(value) > MAX_PATH_LENGTH:
        raise ValidationError(f'{field_name} must be at most {MAX_PATH_LENGTH} characters', field_name)
    if re.search(r'\s', value):
        raise ValidationError(f'{field_name} must not contain whitespace', field_name)
    return value


def validate_role(value: Any, field_name: str = 'role') -> str:
    if not isinstance(value, str) or not PATTERNS['role'].match(value):
        raise ValidationError(f'{field_name} is not a valid role name', field_name)
    return value


def validate_node_id(value: Any, field_name: str = 'id') -> str:
    if not isinstance(value, str) or not PATTERNS['node_id'].match(value):
        raise ValidationError(f'{field_name} is not a valid menu item id', field_name)
    return value


def validate_flags(value: Any, field_name: str = 'flags') -> Dict[str, bool]:
    """Feature flags must be a mapping of flag name to boolean."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f'{field_name} must be an object', field_name)
    for name, enabled in value.items():
        if not isinstance(name, str) or not PATTERNS['flag'].match(name):
            raise ValidationError(f"{field_name} contains an invalid flag name: {name!r}", field_name)
        if not isinstance(enabled, bool):
            raise ValidationError(f'{field_name}.{name} must be a boolean', field_name)
    return dict(value)
