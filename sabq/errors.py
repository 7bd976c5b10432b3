"""
Exceptions raised by the navigation layer.
"""

from typing import Optional


class NavigationError(Exception):
    """Raised when a navigation tree cannot be resolved."""
    pass


class MenuDefinitionError(NavigationError):
    """Raised when a static menu definition is malformed."""

    def __init__(self, message: str, node_id: Optional[str] = None):
        self.message = message
        self.node_id = node_id
        super().__init__(message)
