"""
Sabq navigation access resolution.

Filters the static dashboard menu for a viewer's role, permissions and
feature flags, and resolves the active item for the current path.
"""

__version__ = '1.0.0'
