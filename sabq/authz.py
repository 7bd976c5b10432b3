"""
Authorization Module for Sabq navigation

Provides the access checks applied to menu nodes:
- Feature flag gating
- Permission-first / role fallback access predicate
- Built-in role catalogue and role permission resolution
- Access context construction from a user record
- Route protection decorator
"""

from functools import wraps
from typing import Callable, Dict, Iterable, Mapping, Optional, Set

from flask import g, jsonify

from sabq.menu import AccessContext, MenuNode


ROLE_NAMES = {
    'SYSTEM_ADMIN': 'system_admin',
    'ADMIN': 'admin',
    'EDITOR': 'editor',
    'REPORTER': 'reporter',
    'COMMENTS_MODERATOR': 'comments_moderator',
    'MEDIA_MANAGER': 'media_manager',
    'READER': 'reader',
}

# Navigation treats system administrators as administrators
NAV_ROLE_ALIASES = {
    'system_admin': 'admin',
}

DEFAULT_ROLE = 'reader'

PERMISSION_CODES = [
    # Articles
    'articles.view',
    'articles.create',
    'articles.edit_own',
    'articles.edit_any',
    'articles.publish',
    'articles.unpublish',
    'articles.delete',
    'articles.archive',
    'articles.feature',
    # Categories
    'categories.view',
    'categories.create',
    'categories.update',
    'categories.delete',
    # Users
    'users.view',
    'users.create',
    'users.update',
    'users.delete',
    'users.suspend',
    'users.ban',
    'users.change_role',
    # Comments
    'comments.view',
    'comments.view_own',
    'comments.create',
    'comments.approve',
    'comments.reject',
    'comments.delete',
    'comments.ban_user',
    # Media
    'media.view',
    'media.upload',
    'media.edit',
    'media.delete',
    # Settings
    'settings.view',
    'settings.update',
    # Analytics
    'analytics.view',
    'analytics.view_own',
    # Tags
    'tags.view',
    'tags.create',
    'tags.update',
    'tags.delete',
    # System
    'system.view_audit',
]

# Built-in role definitions
BUILTIN_ROLES = {
    'system_admin': {
        'name': 'System Admin',
        'description': 'Full access to the system',
        'permissions': ['*'],
    },
    'admin': {
        'name': 'Admin',
        'description': 'Users, editorial approvals and general settings',
        'permissions': [
            'users.view',
            'users.create',
            'users.update',
            'users.delete',
            'users.suspend',
            'users.ban',
            'users.change_role',
            'articles.view',
            'articles.publish',
            'articles.edit_any',
            'articles.delete',
            'comments.view',
            'comments.approve',
            'media.view',
            'media.upload',
            'settings.view',
            'settings.update',
            'analytics.view',
            'tags.view',
            'system.view_audit',
        ],
    },
    'editor': {
        'name': 'Editor',
        'description': 'Create, edit and publish content; manage media and categories',
        'permissions': [
            'articles.view',
            'articles.create',
            'articles.edit_any',
            'articles.publish',
            'articles.unpublish',
            'articles.feature',
            'media.view',
            'media.upload',
            'media.edit',
            'categories.view',
            'categories.create',
            'categories.update',
            'analytics.view',
            'tags.view',
        ],
    },
    'reporter': {
        'name': 'Reporter',
        'description': 'Create and edit own articles without publishing rights',
        'permissions': [
            'articles.view',
            'articles.create',
            'articles.edit_own',
            'media.view',
            'media.upload',
            'comments.view_own',
            'analytics.view_own',
        ],
    },
    'comments_moderator': {
        'name': 'Comments Moderator',
        'description': 'Approve, reject and ban on comments',
        'permissions': [
            'comments.view',
            'comments.approve',
            'comments.reject',
            'comments.delete',
            'comments.ban_user',
        ],
    },
    'media_manager': {
        'name': 'Media Manager',
        'description': 'Manage the media library and albums',
        'permissions': [
            'media.view',
            'media.upload',
            'media.edit',
            'media.delete',
        ],
    },
    'reader': {
        'name': 'Reader',
        'description': 'Regular user without editorial permissions',
        'permissions': [],
    },
}


def normalize_role(role: Optional[str]) -> str:
    """
    Map a user's role onto the role used for menu filtering.

    Blank roles fall back to DEFAULT_ROLE; aliases such as system_admin
    collapse onto the role the menus are authored for.
    """
    if not role or not str(role).strip():
        return DEFAULT_ROLE
    role = str(role).strip()
    return NAV_ROLE_ALIASES.get(role, role)


def resolve_role_permissions(role: str, role_defs: Optional[Mapping[str, Dict]] = None) -> Set[str]:
    """
    Resolve the permission codes granted to a role.

    Args:
        role: Role name (e.g., 'editor')
        role_defs: Role definitions to use instead of BUILTIN_ROLES (optional)

    Returns:
        Set of permission codes; '*' expands to every known code
    """
    defs = role_defs if role_defs is not None else BUILTIN_ROLES
    role_def = defs.get(role)
    if not role_def:
        return set()

    permissions = set()
    for perm in role_def.get('permissions', []):
        if perm == '*':
            permissions.update(PERMISSION_CODES)
        else:
            permissions.add(perm)
    return permissions


def passes_feature_flags(node: MenuNode, context: AccessContext) -> bool:
    """Every flag declared on the node must be enabled in the context."""
    if not node.feature_flags:
        return True
    flags = context.flag_map
    return all(flags.get(flag) is True for flag in node.feature_flags)


def passes_access(node: MenuNode, context: AccessContext) -> bool:
    """
    Check whether a single node is visible for a context.

    Order of checks:
    1. Feature flags must all be enabled (containers included)
    2. Declared permissions: any one shared permission is enough
    3. No permissions declared: the context role must be listed in roles

    Args:
        node: Menu node to check
        context: Viewer access context

    Returns:
        True if the node passes, False otherwise
    """
    if not passes_feature_flags(node, context):
        return False

    if node.permissions:
        return not node.permissions.isdisjoint(context.permissions)

    return context.role in node.roles


def _user_role(user: Dict) -> Optional[str]:
    raw_role = user.get('role')
    if not raw_role and user.get('roles'):
        raw_role = user['roles'][0]
    return raw_role


def resolve_user_permissions(user: Optional[Dict], role_defs: Optional[Mapping[str, Dict]] = None) -> Set[str]:
    """
    Resolve the permission codes held by a user record.

    An explicit 'permissions' list from the auth layer is used as-is, even
    when empty; otherwise permissions follow the user's real role (not the
    navigation alias).
    """
    user = user or {}
    explicit: Optional[Iterable[str]] = user.get('permissions')
    if explicit is not None:
        return set(explicit)
    return resolve_role_permissions(_user_role(user) or DEFAULT_ROLE, role_defs)


def check_permission(user: Optional[Dict], required_permission: str,
                     role_defs: Optional[Mapping[str, Dict]] = None) -> bool:
    """
    Check if a user holds a permission code.

    Args:
        user: User dict with 'role' and optional 'permissions'
        required_permission: Permission code (e.g., 'users.change_role')
        role_defs: Role definitions (optional)

    Returns:
        True if user has permission, False otherwise
    """
    if not user:
        return False
    return required_permission in resolve_user_permissions(user, role_defs)


def require_permission(permission: str):
    """
    Decorator to require a permission for a route.

    The user is taken from g.current_user, which the auth layer sets.

    Usage:
        @nav_bp.route('/api/nav/preview', methods=['POST'])
        @require_permission('users.change_role')
        def preview_navigation():
            ...
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = getattr(g, 'current_user', None)

            if not user:
                return jsonify({'error': 'Authentication required'}), 401

            if not check_permission(user, permission):
                return jsonify({
                    'error': 'Permission denied',
                    'required_permission': permission
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def context_for_user(user: Optional[Dict], flags: Optional[Mapping[str, bool]] = None,
                     current_path: str = '/',
                     role_defs: Optional[Mapping[str, Dict]] = None) -> AccessContext:
    """
    Build an AccessContext for a user record.

    Args:
        user: User dict with 'role' (or first entry of 'roles') and optional
            explicit 'permissions'
        flags: Enabled feature flags
        current_path: Path of the page being viewed
        role_defs: Role definitions (optional)

    Returns:
        AccessContext with a normalized role and resolved permissions
    """
    user = user or {}
    return AccessContext.create(
        role=normalize_role(_user_role(user)),
        flags=flags,
        permissions=resolve_user_permissions(user, role_defs),
        current_path=current_path,
    )
