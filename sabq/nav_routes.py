"""
Navigation Routes

Provides API endpoints for:
- The filtered sidebar for the current user
- Previewing the sidebar another role would see (users.change_role)
- Recording sidebar clicks
"""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from sabq import config_manager
from sabq.authz import context_for_user, normalize_role, require_permission
from sabq.errors import NavigationError
from sabq.menus import get_menu, label_getter, strip_locale_prefix
from sabq.nav import NavigationResolver
from sabq.tracking import get_sink, track_nav_click
from sabq.validation import (
    ValidationError,
    validate_flags,
    validate_locale,
    validate_node_id,
    validate_path,
    validate_role,
)

logger = logging.getLogger(__name__)

nav_bp = Blueprint('nav', __name__)


def _nav_config():
    return current_app.config.get('NAV_CONFIG') or config_manager.load_config()


def _current_user():
    """Current user from the auth layer (g.current_user), else an anonymous reader."""
    return getattr(g, 'current_user', None) or {'role': 'reader'}


def get_resolver(locale: str) -> NavigationResolver:
    """Resolver for a locale's menu, created once per app and policy."""
    cfg = _nav_config()
    nav_cfg = cfg['navigation']
    policy = config_manager.get_policy_for_locale(locale, cfg)

    resolvers = current_app.extensions.setdefault('sabq_nav_resolvers', {})
    key = (nav_cfg['menu'], policy)
    if key not in resolvers:
        tree = get_menu(nav_cfg['menu'], nav_cfg['max_depth'])
        resolvers[key] = NavigationResolver(
            tree, policy=policy, cache_size=nav_cfg['cache_size'], max_depth=nav_cfg['max_depth']
        )
    return resolvers[key]


def _error(message, status=400, field=None):
    body = {'error': message}
    if field:
        body['field'] = field
    return jsonify(body), status


@nav_bp.before_request
def load_header_user():
    """
    Take the viewer's role from X-User-Role when auth.trust_role_header is on.

    Only for development and tests; a user already set by the auth layer wins.
    """
    if getattr(g, 'current_user', None):
        return
    if not config_manager.trusts_role_header(_nav_config()):
        return
    role = request.headers.get('X-User-Role')
    if role:
        g.current_user = {'role': validate_role(role, 'X-User-Role')}


@nav_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    return _error(e.message, 400, e.field)


@nav_bp.errorhandler(NavigationError)
def handle_navigation_error(e):
    logger.error('Navigation resolution failed: %s', e)
    return _error(str(e), 500)


@nav_bp.route('/api/nav', methods=['GET'])
def get_navigation():
    """Filtered sidebar for the current user and page."""
    cfg = _nav_config()
    locale = validate_locale(request.args.get('locale') or config_manager.get_default_locale(cfg))
    path = validate_path(request.args.get('path') or '/', 'path')

    context = context_for_user(
        _current_user(),
        flags=config_manager.get_feature_flags(cfg),
        current_path=strip_locale_prefix(path, locale),
    )
    state = get_resolver(locale).resolve(context)

    body = state.to_dict(label_getter(locale))
    body['locale'] = locale
    body['role'] = context.role
    return jsonify(body)


@nav_bp.route('/api/nav/preview', methods=['POST'])
@require_permission('users.change_role')
def preview_navigation():
    """Sidebar as another role would see it."""
    data = request.get_json(silent=True) or {}
    role = validate_role(data.get('role'))
    locale = validate_locale(data.get('locale') or config_manager.get_default_locale(_nav_config()))
    path = validate_path(data.get('path') or '/', 'path')

    flags = config_manager.get_feature_flags(_nav_config())
    flags.update(validate_flags(data.get('flags')))

    context = context_for_user(
        {'role': role},
        flags=flags,
        current_path=strip_locale_prefix(path, locale),
    )
    state = get_resolver(locale).resolve(context)

    body = state.to_dict(label_getter(locale))
    body['locale'] = locale
    body['role'] = context.role
    return jsonify(body)


@nav_bp.route('/api/nav/click', methods=['POST'])
def record_click():
    """Record a sidebar click. Telemetry failures never fail the request."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error('JSON body required')

    node_id = validate_node_id(data.get('id'))
    path = validate_path(data.get('path'), 'path', required=False)
    locale = data.get('locale')
    if locale is not None:
        locale = validate_locale(locale)

    sink = current_app.extensions.get('sabq_nav_sink')
    if sink is None:
        sink = get_sink(_nav_config())
        current_app.extensions['sabq_nav_sink'] = sink

    track_nav_click(sink, node_id, path=path, locale=locale,
                    role=normalize_role(_current_user().get('role')))
    return jsonify({'tracked': True})
