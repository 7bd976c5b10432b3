"""
Navigation configuration manager.

Loads and saves nav_config.yaml from CONFIG_DIR (default /app/config).
The file is YAML so policies and feature flags can be reviewed and edited by
hand. Values in the file are deep-merged over DEFAULT_CONFIG; a missing or
unreadable file yields the defaults.
"""
import copy
import logging
import os
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = os.environ.get('CONFIG_DIR', '/app/config')
CONFIG_FILENAME = 'nav_config.yaml'
CONFIG_PATH = os.path.join(CONFIG_DIR, CONFIG_FILENAME)

VALID_POLICIES = ('promoting', 'strict')
VALID_SINKS = ('logging', 'http', 'null')

# Organization: navigation, features, telemetry, auth
DEFAULT_CONFIG = {
    'navigation': {
        # Filtering policy per locale; the English sidebar keeps the strict check
        'policies': {
            'en': 'strict',
            'ar': 'promoting',
            'ur': 'promoting',
        },
        'default_locale': None,
        'menu': 'dashboard',
        'max_depth': 8,
        'cache_size': 128,
    },
    'features': {
        'aiDeepAnalysis': False,
        'smartThemes': True,
        'audioSummaries': False,
    },
    'telemetry': {
        'sink': 'logging',
        'url': '',
        'timeout': 5,
    },
    'auth': {
        # Trust X-User-Role as the viewer's role; only for dev and tests
        'trust_role_header': False,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base. Lists are replaced, not merged."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config() -> Dict[str, Any]:
    """
    Load configuration from file. If the file does not exist or is invalid,
    return the default config.
    """
    if not os.path.isfile(CONFIG_PATH):
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(CONFIG_PATH, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning('Could not read %s, using defaults: %s', CONFIG_PATH, e)
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(data, dict):
        return copy.deepcopy(DEFAULT_CONFIG)
    validated, err = validate_config(data)
    if validated is None:
        logger.warning('Ignoring invalid %s: %s', CONFIG_PATH, err)
        return copy.deepcopy(DEFAULT_CONFIG)
    return validated


def save_config(config: Dict[str, Any]) -> Tuple[bool, str]:
    """
    Validate config, then save to nav_config.yaml.
    Returns (success, error_message). Error message is empty on success.
    """
    validated, err = validate_config(config)
    if validated is None:
        return False, err or 'Invalid config'
    try:
        os.makedirs(CONFIG_DIR, mode=0o755, exist_ok=True)
        with open(CONFIG_PATH, 'w', encoding='utf-8') as f:
            yaml.dump(validated, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        return True, ''
    except OSError as e:
        return False, str(e)


def validate_config(config: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], str]:
    """
    Validate config structure and values. Returns (validated_dict, error_message).
    If valid, returns (validated merged with defaults, ''). Otherwise (None, error_message).
    """
    if not isinstance(config, dict):
        return None, 'Config must be a dict'
    merged = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), config)

    # navigation
    n = merged.get('navigation')
    if not isinstance(n, dict):
        return None, 'navigation must be a dict'
    policies = n.get('policies')
    if not isinstance(policies, dict):
        return None, 'navigation.policies must be a dict'
    for locale, policy in policies.items():
        if policy not in VALID_POLICIES:
            return None, f'navigation.policies.{locale} must be promoting or strict'
    if not isinstance(n.get('default_locale'), (str, type(None))):
        return None, 'navigation.default_locale must be a string'
    for key in ('max_depth', 'cache_size'):
        value = n.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            return None, f'navigation.{key} must be a positive integer'

    # features
    f = merged.get('features')
    if not isinstance(f, dict):
        return None, 'features must be a dict'
    for name, enabled in f.items():
        if not isinstance(enabled, bool):
            return None, f'features.{name} must be a boolean'

    # telemetry
    t = merged.get('telemetry')
    if not isinstance(t, dict):
        return None, 'telemetry must be a dict'
    if t.get('sink') not in VALID_SINKS:
        return None, 'telemetry.sink must be logging, http, or null'
    if t.get('sink') == 'http' and not t.get('url'):
        return None, 'telemetry.url is required for the http sink'
    if not isinstance(t.get('timeout'), (int, float)) or t.get('timeout') <= 0:
        return None, 'telemetry.timeout must be a positive number'

    # auth
    a = merged.get('auth')
    if not isinstance(a, dict):
        return None, 'auth must be a dict'
    if not isinstance(a.get('trust_role_header'), bool):
        return None, 'auth.trust_role_header must be a boolean'

    return merged, ''


def get_default_locale(config: Optional[Dict[str, Any]] = None) -> str:
    """Default locale: from config if set, else NAV_DEFAULT_LOCALE, else 'ar'."""
    cfg = config if config is not None else load_config()
    return (cfg.get('navigation') or {}).get('default_locale') or os.environ.get('NAV_DEFAULT_LOCALE', 'ar')


def get_policy_for_locale(locale: str, config: Optional[Dict[str, Any]] = None) -> str:
    """Filtering policy for a locale's menu; unknown locales use promoting."""
    cfg = config if config is not None else load_config()
    policies = (cfg.get('navigation') or {}).get('policies') or {}
    return policies.get(locale, 'promoting')


def get_feature_flags(config: Optional[Dict[str, Any]] = None) -> Dict[str, bool]:
    """Enabled/disabled feature flags."""
    cfg = config if config is not None else load_config()
    return dict(cfg.get('features') or {})


def trusts_role_header(config: Optional[Dict[str, Any]] = None) -> bool:
    """True if the X-User-Role header may stand in for an authenticated user."""
    cfg = config if config is not None else load_config()
    return (cfg.get('auth') or {}).get('trust_role_header') is True


def config_file_exists() -> bool:
    """Return True if nav_config.yaml exists."""
    return os.path.isfile(CONFIG_PATH)


def get_config_path() -> str:
    """Return absolute path to config file."""
    return CONFIG_PATH
