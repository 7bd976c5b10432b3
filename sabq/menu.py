"""
Menu data model for the dashboard navigation.

A menu is a forest of immutable MenuNode objects built once per process from
plain dict definitions (see menus.py). Filtering never mutates a node; it
produces new nodes through MenuNode.with_children().

Definition format (one dict per node):
    {
        'id': 'articles',              # required, unique in the whole tree
        'path': '/dashboard/articles', # optional, omitted for pure containers
        'roles': ['admin', 'editor'],
        'permissions': ['articles.view'],
        'feature_flags': ['smartThemes'],
        'exact': True,                 # exact-match hint for active item
        'icon': 'FileText',
        'divider': True,               # starts a new sidebar group
        'badge': 'new',
        'children': [...],
    }
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from sabq.errors import MenuDefinitionError

DEFAULT_MAX_DEPTH = 8

_LIST_FIELDS = ('roles', 'permissions', 'feature_flags')
_KNOWN_FIELDS = {
    'id', 'path', 'roles', 'permissions', 'feature_flags', 'exact',
    'icon', 'divider', 'badge', 'children',
}


@dataclass(frozen=True)
class MenuNode:
    """One entry of the navigation tree (container or navigable item)."""
    id: str
    path: Optional[str] = None
    roles: FrozenSet[str] = frozenset()
    permissions: FrozenSet[str] = frozenset()
    feature_flags: FrozenSet[str] = frozenset()
    children: Tuple['MenuNode', ...] = ()
    exact_match: bool = False
    icon: Optional[str] = None
    divider: bool = False
    badge: Optional[str] = None

    @property
    def is_container(self) -> bool:
        """Pure containers have no route of their own."""
        return not self.path

    def with_children(self, children: Iterable['MenuNode']) -> 'MenuNode':
        return replace(self, children=tuple(children))

    def to_dict(self, label_for: Optional[Callable[[str], str]] = None) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'path': self.path,
            'roles': sorted(self.roles),
            'permissions': sorted(self.permissions),
            'feature_flags': sorted(self.feature_flags),
            'exact': self.exact_match,
            'icon': self.icon,
            'divider': self.divider,
            'badge': self.badge,
            'children': [c.to_dict(label_for) for c in self.children],
        }
        if label_for is not None:
            data['label'] = label_for(self.id)
        return data


@dataclass(frozen=True)
class AccessContext:
    """
    Per-request view of who is looking at the menu.

    Flags are kept as a sorted tuple of (name, enabled) pairs so the context
    is hashable and can key the resolver cache.
    """
    role: str
    flags: Tuple[Tuple[str, bool], ...] = ()
    permissions: FrozenSet[str] = frozenset()
    current_path: str = '/'

    @classmethod
    def create(cls, role: str, flags: Optional[Mapping[str, bool]] = None,
               permissions: Optional[Iterable[str]] = None,
               current_path: str = '/') -> 'AccessContext':
        flag_pairs = tuple(sorted((str(k), v is True) for k, v in (flags or {}).items()))
        return cls(
            role=role,
            flags=flag_pairs,
            permissions=frozenset(permissions or ()),
            current_path=current_path,
        )

    @property
    def flag_map(self) -> Dict[str, bool]:
        return dict(self.flags)

    def flag_enabled(self, name: str) -> bool:
        return self.flag_map.get(name) is True

    def for_path(self, current_path: str) -> 'AccessContext':
        return replace(self, current_path=current_path)


def _string_set(definition: Dict[str, Any], key: str, node_id: str) -> FrozenSet[str]:
    value = definition.get(key)
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise MenuDefinitionError(f"'{key}' must be a list of strings", node_id)
    for item in value:
        if not isinstance(item, str) or not item:
            raise MenuDefinitionError(f"'{key}' entries must be non-empty strings", node_id)
    return frozenset(value)


def _build_node(definition: Any, depth: int, max_depth: int,
                seen_ids: Set[str], seen_objects: Set[int]) -> MenuNode:
    if not isinstance(definition, dict):
        raise MenuDefinitionError('Menu entries must be dicts')

    node_id = definition.get('id')
    if not isinstance(node_id, str) or not node_id.strip():
        raise MenuDefinitionError('Menu entry is missing an id')

    if depth > max_depth:
        raise MenuDefinitionError(f'Menu nesting exceeds {max_depth} levels', node_id)

    # A dict reachable twice is either a cycle or a shared subtree
    if id(definition) in seen_objects:
        raise MenuDefinitionError('Menu entry is referenced more than once', node_id)
    seen_objects.add(id(definition))

    if node_id in seen_ids:
        raise MenuDefinitionError(f"Duplicate menu id '{node_id}'", node_id)
    seen_ids.add(node_id)

    unknown = set(definition) - _KNOWN_FIELDS
    if unknown:
        raise MenuDefinitionError(f"Unknown fields: {', '.join(sorted(unknown))}", node_id)

    path = definition.get('path')
    if path is not None and (not isinstance(path, str) or not path.startswith('/')):
        raise MenuDefinitionError("'path' must be a string starting with '/'", node_id)

    children_defs = definition.get('children') or []
    if not isinstance(children_defs, (list, tuple)):
        raise MenuDefinitionError("'children' must be a list", node_id)

    sets = {key: _string_set(definition, key, node_id) for key in _LIST_FIELDS}

    children = tuple(
        _build_node(child, depth + 1, max_depth, seen_ids, seen_objects)
        for child in children_defs
    )

    return MenuNode(
        id=node_id,
        path=path or None,
        roles=sets['roles'],
        permissions=sets['permissions'],
        feature_flags=sets['feature_flags'],
        children=children,
        exact_match=bool(definition.get('exact', False)),
        icon=definition.get('icon'),
        divider=bool(definition.get('divider', False)),
        badge=definition.get('badge'),
    )


def build_menu(definitions: List[Dict[str, Any]], max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[MenuNode, ...]:
    """
    Build an immutable menu forest from plain dict definitions.

    Args:
        definitions: Top-level menu entries
        max_depth: Deepest allowed nesting level (top level is 1)

    Returns:
        Tuple of MenuNode in definition order

    Raises:
        MenuDefinitionError: If an entry is malformed, an id repeats, the
            tree is nested too deeply or an entry is reachable twice
    """
    if not isinstance(definitions, (list, tuple)):
        raise MenuDefinitionError('Menu definitions must be a list')
    seen_ids: Set[str] = set()
    seen_objects: Set[int] = set()
    return tuple(
        _build_node(d, 1, max_depth, seen_ids, seen_objects)
        for d in definitions
    )
