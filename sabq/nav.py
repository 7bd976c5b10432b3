"""
Navigation resolution for the dashboard sidebar.

Given a static menu tree and a viewer's AccessContext, compute:
  - the filtered tree the viewer may see
  - the active item for the current path (exact match, else longest prefix)
  - the active item's ancestors (root first)
  - the filtered tree flattened in pre-order

Two filtering policies exist and are chosen per menu tree, never mixed:
  promoting  PromotingPermissionFilter. Containers without a path are shown
             when any child survives; a path-bearing parent that fails its
             own check is replaced by its surviving children.
  strict     StrictRoleFilter. Every node must pass its own check; a failing
             node hides its whole subtree.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sabq.authz import passes_access, passes_feature_flags
from sabq.errors import NavigationError
from sabq.menu import DEFAULT_MAX_DEPTH, AccessContext, MenuNode

logger = logging.getLogger(__name__)

POLICY_PROMOTING = 'promoting'
POLICY_STRICT = 'strict'


class TreeFilter:
    """Base class for menu filtering policies."""

    policy = ''

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def filter(self, nodes: Sequence[MenuNode], context: AccessContext) -> List[MenuNode]:
        return self._filter(nodes, context, 1)

    def _check_depth(self, depth: int):
        if depth > self.max_depth:
            raise NavigationError(f'Menu tree deeper than {self.max_depth} levels')

    def _filter(self, nodes: Sequence[MenuNode], context: AccessContext, depth: int) -> List[MenuNode]:
        raise NotImplementedError


class PromotingPermissionFilter(TreeFilter):
    """
    Permission-first filtering with parent promotion.

    Feature flags gate a node and everything below it. Pure containers are
    never access checked on their own; they appear when at least one child
    survives. Path-bearing parents must pass the full access check, and when
    they fail their surviving children take their place in the result.
    """

    policy = POLICY_PROMOTING

    def _filter(self, nodes: Sequence[MenuNode], context: AccessContext, depth: int) -> List[MenuNode]:
        self._check_depth(depth)
        result: List[MenuNode] = []

        for node in nodes:
            if not passes_feature_flags(node, context):
                continue

            if node.children:
                children = self._filter(node.children, context, depth + 1)

                if children:
                    if node.is_container or passes_access(node, context):
                        result.append(node.with_children(children))
                    else:
                        # Promote: parent route stays hidden, children stay reachable
                        result.extend(children)
                    continue

                if node.path and passes_access(node, context):
                    result.append(node.with_children(()))
                continue

            if passes_access(node, context):
                result.append(node)

        return result


class StrictRoleFilter(TreeFilter):
    """
    Uniform filtering: every node, container or not, must pass the access
    check itself. A failing node takes its subtree with it.
    """

    policy = POLICY_STRICT

    def _filter(self, nodes: Sequence[MenuNode], context: AccessContext, depth: int) -> List[MenuNode]:
        self._check_depth(depth)
        result: List[MenuNode] = []

        for node in nodes:
            if not passes_access(node, context):
                continue
            if node.children:
                node = node.with_children(self._filter(node.children, context, depth + 1))
            result.append(node)

        return result


FILTERS = {
    POLICY_PROMOTING: PromotingPermissionFilter,
    POLICY_STRICT: StrictRoleFilter,
}


def get_filter(policy: str, max_depth: int = DEFAULT_MAX_DEPTH) -> TreeFilter:
    """Return the filtering strategy registered under a policy name."""
    filter_cls = FILTERS.get(policy)
    if filter_cls is None:
        raise NavigationError(
            f"Unknown navigation policy '{policy}' (expected one of: {', '.join(sorted(FILTERS))})"
        )
    return filter_cls(max_depth=max_depth)


def filter_tree(nodes: Sequence[MenuNode], context: AccessContext,
                policy: str = POLICY_PROMOTING, max_depth: int = DEFAULT_MAX_DEPTH) -> List[MenuNode]:
    """Filter a menu tree for a context using the named policy."""
    return get_filter(policy, max_depth).filter(nodes, context)


def flatten(nodes: Sequence[MenuNode]) -> List[MenuNode]:
    """Pre-order traversal: each node before its children, order preserved."""
    flat: List[MenuNode] = []

    def traverse(items: Sequence[MenuNode]):
        for item in items:
            flat.append(item)
            if item.children:
                traverse(item.children)

    traverse(nodes)
    return flat


def find_active(nodes: Sequence[MenuNode], current_path: str) -> Optional[MenuNode]:
    """
    Find the node matching the current path.

    Exact-match nodes whose path equals current_path win. Otherwise the node
    with the longest path that prefixes current_path is returned, so
    /dashboard/articles/new highlights "New Article" rather than "Articles".
    Ties go to the first node in pre-order.
    """
    flat = flatten(nodes)

    for node in flat:
        if node.path and node.exact_match and node.path == current_path:
            return node

    best = None
    best_len = -1
    for node in flat:
        if node.path and current_path.startswith(node.path):
            if len(node.path) > best_len:
                best = node
                best_len = len(node.path)

    return best


def find_ancestors(nodes: Sequence[MenuNode], active_item: Optional[MenuNode]) -> List[MenuNode]:
    """
    Return the chain of ancestors of active_item, root first.

    The active item itself is excluded. An item that is missing from the
    tree (or None) yields an empty list.
    """
    if active_item is None:
        return []

    def traverse(items: Sequence[MenuNode], stack: List[MenuNode]) -> Optional[List[MenuNode]]:
        for item in items:
            if item.id == active_item.id:
                return list(stack)
            if item.children:
                found = traverse(item.children, stack + [item])
                if found is not None:
                    return found
        return None

    return traverse(nodes, []) or []


def group_by_divider(nodes: Sequence[MenuNode]) -> List[List[MenuNode]]:
    """Split top-level nodes into sidebar groups; a divider starts a new group."""
    groups: List[List[MenuNode]] = []
    current: List[MenuNode] = []

    for node in nodes:
        if node.divider and current:
            groups.append(current)
            current = [node]
        else:
            current.append(node)

    if current:
        groups.append(current)
    return groups


@dataclass(frozen=True)
class NavigationState:
    """Everything the sidebar needs to render for one request."""
    filtered_tree: Tuple[MenuNode, ...]
    active_item: Optional[MenuNode]
    ancestors: Tuple[MenuNode, ...]
    flat_list: Tuple[MenuNode, ...]
    groups: Tuple[Tuple[MenuNode, ...], ...] = field(default=())

    def to_dict(self, label_for: Optional[Callable[[str], str]] = None) -> Dict[str, Any]:
        return {
            'tree': [n.to_dict(label_for) for n in self.filtered_tree],
            'active_id': self.active_item.id if self.active_item else None,
            'active_path': self.active_item.path if self.active_item else None,
            'ancestor_ids': [n.id for n in self.ancestors],
            'flat_ids': [n.id for n in self.flat_list],
            'groups': [[n.id for n in g] for g in self.groups],
        }


def resolve_navigation(nodes: Sequence[MenuNode], context: AccessContext,
                       policy: str = POLICY_PROMOTING,
                       max_depth: int = DEFAULT_MAX_DEPTH) -> NavigationState:
    """
    Compute the NavigationState for a menu tree and access context.

    Args:
        nodes: Static menu tree
        context: Viewer access context (role, flags, permissions, path)
        policy: Filtering policy name ('promoting' or 'strict')
        max_depth: Recursion guard for the filter

    Returns:
        NavigationState with filtered tree, active item, ancestors and flat list
    """
    tree = filter_tree(nodes, context, policy, max_depth)
    active = find_active(tree, context.current_path)
    ancestors = find_ancestors(tree, active)
    flat = flatten(tree)

    logger.debug(
        'Resolved navigation: policy=%s role=%s path=%s visible=%d active=%s',
        policy, context.role, context.current_path, len(flat), active.id if active else None
    )

    return NavigationState(
        filtered_tree=tuple(tree),
        active_item=active,
        ancestors=tuple(ancestors),
        flat_list=tuple(flat),
        groups=tuple(tuple(g) for g in group_by_divider(tree)),
    )


class NavigationResolver:
    """
    Memoizing resolver bound to one menu tree and one policy.

    Results are cached on the AccessContext, which is hashable and covers
    role, flags, permissions and current path.
    """

    def __init__(self, nodes: Sequence[MenuNode], policy: str = POLICY_PROMOTING,
                 cache_size: int = 128, max_depth: int = DEFAULT_MAX_DEPTH):
        # Fail early on unknown policy names
        get_filter(policy, max_depth)
        self.nodes = tuple(nodes)
        self.policy = policy
        self.max_depth = max_depth
        self._resolve = lru_cache(maxsize=cache_size)(self._compute)

    def _compute(self, context: AccessContext) -> NavigationState:
        return resolve_navigation(self.nodes, context, self.policy, self.max_depth)

    def resolve(self, context: AccessContext) -> NavigationState:
        return self._resolve(context)

    def cache_info(self):
        return self._resolve.cache_info()

    def clear_cache(self):
        self._resolve.cache_clear()
