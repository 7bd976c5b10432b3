"""
Tests for sabq/menu.py - menu nodes, access context and the definition builder
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sabq.errors import MenuDefinitionError, NavigationError
from sabq.menu import AccessContext, MenuNode, build_menu


class TestBuildMenu:
    """Tests for build_menu."""

    def test_builds_nodes(self):
        menu = build_menu([
            {'id': 'home', 'path': '/home', 'roles': ['admin'], 'exact': True},
            {'id': 'group', 'divider': True, 'icon': 'Folder', 'children': [
                {'id': 'child', 'path': '/group/child', 'permissions': ['x.view'],
                 'feature_flags': ['beta'], 'badge': 'new'},
            ]},
        ])

        home, group = menu
        assert home.path == '/home'
        assert home.roles == frozenset(['admin'])
        assert home.exact_match is True
        assert group.is_container is True
        assert group.divider is True
        child = group.children[0]
        assert child.permissions == frozenset(['x.view'])
        assert child.feature_flags == frozenset(['beta'])
        assert child.badge == 'new'

    def test_empty_path_is_container(self):
        menu = build_menu([{'id': 'box', 'path': None}])
        assert menu[0].is_container is True

    def test_duplicate_id(self):
        with pytest.raises(MenuDefinitionError) as exc:
            build_menu([
                {'id': 'a', 'children': [{'id': 'dup'}]},
                {'id': 'dup'},
            ])
        assert exc.value.node_id == 'dup'

    def test_missing_id(self):
        with pytest.raises(MenuDefinitionError):
            build_menu([{'path': '/a'}])

    def test_relative_path(self):
        with pytest.raises(MenuDefinitionError):
            build_menu([{'id': 'a', 'path': 'a'}])

    def test_roles_must_be_list(self):
        with pytest.raises(MenuDefinitionError):
            build_menu([{'id': 'a', 'roles': 'admin'}])

    def test_unknown_field(self):
        with pytest.raises(MenuDefinitionError) as exc:
            build_menu([{'id': 'a', 'rolse': ['admin']}])
        assert 'rolse' in str(exc.value)

    def test_depth_limit(self):
        definition = {'id': 'n5'}
        for i in range(4, -1, -1):
            definition = {'id': f'n{i}', 'children': [definition]}
        build_menu([definition], max_depth=6)
        with pytest.raises(MenuDefinitionError):
            build_menu([definition], max_depth=5)

    def test_cycle(self):
        looped = {'id': 'loop', 'children': []}
        looped['children'].append(looped)
        with pytest.raises(MenuDefinitionError):
            build_menu([looped])

    def test_shared_subtree(self):
        shared = {'id': 'shared', 'path': '/s'}
        with pytest.raises(MenuDefinitionError):
            build_menu([
                {'id': 'a', 'children': [shared]},
                {'id': 'b', 'children': [shared]},
            ])

    def test_definition_error_is_navigation_error(self):
        with pytest.raises(NavigationError):
            build_menu('not a list')


class TestMenuNode:
    """Tests for MenuNode."""

    def test_with_children_copies(self):
        child = MenuNode(id='c', path='/c')
        parent = MenuNode(id='p', children=(child,))
        bare = parent.with_children(())

        assert bare.children == ()
        assert parent.children == (child,)
        assert bare.id == 'p'

    def test_to_dict(self):
        parent = MenuNode(id='p', path='/p', roles=frozenset(['b', 'a']),
                          children=(MenuNode(id='c', path='/p/c'),))
        data = parent.to_dict(lambda node_id: f'label-{node_id}')

        assert data['roles'] == ['a', 'b']
        assert data['label'] == 'label-p'
        assert data['children'][0]['label'] == 'label-c'

    def test_to_dict_without_labels(self):
        assert 'label' not in MenuNode(id='p').to_dict()


class TestAccessContext:
    """Tests for AccessContext."""

    def test_create_normalizes(self):
        context = AccessContext.create('editor', flags={'b': True, 'a': False},
                                       permissions=['x', 'x'], current_path='/p')
        assert context.flags == (('a', False), ('b', True))
        assert context.permissions == frozenset(['x'])
        assert context.current_path == '/p'

    def test_hashable_and_equal(self):
        first = AccessContext.create('editor', flags={'a': True, 'b': False})
        second = AccessContext.create('editor', flags={'b': False, 'a': True})
        assert first == second
        assert hash(first) == hash(second)

    def test_for_path(self):
        context = AccessContext.create('editor', current_path='/a')
        moved = context.for_path('/b')
        assert moved.current_path == '/b'
        assert context.current_path == '/a'
        assert moved.role == 'editor'

    def test_defaults(self):
        context = AccessContext.create('reader')
        assert context.flags == ()
        assert context.permissions == frozenset()
        assert context.current_path == '/'
