"""
Tests for sabq/menus.py - the dashboard menu as seen by each role

Tests:
- Menu builds and every item has a label in every locale
- Visible items per role under both policies
- Active item resolution on real dashboard routes
- Locale route prefixes
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sabq.authz import context_for_user
from sabq.errors import NavigationError
from sabq.menus import (
    LABELS,
    SUPPORTED_LOCALES,
    get_label,
    get_menu,
    label_getter,
    strip_locale_prefix,
)
from sabq.nav import flatten, resolve_navigation

DEFAULT_FLAGS = {'aiDeepAnalysis': False, 'smartThemes': True, 'audioSummaries': False}


def ids(nodes):
    return [n.id for n in nodes]


def state_for(role, path='/dashboard', policy='promoting', flags=None):
    context = context_for_user({'role': role}, flags=flags or DEFAULT_FLAGS, current_path=path)
    return resolve_navigation(get_menu(), context, policy)


class TestMenuDefinition:
    """Tests for the static menu definition."""

    def test_menu_builds(self):
        menu = get_menu()
        assert ids(menu)[0] == 'dashboard'
        assert len(flatten(menu)) == 29

    def test_menu_is_cached(self):
        assert get_menu() is get_menu()

    def test_unknown_menu(self):
        with pytest.raises(NavigationError):
            get_menu('footer')

    @pytest.mark.parametrize('locale', SUPPORTED_LOCALES)
    def test_every_item_labelled(self, locale):
        missing = [n.id for n in flatten(get_menu()) if n.id not in LABELS[locale]]
        assert missing == []


class TestLabels:
    """Tests for label lookup."""

    def test_label_per_locale(self):
        assert get_label('articles', 'en') == 'Articles'
        assert get_label('articles', 'ar') == 'المقالات'
        assert get_label('articles', 'ur') == 'مضامین'

    def test_unknown_locale_falls_back_to_english(self):
        assert get_label('settings', 'fr') == 'Settings'

    def test_unknown_id_returns_id(self):
        assert get_label('nope', 'ar') == 'nope'

    def test_label_getter(self):
        assert label_getter('ar')('dashboard') == 'لوحة التحكم'


class TestRoleVisibility:
    """Visible sidebar for each role on the promoting policy."""

    def test_reporter(self):
        """Reporter keeps own stats and tasks through promotion."""
        state = state_for('reporter')

        assert ids(state.filtered_tree) == [
            'dashboard', 'content', 'media', 'my-stats', 'comments', 'tasks', 'announcements'
        ]
        content = state.filtered_tree[1]
        assert ids(content.children) == ['articles', 'articles-new', 'calendar']

    def test_system_admin_sees_all_but_disabled_features(self):
        state = state_for('system_admin')
        visible = set(ids(state.flat_list))
        every = set(ids(flatten(get_menu())))

        assert every - visible == {'deep-analysis', 'audio-summaries'}

    def test_feature_flag_enables_item(self):
        flags = dict(DEFAULT_FLAGS, aiDeepAnalysis=True)
        state = state_for('editor', flags=flags)
        assert 'deep-analysis' in ids(state.flat_list)

    def test_smart_themes_flag_off_hides_themes(self):
        flags = dict(DEFAULT_FLAGS, smartThemes=False)
        state = state_for('system_admin', flags=flags)
        assert 'themes' not in ids(state.flat_list)
        assert 'settings' in ids(state.flat_list)

    def test_reader_sees_nothing(self):
        assert state_for('reader').filtered_tree == ()

    def test_media_manager(self):
        state = state_for('media_manager')
        assert ids(state.filtered_tree) == ['dashboard', 'media', 'announcements']

    def test_editor_and_admin_see_tags(self):
        for role in ('editor', 'admin'):
            content = [n for n in state_for(role).filtered_tree if n.id == 'content'][0]
            assert 'tags' in ids(content.children), role

    def test_comments_moderator(self):
        state = state_for('comments_moderator')
        assert ids(state.filtered_tree) == ['dashboard', 'comments', 'announcements']


class TestStrictPolicyVisibility:
    """Visible sidebar for the English (strict) policy."""

    def test_reporter_loses_promoted_items(self):
        state = state_for('reporter', policy='strict')
        assert ids(state.filtered_tree) == ['dashboard', 'content', 'media', 'comments']

    def test_media_manager_strict(self):
        state = state_for('media_manager', policy='strict')
        assert ids(state.filtered_tree) == ['dashboard', 'media']


class TestActiveItem:
    """Active item on real dashboard routes."""

    def test_new_article(self):
        state = state_for('reporter', path='/dashboard/articles/new')
        assert state.active_item.id == 'articles-new'
        assert ids(state.ancestors) == ['content']

    def test_article_list_exact(self):
        state = state_for('reporter', path='/dashboard/articles')
        assert state.active_item.id == 'articles'

    def test_article_edit_falls_back_to_list(self):
        state = state_for('reporter', path='/dashboard/articles/123/edit')
        assert state.active_item.id == 'articles'

    def test_dashboard_home(self):
        state = state_for('editor', path='/dashboard')
        assert state.active_item.id == 'dashboard'
        assert state.ancestors == ()

    def test_promoted_item_has_no_ancestors(self):
        state = state_for('reporter', path='/dashboard/analytics/mine')
        assert state.active_item.id == 'my-stats'
        assert state.ancestors == ()

    def test_nested_settings_page(self):
        state = state_for('system_admin', path='/dashboard/settings/audit')
        assert state.active_item.id == 'audit-log'
        assert ids(state.ancestors) == ['settings']


class TestLocalePrefix:
    """Tests for strip_locale_prefix."""

    def test_urdu(self):
        assert strip_locale_prefix('/ur/dashboard/articles', 'ur') == '/dashboard/articles'

    def test_prefix_root(self):
        assert strip_locale_prefix('/ur', 'ur') == '/'

    def test_similar_prefix_untouched(self):
        assert strip_locale_prefix('/urdu-news', 'ur') == '/urdu-news'

    def test_arabic_has_no_prefix(self):
        assert strip_locale_prefix('/dashboard', 'ar') == '/dashboard'

    def test_english(self):
        assert strip_locale_prefix('/en/dashboard', 'en') == '/dashboard'
