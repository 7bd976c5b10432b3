"""Tests for input validation module."""
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sabq.validation import (
    MAX_PATH_LENGTH,
    ValidationError,
    validate_flags,
    validate_locale,
    validate_node_id,
    validate_path,
    validate_role,
)


class TestValidateLocale:
    """Tests for validate_locale function."""

    def test_supported(self):
        for locale in ('en', 'ar', 'ur'):
            assert validate_locale(locale) == locale

    def test_unsupported(self):
        with pytest.raises(ValidationError) as exc:
            validate_locale('fr')
        assert exc.value.field == 'locale'

    def test_non_string(self):
        with pytest.raises(ValidationError):
            validate_locale(None)


class TestValidatePath:
    """Tests for validate_path function."""

    def test_valid(self):
        assert validate_path('/dashboard/articles/new') == '/dashboard/articles/new'

    def test_must_be_absolute(self):
        with pytest.raises(ValidationError) as exc:
            validate_path('dashboard')
        assert "start with '/'" in exc.value.message

    def test_no_whitespace(self):
        with pytest.raises(ValidationError):
            validate_path('/dash board')

    def test_too_long(self):
        with pytest.raises(ValidationError):
            validate_path('/' + 'a' * MAX_PATH_LENGTH)

    def test_required(self):
        with pytest.raises(ValidationError):
            validate_path(None)

    def test_optional(self):
        assert validate_path(None, required=False) is None
        assert validate_path('', required=False) is None

    def test_non_string(self):
        with pytest.raises(ValidationError):
            validate_path(42)


class TestValidateRole:
    """Tests for validate_role function."""

    def test_valid(self):
        assert validate_role('comments_moderator') == 'comments_moderator'

    def test_invalid(self):
        for value in ('Admin', 'a', 'ad min', '', None, 'x' * 51):
            with pytest.raises(ValidationError):
                validate_role(value)


class TestValidateNodeId:
    """Tests for validate_node_id function."""

    def test_valid(self):
        assert validate_node_id('articles-new') == 'articles-new'

    def test_invalid(self):
        for value in ('', 'Articles', '-lead', '../x', None):
            with pytest.raises(ValidationError):
                validate_node_id(value)


class TestValidateFlags:
    """Tests for validate_flags function."""

    def test_valid(self):
        assert validate_flags({'aiDeepAnalysis': True, 'smart_themes': False}) == {
            'aiDeepAnalysis': True, 'smart_themes': False
        }

    def test_none_is_empty(self):
        assert validate_flags(None) == {}

    def test_not_a_dict(self):
        with pytest.raises(ValidationError):
            validate_flags(['beta'])

    def test_non_boolean_value(self):
        with pytest.raises(ValidationError) as exc:
            validate_flags({'beta': 'true'})
        assert 'flags.beta' in exc.value.message

    def test_invalid_name(self):
        with pytest.raises(ValidationError):
            validate_flags({'1beta': True})
