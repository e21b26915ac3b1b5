"""
tests/test_validators.py — Tests for JSON API input validation.
"""

from utils.validators import (
    validate_name, validate_growth_form, validate_climate, validate_date, validate_choice,
    parse_bool,
)


class TestValidators:

    def test_name(self):
        assert validate_name('  Kale ') == ('Kale', None)
        value, error = validate_name('   ', 'Plant name')
        assert value is None
        assert error == 'Plant name is required'
        assert validate_name(None)[1] is not None

    def test_growth_form(self):
        assert validate_growth_form('seed') == ('seed', None)
        assert validate_growth_form('cutting')[0] is None

    def test_climate_defaults(self):
        assert validate_climate(None) == ('temperate', None)
        assert validate_climate('', default='warm') == ('warm', None)
        assert validate_climate('cool') == ('cool', None)
        assert validate_climate('arctic')[0] is None

    def test_date(self):
        assert validate_date('2024-03-01') == ('2024-03-01', None)
        assert validate_date('2024-03-01T10:00:00Z') == ('2024-03-01T10:00:00Z', None)
        assert validate_date('2024-02-30')[0] is None
        assert validate_date('')[0] is None
        assert validate_date(20240301)[0] is None

    def test_choice(self):
        assert validate_choice('plant', ('due_date', 'plant'), 'sort') == ('plant', None)
        value, error = validate_choice('size', ('due_date', 'plant'), 'sort')
        assert value is None
        assert 'due_date, plant' in error

    def test_parse_bool(self):
        assert parse_bool('false') is False
        assert parse_bool('0') is False
        assert parse_bool('') is False
        assert parse_bool('on') is True
        assert parse_bool(' True ') is True
        assert parse_bool(True) is True
        assert parse_bool(0) is False
