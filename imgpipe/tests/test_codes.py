"""Tests for LightSource and Unit enums."""

import pytest

from imgpipe.light_source import LightSource
from imgpipe.unit import Unit


class TestLightSource:
    """Tests for LightSource enum."""

    @pytest.mark.parametrize('code, expected', [
        (0, LightSource.UNKNOWN),
        (1, LightSource.DAYLIGHT),
        (4, LightSource.FLASH),
        (21, LightSource.D65),
        (255, LightSource.OTHER_LIGHT_SOURCE),
    ])
    def test_known_codes(self, code, expected):
        assert LightSource.from_value(code) is expected

    def test_unlisted_code(self):
        """Test integer codes outside the table are OTHER_LIGHT_SOURCE."""
        assert LightSource.from_value(5) is LightSource.OTHER_LIGHT_SOURCE

    def test_not_a_number(self):
        assert LightSource.from_value(None) is LightSource.UNKNOWN


class TestUnit:
    """Tests for Unit enum."""

    def test_known_codes(self):
        assert Unit.from_value(2) is Unit.INCHES
        assert Unit.from_value(3) is Unit.CENTIMETERS

    @pytest.mark.parametrize('value', [4, -1, None, 'cm'])
    def test_unknown(self, value):
        assert Unit.from_value(value) is Unit.UNKNOWN
