"""Tests for Brand constructors and parsers."""

import pytest
from klaw_containers import Brand, BrandConstructor, BrandParser, Err, Ok


class InvalidEmail(ValueError):
    pass


email = Brand.of(lambda s: '@' in s, lambda s: InvalidEmail(s))


class TestBrandConstructor:
    """Tests for the identity constructor."""

    def test_identity(self):
        """The constructor returns the value unchanged."""
        user_id = Brand.of()
        assert isinstance(user_id, BrandConstructor)
        assert user_id('u_1') == 'u_1'
        assert user_id.is_('anything')

    def test_partial_arguments(self):
        """Without both callbacks the result is the identity constructor."""
        assert not isinstance(Brand.of(lambda s: True), BrandParser)

    def test_unbrand(self):
        """unbrand is the identity."""
        value = object()
        assert Brand.unbrand(value) is value


class TestBrandParser:
    """Tests for validating brands."""

    def test_is(self):
        """is_ applies the predicate."""
        assert email.is_('ada@example.com')
        assert not email.is_('ada')

    def test_parse(self):
        """parse returns valid values and raises for invalid ones."""
        assert email.parse('ada@example.com') == 'ada@example.com'
        with pytest.raises(InvalidEmail):
            email.parse('ada')

    def test_safe_parse(self):
        """safe_parse returns a Result."""
        assert email.safe_parse('ada@example.com') == Ok('ada@example.com')
        result = email.safe_parse('ada')
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidEmail)
