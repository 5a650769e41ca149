"""Tests for do-notation (Do, bind_to, bind, let) on Option and Result."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from klaw_containers import DoContext, Err, Nothing, Ok, Option, Panic, Result, Some, init

from tests.strategies import do_keys


class TestDoContext:
    """Tests for the immutable context record."""

    def test_empty(self):
        """A fresh context has no keys."""
        assert len(DoContext()) == 0
        assert dict(DoContext()) == {}

    def test_with_returns_new_context(self):
        """with_ leaves the original context untouched."""
        ctx = DoContext()
        extended = ctx.with_('a', 1)
        assert 'a' not in ctx
        assert extended['a'] == 1

    def test_attribute_access(self):
        """Bound names are reachable as attributes."""
        ctx = DoContext({'user': 'ann'})
        assert ctx.user == 'ann'
        with pytest.raises(AttributeError):
            _ = ctx.missing

    def test_immutable(self):
        """Attribute assignment is rejected."""
        with pytest.raises(AttributeError, match='immutable'):
            DoContext().a = 1

    def test_duplicate_key_panics(self):
        """Rebinding a key is a defect in strict mode."""
        with pytest.raises(Panic, match='already bound'):
            DoContext({'a': 1}).with_('a', 2)

    def test_duplicate_key_overrides_when_not_strict(self):
        """Rebinding overrides the value when strict_do_keys is off."""
        init(strict_do_keys=False)
        assert DoContext({'a': 1}).with_('a', 2)['a'] == 2

    def test_strict_keys_from_environment(self, monkeypatch):
        """KLAW_CONTAINERS_STRICT_DO_KEYS disables the check."""
        monkeypatch.setenv('KLAW_CONTAINERS_STRICT_DO_KEYS', 'false')
        assert DoContext({'a': 1}).with_('a', 3)['a'] == 3


class TestResultDo:
    """Tests for do-notation on Result."""

    def test_do_is_fresh(self):
        """Result.Do is Ok of an empty context on every access."""
        assert Result.Do == Ok(DoContext())
        assert Result.Do is not Result.Do

    def test_bind_accumulates(self):
        """bind stores the unwrapped value under its key."""
        result = (
            Result.Do.bind('a', lambda _: Result.ok(2))
            .bind('b', lambda ctx: Result.ok(ctx.a + 3))
            .map(lambda ctx: ctx.a + ctx.b)
        )
        assert result == Ok(7)

    def test_bind_short_circuits(self, spy):
        """An Err from bind skips every later step."""
        later = spy(lambda ctx: Ok(1))
        result = Result.Do.bind('a', lambda _: Err('boom')).bind('b', later).let('c', later)
        assert result == Err('boom')
        assert later.call_count == 0

    def test_bind_to(self):
        """bind_to starts a context from an existing value."""
        result = Ok(3).bind_to('x').let('y', lambda ctx: ctx.x * 2)
        assert result.map(dict) == Ok({'x': 3, 'y': 6})

    def test_bind_to_on_err(self):
        """bind_to keeps the Err."""
        assert Err('e').bind_to('x') == Err('e')

    def test_let_keeps_none(self):
        """let binds None as a regular value."""
        result = Result.Do.let('a', lambda _: None)
        assert result.map(lambda ctx: ctx['a']) == Ok(None)

    def test_bind_outside_do_panics(self):
        """bind requires a context."""
        with pytest.raises(Panic, match='Result.Do'):
            Ok(1).bind('a', lambda _: Ok(2))

    def test_bind_requires_result(self):
        """bind panics when the callback returns a non-Result."""
        with pytest.raises(Panic, match='Result.bind expected Result'):
            Result.Do.bind('a', lambda _: 2)  # type: ignore[arg-type, return-value]

    def test_bind_defect(self):
        """An exception inside bind names the key."""
        with pytest.raises(Panic, match='binding "a"'):
            Result.Do.bind('a', lambda _: 1 / 0)

    def test_duplicate_bind_panics(self):
        """Binding the same key twice is a defect."""
        with pytest.raises(Panic, match='"a" is already bound'):
            Result.Do.bind('a', lambda _: Ok(1)).bind('a', lambda _: Ok(2))


class TestOptionDo:
    """Tests for do-notation on Option."""

    def test_do_is_fresh(self):
        """Option.Do is Some of an empty context."""
        assert Option.Do == Some(DoContext())

    def test_bind_accumulates(self):
        """bind stores the unwrapped value under its key."""
        option = Option.Do.bind('a', lambda _: Some(1)).bind('b', lambda ctx: Some(ctx.a + 1))
        assert option.map(dict) == Some({'a': 1, 'b': 2})

    def test_bind_short_circuits(self, spy):
        """Nothing from bind skips every later step."""
        later = spy(lambda ctx: Some(1))
        assert Option.Do.bind('a', lambda _: Nothing).bind('b', later) is Nothing
        assert later.call_count == 0

    def test_let_none_is_nothing(self):
        """Option.let treats None as absence."""
        assert Option.Do.let('a', lambda _: None) is Nothing

    def test_bind_outside_do_panics(self):
        """bind requires a context."""
        with pytest.raises(Panic, match='Option.Do'):
            Some(1).bind('a', lambda _: Some(2))


@pytest.mark.hypothesis_property
class TestDoLaws:
    """Accumulation properties of do-notation."""

    @given(st.dictionaries(do_keys, st.integers(), max_size=8))
    def test_result_accumulation(self, bindings):
        """Binding distinct keys yields exactly those keys and values."""
        result = Result.Do
        for key, value in bindings.items():
            result = result.bind(key, lambda _, v=value: Ok(v))
        assert result.map(dict) == Ok(bindings)

    @given(st.dictionaries(do_keys, st.integers(), max_size=8))
    def test_option_accumulation(self, bindings):
        """Binding distinct keys on Option yields exactly those keys and values."""
        option = Option.Do
        for key, value in bindings.items():
            option = option.let(key, lambda _, v=value: v)
        assert option.map(dict) == Some(bindings)
