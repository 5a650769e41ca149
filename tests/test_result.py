"""Tests for Result type (Ok and Err)."""

import msgspec
import pytest
from hypothesis import given
from hypothesis import strategies as st
from klaw_containers import (
    Err,
    FailedPredicateError,
    NoValueError,
    Nothing,
    Ok,
    Panic,
    Result,
    Some,
    UnhandledException,
)

from tests.strategies import errs, int_results, oks, result_arrows, results


class TestResultCreation:
    """Tests for Ok/Err instantiation and basic properties."""

    def test_ok_creation(self):
        """Ok wraps a value."""
        assert Ok(42).value == 42

    def test_err_creation(self):
        """Err wraps an error."""
        assert Err('boom').error == 'boom'

    def test_frozen(self):
        """Variants are immutable."""
        with pytest.raises(AttributeError):
            Ok(1).value = 2  # type: ignore[misc]

    def test_tags(self):
        """Variants expose their discriminant."""
        assert Ok(1).tag == 'Ok'
        assert Err('e').tag == 'Error'

    def test_repr(self):
        """Variants render their payload."""
        assert repr(Ok(1)) == 'Ok(1)'
        assert repr(Err('e')) == "Err('e')"

    def test_equality(self):
        """Equality is by variant and payload."""
        assert Ok(1) == Ok(1)
        assert Ok(1) != Err(1)
        assert Err('e') == Err('e')

    def test_is_result(self):
        """is_result recognizes both variants only."""
        assert Result.is_result(Ok(1))
        assert Result.is_result(Err(1))
        assert not Result.is_result(Some(1))


class TestResultFactories:
    """Tests for the static constructors on Result."""

    def test_ok_without_value(self):
        """ok() holds None."""
        assert Result.ok() == Ok(None)
        assert Result.of(3) == Ok(3)

    def test_err(self):
        """err builds an Err."""
        assert Result.err('e') == Err('e')

    def test_from_nullable(self):
        """from_nullable rejects only None."""
        assert Result.from_nullable(0) == Ok(0)
        error = Result.from_nullable(None).unwrap_err()
        assert isinstance(error, NoValueError)
        assert error.message == 'No value was provided'

    def test_from_nullable_custom_error(self):
        """on_nullable builds the error."""
        assert Result.from_nullable(None, lambda: 'missing') == Err('missing')

    def test_from_falsy(self):
        """from_falsy rejects falsy values and passes them to on_falsy."""
        assert Result.from_falsy('x') == Ok('x')
        assert isinstance(Result.from_falsy('').unwrap_err(), NoValueError)
        assert Result.from_falsy(0, lambda v: f'bad {v}') == Err('bad 0')

    def test_from_option(self):
        """from_option maps Nothing to an error."""
        assert Result.from_option(Some(1)) == Ok(1)
        assert isinstance(Result.from_option(Nothing).unwrap_err(), NoValueError)
        assert Result.from_option(Nothing, lambda: 'none') == Err('none')

    def test_try_success(self):
        """try_ wraps the value."""
        assert Result.try_(lambda: int('3')) == Ok(3)

    def test_try_default_error(self):
        """try_ wraps the exception in UnhandledException."""
        error = Result.try_(lambda: int('x')).unwrap_err()
        assert isinstance(error, UnhandledException)
        assert isinstance(error.cause, ValueError)
        assert error.__cause__ is error.cause

    def test_try_on_throw(self):
        """on_throw maps the exception."""
        result = Result.try_(lambda: int('x'), lambda e: type(e).__name__)
        assert result == Err('ValueError')

    def test_try_on_throw_none_falls_back(self):
        """on_throw returning None falls back to the default error."""
        result = Result.try_(lambda: int('x'), lambda e: None)
        assert isinstance(result.unwrap_err(), UnhandledException)

    def test_try_reraises_panic(self):
        """try_ never swallows a Panic."""
        with pytest.raises(Panic):
            Result.try_(lambda: Err('e').unwrap())

    def test_predicate(self):
        """predicate builds a validating constructor."""
        even = Result.predicate(lambda n: n % 2 == 0, lambda n: f'{n} is odd')
        assert even(2) == Ok(2)
        assert even(3) == Err('3 is odd')

    def test_lift(self):
        """lift turns a raising function into a Result-returning one."""
        safe_int = Result.lift(int)
        assert safe_int('7') == Ok(7)
        assert isinstance(safe_int('x').unwrap_err(), UnhandledException)

    def test_lift_on_throw(self):
        """lift forwards on_throw."""
        safe_int = Result.lift(int, lambda e: 'not a number')
        assert safe_int('x') == Err('not a number')

    def test_partition(self):
        """partition splits values and errors preserving order."""
        values, errors = Result.partition([Ok(1), Err('a'), Ok(2), Err('b')])
        assert values == [1, 2]
        assert errors == ['a', 'b']

    def test_values(self):
        """values keeps Ok payloads in order."""
        assert Result.values([Ok(1), Err('a'), Ok(3)]) == [1, 3]


class TestResultHydrate:
    """Tests for rebuilding Results from their serialized form."""

    def test_hydrate_ok(self):
        """A tagged Ok mapping becomes Ok."""
        assert Result.hydrate({'_tag': 'Ok', 'value': 5}) == Ok(5)

    def test_hydrate_err(self):
        """A tagged Error mapping becomes Err."""
        assert Result.hydrate({'_tag': 'Error', 'error': 'boom'}) == Err('boom')

    def test_hydrate_result_passthrough(self):
        """An existing Result is returned unchanged."""
        ok = Ok(1)
        assert Result.hydrate(ok) is ok

    def test_hydrate_through_json(self):
        """A Result survives a JSON round trip."""
        payload = msgspec.json.decode(msgspec.json.encode(Err({'code': 7})))
        assert Result.hydrate(payload) == Err({'code': 7})

    @pytest.mark.parametrize('obj', [{'_tag': 'Nope'}, {'value': 1}, 42, None])
    def test_hydrate_invalid(self, obj):
        """Anything else is a Panic."""
        with pytest.raises(Panic, match='Cannot hydrate'):
            Result.hydrate(obj)


class TestResultTransformations:
    """Tests for map, map_err, and_then, filter, or_else, swap and zip."""

    def test_map(self, spy):
        """map transforms Ok and skips Err."""
        f = spy(lambda x: x + 1)
        assert Ok(1).map(f) == Ok(2)
        assert Err('e').map(f) == Err('e')
        assert f.call_count == 1

    def test_map_keeps_none(self):
        """Result.map does not null-check."""
        assert Ok(1).map(lambda x: None) == Ok(None)

    def test_map_err(self):
        """map_err transforms Err and skips Ok."""
        assert Err('e').map_err(str.upper) == Err('E')
        assert Ok(1).map_err(str.upper) == Ok(1)

    def test_map_both(self):
        """map_both applies the function of the matching channel."""
        assert Ok(1).map_both(ok=lambda x: x * 10, err=str.upper) == Ok(10)
        assert Err('e').map_both(ok=lambda x: x * 10, err=str.upper) == Err('E')

    def test_and_then(self):
        """and_then flattens and short-circuits."""
        assert Ok(1).and_then(lambda x: Ok(x + 1)) == Ok(2)
        assert Ok(1).and_then(lambda x: Err('no')) == Err('no')
        assert Err('e').and_then(lambda x: Ok(x)) == Err('e')

    def test_and_then_requires_result(self):
        """and_then panics when the callback returns a non-Result."""
        with pytest.raises(Panic, match='expected Result'):
            Ok(1).and_then(lambda x: Some(x))  # type: ignore[arg-type, return-value]

    def test_filter_default_error(self):
        """filter fails with FailedPredicateError carrying the value."""
        result = Ok(5).filter(lambda x: x > 10)
        error = result.unwrap_err()
        assert isinstance(error, FailedPredicateError)
        assert error.value == 5
        assert error.tag == 'FailedPredicateError'

    def test_filter_custom_error(self):
        """on_unfulfilled builds the error from the value."""
        assert Ok(5).filter(lambda x: x > 10, lambda x: f'{x} too small') == Err('5 too small')

    def test_filter_custom_none_falls_back(self):
        """on_unfulfilled returning None falls back to FailedPredicateError."""
        assert isinstance(Ok(5).filter(lambda x: x > 10, lambda x: None).unwrap_err(), FailedPredicateError)

    def test_filter_passes(self):
        """filter keeps values satisfying the predicate."""
        assert Ok(11).filter(lambda x: x > 10) == Ok(11)

    def test_or_else(self, spy):
        """or_else recovers from Err with the error."""
        recover = spy(lambda e: Ok(len(e)))
        assert Ok(1).or_else(recover) == Ok(1)
        assert recover.call_count == 0
        assert Err('abc').or_else(recover) == Ok(3)

    def test_swap(self):
        """swap exchanges the channels."""
        assert Ok(1).swap() == Err(1)
        assert Err('e').swap() == Ok('e')

    def test_zip(self):
        """zip pairs Ok values; the first Err wins."""
        assert Ok(1).zip(Ok(2)) == Ok((1, 2))
        assert Ok(1).zip(Err('b')) == Err('b')
        assert Err('a').zip(Err('b')) == Err('a')

    def test_zip_with(self):
        """zip_with combines Ok values."""
        assert Ok(2).zip_with(Ok(3), lambda a, b: a + b) == Ok(5)
        assert Ok(2).zip_with(Err('e'), lambda a, b: a + b) == Err('e')

    def test_inspect_and_inspect_err(self, spy):
        """inspect and inspect_err run side effects on their channel only."""
        on_ok = spy()
        on_err = spy()
        assert Ok(1).inspect(on_ok).inspect_err(on_err) == Ok(1)
        assert Err('e').inspect(on_ok).inspect_err(on_err) == Err('e')
        assert on_ok.calls == [(1,)]
        assert on_err.calls == [('e',)]


class TestResultElimination:
    """Tests for match, unwrap variants, expect, merge and conversions."""

    def test_match(self):
        """match calls the case of the variant."""
        assert Ok(2).match(ok=lambda x: x * 2, err=len) == 4
        assert Err('abc').match(ok=lambda x: x * 2, err=len) == 3

    def test_unwrap_err_variant_panics(self):
        """unwrap on Err raises Panic."""
        with pytest.raises(Panic, match=r'called "Result.unwrap\(\)" on an "Error" value'):
            Err('e').unwrap()

    def test_unwrap_chains_exception_errors(self):
        """unwrap on an Err holding an exception chains it."""
        cause = ValueError('bad')
        with pytest.raises(Panic) as info:
            Err(cause).unwrap()
        assert info.value.__cause__ is cause

    def test_unwrap_err(self):
        """unwrap_err returns the error and panics on Ok."""
        assert Err('e').unwrap_err() == 'e'
        with pytest.raises(Panic, match=r'called "Result.unwrap_err\(\)" on an "Ok" value'):
            Ok(1).unwrap_err()

    def test_unwrap_or(self):
        """unwrap_or returns the default on Err."""
        assert Ok(1).unwrap_or(0) == 1
        assert Err('e').unwrap_or(0) == 0

    def test_unwrap_or_else(self):
        """unwrap_or_else computes the fallback from the error."""
        assert Ok(1).unwrap_or_else(len) == 1
        assert Err('abc').unwrap_or_else(len) == 3

    def test_unwrap_or_none(self):
        """unwrap_or_none maps Err to None."""
        assert Ok(1).unwrap_or_none() == 1
        assert Err('e').unwrap_or_none() is None

    def test_expect(self):
        """expect raises a Panic or the built exception."""
        assert Ok(1).expect('never') == 1
        with pytest.raises(Panic, match='config missing'):
            Err('e').expect('config missing')
        with pytest.raises(KeyError):
            Err('e').expect(lambda e: KeyError(e))

    def test_merge(self):
        """merge returns whichever payload is present."""
        assert Ok(1).merge() == 1
        assert Err('e').merge() == 'e'

    def test_contains(self):
        """contains checks the Ok value."""
        assert Ok(3).contains(lambda x: x == 3)
        assert not Err(3).contains(lambda x: x == 3)

    def test_to_list_and_iter(self):
        """to_list and iter expose the Ok value only."""
        assert Ok(1).to_list() == [1]
        assert Err('e').to_list() == []
        assert list(Ok(1).iter()) == [1]
        assert list(Err('e').iter()) == []

    def test_equals(self):
        """equals uses eq for values and err_eq for errors."""
        assert Ok(1).equals(Ok(1))
        assert not Ok(1).equals(Err(1))
        assert Err('A').equals(Err('a'), err_eq=lambda a, b: a.lower() == b.lower())
        assert not Err('A').equals(Err('a'))


class TestResultDefects:
    """Exceptions raised by callbacks surface as Panic."""

    def test_map_defect(self):
        """An exception inside map becomes a Panic."""
        with pytest.raises(Panic) as info:
            Ok(1).map(lambda x: x / 0)
        assert isinstance(info.value.__cause__, ZeroDivisionError)

    def test_map_err_defect(self):
        """An exception inside map_err becomes a Panic."""
        with pytest.raises(Panic, match="mapping a Result's error"):
            Err('e').map_err(lambda e: e / 2)

    def test_on_throw_defect(self):
        """An exception inside on_throw is a defect, not an Err."""
        with pytest.raises(Panic):
            Result.try_(lambda: int('x'), lambda e: 1 / 0)


@pytest.mark.hypothesis_property
class TestResultLaws:
    """Property-based container laws for Result."""

    @given(results)
    def test_map_identity(self, result):
        """Identity: m.map(id) == m."""
        assert result.map(lambda x: x) == result

    @given(results)
    def test_map_preserves_variant(self, result):
        """map preserves is_ok."""
        assert result.map(lambda x: (x,)).is_ok() == result.is_ok()

    @given(errs)
    def test_err_short_circuits(self, err):
        """Err never calls callbacks of map, and_then and filter, and keeps its error."""
        calls = []

        def record(x):
            calls.append(x)
            return Ok(x)

        assert err.map(record).unwrap_err() is err.error
        assert err.and_then(record).unwrap_err() is err.error
        assert err.filter(record).unwrap_err() is err.error
        assert calls == []

    @given(st.integers(), result_arrows)
    def test_left_identity(self, value, f):
        """Left identity: Ok(a).and_then(f) == f(a)."""
        assert Ok(value).and_then(f) == f(value)

    @given(int_results)
    def test_right_identity(self, result):
        """Right identity: m.and_then(Ok) == m."""
        assert result.and_then(Ok) == result

    @given(int_results, result_arrows, result_arrows)
    def test_associativity(self, result, f, g):
        """Associativity: m.and_then(f).and_then(g) == m.and_then(x => f(x).and_then(g))."""
        assert result.and_then(f).and_then(g) == result.and_then(lambda x: f(x).and_then(g))

    @given(results)
    def test_hydrate_round_trip(self, result):
        """hydrate(to_builtins(r)) == r."""
        assert Result.hydrate(msgspec.to_builtins(result)) == result

    @given(oks)
    def test_to_list_length(self, result):
        """to_list has at most one item."""
        assert len(result.to_list()) == 1
        assert len(result.swap().to_list()) == 0


class TestResultScenarios:
    """Documented usage scenarios."""

    def test_filter_scenario(self):
        """Result.ok(5).filter(x > 10) fails with FailedPredicateError(5)."""
        result = Result.ok(5).filter(lambda x: x > 10)
        assert result.is_err()
        assert result.unwrap_err()._tag == 'FailedPredicateError'

    def test_try_json_scenario(self):
        """Result.try_ over a bad JSON document gives an UnhandledException."""
        result = Result.try_(lambda: msgspec.json.decode('{bad json'))
        error = result.unwrap_err()
        assert isinstance(error, UnhandledException)
        assert isinstance(error.cause, msgspec.DecodeError)
