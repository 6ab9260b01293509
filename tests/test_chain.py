"""Tests for the Good/Bad chain: combinators, projections and ownership."""

from __future__ import annotations

import io

import pytest
from hypothesis import given
from hypothesis import strategies as st
from klaw_io import Bad, ConsumedChainError, Err, Good, Ok, init
from klaw_io._config import reset

from tests.helpers import SpyHandle
from tests.strategies import bads, chains, errors, goods, payloads

DELEGATED = [
    pytest.param(lambda c: c.read(4), id='read'),
    pytest.param(lambda c: c.read_to_end(), id='read_to_end'),
    pytest.param(lambda c: c.read_to_string(), id='read_to_string'),
    pytest.param(lambda c: c.write(b'x'), id='write'),
    pytest.param(lambda c: c.write_all(b'xyz'), id='write_all'),
    pytest.param(lambda c: c.write_fmt('{}-{}', 1, 2), id='write_fmt'),
    pytest.param(lambda c: c.flush(), id='flush'),
    pytest.param(lambda c: c.seek(0), id='seek'),
    pytest.param(lambda c: c.fill_buf(), id='fill_buf'),
    pytest.param(lambda c: c.consume(1), id='consume'),
    pytest.param(lambda c: c.read_until(b'\n'), id='read_until'),
    pytest.param(lambda c: c.read_line(), id='read_line'),
    pytest.param(lambda c: c.print_line('hi'), id='print_line'),
    pytest.param(lambda c: c.write_to_err(b'oops'), id='write_to_err'),
    pytest.param(lambda c: c.write_all_to_err(b'oops'), id='write_all_to_err'),
    pytest.param(lambda c: c.write_fmt_to_err('{}', 'oops'), id='write_fmt_to_err'),
]


@pytest.fixture
def lenient():
    """Allow reuse of consumed chains for the duration of a test."""
    init(strict=False)
    yield
    reset()


class TestChainCreation:
    """Tests for Good/Bad instantiation and basic properties."""

    def test_good_holds_handle_and_payload(self):
        handle = io.BytesIO()
        chain = Good(handle, 3)
        assert chain.handle is handle
        assert chain.payload == 3

    def test_bad_holds_handle_and_error(self):
        err = OSError('boom')
        chain = Bad(None, err)
        assert chain.handle is None
        assert chain.error is err

    def test_chain_is_frozen(self):
        chain = Good(io.BytesIO(), 1)
        with pytest.raises(AttributeError):
            chain.payload = 2  # type: ignore[misc]

    def test_pattern_matching(self):
        """Both variants destructure positionally."""
        match Bad('h', OSError('e')):
            case Good(_, _):
                pytest.fail('matched Good')
            case Bad(handle, error):
                assert handle == 'h'
                assert str(error) == 'e'

    def test_repr(self):
        assert repr(Good('h', b'x')) == "Good('h', b'x')"
        assert repr(Bad(None, OSError('e'))) == "Bad(None, OSError('e'))"

    def test_equality_ignores_consumption(self):
        handle = io.BytesIO()
        first = Good(handle, 1)
        first.ignore()
        assert first == Good(handle, 1)


class TestQueries:
    """Tests for is_good/is_bad and their agreement with projections."""

    @given(chains)
    def test_is_good_and_is_bad_are_complementary(self, chain):
        assert chain.is_good() != chain.is_bad()

    @given(chains, st.sampled_from(['ok', 'to_data', 'to_handle']))
    def test_projection_follows_state(self, chain, projection):
        good = chain.is_good()
        result = getattr(chain, projection)()
        assert result.is_ok() is good
        assert isinstance(result, Ok if good else Err)

    def test_queries_do_not_consume(self):
        chain = Good(io.BytesIO(b'abc'), None)
        assert chain.is_good()
        assert not chain.is_bad()
        assert chain.read(1).to_data() == Ok(b'a')


class TestShortCircuit:
    """A Bad chain never touches its handle."""

    @pytest.mark.parametrize('op', DELEGATED)
    @given(error=errors)
    def test_delegated_op_propagates_bad(self, op, error):
        spy = SpyHandle(b'data\n')
        out = op(Bad(spy, error))
        assert out.is_bad()
        assert out.handle is spy
        assert out.error is error
        assert spy.calls == []

    @pytest.mark.parametrize('op', DELEGATED)
    def test_placeholder_handle_propagates(self, op):
        err = FileNotFoundError(2, 'No such file or directory')
        out = op(Bad(None, err))
        assert out == Bad(None, err)

    def test_long_chain_stops_at_first_failure(self, failing_spy):
        out = Good(failing_spy, None).write_all(b'a').write_all(b'b').seek(0).read_to_end()
        assert out.is_bad()
        assert isinstance(out.error, OSError)
        assert failing_spy.calls == ['write']

    @given(errors)
    def test_and_then_is_not_called(self, error):
        calls = []
        out = Bad('h', error).and_then(lambda p, h: calls.append(p) or Good(h, p))
        assert calls == []
        assert out == Bad('h', error)


class TestSuccessPropagation:
    """A Good chain delivers exactly the handle operation's result."""

    def test_payload_is_operation_result(self, spy):
        out = Good(spy, None).read(5)
        assert out == Good(spy, b'alpha')
        assert spy.calls == ['read']

    def test_payload_is_replaced_not_merged(self, spy):
        out = Good(spy, 'old').read(6).seek(0).read_line()
        assert out.payload == 'alpha\n'

    def test_failure_discards_payload(self, failing_spy):
        out = Good(failing_spy, b'previous').read(1)
        assert out.is_bad()
        assert not hasattr(out, 'payload')


class TestAndOr:
    """Tests for and_/or_ symmetry."""

    @given(goods, chains)
    def test_good_and_returns_other(self, good, other):
        assert good.and_(other) is other

    @given(bads, chains)
    def test_bad_and_keeps_bad(self, bad, other):
        handle, error = bad.handle, bad.error
        assert bad.and_(other) == Bad(handle, error)

    @given(bads, chains)
    def test_bad_or_returns_other(self, bad, other):
        assert bad.or_(other) is other

    @given(goods, chains)
    def test_good_or_keeps_good(self, good, other):
        handle, payload = good.handle, good.payload
        assert good.or_(other) == Good(handle, payload)

    def test_and_pivots_to_other_handle(self):
        first = io.BytesIO(b'one')
        second = io.BytesIO(b'two')
        out = Good(first, None).read(1).and_(Good(second, None)).read_to_end()
        assert out.to_data() == Ok(b'two')
        assert first.closed

    def test_and_keeps_shared_handle_open(self):
        handle = io.BytesIO(b'shared')
        out = Good(handle, 'x').and_(Good(handle, None)).read_to_end()
        assert out.ok() == Ok((handle, b'shared'))
        assert not handle.closed

    def test_or_releases_dropped_other(self):
        other = io.BytesIO()
        Good(io.BytesIO(), 1).or_(Good(other, 2))
        assert other.closed

    def test_or_recovers_from_failed_open(self, tmp_path):
        fallback = tmp_path / 'fallback.txt'
        fallback.write_text('defaults')
        out = Bad(None, FileNotFoundError()).or_(Good(fallback.open('rb'), None)).read_to_string()
        assert out.to_data() == Ok('defaults')


class TestAndThen:
    """Tests for and_then (bind on the Good branch)."""

    def test_receives_payload_and_handle(self, spy):
        seen = []

        def step(payload, handle):
            seen.append((payload, handle))
            return Good(handle, len(payload))

        out = Good(spy, None).read(5).and_then(step)
        assert seen == [(b'alpha', spy)]
        assert out == Good(spy, 5)

    def test_continues_with_io_on_same_handle(self, spy):
        out = Good(spy, None).read_line().and_then(lambda line, h: Good(h, None).read_line())
        assert out.payload == 'beta\n'

    def test_can_fail_the_chain(self):
        def non_empty(data, handle):
            if not data:
                return Bad(handle, ValueError('empty file'))
            return Good(handle, data)

        handle = io.BytesIO(b'')
        out = Good(handle, None).read_to_string().and_then(non_empty)
        assert out.is_bad()
        assert str(out.error) == 'empty file'
        assert out.handle is handle

    def test_non_chain_return_raises(self):
        with pytest.raises(TypeError, match='and_then'):
            Good('h', 1).and_then(lambda p, h: p)


class TestOrElse:
    """Tests for or_else (recovery on the Bad branch)."""

    def test_receives_error_and_handle(self):
        err = OSError('gone')
        seen = []

        def recover(error, handle):
            seen.append((error, handle))
            return Good(handle, 'recovered')

        assert Bad('h', err).or_else(recover) == Good('h', 'recovered')
        assert seen == [(err, 'h')]

    @given(goods)
    def test_good_does_not_call(self, good):
        calls = []
        handle, payload = good.handle, good.payload
        out = good.or_else(lambda e, h: calls.append(e) or Bad(h, e))
        assert calls == []
        assert out == Good(handle, payload)

    def test_retry_after_seek_failure(self):
        handle = io.BytesIO(b'0123456789')
        out = (
            Good(handle, None)
            .seek(-1)
            .or_else(lambda error, h: Good(h, None).seek(4))
            .read(3)
        )
        assert out.payload == b'456'

    def test_non_chain_return_raises(self):
        with pytest.raises(TypeError, match='or_else'):
            Bad('h', OSError()).or_else(lambda e, h: None)


class TestIgnore:
    """ignore() only replaces the payload."""

    @given(chains)
    def test_state_and_handle_preserved(self, chain):
        good, handle = chain.is_good(), chain.handle
        out = chain.ignore()
        assert out.is_good() is good
        assert out.handle is handle

    @given(st.binary(), payloads)
    def test_good_payload_becomes_none(self, data, payload):
        handle = io.BytesIO(data)
        assert Good(handle, payload).ignore() == Good(handle, None)

    @given(errors)
    def test_bad_error_preserved(self, error):
        assert Bad(None, error).ignore().error is error


class TestProjections:
    """Tests for ok, to_data and to_handle."""

    def test_ok_returns_handle_and_payload(self, spy):
        assert Good(spy, None).read(5).ok() == Ok((spy, b'alpha'))
        assert not spy.closed

    def test_ok_on_bad_releases_handle(self, spy):
        err = OSError('x')
        assert Bad(spy, err).ok() == Err(err)
        assert spy.closed

    def test_to_data_releases_handle(self, spy):
        assert Good(spy, None).read(5).to_data() == Ok(b'alpha')
        assert spy.closed

    def test_to_handle_discards_payload(self, spy):
        assert Good(spy, None).read(5).to_handle() == Ok(spy)
        assert not spy.closed

    def test_to_handle_on_bad(self, spy):
        err = OSError('x')
        assert Bad(spy, err).to_handle() == Err(err)
        assert spy.closed

    def test_release_can_be_disabled(self, spy):
        init(close_on_release=False)
        try:
            assert Good(spy, 1).to_data() == Ok(1)
        finally:
            reset()
        assert not spy.closed


class TestOwnership:
    """Consumed chains are rejected."""

    def test_reuse_raises(self):
        chain = Good(io.BytesIO(b'abc'), None)
        chain.read(1)
        with pytest.raises(ConsumedChainError, match='read'):
            chain.read(1)

    @pytest.mark.parametrize(
        'use',
        [
            lambda c: c.ignore(),
            lambda c: c.and_then(lambda p, h: Good(h, p)),
            lambda c: c.or_else(lambda e, h: Good(h, None)),
            lambda c: c.ok(),
            lambda c: c.to_data(),
            lambda c: c.to_handle(),
            lambda c: c.write(b'x'),
        ],
    )
    def test_every_operation_consumes(self, use):
        chain = Good(io.BytesIO(), None)
        use(chain)
        with pytest.raises(ConsumedChainError):
            use(chain)

    def test_bad_is_consumed_too(self):
        chain = Bad(None, OSError())
        chain.read(1)
        with pytest.raises(ConsumedChainError):
            chain.to_data()

    def test_consumed_other_is_rejected(self):
        other = Good(io.BytesIO(), None)
        other.ignore()
        with pytest.raises(ConsumedChainError, match='and_'):
            Good(io.BytesIO(), None).and_(other)

    def test_consumed_error_is_runtime_error(self):
        chain = Good('h', None)
        chain.ignore()
        with pytest.raises(RuntimeError):
            chain.ignore()

    def test_lenient_mode_allows_reuse(self, lenient):
        chain = Good(io.BytesIO(b'abc'), None)
        chain.read(1)
        assert chain.read(1).payload == b'b'


class TestContextManager:
    """with-blocks release the handle on exit."""

    def test_handle_closed_on_exit(self, sample_file):
        with Good(sample_file.open('rb'), None) as chain:
            data = chain.read_line().to_handle()
        assert data.unwrap().closed

    def test_closed_even_when_release_disabled(self, spy):
        init(close_on_release=False)
        try:
            with Good(spy, None) as chain:
                chain.read(1)
        finally:
            reset()
        assert spy.closed

    def test_exception_propagates(self, spy):
        with pytest.raises(KeyError), Good(spy, None):
            raise KeyError('x')
        assert spy.closed


class TestScenarios:
    """End-to-end chains over real files and buffers."""

    def test_read_file_and_reject_empty(self, tmp_path):
        path = tmp_path / 'notes.txt'
        path.write_text('contents')

        def non_empty(data, handle):
            return Bad(handle, ValueError('empty file')) if not data else Good(handle, data)

        with path.open('rb') as f:
            out = Good(f, None).read_to_string().and_then(non_empty)
            assert out == Good(f, 'contents')

    def test_sequential_write_all(self):
        handle = io.BytesIO()
        out = Good(handle, 0).write_all(b'hello ').write_all(b'world')
        assert out == Good(handle, None)
        assert handle.getvalue() == b'hello world'

    def test_failed_write_stops_later_writes(self):
        calls = []

        class BrokenPipe:
            def write(self, data):
                calls.append(bytes(data))
                raise BrokenPipeError(32, 'Broken pipe')

        handle = BrokenPipe()
        out = Good(handle, 0).write_all(b'first').write_all(b'second')
        assert out.is_bad()
        assert isinstance(out.error, BrokenPipeError)
        assert calls == [b'first']
