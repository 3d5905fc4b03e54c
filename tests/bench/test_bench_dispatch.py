"""Dispatch benchmarks for tagged.

Measures the hot path: construct, assign, and dispatch on small and wide
variants. Dispatch should cost the same for the first and the last member.

Run: uv run pytest tests/bench/test_bench_dispatch.py --benchmark-only
"""

from __future__ import annotations

import operator

from tagged import Variant, dispatch

# ── Fixtures ─────────────────────────────────────────────────────────────────

WIDE = 64

Scalar = Variant(str, int, bool, name="Scalar")
MEASURE = Scalar.handlers({str: len, int: operator.pos, bool: operator.not_})

_wide_types = [type(f"Member{i}", (), {"__slots__": ()}) for i in range(WIDE)]
Wide = Variant(*_wide_types, name="Wide")
WIDE_HANDLERS = Wide.handlers({t: id for t in _wide_types})


# ── Construct ────────────────────────────────────────────────────────────────


def test_bench_scalar_exact_construct(benchmark):
    benchmark(Scalar, "hello")


def test_bench_scalar_subclass_construct(benchmark):
    # bool has no exact member here, so resolution falls back to isinstance.
    number = Variant(str, int)
    benchmark(number, True)


def test_bench_wide_last_member_construct(benchmark):
    value = _wide_types[-1]()
    benchmark(Wide, value)


# ── Assign ───────────────────────────────────────────────────────────────────


def test_bench_scalar_switch_assign(benchmark):
    tv = Scalar("hello")
    benchmark(tv.assign, 42)


# ── Dispatch ─────────────────────────────────────────────────────────────────


def test_bench_scalar_text_dispatch(benchmark):
    tv = Scalar("hello")
    assert benchmark(dispatch, tv, MEASURE) == 5


def test_bench_scalar_bool_dispatch(benchmark):
    tv = Scalar(True)
    assert benchmark(dispatch, tv, MEASURE) is False


def test_bench_wide_first_member_dispatch(benchmark):
    tv = Wide(_wide_types[0]())
    benchmark(dispatch, tv, WIDE_HANDLERS)


def test_bench_wide_last_member_dispatch(benchmark):
    tv = Wide(_wide_types[-1]())
    benchmark(dispatch, tv, WIDE_HANDLERS)


def test_bench_scalar_method_dispatch(benchmark):
    tv = Scalar(7)
    assert benchmark(tv.dispatch, MEASURE) == 7
