"""Lexer and parser benchmarks.

Run with: pytest benchmarks/test_benchmark_lexer.py --benchmark-only
"""

from __future__ import annotations

import pytest
from pytest_benchmark.fixture import BenchmarkFixture

from stache.lexer import tokenize
from stache.parser import parse


@pytest.fixture(scope="module")
def large_source(nested_source: str) -> str:
    # A source of a few KB
    return "\n".join([nested_source] * 20)


@pytest.mark.benchmark(group="lexer")
def test_tokenize_small(benchmark: BenchmarkFixture, small_source: str) -> None:
    benchmark(tokenize, small_source)


@pytest.mark.benchmark(group="lexer")
def test_tokenize_large(benchmark: BenchmarkFixture, large_source: str) -> None:
    tokens = benchmark(tokenize, large_source)
    assert tokens[-1].type.name == "EOF"


@pytest.mark.benchmark(group="parser")
def test_parse_small(benchmark: BenchmarkFixture, small_source: str) -> None:
    benchmark(parse, small_source)


@pytest.mark.benchmark(group="parser")
def test_parse_large(benchmark: BenchmarkFixture, large_source: str) -> None:
    template = benchmark(parse, large_source)
    assert len(template.elements) > 20
