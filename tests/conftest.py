"""Pytest configuration and fixtures for stache tests."""

import pytest

from stache import DictLoader, Registry
from stache.environment import terminal


@pytest.fixture(autouse=True, scope="session")
def _plain_diagnostics():
    """Keep error messages free of ANSI codes regardless of the terminal.

    Session-scoped: hypothesis rejects function-scoped fixtures.
    """
    previous = terminal._USE_COLORS
    terminal._USE_COLORS = False
    yield
    terminal._USE_COLORS = previous


@pytest.fixture
def registry():
    """Create a basic stache Registry."""
    return Registry()


@pytest.fixture
def strict_registry():
    """Create a Registry with strict_mode enabled."""
    return Registry(strict_mode=True)


@pytest.fixture
def registry_with_loader():
    """Create a Registry with a DictLoader holding test partials."""
    loader = DictLoader(
        {
            "card": "<div>{{name}}</div>",
            "address": "{{city}}, {{country}}",
            "owner": "{{../name}}",
            "loop": "{{> loop}}",
        }
    )
    return Registry(loader=loader)


@pytest.fixture
def address_data():
    """The address record used by the narrowing scenarios."""
    return {"addr": {"city": "Beijing", "country": "China"}}


@pytest.fixture
def people_data():
    return {
        "title": "Team",
        "people": [
            {"name": "Ada", "age": 27, "addr": {"city": "London"}},
            {"name": "Grace", "age": 27, "addr": {"city": "Arlington"}},
        ],
    }


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
