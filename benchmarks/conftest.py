from __future__ import annotations

import json
import os
import platform
import sys
from importlib import metadata as importlib_metadata
from pathlib import Path

import pytest

from stache import Registry

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)

MINIMAL_TEMPLATE = "Hello, {{name}}!"

SMALL_TEMPLATE = """\
<h1>{{title}}</h1>
<ul>
{{#each items}}  <li>{{this}}</li>
{{/each}}</ul>"""

NESTED_TEMPLATE = """\
{{#each departments as |dept|}}
<section>
  <h2>{{name}} ({{@root.company}})</h2>
  {{#each teams}}
  <h3>{{name}}</h3>
  {{#each members as |m i|}}
    {{#with address}}<p>{{i}}. {{m.name}} in {{city}} / {{dept.name}} / {{../../name}}</p>{{/with}}
  {{/each}}
  {{/each}}
</section>
{{/each}}"""


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "stache": _version("stache"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def registry() -> Registry:
    registry = Registry()
    registry.register_template_string("minimal", MINIMAL_TEMPLATE)
    registry.register_template_string("small", SMALL_TEMPLATE)
    registry.register_template_string("nested", NESTED_TEMPLATE)
    return registry


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return {"title": "Benchmark", "items": [f"item {i}" for i in range(5)]}


@pytest.fixture(scope="session")
def nested_context() -> dict[str, object]:
    """3 departments x 4 teams x 10 members, each member with an address."""
    return {
        "company": "Acme",
        "departments": [
            {
                "name": f"dept-{d}",
                "teams": [
                    {
                        "name": f"team-{d}-{t}",
                        "members": [
                            {"name": f"member-{m}", "address": {"city": f"city-{m % 7}"}}
                            for m in range(10)
                        ],
                    }
                    for t in range(4)
                ],
            }
            for d in range(3)
        ],
    }


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return {"title": "Large", "items": [f"item {i}" for i in range(1000)]}


@pytest.fixture(scope="session")
def small_source() -> str:
    return SMALL_TEMPLATE


@pytest.fixture(scope="session")
def nested_source() -> str:
    return NESTED_TEMPLATE
