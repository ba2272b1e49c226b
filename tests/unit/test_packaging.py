"""Unit tests for declared dependencies."""

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _dependency_names() -> set[str]:
    with PYPROJECT.open("rb") as f:
        dependencies = tomllib.load(f)["project"]["dependencies"]
    return {dep.split(">")[0].split("<")[0].split("[")[0].strip() for dep in dependencies}


def test_opentelemetry_packages_declared():
    """Test every OpenTelemetry distribution imported directly is declared."""
    names = _dependency_names()

    for package in (
        "opentelemetry-api",
        "opentelemetry-sdk",
        "opentelemetry-semantic-conventions",
        "opentelemetry-exporter-otlp-proto-http",
        "opentelemetry-instrumentation-fastapi",
        "opentelemetry-instrumentation-sqlalchemy",
    ):
        assert package in names
