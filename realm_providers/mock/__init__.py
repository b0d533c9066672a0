"""Mock transport package exposing a fixture-backed bean server for tests and demos."""

from .invoker import MockInvoker, load_fixture_catalog

__all__ = ["MockInvoker", "load_fixture_catalog"]
