from __future__ import annotations

import logging

import pytest

from image_orchestrator.registry import LoaderRegistry, NoLoaderError


def _loader_a(image_id, options):
    return "a"


def _loader_b(image_id, options):
    return "b"


def test_last_registration_for_scheme_wins() -> None:
    registry = LoaderRegistry()
    registry.register_loader("wadouri", _loader_a)
    registry.register_loader("wadouri", _loader_b)

    assert registry.resolve_loader("wadouri:a.dcm") is _loader_b
    assert registry.schemes == ["wadouri"]


def test_register_unknown_loader_returns_previous() -> None:
    registry = LoaderRegistry()

    assert registry.register_unknown_loader(_loader_a) is None
    assert registry.register_unknown_loader(_loader_b) is _loader_a
    assert registry.resolve_loader("foo:bar") is _loader_b


def test_unknown_loader_serves_ids_without_scheme() -> None:
    registry = LoaderRegistry()
    registry.register_loader("wadouri", _loader_a)
    registry.register_unknown_loader(_loader_b)

    assert registry.resolve_loader("a.dcm") is _loader_b


def test_resolve_without_match_or_fallback_raises() -> None:
    registry = LoaderRegistry()
    registry.register_loader("wadouri", _loader_a)

    with pytest.raises(NoLoaderError, match="foo:bar") as excinfo:
        registry.resolve_loader("foo:bar")

    assert excinfo.value.scheme == "foo"


def test_empty_scheme_cannot_be_registered() -> None:
    registry = LoaderRegistry()

    with pytest.raises(ValueError):
        registry.register_loader("", _loader_a)


def test_unregister_all_clears_schemes_and_fallback() -> None:
    registry = LoaderRegistry()
    registry.register_loader("wadouri", _loader_a)
    registry.register_unknown_loader(_loader_b)

    registry.unregister_all()
    registry.unregister_all()

    assert registry.schemes == []
    assert registry.has_unknown_loader is False
    with pytest.raises(NoLoaderError):
        registry.resolve_loader("wadouri:a.dcm")


def test_unregister_single_scheme() -> None:
    registry = LoaderRegistry()
    registry.register_loader("wadouri", _loader_a)
    registry.register_loader("http", _loader_b)

    assert registry.unregister_loader("wadouri") is _loader_a
    assert registry.unregister_loader("wadouri") is None
    assert registry.schemes == ["http"]


def test_unregister_single_scheme_is_logged(caplog) -> None:
    registry = LoaderRegistry()
    registry.register_loader("wadouri", _loader_a)

    with caplog.at_level(logging.DEBUG, logger="image_orchestrator.registry"):
        registry.unregister_loader("wadouri")
        registry.unregister_loader("http")

    records = [record for record in caplog.records if record.getMessage() == "loader_unregistered"]
    assert [(record.scheme, record.removed) for record in records] == [("wadouri", True), ("http", False)]
