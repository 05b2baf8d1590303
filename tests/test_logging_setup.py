from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest

from spending_tracker import logging_setup
from spending_tracker.logging_setup import configure_logging, get_logger, resolve_level


@pytest.fixture
def fresh_package_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    pkg = logging.getLogger(logging_setup.PACKAGE_LOGGER)
    saved = (list(pkg.handlers), pkg.level, pkg.propagate)
    pkg.handlers.clear()
    monkeypatch.setattr(logging_setup, "_configured", False)
    yield pkg
    pkg.handlers[:] = saved[0]
    pkg.setLevel(saved[1])
    pkg.propagate = saved[2]


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (logging.WARNING, logging.WARNING),
        ("debug", logging.DEBUG),
        (" Error ", logging.ERROR),
        ("15", 15),
        ("nonsense", logging.INFO),
    ],
)
def test_resolve_level(level: int | str, expected: int) -> None:
    assert resolve_level(level) == expected


def test_resolve_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_level() == logging.INFO
    monkeypatch.setenv(logging_setup.LEVEL_ENV_VAR, "WARNING")
    assert resolve_level() == logging.WARNING


def test_library_logger_is_silent_until_configured(fresh_package_logger: logging.Logger) -> None:
    get_logger("spending_tracker.importer")
    assert [type(h) for h in fresh_package_logger.handlers] == [logging.NullHandler]


def test_configure_once(fresh_package_logger: logging.Logger) -> None:
    buf = io.StringIO()
    configure_logging("DEBUG", fmt="%(name)s:%(message)s", stream=buf)
    configure_logging("ERROR", stream=io.StringIO())

    get_logger("spending_tracker.importer").debug("parsed %d rows", 3)
    assert buf.getvalue() == "spending_tracker.importer:parsed 3 rows\n"
    assert len(fresh_package_logger.handlers) == 1
    assert fresh_package_logger.propagate is False
