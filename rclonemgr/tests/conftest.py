"""Module that adds flags to pytest to enable certain extra tests."""

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--system",
        action="store_true",
        default=False,
        help="Run tests against real system utilities",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "system: mark test as requiring real system utilities to run"
    )


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--system"):
        skip_system = pytest.mark.skip(reason="only runs with --system option")

        for item in items:
            if "system" in item.keywords:
                item.add_marker(skip_system)
