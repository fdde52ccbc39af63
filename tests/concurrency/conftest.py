from __future__ import annotations

import pytest


def _markexpr_allows(config: pytest.Config, marker_name: str) -> bool:
    """
    Return True if the user's `-m` expression *mentions* marker_name.
    """
    expr = getattr(config.option, "markexpr", "") or ""
    return marker_name in expr


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Skip concurrency tests unless explicitly selected with `-m concurrency`.
    """
    if _markexpr_allows(config, "concurrency"):
        return

    skip_concurrency = pytest.mark.skip(
        reason="Skipped: run with `pytest -m concurrency` to execute concurrency invariant tests."
    )
    for item in items:
        if item.get_closest_marker("concurrency") is not None:
            item.add_marker(skip_concurrency)
