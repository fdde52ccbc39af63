from __future__ import annotations

import pytest

from sanityset.config import SanityOptions
from sanityset.context import DataContext

from ._fakes import RecordingTransport


@pytest.fixture
def options() -> SanityOptions:
    return SanityOptions(project_id="abc123", dataset="test", token="secret")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def context(options: SanityOptions, transport: RecordingTransport) -> DataContext:
    """A DataContext wired to the recording transport."""
    return DataContext(options, transport=transport)
