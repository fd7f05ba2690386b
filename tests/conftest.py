"""Fixtures for building chart archives in tests."""

from collections.abc import Callable
import io
import random
import tarfile

import pytest

ArchiveBuilder = Callable[[list[tuple[str, bytes]]], bytes]
StreamFactory = Callable[[bytes, int], io.BytesIO]


class ReadLimitExceeded(Exception):
    """Raised when a test stream is read past its limit."""


class GuardedStream(io.BytesIO):
    """A stream that fails when read at or after a sentinel position."""

    def __init__(self, data: bytes, limit: int) -> None:
        super().__init__(data)
        self._limit = limit

    def read(self, size: int | None = -1) -> bytes:
        if self.tell() >= self._limit:
            raise ReadLimitExceeded(f"Read at position {self.tell()}")
        return super().read(size)


def _build_archive(members: list[tuple[str, bytes]]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in members:
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture(name="chart_yaml")
def chart_yaml_fixture() -> bytes:
    """Fixture for the contents of a Chart.yaml file."""
    return b"""\
apiVersion: v2
name: foo
description: bar
icon: http://x/icon.png
version: 0.1.0
"""


@pytest.fixture(name="values_yaml")
def values_yaml_fixture() -> bytes:
    """Fixture for the contents of a values.yaml file."""
    return b"replicaCount: 1\n"


@pytest.fixture(name="build_archive")
def build_archive_fixture() -> ArchiveBuilder:
    """Fixture for creating a chart archive with the members in order."""
    return _build_archive


@pytest.fixture(name="unrelated_members")
def unrelated_members_fixture() -> list[tuple[str, bytes]]:
    """Fixture for a large tail of template files that do not compress well."""
    rand = random.Random(0)
    return [
        (f"mychart/templates/file-{i}.yaml", rand.randbytes(128))
        for i in range(10000)
    ]


@pytest.fixture(name="guarded_stream")
def guarded_stream_fixture() -> StreamFactory:
    """Fixture for creating a stream that fails when read past a limit."""
    return GuardedStream


@pytest.fixture(name="chart_archive")
def chart_archive_fixture(
    build_archive: ArchiveBuilder, chart_yaml: bytes, values_yaml: bytes
) -> bytes:
    """Fixture for a minimal chart archive."""
    return build_archive(
        [
            ("mychart/Chart.yaml", chart_yaml),
            ("mychart/values.yaml", values_yaml),
            ("mychart/templates/deployment.yaml", b"kind: Deployment\n"),
        ]
    )
