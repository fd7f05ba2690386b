"""Library for extracting chart data from a packaged helm chart archive.

A packaged chart is a gzip compressed tarball with every file nested under a
single top-level directory named after the chart, for example:

    mychart/Chart.yaml
    mychart/values.yaml
    mychart/templates/deployment.yaml

The archive is read as a stream one member at a time. Scanning stops as soon as
both the chart metadata and the values file have been captured, so large
archives are never read in full and member order does not matter.
"""

from collections.abc import Generator
from dataclasses import dataclass
import fnmatch
import gzip
import logging
from pathlib import Path
import re
import tarfile
from typing import IO, BinaryIO
import zlib

from mashumaro import DataClassDictMixin

from .chart import CHART_FILE, ChartMetadata, parse_chart
from .exceptions import (
    ArchiveFormatError,
    DecompressionError,
    MissingMemberError,
    StreamOpenError,
    ValuesEncodingError,
)

__all__ = [
    "METADATA_PATTERN",
    "VALUES_PATTERN",
    "ExtractionResult",
    "match_member",
    "iter_members",
    "read_chart_archive",
    "extract_chart",
]

_LOGGER = logging.getLogger(__name__)

VALUES_FILE = "values.yaml"

# Each pattern matches a file exactly one directory below the archive root.
METADATA_PATTERN = f"*/{CHART_FILE}"
VALUES_PATTERN = f"*/{VALUES_FILE}"


def _compile_pattern(pattern: str) -> tuple[re.Pattern[str], ...]:
    """Compile a glob pattern into one regex per path segment."""
    return tuple(re.compile(fnmatch.translate(part)) for part in pattern.split("/"))


_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    pattern: _compile_pattern(pattern) for pattern in (METADATA_PATTERN, VALUES_PATTERN)
}


def match_member(pattern: str, name: str) -> bool:
    """Return true if the archive member name matches the glob pattern.

    Wildcards only match within a single path segment, so `*/Chart.yaml`
    matches `mychart/Chart.yaml` but not `mychart/sub/Chart.yaml`.
    Only METADATA_PATTERN and VALUES_PATTERN are accepted; they are compiled
    once at import and any other pattern raises KeyError.
    """
    segments = _PATTERNS[pattern]
    parts = name.split("/")
    if len(parts) != len(segments):
        return False
    return all(regex.match(part) for regex, part in zip(segments, parts))


@dataclass(frozen=True)
class ExtractionResult(DataClassDictMixin):
    """Data extracted from a chart archive used to build a service bundle."""

    name: str
    """The name of the chart."""

    description: str
    """The description of the chart."""

    icon: str
    """The chart icon URL, or empty."""

    archive_file_name: str
    """The file name of the chart archive, as given by the caller."""

    values_text: str
    """The entire contents of the chart's values.yaml file."""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ExtractionResult requires a chart name")
        if not self.values_text:
            raise ValueError("ExtractionResult requires values text")


def iter_members(
    archive: tarfile.TarFile,
) -> Generator[tuple[tarfile.TarInfo, IO[bytes] | None], None, None]:
    """Yield each archive member with a reader for its contents.

    The archive is advanced one header at a time. A reader is only valid until
    the next member is requested and is None for anything but a regular file.
    """
    while (member := archive.next()) is not None:
        # Links can't be opened when reading the archive as a stream
        yield member, archive.extractfile(member) if member.isfile() else None


def _read_values(member: tarfile.TarInfo, reader: IO[bytes]) -> str:
    data = reader.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValuesEncodingError(
            f"{member.name} is not valid UTF-8 text: {err}"
        ) from err


def _missing_error(chart: ChartMetadata | None, values_text: str) -> MissingMemberError:
    """Describe which required members were never captured."""
    missing: list[str] = []
    if chart is None or not chart.name:
        missing.append(CHART_FILE)
    if not values_text:
        missing.append(VALUES_FILE)
    if len(missing) == 1:
        message = f"{missing[0]} not found in archive"
    else:
        message = f"Could not find both {CHART_FILE} and {VALUES_FILE}"
    return MissingMemberError(tuple(missing), message)


def _scan(archive: tarfile.TarFile, archive_file_name: str) -> ExtractionResult:
    chart: ChartMetadata | None = None
    values_text = ""
    for member, reader in iter_members(archive):
        if reader is None:
            continue
        if match_member(METADATA_PATTERN, member.name):
            _LOGGER.debug("Found chart metadata %s", member.name)
            chart = parse_chart(reader.read())
        elif match_member(VALUES_PATTERN, member.name):
            _LOGGER.debug("Found chart values %s", member.name)
            values_text = _read_values(member, reader)
        # A metadata file without a name does not count as found, so scanning
        # continues in case a later member supplies one.
        if chart is not None and chart.name and values_text:
            _LOGGER.debug("Found chart %s in %s", chart.name, archive_file_name)
            return ExtractionResult(
                name=chart.name,
                description=chart.description,
                icon=chart.icon,
                archive_file_name=archive_file_name,
                values_text=values_text,
            )
    raise _missing_error(chart, values_text)


def read_chart_archive(stream: BinaryIO, archive_file_name: str) -> ExtractionResult:
    """Extract the chart metadata and values from a gzip compressed tar stream.

    The stream is read sequentially and is not closed.
    """
    try:
        with gzip.GzipFile(fileobj=stream, mode="rb") as uncompressed, tarfile.open(
            fileobj=uncompressed, mode="r|"
        ) as archive:
            return _scan(archive, archive_file_name)
    except gzip.BadGzipFile as err:
        raise DecompressionError(
            f"{archive_file_name} is not a gzip file: {err}"
        ) from err
    except (zlib.error, EOFError) as err:
        raise DecompressionError(
            f"{archive_file_name} has corrupt compressed data: {err}"
        ) from err
    except tarfile.TarError as err:
        raise ArchiveFormatError(
            f"{archive_file_name} is not a valid tar archive: {err}"
        ) from err
    except OSError as err:
        raise StreamOpenError(f"Could not read {archive_file_name}: {err}") from err


def extract_chart(path: str | Path) -> ExtractionResult:
    """Extract the chart metadata and values from a chart archive file."""
    archive_file_name = str(path)
    _LOGGER.debug("Reading chart archive %s", archive_file_name)
    try:
        stream = open(path, "rb")
    except OSError as err:
        raise StreamOpenError(f"Could not open {archive_file_name}: {err}") from err
    with stream:
        return read_chart_archive(stream, archive_file_name)
