"""Exceptions related to helm2bundle."""

__all__ = [
    "Helm2BundleException",
    "InputException",
    "StreamOpenError",
    "DecompressionError",
    "ArchiveFormatError",
    "ValuesEncodingError",
    "MetadataParseError",
    "MissingMemberError",
    "OutputException",
    "OutputExistsError",
]


class Helm2BundleException(Exception):
    """Generic base exception used for this library."""


class InputException(Helm2BundleException):
    """Raised when the chart archive can't be read as expected."""


class StreamOpenError(InputException):
    """Raised when the chart archive could not be opened or read at all."""


class DecompressionError(InputException):
    """Raised when the chart archive is not valid gzip content."""


class ArchiveFormatError(InputException):
    """Raised when the tar structure inside the chart archive is corrupt."""


class ValuesEncodingError(ArchiveFormatError):
    """Raised when the values file is not valid UTF-8 text."""


class MetadataParseError(InputException):
    """Raised when the chart metadata file is not valid YAML."""

    def __init__(self, member_name: str, message: str) -> None:
        super().__init__(f"Could not parse {member_name}: {message}")
        self.member_name = member_name


class MissingMemberError(InputException):
    """Raised when the archive ends before the required files are found."""

    def __init__(self, missing: tuple[str, ...], message: str) -> None:
        super().__init__(message)
        self.missing = missing


class OutputException(Helm2BundleException):
    """Raised when the bundle files can't be written."""


class OutputExistsError(OutputException):
    """Raised when an output file already exists and overwriting is not allowed."""

    def __init__(self, paths: list[str]) -> None:
        super().__init__(
            f"use --force to overwrite existing {' and/or '.join(paths)}"
        )
        self.paths = paths
