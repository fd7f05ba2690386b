"""Library for reading the metadata of a helm chart.

Only the fields needed to describe a service bundle are read from the chart's
`Chart.yaml`. Everything else in the file (version, dependencies, maintainers,
etc) is ignored.
"""

from dataclasses import dataclass
import logging

from mashumaro import DataClassDictMixin
import yaml

from .exceptions import MetadataParseError

__all__ = [
    "CHART_FILE",
    "ChartMetadata",
    "parse_chart",
]

_LOGGER = logging.getLogger(__name__)

CHART_FILE = "Chart.yaml"


@dataclass(frozen=True)
class ChartMetadata(DataClassDictMixin):
    """Data parsed from a helm chart's Chart.yaml file."""

    name: str
    """The name of the chart."""

    description: str = ""
    """A single-sentence description of the chart."""

    icon: str = ""
    """A URL to an image used as the chart icon."""

_NULL_TAG = "tag:yaml.org,2002:null"


def _text_field(fields: dict[str, yaml.Node], key: str) -> str:
    """Return a scalar field as written in the file, empty when unset."""
    if (node := fields.get(key)) is None:
        return ""
    if not isinstance(node, yaml.ScalarNode):
        raise MetadataParseError(
            CHART_FILE, f"field '{key}' must be a scalar, got {node.id}"
        )
    if node.tag == _NULL_TAG:
        return ""
    return node.value


def parse_chart(content: bytes | str) -> ChartMetadata:
    """Parse the contents of a Chart.yaml file.

    Fields keep the text of the scalar as written, so `version: 1.10` is read
    as "1.10" rather than a number. An empty document is not an error and
    returns metadata with an empty name; callers decide whether that is
    acceptable.
    """
    try:
        doc = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise MetadataParseError(CHART_FILE, str(err)) from err
    if doc is None:
        _LOGGER.debug("%s is empty", CHART_FILE)
        return ChartMetadata(name="")
    if not isinstance(doc, dict):
        raise MetadataParseError(
            CHART_FILE, f"expected a mapping, got {type(doc).__name__}"
        )
    root = yaml.compose(content, Loader=yaml.SafeLoader)
    fields = {
        key.value: value
        for key, value in root.value
        if isinstance(key, yaml.ScalarNode)
    }
    return ChartMetadata(
        name=_text_field(fields, "name"),
        description=_text_field(fields, "description"),
        icon=_text_field(fields, "icon"),
    )
