"""Tests for the chart library."""

import pytest

from helm2bundle.chart import ChartMetadata, parse_chart
from helm2bundle.exceptions import MetadataParseError


def test_parse_chart(chart_yaml: bytes) -> None:
    """Test parsing the fields used from a Chart.yaml file."""
    chart = parse_chart(chart_yaml)
    assert chart == ChartMetadata(
        name="foo", description="bar", icon="http://x/icon.png"
    )


def test_parse_chart_defaults() -> None:
    """Test optional fields default to empty strings."""
    chart = parse_chart("name: foo\ndescription:\n")
    assert chart.name == "foo"
    assert chart.description == ""
    assert chart.icon == ""


def test_parse_empty_chart() -> None:
    """Test an empty Chart.yaml has no name rather than failing."""
    assert parse_chart(b"") == ChartMetadata(name="")


def test_parse_scalar_fields() -> None:
    """Test non-string scalars keep the text written in the file."""
    chart = parse_chart("name: 0x1F\ndescription: 1.10\nicon: yes\n")
    assert chart == ChartMetadata(name="0x1F", description="1.10", icon="yes")


def test_parse_null_fields() -> None:
    """Test null scalars are read as empty strings."""
    chart = parse_chart("name: foo\ndescription: ~\nicon: null\n")
    assert chart == ChartMetadata(name="foo")


@pytest.mark.parametrize(
    "content",
    [
        "name: [foo\n",
        "name: 'unterminated\n",
        "- name: foo\n",
        "just a string",
        "name:\n  nested: foo\n",
    ],
)
def test_parse_invalid_chart(content: str) -> None:
    """Test Chart.yaml content that can't be used."""
    with pytest.raises(MetadataParseError, match="Chart.yaml"):
        parse_chart(content)
