"""Representation of a service bundle built from a helm chart.

The descriptor is written to `apb.yml` and describes how a service broker
deploys the chart: a single `default` plan whose only parameter is the chart's
values file, which the user may edit before provisioning.
"""

from dataclasses import dataclass, field
import logging
from typing import Any

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
import yaml

from .archive import ExtractionResult

__all__ = [
    "ParameterDescriptor",
    "Plan",
    "BundleMetadata",
    "ServiceBundleDescriptor",
    "build_descriptor",
]

_LOGGER = logging.getLogger(__name__)

SPEC_VERSION = "1.0"
ASYNC_OPTIONAL = "optional"
DEFAULT_PLAN = "default"
VALUES_PARAMETER = "values"


class _BundleDumper(yaml.SafeDumper):
    """Dumper that keeps values files readable in the output."""


def _str_presenter(dumper: yaml.SafeDumper, data: str) -> Any:
    """Represent multi-line yaml strings as you'd expect.

    See https://github.com/yaml/pyyaml/issues/240
    """
    return dumper.represent_scalar(
        "tag:yaml.org,2002:str", data, style="|" if data.count("\n") > 0 else None
    )


_BundleDumper.add_representer(str, _str_presenter)


@dataclass(frozen=True)
class BaseDescriptor(DataClassDictMixin):
    """Base class for all descriptor objects."""

    class Config(BaseConfig):
        serialize_by_alias = True


@dataclass(frozen=True)
class ParameterDescriptor(BaseDescriptor):
    """A user provided parameter of a plan."""

    name: str
    """The name of the parameter passed to the bundle."""

    title: str
    """The label shown to the user."""

    type: str
    """The type of the parameter value."""

    display_type: str
    """How the parameter is presented in a user interface."""

    default: str
    """The default value of the parameter."""


@dataclass(frozen=True)
class Plan(BaseDescriptor):
    """A named deployment configuration of a service bundle."""

    name: str
    """The name of the plan."""

    description: str
    """A description of what the plan deploys."""

    free: bool
    """True if provisioning the plan has no cost."""

    parameters: tuple[ParameterDescriptor, ...]
    """Parameters the user may set when provisioning the plan."""

    metadata: dict[str, Any] = field(default_factory=dict)
    """Additional plan metadata."""


@dataclass(frozen=True)
class BundleMetadata(BaseDescriptor):
    """Display metadata of a service bundle."""

    display_name: str = field(metadata=field_options(alias="displayName"))
    """The name shown to the user."""

    image_url: str = field(metadata=field_options(alias="imageUrl"))
    """A URL to the bundle icon."""


@dataclass(frozen=True)
class ServiceBundleDescriptor(BaseDescriptor):
    """A service bundle descriptor, the contents of apb.yml."""

    version: str
    """The version of the descriptor format."""

    name: str
    """The name of the bundle."""

    description: str
    """A description of the bundle."""

    bindable: bool
    """True if the bundle supports binding to other services."""

    async_mode: str = field(metadata=field_options(alias="async"))
    """Whether the broker may provision the bundle asynchronously."""

    metadata: BundleMetadata
    """Display metadata for the bundle."""

    plans: tuple[Plan, ...]
    """The plans available when provisioning the bundle."""

    def yaml(self) -> str:
        """Return a YAML string representation of the descriptor."""
        return yaml.dump(self.to_dict(), Dumper=_BundleDumper, sort_keys=False)


def build_descriptor(result: ExtractionResult) -> ServiceBundleDescriptor:
    """Build the service bundle descriptor for a chart."""
    _LOGGER.debug("Building service bundle for chart %s", result.name)
    parameter = ParameterDescriptor(
        name=VALUES_PARAMETER,
        title="Values",
        type="string",
        display_type="textarea",
        default=result.values_text,
    )
    plan = Plan(
        name=DEFAULT_PLAN,
        description=f"Deploys helm chart {result.name}",
        free=True,
        parameters=(parameter,),
    )
    return ServiceBundleDescriptor(
        version=SPEC_VERSION,
        name=f"{result.name}-apb",
        description=result.description,
        bindable=False,
        async_mode=ASYNC_OPTIONAL,
        metadata=BundleMetadata(
            display_name=f"{result.name} (helm bundle)",
            image_url=result.icon,
        ),
        plans=(plan,),
    )
