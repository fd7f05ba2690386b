"""Library for writing the files used to build a service bundle image.

Two files are written to the output directory: `apb.yml` holding the service
bundle descriptor, and a `Dockerfile` that copies the chart archive into the
helm bundle base image.
"""

import logging
from pathlib import Path

import aiofiles
from jinja2 import Environment, StrictUndefined

from .archive import ExtractionResult
from .bundle import build_descriptor
from .exceptions import OutputException, OutputExistsError

__all__ = [
    "APB_YML",
    "DOCKERFILE",
    "existing_outputs",
    "render_dockerfile",
    "write_bundle",
]

_LOGGER = logging.getLogger(__name__)

APB_YML = "apb.yml"
DOCKERFILE = "Dockerfile"

DOCKERFILE_TEMPLATE = """\
FROM ansibleplaybookbundle/helm-bundle-base

LABEL "com.redhat.apb.spec"=\\
""

COPY {{ tarfile_name }} /opt/chart.tgz

ENTRYPOINT ["entrypoint.sh"]
"""

_ENVIRONMENT = Environment(
    autoescape=False, keep_trailing_newline=True, undefined=StrictUndefined
)


def existing_outputs(output_dir: Path) -> list[Path]:
    """Return the output files that already exist in the directory."""
    return [
        path
        for path in (output_dir / APB_YML, output_dir / DOCKERFILE)
        if path.exists()
    ]


def render_dockerfile(archive_file_name: str) -> str:
    """Return the Dockerfile contents for the chart archive."""
    template = _ENVIRONMENT.from_string(DOCKERFILE_TEMPLATE)
    return template.render(tarfile_name=archive_file_name)


async def _write_file(path: Path, content: str) -> None:
    _LOGGER.debug("Writing %s", path)
    try:
        async with aiofiles.open(str(path), mode="w") as output_file:
            await output_file.write(content)
    except OSError as err:
        raise OutputException(f"Could not write {path}: {err}") from err


async def write_bundle(
    result: ExtractionResult, output_dir: Path, force: bool = False
) -> list[Path]:
    """Write apb.yml and the Dockerfile for the extracted chart.

    Existing files are only replaced when `force` is set, and nothing is
    written if either file already exists. Both files are rendered before
    either is written, but the writes are not atomic: if writing the
    Dockerfile fails, the apb.yml already written is left in place.
    """
    if not force and (existing := existing_outputs(output_dir)):
        raise OutputExistsError([path.name for path in existing])
    descriptor = build_descriptor(result)
    outputs = {
        output_dir / APB_YML: descriptor.yaml(),
        output_dir / DOCKERFILE: render_dockerfile(result.archive_file_name),
    }
    for path, content in outputs.items():
        await _write_file(path, content)
    return list(outputs)
