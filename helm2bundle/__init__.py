"""
helm2bundle packages a helm chart archive as a service bundle.

The chart's `Chart.yaml` and `values.yaml` are read from the archive and used to
write an `apb.yml` service bundle descriptor and a `Dockerfile` for building
the bundle image.
"""

__all__ = [
    "archive",
    "bundle",
    "chart",
    "exceptions",
    "writer",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
