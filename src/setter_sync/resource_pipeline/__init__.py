"""Resource pipeline exports."""

from .package_io import DEFAULT_MATCH_FILES, LocalPackageReadWriter, PipelineError
from .pipeline import Pipeline, ResourceFilter
from .resource_models import ResourceDocument, SetterReference
from .setter_filter import SetAll
from .setter_references import find_setter_references

__all__ = [
    "DEFAULT_MATCH_FILES",
    "LocalPackageReadWriter",
    "PipelineError",
    "Pipeline",
    "ResourceFilter",
    "ResourceDocument",
    "SetterReference",
    "SetAll",
    "find_setter_references",
]
