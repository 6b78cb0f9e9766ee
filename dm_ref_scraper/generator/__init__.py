"""Utilities for resolving, rendering, and writing reference pages."""

from .front_matter import PageDocumentRenderer, build_front_matter
from .link_resolver import CrossReferenceResolver, LinkKind
from .models import BuildReport, MetadataBlock, PageRecord
from .page_generator import OutputError, ReferenceSiteGenerator, output_path_for
from .renderer import MissingTitleError, PageRenderError, ReferencePageRenderer

__all__ = [
    "BuildReport",
    "CrossReferenceResolver",
    "LinkKind",
    "MetadataBlock",
    "MissingTitleError",
    "OutputError",
    "PageDocumentRenderer",
    "PageRecord",
    "PageRenderError",
    "ReferencePageRenderer",
    "ReferenceSiteGenerator",
    "build_front_matter",
    "output_path_for",
]
