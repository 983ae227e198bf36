"""
Core utilities for SiteGraph.
"""
from sitegraph.core.exceptions import (
    SiteGraphError,
    InvalidUrl,
    UnresolvableDomain,
    NoPagesCrawled,
    RendererUnavailable,
    RenderError,
    RenderTimeout,
    NetworkError,
)

__all__ = [
    "SiteGraphError",
    "InvalidUrl",
    "UnresolvableDomain",
    "NoPagesCrawled",
    "RendererUnavailable",
    "RenderError",
    "RenderTimeout",
    "NetworkError",
]
