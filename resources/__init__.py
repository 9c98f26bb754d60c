from __future__ import annotations

from .errors import (
    BadInput,
    InvalidNamespace,
    ResourceAlreadyExists,
    ResourceError,
    ResourceNotFound,
)
from .merge import JsonValue, Resource, is_resource, merge_resources
from .store import Namespace, ResourceStore

__all__ = [
    "BadInput",
    "InvalidNamespace",
    "ResourceAlreadyExists",
    "ResourceError",
    "ResourceNotFound",
    "JsonValue",
    "Resource",
    "is_resource",
    "merge_resources",
    "Namespace",
    "ResourceStore",
]
