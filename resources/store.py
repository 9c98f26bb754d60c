from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Mapping

from .errors import InvalidNamespace, ResourceAlreadyExists, ResourceNotFound
from .merge import Resource, is_resource, merge_resources

logger = logging.getLogger(__name__)

Namespace = str


def _check_namespace(ns: Any) -> Namespace:
    if not isinstance(ns, str) or not ns:
        raise InvalidNamespace(ns)
    return ns


def _copy_doc(doc: Mapping[str, Any]) -> Resource:
    return copy.deepcopy(dict(doc))


class ResourceStore:
    """
    In-memory namespace -> document mapping shared by all requests.

    Every operation runs under a single lock, so a merge is one atomic
    read-modify-write and no caller ever sees a half-applied change.
    Documents are copied on the way in and on the way out; stored state is
    never aliased by callers.
    """

    def __init__(self, resources: Mapping[Namespace, Resource] | None = None) -> None:
        self._lock = threading.Lock()
        self._resources: dict[Namespace, Resource] = {}
        if resources:
            self.load(resources)

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)

    def has(self, ns: Namespace) -> bool:
        ns = _check_namespace(ns)
        with self._lock:
            return ns in self._resources

    def set(self, ns: Namespace, doc: Mapping[str, Any]) -> None:
        ns = _check_namespace(ns)
        data = _copy_doc(doc)
        with self._lock:
            self._resources[ns] = data
        logger.info("resource [%s] updated", ns)

    def get(self, ns: Namespace) -> Resource:
        ns = _check_namespace(ns)
        with self._lock:
            if ns not in self._resources:
                raise ResourceNotFound(ns)
            data = copy.deepcopy(self._resources[ns])
        logger.info("resource [%s] queried", ns)
        return data

    def merge(self, ns: Namespace, doc: Mapping[str, Any]) -> Resource:
        """
        Merge `doc` into the document under `ns`, creating it when absent.
        Returns a copy of the merged document.
        """
        ns = _check_namespace(ns)
        incoming = _copy_doc(doc)
        with self._lock:
            merged = self._merge_locked(ns, incoming)
        logger.info("resource [%s] updated", ns)
        return merged

    def remove(self, ns: Namespace) -> None:
        self.pop(ns)

    def list(self) -> list[Namespace]:
        with self._lock:
            return list(self._resources)

    # ------------------------------------------------------------------
    # Conditional operations (check and act under one lock acquisition)
    # ------------------------------------------------------------------

    def create(self, ns: Namespace, doc: Mapping[str, Any], *, overwrite: bool = False) -> bool:
        """
        Store `doc` unless `ns` already exists. Returns False when nothing changed.
        """
        ns = _check_namespace(ns)
        data = _copy_doc(doc)
        with self._lock:
            if ns in self._resources and not overwrite:
                return False
            self._resources[ns] = data
        logger.info("resource [%s] updated", ns)
        return True

    def add(self, ns: Namespace, doc: Mapping[str, Any], *, overwrite: bool = False) -> Resource:
        if not self.create(ns, doc, overwrite=overwrite):
            raise ResourceAlreadyExists(ns)
        return _copy_doc(doc)

    def update(self, ns: Namespace, doc: Mapping[str, Any]) -> Resource | None:
        """
        Merge into an existing document only. Returns None when `ns` is absent.
        """
        ns = _check_namespace(ns)
        incoming = _copy_doc(doc)
        with self._lock:
            if ns not in self._resources:
                return None
            merged = self._merge_locked(ns, incoming)
        logger.info("resource [%s] updated", ns)
        return merged

    def pop(self, ns: Namespace) -> Resource | None:
        ns = _check_namespace(ns)
        with self._lock:
            data = self._resources.pop(ns, None)
        if data is not None:
            logger.info("resource [%s] removed", ns)
        return data

    # ------------------------------------------------------------------
    # Whole-store access for snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[Namespace, Resource]:
        with self._lock:
            return copy.deepcopy(self._resources)

    def load(self, resources: Mapping[Namespace, Any]) -> None:
        """
        Replace the whole mapping. Every value must be a document.
        """
        loaded: dict[Namespace, Resource] = {}
        for ns, doc in resources.items():
            ns = _check_namespace(ns)
            if not is_resource(doc):
                raise TypeError(f"resource [{ns}] is not a JSON object")
            loaded[ns] = _copy_doc(doc)
        with self._lock:
            self._resources = loaded

    def _merge_locked(self, ns: Namespace, incoming: Resource) -> Resource:
        base = self._resources.get(ns)
        if base is None:
            base = {}
        self._resources[ns] = merge_resources(base, incoming)  # type: ignore[assignment]
        return copy.deepcopy(self._resources[ns])
