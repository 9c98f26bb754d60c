from __future__ import annotations


class ResourceError(Exception):
    """
    Base class for failures the HTTP layer turns into a JSON error envelope.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceNotFound(ResourceError):
    status_code = 404

    def __init__(self, namespace: str) -> None:
        super().__init__(f"no such resource: [{namespace}]")
        self.namespace = namespace


class ResourceAlreadyExists(ResourceError):
    status_code = 409

    def __init__(self, namespace: str) -> None:
        super().__init__(f"resource already exists: [{namespace}]")
        self.namespace = namespace


class BadInput(ResourceError):
    status_code = 400


class InvalidNamespace(BadInput):
    def __init__(self, namespace: object) -> None:
        super().__init__(f"invalid namespace: {namespace!r}")
        self.namespace = namespace
