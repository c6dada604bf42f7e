class CatalogError(Exception):
    """Base class for failures a page controller turns into a flash message."""


class RequestError(CatalogError):
    """Wrong method or a missing / malformed request parameter."""


class NotFoundError(CatalogError):
    pass


class ValidationFailed(CatalogError):
    def __init__(self, errors: dict, message: str = "Validation failed."):
        super().__init__(message)
        self.errors = errors


class PersistenceError(CatalogError):
    pass


class UploadError(CatalogError):
    pass
