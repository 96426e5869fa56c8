class BackendError(Exception):
    """Raised when backend API computation fails in a controlled way."""
    pass


class CatalogError(BackendError):
    """Catalog file unreadable, invalid, or rejected by the audit."""
    pass
