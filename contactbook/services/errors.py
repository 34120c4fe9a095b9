class StoreError(RuntimeError):
    """Failure reported by the backing database, carrying the driver's message."""


class StoreConnectionError(StoreError, ConnectionError):
    """The connection could not be opened, or the held one is no longer usable."""


class SchemaError(StoreError):
    pass


class NotFoundError(StoreError, LookupError):
    """An id-keyed update or delete matched no rows."""
