class QueryValidationError(ValueError):
    """Request parameters are well-formed but cannot produce a query."""


class StoreError(Exception):
    """Failure talking to or querying the database."""
