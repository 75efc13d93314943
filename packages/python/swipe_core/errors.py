class DomainError(Exception):
    code: str = "domain_error"

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message or self.__class__.__name__)
        if code:
            self.code = code


class ValidationError(DomainError):
    """A catalog item or interaction is missing fields or carries bad values."""

    code = "validation_error"


class ConfigurationError(DomainError):
    code = "configuration_error"


class CatalogError(DomainError):
    """The upstream movie catalog (TMDB) failed to answer a request."""

    code = "catalog_error"

    def __init__(self, message: str = "", *, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status
