"""Exceptions raised by the PHIVOLCS scrapers and API."""


class PhivolcsError(Exception):
    """Base class for all errors raised by this service."""


class FetchError(PhivolcsError):
    """The upstream page could not be retrieved or was not HTML."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class MissingParameterError(PhivolcsError):
    """A required query parameter was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing {name} parameter")


class InvalidParameterError(PhivolcsError):
    """An optional query parameter has a value that cannot be used."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name} parameter: {value!r}")
