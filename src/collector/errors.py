from __future__ import annotations


class CountriesError(Exception):
    pass


class InvalidURLError(CountriesError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url}")
        self.url = url


class TransportFailureError(CountriesError):
    def __init__(self, cause: BaseException) -> None:
        # Timeouts and some connect errors stringify to "".
        super().__init__(f"Network error: {str(cause) or type(cause).__name__}")
        self.cause = cause


class InvalidDataError(CountriesError):
    def __init__(self, message: str = "Received invalid data") -> None:
        super().__init__(message)


class DecodingFailureError(CountriesError):
    def __init__(self, message: str = "Failed to decode response") -> None:
        super().__init__(message)


class EmptyResponseError(CountriesError):
    def __init__(self, message: str = "Received empty response") -> None:
        super().__init__(message)
