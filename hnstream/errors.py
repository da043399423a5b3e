class ConfigurationError(ValueError):
    """Invalid argument passed to the stream factory."""


class FatalFetchError(RuntimeError):
    """The story id list could not be fetched."""

    def __init__(self, url: str, status_code: int | None = None, message: str = "No data"):
        super().__init__(f"{message}: {url}" + (f" ({status_code})" if status_code else ""))
        self.url = url
        self.status_code = status_code
