class PlacesError(Exception):
    def __init__(
        self,
        message: str,
        reason: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.reason = reason
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(Exception):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Rate limit exceeded for {service}")
