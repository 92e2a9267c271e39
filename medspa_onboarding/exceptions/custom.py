class ConfigurationError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EmptyInputError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RemoteServiceError(Exception):
    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.service = service
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(f"{service} error: {message}")


class RateLimitError(RemoteServiceError):
    def __init__(self, service: str, body: str | None = None):
        super().__init__(service, f"Rate limit exceeded for {service}", status_code=429, body=body)


class JobFailedError(Exception):
    def __init__(self, message: str, job_id: str | None = None):
        self.message = message
        self.job_id = job_id
        super().__init__(f"Crawl job failed: {message}")


class CrawlTimeoutError(TimeoutError):
    def __init__(self, attempts: int, elapsed_seconds: float):
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"Crawl job timed out after {elapsed_seconds:.0f}s ({attempts} attempts)"
        )


class EmptyResultError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParseError(Exception):
    def __init__(self, message: str, raw_text: str | None = None):
        self.message = message
        self.raw_text = raw_text
        super().__init__(message)
