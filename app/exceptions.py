class LoginRequired(Exception):
    """Anonymous request to a server-rendered admin page."""

    def __init__(self, next_path: str = "/admin/dashboard"):
        self.next_path = next_path
        super().__init__("Authentication required")


class AccessDenied(Exception):
    """Authenticated principal lacks the role a rendered page requires."""

    def __init__(self, message: str = "You do not have permission to access this page"):
        self.message = message
        super().__init__(message)


class RateLimitExceeded(Exception):
    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry in {retry_after}s")
