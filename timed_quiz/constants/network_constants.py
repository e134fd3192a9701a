"""Network configuration constants for the quiz service."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3000
API_PREFIX: str = "/api"
ADMIN_TOKEN_HEADER: str = "x-admin-token"
DEFAULT_ADMIN_TOKEN: str = "change-me-admin-token"
