class GatewayError(Exception):
    """Base class for database gateway failures"""


class ConnectionFailure(GatewayError):
    """Raised when the database cannot be reached or prepared at startup"""

    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    AUTH = "auth"
    SCHEMA = "schema"

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)


class SchemaError(ConnectionFailure):
    """Raised when the visitor counter table cannot be bootstrapped"""

    def __init__(self, detail: str = ""):
        super().__init__(ConnectionFailure.SCHEMA, detail)


class QueryFailure(GatewayError):
    """Raised when the counter increment query fails"""
