class ClusterOpsError(Exception):
    """Base exception for clusterops errors"""
    def __init__(self, msg: str):
        self.msg = msg

    def __str__(self):
        return self.msg


class InvalidArgumentError(ClusterOpsError, ValueError):
    """Raised when a required argument is missing, empty or out of range"""
    def __init__(self, argument: str, msg: str | None = None):
        self.argument = argument
        super().__init__(msg or f"Argument '{argument}' is required and must not be empty")


class MalformedKeyError(ClusterOpsError, ValueError):
    """Raised when a wire string can not be parsed"""
    def __init__(self, key: str | None, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed key {key!r}: {reason}")


class ConfigError(ClusterOpsError):
    pass


class ConfigNotFoundError(ConfigError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Config file '{path}' not found")
