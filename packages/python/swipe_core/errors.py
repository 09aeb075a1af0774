class DomainError(Exception):
    code: str = "domain_error"

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message or self.__class__.__name__)
        if code: self.code = code

class ConfigError(DomainError):
    code = "invalid_config"

class MissingConfig(ConfigError):
    code = "missing_config"
