class SwapException(Exception):
    pass


class ConfigurationError(SwapException):
    pass


class InvalidCurrencyError(SwapException):
    pass


class SourceUnavailableError(SwapException):
    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f'{source}: {message}')


class CacheError(SwapException):
    pass
