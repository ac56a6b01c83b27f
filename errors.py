class CacheSimError(Exception):
    pass

class ConfigurationError(CacheSimError):
    """
    Raised when a cache or address decoder is built with invalid parameters.
    No partially built object is ever returned.
    """

class MalformedRecordError(CacheSimError):
    """
    Raised when a trace record has an operation other than R or W.
    The whole run is aborted and its statistics are not valid.
    """

    def __init__(self, record_number: int, line: str):
        self.record_number = record_number
        self.line = line
        super().__init__(f"{record_number}: ERROR!!!! malformed trace record {line!r}")

class UnknownOperationError(CacheSimError):
    """
    Raised when the cache is asked to perform something other than a read or a write.
    """
