class MemKVException(Exception):
    """Base class for all errors raised at the HTTP boundary."""
    status_code = 500

class MissingParameterError(MemKVException):
    """Raised when a request lacks the key (or value) it needs."""
    status_code = 400

    def __init__(self, message="Key or value not provided"):
        super().__init__(message)

class InvalidPayloadError(MemKVException):
    """Raised when a POST body cannot be decoded as a JSON object."""
    status_code = 400

    def __init__(self, message="Failed to decode JSON data"):
        super().__init__(message)

class KeyNotFoundError(MemKVException):
    """For GET, DELETE"""
    status_code = 404

    def __init__(self, key: str):
        self.key = key
        super().__init__("Key not found")

class SerializationError(MemKVException):
    """Raised when a value or response cannot be encoded as JSON."""
    status_code = 500

    def __init__(self, message="Failed to encode JSON"):
        super().__init__(message)
