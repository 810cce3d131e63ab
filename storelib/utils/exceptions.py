__all__ = ["StoreException", "StorageError", "StorageReadError", "StorageWriteError", "ValidationException",
           "InvalidOrderStatus", "MalformedDocument", "StorageConfigurationError"]


class StoreException(Exception):
    pass


# Storage medium exceptions
class StorageError(StoreException):
    LEVEL = 'error'


class StorageReadError(StorageError):
    LEVEL = 'warning'


class StorageWriteError(StorageError):
    LEVEL = 'error'


class StorageConfigurationError(StoreException):
    pass


# Validations exceptions
class ValidationException(StoreException):
    LEVEL = 'warning'


class InvalidOrderStatus(ValidationException):
    pass


class MalformedDocument(ValidationException):
    pass
