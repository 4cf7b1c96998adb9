from .base import AppError, DomainError, InfrastructureError, StoreUnavailableError, ValidationError
from .validation import raise_validation_error

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "StoreUnavailableError",
    "ValidationError",
    "raise_validation_error",
]
