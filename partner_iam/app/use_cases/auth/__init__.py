"""
Authentication Use Cases

Session login and credential recovery.
"""

from .login_use_case import LoginUseCase
from .confirm_recovery_use_case import ConfirmRecoveryUseCase
from .dtos import LoginResponse, ConfirmRecoveryResponse

__all__ = [
    "LoginUseCase",
    "ConfirmRecoveryUseCase",
    "LoginResponse",
    "ConfirmRecoveryResponse",
]
