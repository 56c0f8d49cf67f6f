"""
Principal Use Cases

Self-service and tenant-admin operations on principals.
"""

from .delete_principal_use_case import DeletePrincipalResponse, DeletePrincipalUseCase
from .dtos import (
    ContextInfo,
    MeResponse,
    PrincipalListResponse,
    PrincipalPatch,
    PrincipalResponse,
    TenantSummary,
)
from .get_me_use_case import GetMeUseCase
from .get_principal_use_case import GetPrincipalUseCase, ListPrincipalsUseCase
from .update_principal_use_case import UpdatePrincipalUseCase

__all__ = [
    "GetMeUseCase",
    "GetPrincipalUseCase",
    "ListPrincipalsUseCase",
    "UpdatePrincipalUseCase",
    "DeletePrincipalUseCase",
    "PrincipalPatch",
    "PrincipalResponse",
    "PrincipalListResponse",
    "MeResponse",
    "TenantSummary",
    "ContextInfo",
    "DeletePrincipalResponse",
]
