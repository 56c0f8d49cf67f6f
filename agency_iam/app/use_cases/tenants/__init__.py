"""
Tenant Use Cases

Tenant reads for ordinary principals. Tenant writes live in provisioning.
"""

from .dtos import TenantResponse
from .get_tenant_use_case import GetTenantUseCase

__all__ = [
    "GetTenantUseCase",
    "TenantResponse",
]
