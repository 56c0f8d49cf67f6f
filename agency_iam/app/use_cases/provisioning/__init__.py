"""
Provisioning Use Cases

Tenant and principal lifecycle on the privileged path. Callers must hand
these use cases a provisioning unit of work.
"""

from .dtos import (
    ProvisionPrincipalCommand,
    ProvisionTenantCommand,
    PurgeTenantResponse,
    TenantSettingsPatch,
)
from .provision_principal_use_case import ProvisionPrincipalUseCase
from .provision_tenant_use_case import ProvisionTenantUseCase
from .purge_tenant_use_case import PurgeTenantUseCase
from .update_tenant_settings_use_case import UpdateTenantSettingsUseCase

__all__ = [
    "ProvisionTenantUseCase",
    "UpdateTenantSettingsUseCase",
    "ProvisionPrincipalUseCase",
    "PurgeTenantUseCase",
    "ProvisionTenantCommand",
    "TenantSettingsPatch",
    "ProvisionPrincipalCommand",
    "PurgeTenantResponse",
]
