"""
Linkage Use Cases

Reconciler and tenant-scoped linkage operations.
"""

from .dtos import (
    LinkageDocumentResponse,
    LinkageListResponse,
    LinkageResponse,
    LinkageResult,
)
from .find_or_create_linkage_use_case import FindOrCreateLinkageUseCase
from .get_linkage_use_case import GetLinkageUseCase
from .linkage_document_use_cases import (
    AttachLinkageDocumentUseCase,
    GetLinkageDocumentUseCase,
)
from .list_linkages_use_case import ListLinkagesUseCase
from .update_linkage_status_use_case import UpdateLinkageStatusUseCase

__all__ = [
    "FindOrCreateLinkageUseCase",
    "UpdateLinkageStatusUseCase",
    "GetLinkageUseCase",
    "ListLinkagesUseCase",
    "AttachLinkageDocumentUseCase",
    "GetLinkageDocumentUseCase",
    "LinkageResponse",
    "LinkageResult",
    "LinkageListResponse",
    "LinkageDocumentResponse",
]
