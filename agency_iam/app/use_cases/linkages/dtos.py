"""
Linkage Use Case DTOs (Data Transfer Objects)

Response classes for the linkage domain. Built inside the unit of work
so nothing lazy-loads after the session closes.
"""

from typing import List, Optional

from pydantic import BaseModel

from agency_iam.domain.entities import Linkage


class LinkageResponse(BaseModel):
    """A linkage as returned to callers"""

    id: str
    tenant_id: str
    subject_id: str
    target_id: str
    descriptor: str
    status: str
    document_name: Optional[str] = None
    has_document: bool = False
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, linkage: Linkage) -> "LinkageResponse":
        return cls(
            id=str(linkage.id),
            tenant_id=str(linkage.tenant_id),
            subject_id=str(linkage.subject_id),
            target_id=str(linkage.target_id),
            descriptor=linkage.descriptor,
            status=linkage.status.value,
            document_name=linkage.document_name,
            has_document=linkage.document_ref is not None,
            created_at=linkage.created_at.isoformat(),
            updated_at=linkage.updated_at.isoformat(),
        )


class LinkageResult(BaseModel):
    """Outcome of find-or-create: the linkage and whether it already existed"""

    linkage: LinkageResponse
    reused: bool


class LinkageListResponse(BaseModel):
    linkages: List[LinkageResponse]


class LinkageDocumentResponse(BaseModel):
    """Storage locator of the document attached to a linkage"""

    linkage_id: str
    document_ref: str
    document_name: Optional[str] = None
