"""Back-office provisioning key.

Tenant and principal provisioning, plus the tenant purge, are driven by the
back office rather than by a principal. Those routes carry a shared key in
``X-Admin-API-Key`` instead of an identity token, and the use cases behind
them run on privileged sessions.
"""

import hmac
import logging
from typing import Optional

from fastapi import Header, status

from agency_iam.api.error import ClientError
from agency_iam.libs.result import Error
from config import ApplicationConfig

logger = logging.getLogger(__name__)


def _unauthorized(code: str, message: str) -> ClientError:
    return ClientError(Error(code, message), status_code=status.HTTP_401_UNAUTHORIZED)


async def require_provisioning_key(
    x_admin_api_key: Optional[str] = Header(None),
) -> bool:
    """Reject back-office calls without the configured provisioning key"""
    if not x_admin_api_key:
        raise _unauthorized("UNAUTHORIZED", "Admin API key required")

    # Constant-time compare
    if not hmac.compare_digest(
        x_admin_api_key.encode(), ApplicationConfig.ADMIN_API_KEY.encode()
    ):
        logger.warning("Provisioning call rejected: key mismatch")
        raise _unauthorized("INVALID_API_KEY", "Invalid admin API key")

    return True
