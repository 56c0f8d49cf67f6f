from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
from agency_iam.app.errors import DatastoreUnavailable, PolicyViolation, denied, unavailable
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_policy_violation(request: Request, exc: PolicyViolation):
    error = denied(exc.reason)
    logger.warning(f"Policy violation outside use case: {exc}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": {"code": error.code, "message": error.message}},
    )


async def handle_datastore_unavailable(request: Request, exc: DatastoreUnavailable):
    error = unavailable()
    logger.error(f"Datastore unavailable: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": {"code": error.code, "message": error.message}},
    )


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Agency IAM", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from agency_iam.api.routes import (
        admin,
        audit,
        health_check,
        linkages,
        principals,
        tenant,
    )

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(principals.router, prefix=prefix, tags=["Principals"])
    app.include_router(tenant.router, prefix=prefix, tags=["Tenant"])
    app.include_router(linkages.router, prefix=prefix, tags=["Linkages"])
    app.include_router(audit.router, prefix=prefix, tags=["Audit"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(PolicyViolation, handle_policy_violation)
    app.add_exception_handler(DatastoreUnavailable, handle_datastore_unavailable)

    return app
