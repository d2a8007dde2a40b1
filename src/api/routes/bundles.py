"""
Bundle endpoints.

Manual trigger for a bundle rebuild, plus read access to the stored
snapshot. Unlike the storage notification path, failures here surface
to the caller as HTTP errors.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ...core.library.bundle import BundleNotFoundError
from ...infrastructure.storage.client import StorageError
from ..dependencies import BundleBuilderDep

logger = logging.getLogger(__name__)

router = APIRouter()


class GenerateBundleResponse(BaseModel):
    """Response after a manual rebuild."""
    bundle_path: str = Field(description="Storage path of the written bundle.json")
    message: str = Field(description="Status message")


@router.api_route(
    "/generate",
    methods=["GET", "POST"],
    response_model=GenerateBundleResponse,
    status_code=status.HTTP_200_OK,
    summary="Rebuild a bundle",
    description="Recompute bundles/<clinic>/<department>/bundle.json from the current object listing",
)
async def generate_bundle(
    builder: BundleBuilderDep,
    clinic: Optional[str] = None,
    department: Optional[str] = None,
) -> GenerateBundleResponse:
    """
    Rebuild the bundle of one namespace on demand.

    Both query parameters are required; a blank value counts as missing.
    """
    clinic = clinic or ""
    department = department or ""

    if not clinic.strip() or not department.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing clinic or department parameters."
        )

    logger.info(
        f"[HTTP] Generating bundle for {clinic}/{department}",
        extra={"clinic": clinic, "department": department}
    )

    try:
        path = await builder.build(clinic, department)
    except StorageError as e:
        logger.error(
            "[HTTP] Error generating bundle",
            extra={"clinic": clinic, "department": department, "error": str(e)},
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error generating bundle.json"
        )

    return GenerateBundleResponse(
        bundle_path=path,
        message=f"bundle.json created at {path}",
    )


@router.get(
    "/{clinic}/{department}",
    status_code=status.HTTP_200_OK,
    summary="Get a bundle",
    description="Return the stored bundle.json of a namespace",
)
async def get_bundle(
    clinic: str,
    department: str,
    builder: BundleBuilderDep,
) -> dict[str, Any]:
    """Return the last written snapshot as-is."""
    try:
        return await builder.load(clinic, department)
    except BundleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No bundle for {clinic}/{department}"
        )
    except StorageError as e:
        logger.error(
            "Failed to read bundle",
            extra={"clinic": clinic, "department": department, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error reading bundle.json"
        )
