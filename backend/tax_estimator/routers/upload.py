"""
Document upload endpoints.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, UploadFile, File, HTTPException, status, Request

from tax_estimator.models.document import UploadedDocument, UploadResponse
from tax_estimator.services.tax_engine import utc_timestamp
from tax_estimator.utils.validators import validate_upload_files


logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@router.post("/upload-documents", response_model=UploadResponse)
async def upload_documents(
    request: Request,
    documents: Optional[List[UploadFile]] = File(None)
):
    """
    Accept supporting documents and report their metadata.

    Files are validated and described, then discarded; no tax is computed.

    Args:
        request: FastAPI request object (to access app state)
        documents: Files uploaded under the "documents" field

    Returns:
        Upload confirmation with one descriptor per file

    Raises:
        HTTPException: If no documents are supplied or a file is rejected
    """
    audit_logger = request.app.state.audit_logger
    ip_address = request.client.host if request.client else None

    try:
        if not documents:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No documents uploaded"
            )

        descriptors = await validate_upload_files(documents)
        upload_date = utc_timestamp()

        files = [
            UploadedDocument(**descriptor.model_dump(), uploadDate=upload_date)
            for descriptor in descriptors
        ]

        logger.info(f"Received {len(files)} document(s)")
        if audit_logger:
            audit_logger.log_documents_uploaded(
                filenames=[f.filename for f in files],
                total_size=sum(f.size for f in files),
                ip_address=ip_address
            )

        return UploadResponse(
            message="Documents uploaded successfully",
            files=files
        )

    except HTTPException as e:
        if audit_logger:
            audit_logger.log_upload_rejected(reason=str(e.detail), ip_address=ip_address)
        raise
    except Exception as e:
        logger.error(f"Document upload error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Error uploading documents",
                "message": str(e)
            }
        )
