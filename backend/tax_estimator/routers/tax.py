"""
Tax calculation endpoints.
"""

import logging
from typing import List, Tuple
from fastapi import APIRouter, HTTPException, Request, status
from starlette.datastructures import UploadFile

from tax_estimator.exceptions import ValidationError
from tax_estimator.models.document import UploadedDocumentDescriptor
from tax_estimator.models.tax import TaxCalculationRequest, TaxResult
from tax_estimator.utils.validators import validate_upload_files


logger = logging.getLogger(__name__)

router = APIRouter(tags=["tax"])

DOCUMENTS_FIELD = "documents"


async def read_form_files(request: Request) -> Tuple[dict, List[UploadFile]]:
    """
    Split a request body into plain fields and attached documents.

    JSON bodies carry fields only; multipart and urlencoded bodies may also
    carry files under the "documents" field.

    Args:
        request: FastAPI request object

    Returns:
        Tuple of (fields, files)

    Raises:
        HTTPException: If the body cannot be parsed
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body is not valid JSON"
            )
        if not isinstance(payload, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body must be a JSON object"
            )
        return payload, []

    form = await request.form()
    fields = {
        key: value for key, value in form.multi_items()
        if not isinstance(value, UploadFile)
    }
    files = [
        value for value in form.getlist(DOCUMENTS_FIELD)
        if isinstance(value, UploadFile)
    ]
    return fields, files


@router.post("/calculate-tax", response_model=TaxResult)
async def calculate_tax(request: Request):
    """
    Estimate federal tax and the refund or amount owed.

    Accepts either a JSON object or a form submission with optional
    documents attached.

    Args:
        request: FastAPI request object (to access app state)

    Returns:
        TaxResult serialized with camelCase keys

    Raises:
        HTTPException: 400 if required fields are missing or a document is
            rejected, 500 if the calculation fails unexpectedly
    """
    tax_engine = request.app.state.tax_engine
    audit_logger = request.app.state.audit_logger
    ip_address = request.client.host if request.client else None

    try:
        fields, files = await read_form_files(request)
        documents: List[UploadedDocumentDescriptor] = await validate_upload_files(files)

        calculation_request = TaxCalculationRequest.model_validate(fields)
        result = tax_engine.estimate(calculation_request, documents)

        if audit_logger:
            audit_logger.log_tax_calculated(
                filing_status=result.filing_status,
                total_gross_income=result.income.total_gross_income,
                refund_type=result.refund_or_owed.type,
                amount=result.refund_or_owed.amount,
                document_count=len(documents),
                ip_address=ip_address
            )

        return result

    except ValidationError as e:
        logger.info(f"Rejected tax calculation, missing: {', '.join(e.missing_fields)}")
        if audit_logger:
            audit_logger.log_validation_failed(e.missing_fields, ip_address=ip_address)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(e)}
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Tax calculation error: {str(e)}")
        if audit_logger:
            audit_logger.log_calculation_failed(str(e), ip_address=ip_address)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error during tax calculation",
                "message": str(e)
            }
        )
