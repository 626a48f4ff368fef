"""
Router for the product extraction endpoint.

Handles:
- Base64 PDF submission and conversion into an indexed product table
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from ..models import ErrorResponse, ExtractionRequest, IndexedProductRow
from ..services.ai import AIService, get_ai_service, index_rows
from ..services.pdf_service import PDFService, decode_pdf_data, get_pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["extract"])


@router.post(
    "/extract",
    response_model=list[IndexedProductRow],
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def extract_products(
    body: ExtractionRequest,
    pdf_service: Annotated[PDFService, Depends(get_pdf_service)],
    ai_service: Annotated[AIService, Depends(get_ai_service)],
) -> list[IndexedProductRow]:
    """
    Extract the product table from a base64-encoded PDF.

    Decodes the PDF, extracts its text, asks Gemini for the rows and
    numbers them from 1. Any failure after validation is reported as
    500 with the underlying message.
    """
    if not body.pdf_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No PDF data was provided.",
        )

    try:
        pdf_bytes = decode_pdf_data(body.pdf_data)
        logger.info("Processing PDF (%d bytes)", len(pdf_bytes))

        pdf_text = await run_in_threadpool(pdf_service.extract_text, pdf_bytes)
        rows = await ai_service.extract_product_rows(
            pdf_text, body.additional_prompt
        )
        indexed = index_rows(rows)

    except Exception as e:
        logger.exception("Product extraction failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    logger.info("Returning %d indexed row(s)", len(indexed))
    return indexed
