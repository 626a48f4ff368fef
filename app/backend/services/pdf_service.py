"""
PDF processing service using pdfplumber.

Handles extraction of plain text from PDF documents for AI processing.
"""

import base64
import binascii
import io
import logging

import pdfplumber

logger = logging.getLogger(__name__)

# Leading bytes (BOM, mail wrappers) before the header are tolerated.
HEADER_SEARCH_WINDOW = 1024


class PDFExtractionError(Exception):
    """Raised when PDF text extraction fails."""

    pass


def decode_pdf_data(pdf_data: str) -> bytes:
    """
    Decode a base64 PDF payload into raw bytes.

    Accepts plain base64 or a ``data:...;base64,`` URL as produced by
    browsers.

    Raises:
        PDFExtractionError: If the payload is not valid base64.
    """
    if pdf_data.startswith("data:") and "," in pdf_data:
        pdf_data = pdf_data.split(",", 1)[1]

    try:
        return base64.b64decode(pdf_data)
    except (binascii.Error, ValueError) as e:
        raise PDFExtractionError(f"Invalid base64 PDF data: {e}") from e


class PDFService:
    """
    Service for PDF processing operations.

    Uses pdfplumber (backed by pdfminer.six) to pull the text layer
    out of every page.
    """

    def __init__(self, page_separator: str = "\n"):
        """
        Initialize the PDF service.

        Args:
            page_separator: String appended after each page's text.
        """
        self.page_separator = page_separator

    def _validate(self, pdf_bytes: bytes) -> None:
        if not pdf_bytes:
            raise PDFExtractionError("Empty PDF file provided")

        if b"%PDF" not in pdf_bytes[:HEADER_SEARCH_WINDOW]:
            raise PDFExtractionError(
                "Invalid PDF file: no PDF header in the first %d bytes"
                % HEADER_SEARCH_WINDOW
            )

    def extract_text(self, pdf_bytes: bytes) -> str:
        """
        Extract the plain text of all pages.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            The concatenated page texts, each followed by the page separator.
            Pages without a text layer contribute nothing.

        Raises:
            PDFExtractionError: If the input is not a PDF or parsing fails.
        """
        self._validate(pdf_bytes)

        try:
            logger.info("Extracting text from PDF (%d bytes)", len(pdf_bytes))

            parts: list[str] = []
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                for page in pdf.pages:
                    text = page.extract_text()
                    if text:
                        parts.append(text + self.page_separator)

            full_text = "".join(parts)
            logger.info(
                "Extracted %d characters from %d page(s) with text",
                len(full_text),
                len(parts),
            )
            return full_text

        except Exception as e:
            logger.exception("Unexpected error during PDF text extraction")
            raise PDFExtractionError(f"PDF text extraction failed: {e}") from e


# Singleton instance for convenience
_pdf_service: PDFService | None = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service singleton."""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
