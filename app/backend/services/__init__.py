"""
Services package for PDF product extraction.

Contains:
- pdf_service: PDF text extraction utilities
- ai: Gemini integration for product table extraction
"""

from .ai import AIService
from .pdf_service import PDFService

__all__ = ["PDFService", "AIService"]
