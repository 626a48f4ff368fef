"""
PDF Product Extraction Backend Application.

A FastAPI service that reads the product table out of a PDF
using pdfplumber and Google Gemini.
"""

__version__ = "1.0.0"
