"""
Pydantic models for the PDF product extraction endpoint.

Defines the request body, the product rows returned by the AI,
and the indexed rows sent back to the client.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Column keys in the order the AI is asked to return them.
PRODUCT_FIELDS: tuple[str, ...] = (
    "produto",
    "descricao",
    "um",
    "quantidade",
    "precoVenda",
    "total",
)


class ExtractionRequest(BaseModel):
    """
    Body of POST /api/extract.

    Attributes:
        pdf_data: Base64-encoded PDF bytes (``pdfData`` on the wire).
        additional_prompt: Optional free-text instruction for the AI
            (``additionalPrompt`` on the wire).
    """

    model_config = ConfigDict(populate_by_name=True)

    pdf_data: str | None = Field(
        default=None,
        alias="pdfData",
        description="Base64-encoded PDF content",
    )
    additional_prompt: str | None = Field(
        default=None,
        alias="additionalPrompt",
        description="Extra instructions appended to the extraction prompt",
        examples=["only rows with quantity > 0"],
    )


class ProductRow(BaseModel):
    """
    One line item extracted by the AI.

    Missing or null values become empty strings and other scalars are
    kept as their JSON text, so a loosely-shaped reply still yields a
    complete row.
    """

    produto: str = Field(default="", description="Product code")
    descricao: str = Field(default="", description="Full product description")
    um: str = Field(default="", description="Unit of measure")
    quantidade: str = Field(default="", description="Quantity")
    precoVenda: str = Field(default="", description="Unit sale price")
    total: str = Field(default="", description="Line total")

    @field_validator(*PRODUCT_FIELDS, mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Render null as '' and numbers and booleans as JSON text."""
        if v is None:
            return ""
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (int, float)):
            return str(v)
        return v


class IndexedProductRow(BaseModel):
    """A ProductRow prefixed with its 1-based position in the table."""

    item: str = Field(..., description="1-based row number", examples=["1"])
    produto: str = ""
    descricao: str = ""
    um: str = ""
    quantidade: str = ""
    precoVenda: str = ""
    total: str = ""

    @classmethod
    def from_row(cls, index: int, row: ProductRow) -> "IndexedProductRow":
        """Build the indexed row for the zero-based ``index``."""
        return cls(item=str(index + 1), **row.model_dump())


class ErrorResponse(BaseModel):
    """The single error shape returned by the API."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    message: str = Field(default="")
    version: str = Field(default="1.0.0")
