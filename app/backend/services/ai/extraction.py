"""
Product table extraction from PDF text.

Sends the extracted text to Gemini (through its OpenAI-compatible
endpoint) with a JSON schema constraint and turns the reply into
ProductRow objects.
"""

import json
import logging
from typing import Any

from openai import APIError, APIStatusError
from pydantic import ValidationError

from ...models import PRODUCT_FIELDS, IndexedProductRow, ProductRow

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when the Gemini call fails or its reply cannot be used."""

    pass


# =============================================================================
# Prompt and Response Format
# =============================================================================

ROW_EXAMPLE = json.dumps({field: "string" for field in PRODUCT_FIELDS}, indent=2)

# Gemini honours propertyOrdering; the remaining keys are plain JSON Schema.
PRODUCT_ROWS_RESPONSE_FORMAT: dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "product_rows",
        "schema": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {field: {"type": "string"} for field in PRODUCT_FIELDS},
                "required": list(PRODUCT_FIELDS),
                "propertyOrdering": list(PRODUCT_FIELDS),
            },
        },
    },
}


def build_extraction_prompt(pdf_text: str, additional_prompt: str | None = None) -> str:
    """
    Build the extraction prompt.

    The user's instructions are only included when non-empty; the PDF
    text is embedded verbatim.
    """
    instructions = ""
    if additional_prompt:
        instructions = f"\n## Additional instructions from the user:\n{additional_prompt}\n"

    return f"""Extract the product data from the text below and format it as a spreadsheet with the following columns:
- Produto: the product code.
- Descricao: the full product description.
- UM: the unit of measure.
- Quantidade: the quantity.
- Preco Venda: the sale price.
- Total: the total price.
{instructions}
## PDF TEXT:
"{pdf_text}"

The response must be a JSON array of objects, where each object is one row of the table, with the structure:
{ROW_EXAMPLE}"""


# =============================================================================
# Response Handling
# =============================================================================


def parse_product_rows(content: str) -> list[ProductRow]:
    """
    Parse the model's JSON text into product rows.

    Raises:
        AIServiceError: If the text is not a JSON array of objects.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse extraction response: %s", content[:500])
        raise AIServiceError(f"Invalid JSON in extraction response: {e}") from e

    if not isinstance(data, list):
        raise AIServiceError(
            f"Expected a JSON array of rows, got {type(data).__name__}"
        )

    rows: list[ProductRow] = []
    for position, raw in enumerate(data, start=1):
        if not isinstance(raw, dict):
            raise AIServiceError(
                f"Row {position} is not a JSON object: {raw!r}"
            )
        try:
            rows.append(ProductRow.model_validate(raw))
        except ValidationError as e:
            raise AIServiceError(f"Row {position} is malformed: {e}") from e
    return rows


def index_rows(rows: list[ProductRow]) -> list[IndexedProductRow]:
    """Number the rows from 1, keeping every other field unchanged."""
    return [IndexedProductRow.from_row(i, row) for i, row in enumerate(rows)]


# =============================================================================
# Main Extraction Function
# =============================================================================


async def extract_product_rows(
    pdf_text: str,
    additional_prompt: str | None,
    client: Any,  # AsyncOpenAI client
    model: str,
) -> list[ProductRow]:
    """
    Ask Gemini for the product table contained in ``pdf_text``.

    Args:
        pdf_text: Plain text extracted from the PDF.
        additional_prompt: Optional user instructions.
        client: AsyncOpenAI client configured for Gemini.
        model: Model name to use.

    Returns:
        The rows in the order the model returned them.

    Raises:
        AIServiceError: On a non-2xx status, a transport failure or an
            unusable reply.
    """
    prompt = build_extraction_prompt(pdf_text, additional_prompt)
    logger.info(
        "Requesting product rows from %s (prompt: %d chars)", model, len(prompt)
    )

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            response_format=PRODUCT_ROWS_RESPONSE_FORMAT,
        )
    except APIStatusError as e:
        logger.error("Gemini returned HTTP %d", e.status_code)
        raise AIServiceError(
            f"Gemini API error: {e.status_code} - {e.response.text}"
        ) from e
    except APIError as e:
        logger.error("Gemini request failed: %s", e)
        raise AIServiceError(f"Gemini API request failed: {e}") from e

    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise AIServiceError(f"Unexpected response envelope from Gemini: {e}") from e

    if not content:
        raise AIServiceError("Empty response from Gemini")

    rows = parse_product_rows(content)
    logger.info("Gemini returned %d product row(s)", len(rows))
    return rows
