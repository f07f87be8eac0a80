"""Prompt templates for manifest normalization and HS code lookups."""

import json

CANONICAL_COLUMNS: tuple[str, ...] = (
    "item_no",
    "description",
    "hs_code",
    "quantity",
    "unit",
    "unit_price",
    "total_price",
    "weight",
    "volume",
    "country_of_origin",
    "bl_number",
)

EXAMPLE_ITEM = {
    "item_no": 1,
    "description": "Sample goods",
    "hs_code": "8421290000",
    "quantity": 100,
    "unit": "PCS",
    "unit_price": 50.0,
    "total_price": 5000.0,
    "weight": 250.5,
    "volume": 1.5,
    "country_of_origin": "Indonesia",
    "bl_number": None,
}

NORMALIZATION_PROMPT_TEMPLATE = """You clean and structure cargo manifest data.

YOUR TASK:
1. Take the raw CSV data below
2. Normalize it to the standard columns listed
3. Keep exactly one output object per data row of the CSV; do not merge, split, drop or invent rows
4. Derive item_no from row order (if missing, number sequentially from 1)
5. Fill every standard column (use null or an empty string when a value is missing)
6. Split combined values (for example name + address + tax ID in one column) into the matching columns
7. Clean whitespace, invalid characters and inconsistent formatting

STANDARD COLUMNS:
{columns}
{instruction_block}
RAW CSV DATA:
{table}

OUTPUT RULES:
- The response MUST be a bare JSON array
- Each element is an object with exactly the standard columns above
- item_no must be a number and sequential
- quantity, unit_price, total_price, weight and volume must be numbers
- Strings must be trimmed
- Do NOT use markdown code blocks or any formatting
- Do NOT add explanations or any text outside the JSON

EXAMPLE OUTPUT:
{example}

Your output (JSON array only):"""

HS_LOOKUP_PROMPT_TEMPLATE = """What is the 10-digit HS tariff code for: {description}

CRITICAL: Reply with ONLY the 10-digit number. No text, no explanation, just numbers.
Example correct format: 8421290000"""

HS_BATCH_PROMPT_TEMPLATE = """Generate 10-digit HS tariff codes for these products (Indonesia format).

Products:
{products}

CRITICAL OUTPUT - Reply ONLY with a valid JSON array, no explanation:
[
  {{"index": 1, "hs_code": "8421290000"}},
  {{"index": 2, "hs_code": "8409991000"}}
]

Rules:
- One entry per product, "index" is the product number above
- Exactly 10 digits
- Valid HS code structure
- NO text outside JSON"""


def build_normalization_prompt(
    schema: "list[str] | tuple[str, ...]",
    raw_table: str,
    user_instruction: str | None = None,
) -> str:
    """Assemble the normalization prompt. Same inputs always give the same prompt."""
    columns = ", ".join(schema) if schema else ", ".join(CANONICAL_COLUMNS)
    instruction = (user_instruction or "").strip()
    instruction_block = f"\nADDITIONAL USER INSTRUCTIONS:\n{instruction}\n" if instruction else ""

    return NORMALIZATION_PROMPT_TEMPLATE.format(
        columns=columns,
        instruction_block=instruction_block,
        table=raw_table,
        example=json.dumps([EXAMPLE_ITEM], indent=2),
    )


def build_hs_lookup_prompt(description: str, max_chars: int = 80) -> str:
    return HS_LOOKUP_PROMPT_TEMPLATE.format(description=description.strip()[:max_chars].strip())


def build_hs_batch_prompt(descriptions: list[str], max_chars: int = 100) -> str:
    products = "\n".join(
        f"{i}. {desc.strip()[:max_chars].strip()}" for i, desc in enumerate(descriptions, start=1)
    )
    return HS_BATCH_PROMPT_TEMPLATE.format(products=products)
