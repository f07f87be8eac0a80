import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from manifestpro.manifest.hs_normalize import normalize_hs_code


def coerce_number(value: object) -> float:
    """Parse spreadsheet/model numbers, tolerating "1.234,50" and "1,234.50"."""
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"expected a number, got {type(value).__name__}")
    text = value.strip()
    if "," in text and text.rfind(",") > text.rfind("."):
        text = text.replace(".", "").replace(",", ".")
    else:
        text = text.replace(",", "")
    match = re.search(r"-?\d+(?:\.\d+)?", text)
    return float(match.group()) if match else 0.0


class ManifestLineItem(BaseModel):
    """One row of cargo in the canonical manifest schema."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    item_no: int = Field(0, description="Sequential line number, 1-based after sequencing")
    description: str = Field(..., description="Goods description")
    hs_code: str = Field("", description="HS tariff code: empty or 6-10 digits")
    quantity: float = Field(0.0, description="Number of units")
    unit: str = Field("", description="Unit of measure (PCS, CTN, UNIT, ...)")
    unit_price: float = Field(0.0, description="Price per unit")
    total_price: float = Field(0.0, description="Line total")
    weight: float = Field(0.0, description="Gross weight in kg")
    volume: float = Field(0.0, description="Volume in m3")
    country_of_origin: str = Field("", description="Country of origin")
    bl_number: str | None = Field(None, description="Bill of Lading number")

    @field_validator("item_no", mode="before")
    @classmethod
    def _item_no(cls, v: object) -> int:
        if isinstance(v, bool) or v is None:
            return 0
        if isinstance(v, (int, float)):
            return int(v)
        if isinstance(v, str):
            try:
                return int(float(v.strip()))
            except ValueError:
                return 0
        raise ValueError(f"item_no must be a number, got {type(v).__name__}")

    @field_validator("description", "unit", "country_of_origin", mode="before")
    @classmethod
    def _text(cls, v: object) -> str:
        if v is None:
            return ""
        if isinstance(v, (str, int, float)) and not isinstance(v, bool):
            return str(v).strip()
        raise ValueError(f"expected text, got {type(v).__name__}")

    @field_validator("hs_code", mode="before")
    @classmethod
    def _hs_code(cls, v: object) -> str:
        if v is None:
            return ""
        if isinstance(v, (str, int)) and not isinstance(v, bool):
            return normalize_hs_code(str(v))
        raise ValueError(f"hs_code must be text, got {type(v).__name__}")

    @field_validator("quantity", "unit_price", "total_price", "weight", "volume", mode="before")
    @classmethod
    def _number(cls, v: object) -> float:
        return coerce_number(v)

    @field_validator("bl_number", mode="before")
    @classmethod
    def _bl_number(cls, v: object) -> str | None:
        if v is None:
            return None
        if isinstance(v, (str, int)) and not isinstance(v, bool):
            text = str(v).strip()
            return text or None
        raise ValueError(f"bl_number must be text, got {type(v).__name__}")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnrichmentStatsOut(_CamelModel):
    hs_codes_added: int = 0
    validations_run: int = 0


class NormalizeMetadata(_CamelModel):
    total_items: int
    model_used: str
    filename: str
    fallback_from: str | None = None
    enrichment: EnrichmentStatsOut | None = None
    processing_time_ms: int = 0


class NormalizeResponse(BaseModel):
    success: bool = True
    message: str = "File processed successfully"
    data: list[ManifestLineItem]
    metadata: NormalizeMetadata
