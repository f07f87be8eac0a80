"""
Manifest normalization endpoint.

Flow:
1. Store the upload under a unique name
2. Run the normalization pipeline (extract -> prompt -> AI -> parse -> number -> enrich)
3. Delete the upload, whatever the outcome
"""

from fastapi import APIRouter, Depends, Form, UploadFile
from pydantic import ValidationError

from manifestpro.config import settings
from manifestpro.dependencies import get_normalization_pipeline
from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.manifest.hs_codes import EnrichmentStats, HSStrategy
from manifestpro.manifest.numbering import NumberingConfig
from manifestpro.manifest.pipeline import NormalizationPipeline, NormalizationRequest
from manifestpro.providers import parse_provider_id
from manifestpro.schemas.manifest import EnrichmentStatsOut, NormalizeMetadata, NormalizeResponse
from manifestpro.services.upload_service import scoped_upload, validate_upload_name

router = APIRouter()


def _numbering_config(
    start_number: int | None, middle_format: str | None, year: int | None
) -> NumberingConfig:
    try:
        return NumberingConfig.from_request(
            start_number=settings.bl_start_number if start_number is None else start_number,
            middle_format=middle_format or settings.bl_middle_format,
            year=year,
        )
    except ValidationError as e:
        raise ManifestError(
            ErrorKind.INVALID_ARGUMENT,
            "Invalid B/L numbering options",
            detail=str(e),
            status_code=400,
        ) from e


def _stats_out(stats: EnrichmentStats | None) -> EnrichmentStatsOut | None:
    if stats is None:
        return None
    return EnrichmentStatsOut(
        hs_codes_added=stats.hs_codes_added, validations_run=stats.validations_run
    )


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize_manifest(
    file: UploadFile,
    model_source: str | None = Form(None, alias="modelSource"),
    bl_start_number: int | None = Form(None, alias="blStartNumber"),
    bl_middle_format: str | None = Form(None, alias="blMiddleFormat"),
    bl_year: int | None = Form(None, alias="blYear"),
    instruction: str | None = Form(None),
    enrich_hs_codes: bool = Form(True, alias="enrichHsCodes"),
    hs_strategy: HSStrategy | None = Form(None, alias="hsStrategy"),
    pipeline: NormalizationPipeline = Depends(get_normalization_pipeline),
) -> NormalizeResponse:
    """Normalize an uploaded manifest spreadsheet into canonical line items."""
    file_ext = validate_upload_name(file.filename, settings)
    provider = parse_provider_id(model_source or settings.default_provider)

    request = NormalizationRequest(
        model_source=provider.value,
        numbering=_numbering_config(bl_start_number, bl_middle_format, bl_year),
        instruction=instruction,
        enrich_hs_codes=enrich_hs_codes,
        hs_strategy=hs_strategy,
    )

    async with scoped_upload(file, settings) as file_path:
        result = await pipeline.run(file_path, file_ext, file.filename or "", request)

    return NormalizeResponse(
        data=result.items,
        metadata=NormalizeMetadata(
            total_items=result.total_items,
            model_used=result.model_used,
            filename=result.filename,
            fallback_from=result.fallback_from,
            enrichment=_stats_out(result.enrichment_stats),
            processing_time_ms=result.processing_time_ms,
        ),
    )
