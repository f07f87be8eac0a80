"""Customs (CEISA) seven-sheet workbook processing and download."""

from pathlib import Path

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from manifestpro.config import settings
from manifestpro.customs.pipeline import CustomsPipeline
from manifestpro.dependencies import get_customs_pipeline
from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.manifest.hs_codes import HSStrategy
from manifestpro.schemas.customs import CustomsProcessResponse
from manifestpro.schemas.manifest import EnrichmentStatsOut
from manifestpro.services.upload_service import scoped_upload, validate_upload_name

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/process", response_model=CustomsProcessResponse)
async def process_customs_workbook(
    file: UploadFile,
    model_source: str | None = Form(None, alias="modelSource"),
    hs_strategy: HSStrategy | None = Form(None, alias="hsStrategy"),
    pipeline: CustomsPipeline = Depends(get_customs_pipeline),
) -> CustomsProcessResponse:
    """Parse a customs workbook, backfill HS codes and write the processed workbook."""
    file_ext = validate_upload_name(file.filename, settings)
    if file_ext == "csv":
        raise ManifestError(
            ErrorKind.INVALID_ARGUMENT,
            "Customs manifests must be uploaded as a workbook",
            status_code=400,
        )

    async with scoped_upload(file, settings) as file_path:
        result = await pipeline.run(file_path, model_source, hs_strategy)

    manifest = result.manifest
    return CustomsProcessResponse(
        output_file=result.output_file,
        model_used=result.model_used,
        header=manifest.header,
        summary=manifest.summary,
        enrichment=manifest.enrichment_stats or EnrichmentStatsOut(),
        orphans=manifest.orphans,
        processing_time_ms=result.processing_time_ms,
    )


@router.get("/download/{filename}")
async def download_customs_workbook(filename: str) -> FileResponse:
    if Path(filename).name != filename or not filename.endswith(".xlsx"):
        raise HTTPException(status_code=400, detail="Invalid file name")

    file_path = Path(settings.output_dir) / filename
    if not file_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")

    return FileResponse(file_path, filename=filename, media_type=XLSX_MEDIA_TYPE)
