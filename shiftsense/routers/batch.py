"""
Batch processing router - upload a CSV/TSV of employee metrics.
"""

import json

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from shiftsense.connectors.csv_parser import DelimitedParseError, parse_delimited
from shiftsense.dependencies import get_batch_service
from shiftsense.services.batch_service import BatchService, EmptyBatchError
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


async def _read_rows(file: UploadFile) -> list[dict[str, str]]:
    """Parse an upload, rejecting parse failures and empty tables with 400."""
    content = await file.read()
    filename = file.filename or "upload.csv"
    try:
        rows = parse_delimited(content, filename=filename)
    except DelimitedParseError as e:
        raise HTTPException(status_code=400, detail=f"CSV parsing error: {e}")

    if not rows:
        logger.warning("batch_rejected", filename=filename, reason="no_rows")
        raise HTTPException(status_code=400, detail="No data to process.")
    return rows


@router.post("/upload")
async def upload_batch(
    file: UploadFile = File(...),
    service: BatchService = Depends(get_batch_service),
):
    """
    Parse an uploaded table and validate every row.
    Returns success/failed counts and per-row outcomes.
    """
    rows = await _read_rows(file)
    logger.info("batch_upload", filename=file.filename, rows=len(rows))

    try:
        result = await service.process(rows)
    except EmptyBatchError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "data": result.model_dump(mode="json")}


@router.post("/upload/stream")
async def upload_batch_stream(
    file: UploadFile = File(...),
    service: BatchService = Depends(get_batch_service),
):
    """
    Same as /upload, streamed as NDJSON: one progress line per row, then a
    final line with the totals.
    """
    rows = await _read_rows(file)
    logger.info("batch_upload_stream", filename=file.filename, rows=len(rows))

    async def progress_lines():
        last = None
        async for _, progress in service.iter_rows(rows):
            last = progress
            yield progress.model_dump_json() + "\n"
        if last is not None:
            yield json.dumps(
                {"done": True, "success": last.success, "failed": last.failed, "progress": last.progress}
            ) + "\n"

    return StreamingResponse(progress_lines(), media_type="application/x-ndjson")
