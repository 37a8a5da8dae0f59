import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from ..color.catalog import load_catalog
from ..core.errors import InvalidInputError
from ..core.jobs import JobRecord, store as job_store
from ..core.legend import build_legend
from ..core.pattern_edit import apply_meta_updates
from ..core.pipeline import quantize
from ..cv.bitmap import fit_dimensions, load_bitmap
from ..models.api_schemas import JobList, JobStatus, MetaUpdateRequest
from ..models.pattern import QuantizationSettings
from ..settings import (
    DEFAULT_BRAND,
    DEFAULT_CLOTH_COUNT,
    DEFAULT_MAX_COLORS,
    DEFAULT_TITLE,
    MAX_COLORS_LIMIT,
    MAX_GRID_SIDE,
    MIN_GRID_SIDE,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ACCEPTED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp"}


def _job_status(record: JobRecord) -> JobStatus:
    return JobStatus(
        job_id=record.job_id,
        status=record.status,
        progress=record.progress,
        meta=record.meta,
        grid=record.grid,
    )


def _ready_record(job_id: str) -> JobRecord:
    record = job_store.get(job_id)
    if not record:
        raise HTTPException(status_code=404, detail="Job not found")
    if record.status != "done" or record.pattern is None:
        raise HTTPException(status_code=404, detail="Job not ready")
    return record


# =====================================================================
#   JOB CREATE
# =====================================================================

@router.post("/patterns")
async def create_pattern(
    file: UploadFile = File(...),
    width: Optional[int] = Query(None, ge=MIN_GRID_SIDE, le=MAX_GRID_SIDE),
    height: Optional[int] = Query(None, ge=MIN_GRID_SIDE, le=MAX_GRID_SIDE),
    max_colors: int = Query(DEFAULT_MAX_COLORS, ge=1, le=MAX_COLORS_LIMIT),
    dithering: bool = False,
    cloth_count: int = Query(DEFAULT_CLOTH_COUNT, gt=0),
    title: str = DEFAULT_TITLE,
    seed: Optional[int] = None,
    brand: str = DEFAULT_BRAND,
):
    if file.content_type not in ACCEPTED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported file type")

    content = await file.read()
    try:
        bitmap = load_bitmap(content)
        catalog = load_catalog(brand)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    src_h, src_w = bitmap.shape[:2]
    if width is None or height is None:
        width, height = fit_dimensions(
            src_w,
            src_h,
            width or MAX_GRID_SIDE,
            height or MAX_GRID_SIDE,
        )

    settings = QuantizationSettings(
        width=width,
        height=height,
        maxColors=max_colors,
        dithering=dithering,
        clothCount=cloth_count,
        title=title,
        seed=seed,
    )

    job_id = str(uuid4())
    job_store.create(
        job_id,
        status="processing",
        progress=0.0,
        meta={
            "filename": file.filename,
            "brand": brand,
            "width": width,
            "height": height,
            "max_colors": max_colors,
            "dithering": dithering,
        },
    )

    # ============================================
    # PROCESS PATTERN
    # ============================================
    try:
        pattern = quantize(
            bitmap,
            settings,
            catalog=catalog,
            progress=lambda fraction: job_store.update(job_id, progress=round(fraction, 3)),
        )
    except InvalidInputError as exc:
        logger.warning("Job %s failed: %s", job_id, exc)
        job_store.update(job_id, status="failed", error=str(exc))
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("Job %s crashed", job_id)
        job_store.update(job_id, status="failed", error=str(exc))
        raise

    job_store.set_pattern(job_id, pattern)
    job_store.update(
        job_id,
        status="done",
        progress=1.0,
        palette_size=len(pattern.usedColors),
        total_stitches=pattern.stitch_count(),
    )
    logger.info("Job %s done: %dx%d, %d colours", job_id, width, height, len(pattern.usedColors))
    return JSONResponse({"job_id": job_id, "status": "done"})


# =====================================================================
#   JOB GET / LIST
# =====================================================================

@router.get("/patterns", response_model=JobList)
async def list_patterns(status: Optional[str] = None, query: Optional[str] = None):
    records = job_store.list(status=status, query=query)
    items = [_job_status(r) for r in records]
    return JobList(items=items, total=len(items))


@router.get("/patterns/{job_id}", response_model=JobStatus)
async def get_job(job_id: str):
    record = job_store.get(job_id)
    if not record:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_status(record)


@router.get("/patterns/{job_id}/pattern")
async def get_pattern(job_id: str):
    record = _ready_record(job_id)
    return JSONResponse(record.pattern.model_dump(mode="json"))


# =====================================================================
#   LEGEND & META
# =====================================================================

@router.get("/patterns/{job_id}/legend")
async def get_legend(job_id: str):
    record = _ready_record(job_id)
    return build_legend(record.pattern)


@router.patch("/patterns/{job_id}/meta")
async def update_meta(job_id: str, payload: MetaUpdateRequest):
    _ready_record(job_id)
    updates = payload.model_dump(exclude_none=True)
    pattern = job_store.update_pattern(job_id, lambda p: apply_meta_updates(p, updates))
    if pattern is None:
        raise HTTPException(status_code=404, detail="Job not found")
    meta = {key: value for key, value in pattern.meta.items() if key not in ("legend", "sanity")}
    return {"title": pattern.title, "clothCount": pattern.clothCount, "meta": meta}
