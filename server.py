#!/usr/bin/env python3
"""
Server for the Situation Report Registry.

HTTP API for composing daily situation reports, attaching evidence photos,
viewing and exporting reports, and generating consolidated briefings and
weekly summaries.

Flow:
1. Unit submits structured fields (+ photos) -> markup is compiled and stored
2. Report can be viewed as HTML, edited as markup, exported as .docx
3. Command requests a briefing for the first N reporting days -> the
   registry is windowed, synthesized by Gemini and exported as .docx
4. Command pastes a week of daily reports -> Gemini returns a weekly
   executive summary that can be exported as .docx

Usage:
    uvicorn server:app --reload --port 8000
"""

import asyncio
import base64
import binascii
import logging
import uuid
from typing import List, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, Field

# Import all core functionality
from sitrep import (
    ARTICLE_POLICY,
    DAILY_REPORT_POLICY,
    DOCX_MEDIA_TYPE,
    MODEL_NAME,
    SUPABASE_ARTICLES_TABLE,
    SUPABASE_SERVICE_KEY,
    SUPABASE_TABLE,
    SUPABASE_URL,
    AccessContext,
    ArticleRecord,
    AttachmentLimitError,
    ConsolidatedBriefing,
    DocumentBuildError,
    EmptyWindowError,
    ExportedDocument,
    ImageProcessingError,
    InMemoryRecordStore,
    NoContentError,
    PermissionDeniedError,
    RecordNotFoundError,
    RecordStore,
    ReportFields,
    ReportRecord,
    Role,
    SitrepError,
    SupabaseRecordStore,
    SynthesisError,
    WeeklySummary,
    add_attachments,
    build_magazine_docx,
    compile_report,
    configure_gemini,
    consolidate_reports,
    export_briefing,
    export_report_async,
    export_weekly_summary,
    remove_attachment,
    render_markup,
    render_report_page,
    report_title,
    split_daily_reports,
    summarize_week,
    require,
    supabase_configured,
    validate_config,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# =============================================================================
# FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Situation Report Registry",
    description="API for composing, exporting and consolidating situation reports",
    version="1.0.0"
)

# Global model instance
_model = None


# =============================================================================
# STORAGE
# =============================================================================

def _build_stores() -> tuple[RecordStore, RecordStore]:
    if supabase_configured():
        logger.info(f"Supabase configured: {SUPABASE_URL}")
        return (
            SupabaseRecordStore(SUPABASE_URL, SUPABASE_SERVICE_KEY, SUPABASE_TABLE, ReportRecord),
            SupabaseRecordStore(SUPABASE_URL, SUPABASE_SERVICE_KEY, SUPABASE_ARTICLES_TABLE, ArticleRecord),
        )
    logger.warning("⚠️  Supabase not configured - records are kept in memory")
    return InMemoryRecordStore(ReportRecord), InMemoryRecordStore(ArticleRecord)


_report_store, _article_store = _build_stores()


def get_report_store() -> RecordStore:
    return _report_store


def get_article_store() -> RecordStore:
    return _article_store


def get_access_context(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=Role.CADET.value),
) -> AccessContext:
    """Build the caller's access context from request headers."""
    roles = set()
    for name in x_user_role.split(","):
        try:
            roles.add(Role(name.strip().lower()))
        except ValueError:
            logger.warning(f"Ignoring unknown role: {name!r}")
    return AccessContext(user_id=x_user_id, roles=frozenset(roles))


def get_synthesis_model():
    if _model is None:
        raise HTTPException(status_code=503, detail="Synthesis service not initialized")
    return _model


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    model: str
    supabase_configured: bool
    synthesis_available: bool


class CompileResponse(BaseModel):
    """Preview of a report before it is saved."""
    title: str
    markup_text: str
    html: str


class CreateReportRequest(BaseModel):
    """Request body for report submission."""
    fields: ReportFields
    images: List[str] = Field(default_factory=list, description="Base64 image files, in selection order")


class MarkupUpdateRequest(BaseModel):
    markup_text: str


class AttachmentUploadRequest(BaseModel):
    images: List[str] = Field(description="Base64 image files, in selection order")


class ConsolidationRequest(BaseModel):
    days: int = Field(ge=0, le=100, description="Number of reporting days from the start")


class BriefingExportRequest(BaseModel):
    days: int = Field(ge=0, le=100)
    briefing: ConsolidatedBriefing


class WeeklySummaryRequest(BaseModel):
    start_date: str = Field(min_length=1, description="YYYY-MM-DD")
    end_date: str = Field(min_length=1, description="YYYY-MM-DD")
    reports: List[str] = Field(default_factory=list, description="Daily report texts")
    text: str = Field(default="", description="Daily reports pasted as one block, separated by '---' lines")


class WeeklyExportRequest(BaseModel):
    start_date: str = Field(min_length=1)
    end_date: str = Field(min_length=1)
    summary: WeeklySummary


class ArticleRequest(BaseModel):
    cadet_name: str = Field(min_length=1)
    company: str = Field(min_length=1)
    platoon: str = Field(min_length=1)
    content: str = Field(min_length=1)
    image: Optional[str] = None


# =============================================================================
# HELPERS
# =============================================================================

_ERROR_STATUS = {
    EmptyWindowError: 404,
    NoContentError: 422,
    AttachmentLimitError: 409,
    ImageProcessingError: 400,
    DocumentBuildError: 500,
    SynthesisError: 502,
    RecordNotFoundError: 404,
    PermissionDeniedError: 403,
}

_ERROR_TITLE = {
    EmptyWindowError: "No data for this range",
    NoContentError: "No data for this range",
    AttachmentLimitError: "Could not process this image",
    ImageProcessingError: "Could not process this image",
    DocumentBuildError: "Could not build the document",
    SynthesisError: "Consolidation failed",
    RecordNotFoundError: "Not found",
    PermissionDeniedError: "Restricted",
}


@app.exception_handler(SitrepError)
async def sitrep_error_handler(request: Request, exc: SitrepError):
    status_code = _ERROR_STATUS.get(type(exc), 500)
    title = _ERROR_TITLE.get(type(exc), "Request failed")
    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(status_code=status_code, content={"error": title, "detail": str(exc)})


def decode_upload(data: str, index: int) -> bytes:
    """Decode one base64 upload; a data URL prefix is accepted."""
    payload = data.split(",", 1)[1] if data.startswith("data:") else data
    try:
        return base64.b64decode("".join(payload.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageProcessingError(f"Could not process this image: {e}", index=index) from e


def docx_response(document: ExportedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.filename)}"},
    )


# =============================================================================
# STARTUP
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize on startup."""
    global _model

    is_valid, errors = validate_config()
    if not is_valid:
        for error in errors:
            logger.warning(f"  - {error}")
        logger.warning("⚠️  Consolidated briefings disabled")
        return

    try:
        _model = configure_gemini()
        logger.info("Server started successfully")
    except Exception as e:
        logger.error(f"Failed to configure Gemini: {e}")
        raise


# =============================================================================
# API ENDPOINTS - REPORTS
# =============================================================================

@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        model=MODEL_NAME,
        supabase_configured=supabase_configured(),
        synthesis_available=_model is not None,
    )


@app.post("/api/v1/reports/compile", response_model=CompileResponse)
async def compile_preview(fields: ReportFields):
    """Compile structured fields into markup and preview HTML without saving."""
    markup_text = compile_report(fields)
    return CompileResponse(
        title=report_title(fields),
        markup_text=markup_text,
        html=render_markup(markup_text).to_html(),
    )


@app.post("/api/v1/reports", response_model=ReportRecord, status_code=201)
async def create_report(
    request: CreateReportRequest,
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_report_store),
):
    """
    Submit a daily report.

    Request body:
    {
        "fields": {"report_date": "16 FEB 26", "unit_name": "Alpha Company", ...},
        "images": ["<base64>", "<base64>"]
    }
    """
    raws = [decode_upload(data, i) for i, data in enumerate(request.images)]
    attachments = await add_attachments([], raws, DAILY_REPORT_POLICY)

    fields = request.fields
    record = ReportRecord(
        id=uuid.uuid4().hex,
        owner_id=access.user_id,
        report_date=fields.report_date.strip(),
        unit=fields.unit_name.strip(),
        title=report_title(fields),
        signing_officer=fields.commander_name.strip(),
        markup_text=compile_report(fields),
        attachments=attachments,
    )
    logger.info(f"Received report {record.id} from {record.unit} for {record.report_date}")
    return await store.create(record)


@app.get("/api/v1/reports", response_model=List[ReportRecord])
async def list_reports(store: RecordStore = Depends(get_report_store)):
    return await store.list_by_creation()


@app.get("/api/v1/reports/{report_id}", response_model=ReportRecord)
async def get_report(report_id: str, store: RecordStore = Depends(get_report_store)):
    return await store.get(report_id)


@app.get("/api/v1/reports/{report_id}/view", response_class=HTMLResponse)
async def view_report(report_id: str, store: RecordStore = Depends(get_report_store)):
    """Formatted HTML page for on-screen viewing."""
    record = await store.get(report_id)
    return HTMLResponse(render_report_page(record))


@app.put("/api/v1/reports/{report_id}/markup", response_model=ReportRecord)
async def replace_markup(
    report_id: str,
    request: MarkupUpdateRequest,
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_report_store),
):
    """Overwrite the report body with edited markup."""
    record = await store.get(report_id)
    require(access.can_edit(record), "edit this report")
    return await store.update(report_id, {"markup_text": request.markup_text})


@app.post("/api/v1/reports/{report_id}/attachments", response_model=ReportRecord)
async def upload_attachments(
    report_id: str,
    request: AttachmentUploadRequest,
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_report_store),
):
    """Compress and append evidence photos; the batch is rejected if it would exceed the cap."""
    record = await store.get(report_id)
    require(access.can_edit(record), "edit this report")

    raws = [decode_upload(data, i) for i, data in enumerate(request.images)]
    attachments = await add_attachments(record.attachments, raws, DAILY_REPORT_POLICY)
    return await store.update(report_id, {"attachments": attachments})


@app.delete("/api/v1/reports/{report_id}/attachments/{index}", response_model=ReportRecord)
async def delete_attachment(
    report_id: str,
    index: int,
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_report_store),
):
    record = await store.get(report_id)
    require(access.can_edit(record), "edit this report")
    try:
        attachments = remove_attachment(record.attachments, index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return await store.update(report_id, {"attachments": attachments})


@app.delete("/api/v1/reports/{report_id}", status_code=204)
async def delete_report(
    report_id: str,
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_report_store),
):
    record = await store.get(report_id)
    require(access.can_edit(record), "delete this report")
    await store.delete(report_id)
    return Response(status_code=204)


@app.get("/api/v1/reports/{report_id}/export")
async def export_report_docx(report_id: str, store: RecordStore = Depends(get_report_store)):
    """Download the report as a Word document."""
    record = await store.get(report_id)
    return docx_response(await export_report_async(record))


# =============================================================================
# API ENDPOINTS - CONSOLIDATION
# =============================================================================

@app.post("/api/v1/consolidated", response_model=ConsolidatedBriefing)
async def generate_consolidated(
    request: ConsolidationRequest,
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_report_store),
    model=Depends(get_synthesis_model),
):
    """Synthesize a briefing over the first N reporting days."""
    require(access.can_consolidate(), "generate consolidated reports")

    records = await store.list_by_creation()
    logger.info(f"Consolidating first {request.days} day(s) from {len(records)} report(s)")
    return await asyncio.to_thread(consolidate_reports, records, request.days, model)


@app.post("/api/v1/consolidated/export")
async def export_consolidated(
    request: BriefingExportRequest,
    access: AccessContext = Depends(get_access_context),
):
    """Download a previously generated briefing as a Word document."""
    require(access.can_consolidate(), "export consolidated reports")
    document = await asyncio.to_thread(export_briefing, request.briefing, request.days)
    return docx_response(document)


@app.post("/api/v1/weekly", response_model=WeeklySummary)
async def generate_weekly(
    request: WeeklySummaryRequest,
    access: AccessContext = Depends(get_access_context),
    model=Depends(get_synthesis_model),
):
    """Summarize a week of daily reports."""
    require(access.can_consolidate(), "generate weekly summaries")

    reports = request.reports + split_daily_reports(request.text)
    return await asyncio.to_thread(
        summarize_week, request.start_date, request.end_date, reports, model
    )


@app.post("/api/v1/weekly/export")
async def export_weekly(
    request: WeeklyExportRequest,
    access: AccessContext = Depends(get_access_context),
):
    """Download a previously generated weekly summary as a Word document."""
    require(access.can_consolidate(), "export weekly summaries")
    document = await asyncio.to_thread(
        export_weekly_summary, request.summary, request.start_date, request.end_date
    )
    return docx_response(document)


# =============================================================================
# API ENDPOINTS - MAGAZINE
# =============================================================================

@app.post("/api/v1/articles", response_model=ArticleRecord, status_code=201)
async def submit_article(
    request: ArticleRequest,
    store: RecordStore = Depends(get_article_store),
):
    """Submit a magazine article with an optional profile photo."""
    raws = [decode_upload(request.image, 0)] if request.image else []
    images = await add_attachments([], raws, ARTICLE_POLICY)

    article = ArticleRecord(
        id=uuid.uuid4().hex,
        cadet_name=request.cadet_name.strip(),
        company=request.company.strip(),
        platoon=request.platoon.strip(),
        content=request.content,
        image=images[0] if images else None,
    )
    return await store.create(article)


@app.get("/api/v1/magazine/export")
async def export_magazine(
    access: AccessContext = Depends(get_access_context),
    store: RecordStore = Depends(get_article_store),
):
    require(access.can_manage_magazine(), "export the magazine")
    articles = await store.list_by_creation()
    document = await asyncio.to_thread(build_magazine_docx, articles)
    return docx_response(document)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Situation Report Registry",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
