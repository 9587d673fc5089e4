"""FastAPI application for the ROI calculator -- REST endpoints, SSE streaming
and the narrative relay."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from pydantic import BaseModel, ValidationError

from backend.config.settings import Settings, get_settings
from backend.engine.calculator import CalculationEngine, build_chart_data
from backend.engine.result import CalculationResult
from backend.models.inputs import CalculatorInputs, form_metadata
from backend.models.insight import StrategicInsight, narrative_to_dict
from backend.narrative.requester import NarrativeRequester
from backend.orchestrator.coordinator import SubmissionCoordinator
from backend.providers import ClaudeNarrativeProvider, NarrativeProvider
from backend.report.assembler import ReportBundle, assemble_report
from backend.report.document import build_report_document
from backend.report.pdf import ReportRenderError, render_pdf
from backend.report.summary import build_copy_summary
from backend.streaming import StreamManager
from backend.streaming.events import SessionEventType

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Singletons shared by every session
engine = CalculationEngine()
stream_manager = StreamManager(max_sessions=settings.max_sessions)
requester = NarrativeRequester(settings=settings)
coordinator = SubmissionCoordinator(
    stream_manager=stream_manager,
    requester=requester,
    engine=engine,
    max_sessions=settings.max_sessions,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await coordinator.shutdown()
    await stream_manager.close_all()
    await requester.aclose()


app = FastAPI(title="ROI Calculator API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_narrative_provider() -> NarrativeProvider:
    return ClaudeNarrativeProvider(settings=get_settings())


class InsightRequest(BaseModel):
    inputs: Optional[dict[str, Any]] = None
    results: Optional[dict[str, Any]] = None


class ReportRequest(BaseModel):
    inputs: CalculatorInputs
    narrative: Optional[Union[StrategicInsight, str]] = None


def _calculation_payload(inputs: CalculatorInputs) -> dict[str, Any]:
    result = engine.calculate(inputs)
    return {
        "inputs": inputs.to_dict(),
        "results": result.to_dict(),
        "chartData": [point.to_dict() for point in build_chart_data(result)],
    }


def _bundle_from_request(body: ReportRequest) -> ReportBundle:
    result = engine.calculate(body.inputs)
    return assemble_report(body.inputs, result, build_chart_data(result), body.narrative)


async def _pdf_response(bundle: ReportBundle) -> Response:
    document = build_report_document(bundle, author=settings.company_name)
    # reportlab is synchronous; keep it off the event loop
    pdf = await run_in_threadpool(render_pdf, document)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


def _session_not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Session not found"})


@app.exception_handler(ReportRenderError)
async def report_render_error_handler(request: Request, exc: ReportRenderError):
    return JSONResponse(
        status_code=500,
        content={"error": "La génération du PDF a échoué. Veuillez réessayer."},
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/form")
async def get_form():
    """Industries, default values and slider ranges of the calculator form."""
    return form_metadata()


@app.post("/api/calculate")
async def calculate(body: CalculatorInputs, clamp: bool = False):
    """Stateless calculation: result and chart data, no narrative."""
    inputs = body.clamped() if clamp else body
    return _calculation_payload(inputs)


@app.post("/api/sessions/{session_id}/submissions")
async def create_submission(session_id: str, body: CalculatorInputs, clamp: bool = False):
    """Calculate for a session; the narrative follows on the session stream."""
    inputs = body.clamped() if clamp else body
    submission = await coordinator.submit(session_id, inputs)
    return {
        "submissionId": submission.id,
        "status": submission.status.value,
        "inputs": submission.inputs.to_dict(),
        "results": submission.result.to_dict(),
        "chartData": [point.to_dict() for point in submission.chart],
    }


@app.get("/api/sessions/{session_id}")
async def get_session(session_id: str):
    """Return the current report of a session (polling fallback)."""
    submission = coordinator.current(session_id)
    if submission is None:
        return _session_not_found()
    return {"status": submission.status.value, **submission.report().to_snapshot()}


@app.get("/api/sessions/{session_id}/stream")
async def stream_session(session_id: str, request: Request):
    """SSE endpoint: streams calculation and narrative events."""
    last_event_id: int | None = None
    raw = request.headers.get("Last-Event-ID") or request.headers.get("last-event-id")
    if raw is not None:
        try:
            last_event_id = int(raw)
        except ValueError:
            pass

    generator = stream_manager.event_generator(session_id, last_event_id=last_event_id)
    return StreamingResponse(generator, media_type="text/event-stream")


@app.get("/api/sessions/{session_id}/events")
async def list_session_events(session_id: str, after: int = 0):
    """Buffered events newer than `after`, for clients that cannot hold a stream."""
    events = [e for e in stream_manager.buffered(session_id) if e.sequence_id > after]
    return {"events": [e.to_dict() for e in events]}


@app.get("/api/sessions/{session_id}/report.pdf")
async def export_session_pdf(session_id: str):
    submission = coordinator.current(session_id)
    if submission is None:
        return _session_not_found()
    response = await _pdf_response(submission.report())
    await stream_manager.emit(
        session_id,
        SessionEventType.REPORT_EXPORTED,
        {"submission_id": submission.id},
    )
    return response


@app.post("/api/report/summary", response_class=PlainTextResponse)
async def report_summary(body: ReportRequest):
    """Plain-text summary for the "copy summary" action."""
    return build_copy_summary(_bundle_from_request(body))


@app.post("/api/report/pdf")
async def report_pdf(body: ReportRequest):
    return await _pdf_response(_bundle_from_request(body))


@app.post("/api/insight")
async def insight(
    body: InsightRequest,
    structured: bool = False,
    config: Settings = Depends(get_settings),
    provider: NarrativeProvider = Depends(get_narrative_provider),
):
    """Narrative relay: the only place the model credential is used."""
    if not config.anthropic_api_key:
        logger.error("Narrative relay called without a configured API key")
        return JSONResponse(status_code=500, content={"error": "API key not configured"})

    if not body.inputs or not body.results:
        return JSONResponse(status_code=400, content={"error": "Missing required data"})

    try:
        inputs = CalculatorInputs.model_validate(body.inputs)
        results = CalculationResult.from_dict(body.results)
    except (ValidationError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Rejected insight request: {e}")
        return JSONResponse(status_code=400, content={"error": "Invalid calculation data"})

    try:
        if structured:
            insight_obj = await provider.generate_insight(inputs, results)
            return {"insight": narrative_to_dict(insight_obj)["insight"]}
        text = await provider.generate_text(inputs, results)
        return {"text": text or ""}
    except Exception as e:
        logger.exception("Narrative generation failed")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate insight", "details": type(e).__name__},
        )
