import logging
import os
from pathlib import Path
from typing import Dict, Optional

import httpx
from fastapi import FastAPI, File, Form, Header, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.templating import Jinja2Templates

from app.core.config import DEFAULT_PROMPT, LOG_LEVEL, EmailJsConfig, SummarizerConfig, UploadLimits
from app.core.logging import new_request_id, setup_logging
from app.schemas.share import EmailSuccess, ShareRequest, ShareResponse
from app.schemas.summarize import SummarizeResponse, SummaryRequest, SummarySuccess
from app.services.ingest import ingest_transcript
from app.services.share_workflow import ShareWorkflow
from app.services.submissions import WorkflowRegistry
from app.services.summarizer import OpenAiSummarizer
from app.services.summary_workflow import SummaryWorkflow
from app.services.validators import PROMPT_TOO_SHORT, TRANSCRIPT_TOO_SHORT, validate_summary_input

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="SummarizeShare", version="0.1.0")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

summarizer_config = SummarizerConfig.from_env()
email_config = EmailJsConfig.from_env()
upload_limits = UploadLimits.from_env()

_provider = OpenAiSummarizer(summarizer_config)
_email_http = httpx.Client(timeout=email_config.timeout_seconds)

app.state.summary_workflows = WorkflowRegistry(lambda: SummaryWorkflow(_provider))
app.state.share_workflows = WorkflowRegistry(lambda: ShareWorkflow(email_config, client=_email_http))
app.state.upload_limits = upload_limits


@app.on_event("shutdown")
def _shutdown():
    _email_http.close()


@app.get("/health")
def health():
    return {"status": "ok"}


# -------------------------
# API Layer (JSON endpoints)
# -------------------------
@app.post("/v1/summaries", response_model=SummarizeResponse)
def create_summary(
    req: SummaryRequest,
    response: Response,
    x_client_id: Optional[str] = Header(default=None, alias="X-Client-Id"),
):
    request_id = new_request_id()
    response.headers["X-Request-Id"] = request_id

    workflow: SummaryWorkflow = app.state.summary_workflows.get(x_client_id)
    result = workflow.submit(req.transcript, req.prompt, request_id=request_id)
    superseded = result.generation != workflow.tracker.generation

    if isinstance(result, SummarySuccess):
        return SummarizeResponse(summary=result.text, generation=result.generation, superseded=superseded)
    return SummarizeResponse(error=result.message, generation=result.generation, superseded=superseded)


@app.post("/v1/share", response_model=ShareResponse)
def share_summary(
    req: ShareRequest,
    response: Response,
    x_client_id: Optional[str] = Header(default=None, alias="X-Client-Id"),
):
    request_id = new_request_id()
    response.headers["X-Request-Id"] = request_id

    workflow: ShareWorkflow = app.state.share_workflows.get(x_client_id)
    result = workflow.submit(req.recipient, req.summary, request_id=request_id)
    superseded = result.generation != workflow.tracker.generation

    if isinstance(result, EmailSuccess):
        return ShareResponse(ok=True, generation=result.generation, superseded=superseded)
    return ShareResponse(ok=False, error=result.message, generation=result.generation, superseded=superseded)


# -------------------------
# UI Layer (HTML frontend)
# -------------------------
def _page(request: Request, **overrides):
    context = {
        "request": request,
        "client_id": new_request_id(),
        "transcript": "",
        "prompt": DEFAULT_PROMPT,
        "field_errors": {},
        "error": None,
        "summary": None,
        "recipient": "",
        "share_notice": None,
        "share_error": None,
    }
    context.update(overrides)
    return templates.TemplateResponse(request, "index.html", context)


def _field_errors(messages) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for m in messages:
        if m == TRANSCRIPT_TOO_SHORT:
            out["transcript"] = m
        elif m == PROMPT_TOO_SHORT:
            out["prompt"] = m
    return out


@app.get("/")
def ui_home(request: Request):
    return _page(request)


@app.post("/ui/summarize")
async def ui_summarize(
    request: Request,
    client_id: str = Form(""),
    transcript: str = Form(""),
    prompt: str = Form(""),
    transcript_file: UploadFile | None = File(default=None),
):
    request_id = new_request_id()
    limits: UploadLimits = app.state.upload_limits

    # 1) Resolve transcript text (pasted or uploaded)
    file_bytes = None
    filename = None
    content_type = None
    if transcript_file is not None and transcript_file.filename:
        filename = transcript_file.filename
        content_type = transcript_file.content_type
        file_bytes = await transcript_file.read()

        if len(file_bytes) > limits.max_upload_bytes:
            return _page(
                request,
                client_id=client_id or new_request_id(),
                transcript=transcript,
                prompt=prompt,
                error=f"File too large (max {limits.max_upload_mb}MB)",
            )

    if transcript.strip() or file_bytes:
        try:
            ing = ingest_transcript(
                text=transcript,
                file_bytes=file_bytes,
                filename=filename,
                content_type=content_type,
                max_pdf_pages=limits.max_pdf_pages,
            )
        except ValueError as e:
            logger.info(f"[{request_id}] ingest_rejected: {e}")
            return _page(request, client_id=client_id or new_request_id(), transcript=transcript, prompt=prompt, error=str(e))
        transcript = ing.text
        logger.info(f"[{request_id}] ingest source={ing.source} pages={ing.pages} chars={len(ing.text)}")

    # 2) Field-level validation before any provider call
    req, errors = validate_summary_input(transcript, prompt)
    if req is None:
        return _page(
            request,
            client_id=client_id or new_request_id(),
            transcript=transcript,
            prompt=prompt,
            field_errors=_field_errors(errors),
        )

    # 3) Run the workflow
    workflow: SummaryWorkflow = app.state.summary_workflows.get(client_id)
    result = await run_in_threadpool(workflow.request_summary, req, request_id=request_id)

    if isinstance(result, SummarySuccess):
        return _page(request, client_id=client_id, transcript=transcript, prompt=prompt, summary=result.text)
    return _page(request, client_id=client_id, transcript=transcript, prompt=prompt, error=result.message)


@app.post("/ui/share")
def ui_share(
    request: Request,
    client_id: str = Form(""),
    transcript: str = Form(""),
    prompt: str = Form(""),
    summary: str = Form(""),
    recipient: str = Form(""),
):
    request_id = new_request_id()

    workflow: ShareWorkflow = app.state.share_workflows.get(client_id)
    result = workflow.submit(recipient, summary, request_id=request_id)

    context = {
        "client_id": client_id or new_request_id(),
        "transcript": transcript,
        "prompt": prompt,
        "summary": summary or None,
        "recipient": recipient,
    }
    if isinstance(result, EmailSuccess):
        return _page(request, share_notice="The summary has been sent successfully.", **context)
    if not summary.strip():
        return _page(request, error=result.message, **context)
    return _page(request, share_error=result.message, **context)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
