from __future__ import annotations

import io
import json
from typing import Callable, Generator, List, Optional

import httpx
import pytest
from PyPDF2 import PdfWriter
from PyPDF2.generic import DecodedStreamObject, DictionaryObject, NameObject

from app.core.config import EmailJsConfig

TRANSCRIPT = (
    "Alice: Thanks everyone for joining. Bob, can you give the Q3 update? "
    "Bob: Revenue is up 12 percent and the launch moved to October 3rd."
)


def text_pdf(*pages: str) -> bytes:
    """Build a PDF with one line of Helvetica text per page."""
    writer = PdfWriter()
    font = DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject("/Type1"),
        NameObject("/BaseFont"): NameObject("/Helvetica"),
    })
    font_ref = writer._add_object(font)
    for line in pages:
        writer.add_blank_page(width=612, height=792)
        page = writer.pages[-1]
        page[NameObject("/Resources")] = DictionaryObject({
            NameObject("/Font"): DictionaryObject({NameObject("/F1"): font_ref}),
        })
        content = DecodedStreamObject()
        content.set_data(f"BT /F1 12 Tf 72 720 Td ({line}) Tj ET".encode("latin-1"))
        page[NameObject("/Contents")] = writer._add_object(content)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


class StubProvider:
    """Summarization provider double that records every call."""

    def __init__(self, text: Optional[str] = "• point one\n• point two", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[tuple] = []

    def summarize(self, transcript: str, prompt: str) -> str:
        self.calls.append((transcript, prompt))
        if self.error is not None:
            raise self.error
        return self.text


class RecordingTransport:
    """httpx transport that records requests and answers with a canned response."""

    def __init__(self, handler: Optional[Callable[[httpx.Request], httpx.Response]] = None):
        self.requests: List[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, text="OK"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def transcript() -> str:
    return TRANSCRIPT


@pytest.fixture()
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture()
def email_config() -> EmailJsConfig:
    return EmailJsConfig(
        service_id="service_test",
        template_id="template_test",
        public_key="public_test",
        private_key="private_test",
        api_url="https://emailjs.test/api/v1.0/email/send",
    )


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def test_client(provider: StubProvider, email_config: EmailJsConfig, transport: RecordingTransport) -> Generator:
    from fastapi.testclient import TestClient

    from app import main
    from app.core.config import UploadLimits
    from app.services.share_workflow import ShareWorkflow
    from app.services.submissions import WorkflowRegistry
    from app.services.summary_workflow import SummaryWorkflow

    http = transport.client()
    saved = (
        main.app.state.summary_workflows,
        main.app.state.share_workflows,
        main.app.state.upload_limits,
    )
    main.app.state.summary_workflows = WorkflowRegistry(lambda: SummaryWorkflow(provider))
    main.app.state.share_workflows = WorkflowRegistry(lambda: ShareWorkflow(email_config, client=http))
    main.app.state.upload_limits = UploadLimits(max_upload_mb=1, max_pdf_pages=2)

    client = TestClient(main.app)
    try:
        yield client
    finally:
        client.close()
        http.close()
        (
            main.app.state.summary_workflows,
            main.app.state.share_workflows,
            main.app.state.upload_limits,
        ) = saved
