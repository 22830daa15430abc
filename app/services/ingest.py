from __future__ import annotations

import io
from dataclasses import dataclass
from typing import List, Optional

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

TEXT_SUFFIXES = (".txt", ".md", ".vtt", ".srt")


@dataclass
class IngestResult:
    source: str  # "text" | "file" | "pdf"
    text: str
    pages: int


def _extract_pdf_text_per_page(pdf_bytes: bytes, max_pages: int) -> List[str]:
    """
    Text extraction for digital PDFs (exported transcripts, minutes).
    Scanned pages come back empty.
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        total_pages = len(reader.pages)
    except PdfReadError as e:
        raise ValueError("Could not read the PDF") from e
    if total_pages > max_pages:
        raise ValueError(f"PDF has {total_pages} pages; max allowed is {max_pages}")

    out: List[str] = []
    try:
        for page in reader.pages:
            t = page.extract_text() or ""
            out.append(t.strip())
    except PdfReadError as e:
        raise ValueError("Could not read the PDF") from e
    return out


def ingest_transcript(
    *,
    text: Optional[str],
    file_bytes: Optional[bytes],
    filename: Optional[str],
    content_type: Optional[str],
    max_pdf_pages: int,
) -> IngestResult:
    """
    Returns the transcript text to summarize.
    Rules:
    - Pasted `text` wins when it is not blank; it is passed through as typed.
    - Plain-text uploads (.txt, .md, .vtt, .srt, text/*) are decoded as UTF-8.
    - PDFs are read page by page, up to `max_pdf_pages`.
    """
    if text and text.strip():
        return IngestResult(source="text", text=text, pages=0)

    if not file_bytes:
        raise ValueError("Provide either a transcript or a file")

    name = (filename or "").lower()
    ctype = (content_type or "").lower()

    if ctype == "application/pdf" or name.endswith(".pdf"):
        per_page = _extract_pdf_text_per_page(file_bytes, max_pdf_pages)
        merged = "\n\n".join([t for t in per_page if t]).strip()
        if not merged:
            raise ValueError("No text could be extracted from the PDF")
        return IngestResult(source="pdf", text=merged, pages=len(per_page))

    if ctype.startswith("text/") or name.endswith(TEXT_SUFFIXES):
        decoded = file_bytes.decode("utf-8", errors="replace").lstrip("\ufeff")
        return IngestResult(source="file", text=decoded.strip(), pages=0)

    raise ValueError(f"Unsupported file type: {filename} ({content_type})")
