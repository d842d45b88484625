# resume_ingest/services/resumes/ingestion_pipeline.py
"""End-to-end resume parsing: upload bytes in, ParseResult out (text extraction, both extractors, merge, assembly)."""
# -----------------------------------------------------------------------------
# FLOW
# - Input checks first (empty upload, size, mime type): ResumeInputError, nothing else runs.
# - Text extraction -> LLM extractor (may return None) -> pattern engine (always
#   returns) -> merge -> working + RMS profiles -> quality report.
# - Anything unexpected after the input checks becomes success=False with the
#   exception message; this is the only failure result.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import time
from typing import Optional

from resume_ingest.core.config import settings
from resume_ingest.core.errors import ResumeInputError
from resume_ingest.schemas.resume import ParseMetadata, ParseResult
from resume_ingest.services.common.ids import IdFactory, new_id
from resume_ingest.services.common.llm_client import LLMClient
from resume_ingest.services.resumes.assembler import build_rms_profile, build_working_profile
from resume_ingest.services.resumes.extraction.deterministic import extract_pattern_profile
from resume_ingest.services.resumes.extraction.llm_boost import extract_with_llm
from resume_ingest.services.resumes.merge import merge_extractions
from resume_ingest.services.resumes.parsing_utils import extract_document_text, source_type_for
from resume_ingest.services.resumes.validation import validate_profile

logger = logging.getLogger("resumes.pipeline")

PREVIEW_CHARS = 500


def text_preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def check_upload(file_content: Optional[bytes], mime_type: Optional[str]) -> str:
    """Reject unusable uploads before any work; returns the source type ('pdf' / 'docx')."""
    if not file_content:
        raise ResumeInputError("No file provided")
    source_type = source_type_for(mime_type)
    if len(file_content) > settings.MAX_UPLOAD_BYTES:
        raise ResumeInputError(
            f"File too large: {len(file_content)} bytes (limit {settings.MAX_UPLOAD_BYTES})"
        )
    return source_type


def parse_resume(
    file_content: Optional[bytes],
    mime_type: Optional[str],
    *,
    llm_client: Optional[LLMClient] = None,
    id_factory: IdFactory = new_id,
    log: Optional[logging.Logger] = None,
) -> ParseResult:
    log = log or logger
    started = time.perf_counter()
    source_type = check_upload(file_content, mime_type)

    try:
        extracted = extract_document_text(file_content, mime_type)
        ai_result = extract_with_llm(extracted.formatted_text or extracted.text, client=llm_client)
        pattern_result = extract_pattern_profile(extracted.text)

        merged = merge_extractions(ai_result, pattern_result, source_type=source_type, id_factory=id_factory)
        profile = build_working_profile(merged)
        rms = build_rms_profile(merged)

        quality = validate_profile(merged)
        if quality.warnings:
            log.warning("Resume quality warnings: %s", quality.warnings)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        log.info(
            "Parsed %s (%d bytes) in %d ms; llm=%s",
            source_type, len(file_content), elapsed_ms, ai_result is not None,
        )
        return ParseResult(
            success=True,
            profile=profile,
            rms_data=rms,
            confidence=settings.PARSE_CONFIDENCE,
            metadata=ParseMetadata(
                extracted_text_preview=text_preview(extracted.text),
                file_type=mime_type,
                file_size=len(file_content),
                processing_time=elapsed_ms,
                sources=merged.sources,
                quality=quality.summary,
            ),
            warnings=quality.warnings,
        )
    except ResumeInputError:
        raise
    except Exception as e:
        log.exception("Resume parsing failed")
        return ParseResult(success=False, error=str(e) or e.__class__.__name__)
