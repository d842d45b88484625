# resume_ingest/api/routers/resumes.py
"""Resume API endpoints: parse an uploaded PDF/DOCX into the working profile and the RMS profile."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from resume_ingest.core.errors import ResumeInputError
from resume_ingest.services.common.llm_client import LLMClient, get_llm_client
from resume_ingest.services.resumes.ingestion_pipeline import parse_resume

logger = logging.getLogger("api.resumes")

router = APIRouter(prefix="/resumes", tags=["resumes"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.post("/parse")
def parse_resume_upload(
    file: Optional[UploadFile] = File(None),
    llm_client: LLMClient = Depends(get_llm_client),
):
    """
    Parse a resume upload (multipart field `file`).
    - 200: {success: true, profile, rmsData, confidence, metadata, warnings}
    - 400: no file / empty / too large / not PDF or DOCX
    - 500: the document could not be processed
    """
    if file is None:
        return _failure(400, "No file provided")

    content = file.file.read()
    logger.info("Parse request: %s (%s, %d bytes)", file.filename, file.content_type, len(content))
    try:
        result = parse_resume(content, file.content_type, llm_client=llm_client)
    except ResumeInputError as e:
        logger.info("Rejected upload %s: %s", file.filename, e)
        return _failure(e.status_code, str(e))

    if not result.success:
        return _failure(500, result.error or "Failed to parse resume")
    return JSONResponse(content=result.model_dump(by_alias=True, exclude_none=True))
