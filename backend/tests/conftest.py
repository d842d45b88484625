"""
Pytest configuration and fixtures
"""
import io
import os

import pytest

# Pattern-only by default; tests that need the LLM path pass a fake client.
os.environ["OPENAI_API_KEY"] = ""
os.environ["LLM_PROVIDER"] = "openai"

import fitz  # noqa: E402
from docx import Document  # noqa: E402

from resume_ingest.services.common.llm_client import LLMClient, _JSONResponse  # noqa: E402


SAMPLE_RESUME = """JANE DOE
Austin, TX | jane.doe@example.com | (512) 555-1234
linkedin.com/in/janedoe | github.com/janedoe

SUMMARY
Backend engineer with eight years of experience building Python services and data pipelines for fintech products.

EXPERIENCE
Senior Software Engineer
Acme Corp
Jan 2020 - Present
- Built a payments API in Python and FastAPI
- Reduced p95 latency by 40%
Software Developer
Globex
Jun 2016 - Dec 2019
- Maintained Django services
- Migrated MySQL to PostgreSQL

EDUCATION
University of Texas at Austin
B.S. in Computer Science, 2012 - 2016
GPA: 3.8

PROJECTS
Budget Tracker | 2021 - Present
- Personal finance app built with React and Node.js
Technologies: React, Node.js, MongoDB

CERTIFICATIONS
AWS Certified Solutions Architect - Mar 2022

SKILLS
Python, Django, FastAPI, PostgreSQL, Docker, Kubernetes, AWS, Git, Leadership, Communication
"""


class FakeLLMClient:
    """Stands in for LLMClient: returns a canned payload and records the messages it was sent."""

    provider = "openai"

    def __init__(self, payload=None, configured=True):
        self.payload = payload if payload is not None else {}
        self.configured = configured
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    def chat_json(self, messages, timeout=60, *, json_schema=None, schema_name="response", max_tokens=None):
        self.calls.append({"messages": messages, "timeout": timeout, "json_schema": json_schema})
        return _JSONResponse(data=self.payload)


def make_pdf(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    y = 60
    for line in text.splitlines():
        if y > 780:
            page = doc.new_page()
            y = 60
        if line.strip():
            page.insert_text((60, y), line, fontsize=10)
        y += 14
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(build) -> bytes:
    doc = Document()
    build(doc)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture
def sample_text():
    return SAMPLE_RESUME


@pytest.fixture
def sample_pdf():
    return make_pdf(SAMPLE_RESUME)


@pytest.fixture
def unconfigured_client():
    return LLMClient(provider="openai", api_key="")


@pytest.fixture
def id_factory():
    counter = iter(range(1, 10_000))
    return lambda: f"id-{next(counter)}"
