# resume_ingest/schemas/resume.py
# -----------------------------------------------------------------------------
# Pydantic models for the resume parsing pipeline.
# - Python attributes are snake_case; the wire format is camelCase (firstName,
#   startDate, rmsData) through the shared alias generator.
# - Every entity is created fresh per parse request; ids are minted at merge time.
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SkillsMap = Dict[str, List[str]]
SourceType = Literal["pdf", "docx"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactRecord(CamelModel):
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""

    def is_empty(self) -> bool:
        return not any(str(v).strip() for v in self.model_dump().values())

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)


class ExperienceEntry(CamelModel):
    id: str = ""
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    achievements: List[str] = Field(default_factory=list)


class EducationEntry(CamelModel):
    id: str = ""
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: Optional[str] = None
    honors: List[str] = Field(default_factory=list)


class ProjectEntry(CamelModel):
    id: str = ""
    name: str = ""
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    achievements: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    url: Optional[str] = None


class CertificationEntry(CamelModel):
    id: str = ""
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiry_date: str = ""
    url: Optional[str] = None


class ExtractionResult(CamelModel):
    """Output shape shared by the AI extractor and the pattern engine."""
    contact: ContactRecord = Field(default_factory=ContactRecord)
    summary: str = ""
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    certifications: List[CertificationEntry] = Field(default_factory=list)
    skills: SkillsMap = Field(default_factory=dict)


class MergedProfile(ExtractionResult):
    created_at: str
    source_type: SourceType
    # group name -> "ai" | "pattern"
    sources: Dict[str, str] = Field(default_factory=dict)


# --- Internal working profile -------------------------------------------------

class ProfileMetadata(CamelModel):
    created_at: str
    source: SourceType
    version: str = "1.0"


class ResumeProfile(ExtractionResult):
    metadata: ProfileMetadata


# --- Resume Metadata Standard (RMS) profile ----------------------------------

class RmsMetadata(CamelModel):
    version: str = "1.0"
    created: str
    source: SourceType


class RmsName(CamelModel):
    first: str = ""
    middle: str = ""
    last: str = ""
    full: str = ""


class RmsUrls(CamelModel):
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None


class RmsContact(CamelModel):
    email: List[str] = Field(default_factory=list)
    phone: List[str] = Field(default_factory=list)
    location: str = ""
    urls: RmsUrls = Field(default_factory=RmsUrls)


class RmsPersonal(CamelModel):
    name: RmsName = Field(default_factory=RmsName)
    contact: RmsContact = Field(default_factory=RmsContact)


class RmsDates(CamelModel):
    start: str = ""
    end: str = ""
    current: bool = False


class RmsExperience(CamelModel):
    company: str = ""
    position: str = ""
    location: str = ""
    dates: RmsDates = Field(default_factory=RmsDates)
    description: str = ""
    achievements: List[str] = Field(default_factory=list)


class RmsEducation(CamelModel):
    institution: str = ""
    degree: str = ""
    field: str = ""
    location: str = ""
    dates: RmsDates = Field(default_factory=RmsDates)
    date: str = ""
    gpa: Optional[str] = None


class RmsProject(CamelModel):
    name: str = ""
    description: str = ""
    dates: RmsDates = Field(default_factory=RmsDates)
    achievements: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    url: Optional[str] = None


class RmsCertification(CamelModel):
    name: str = ""
    issuer: str = ""
    date: str = ""


class RmsProfessional(CamelModel):
    summary: str = ""
    experience: List[RmsExperience] = Field(default_factory=list)
    skills: SkillsMap = Field(default_factory=dict)
    education: List[RmsEducation] = Field(default_factory=list)
    projects: List[RmsProject] = Field(default_factory=list)
    certifications: List[RmsCertification] = Field(default_factory=list)


class RmsProfile(CamelModel):
    metadata: RmsMetadata
    personal: RmsPersonal = Field(default_factory=RmsPersonal)
    professional: RmsProfessional = Field(default_factory=RmsProfessional)


# --- API result ----------------------------------------------------------------

class ParseMetadata(CamelModel):
    extracted_text_preview: str = ""
    file_type: str
    file_size: int = Field(ge=0)
    processing_time: int = Field(ge=0, description="Elapsed milliseconds")
    sources: Dict[str, str] = Field(default_factory=dict)
    quality: Dict[str, object] = Field(default_factory=dict)


class ParseResult(CamelModel):
    success: bool
    profile: Optional[ResumeProfile] = None
    rms_data: Optional[RmsProfile] = None
    confidence: Optional[float] = None
    metadata: Optional[ParseMetadata] = None
    warnings: Optional[List[str]] = None
    error: Optional[str] = None
