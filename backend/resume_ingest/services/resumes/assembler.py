# resume_ingest/services/resumes/assembler.py
"""Builds the two outward shapes of a merged profile: the working profile and the RMS profile."""
from __future__ import annotations

from resume_ingest.schemas.resume import (
    MergedProfile,
    ProfileMetadata,
    ResumeProfile,
    RmsCertification,
    RmsContact,
    RmsDates,
    RmsEducation,
    RmsExperience,
    RmsMetadata,
    RmsName,
    RmsPersonal,
    RmsProfessional,
    RmsProfile,
    RmsProject,
    RmsUrls,
)
from resume_ingest.services.resumes.dates import PRESENT

RMS_VERSION = "1.0"


def build_working_profile(merged: MergedProfile) -> ResumeProfile:
    return ResumeProfile(
        contact=merged.contact.model_copy(deep=True),
        summary=merged.summary,
        experience=[e.model_copy(deep=True) for e in merged.experience],
        education=[e.model_copy(deep=True) for e in merged.education],
        projects=[p.model_copy(deep=True) for p in merged.projects],
        certifications=[c.model_copy(deep=True) for c in merged.certifications],
        skills={k: list(v) for k, v in merged.skills.items()},
        metadata=ProfileMetadata(created_at=merged.created_at, source=merged.source_type),
    )


def build_rms_profile(merged: MergedProfile) -> RmsProfile:
    """Map the merged entities onto personal.* / professional.*; no extraction happens here."""
    contact = merged.contact
    personal = RmsPersonal(
        name=RmsName(
            first=contact.first_name,
            middle=contact.middle_name,
            last=contact.last_name,
            full=contact.full_name,
        ),
        contact=RmsContact(
            email=[contact.email] if contact.email else [],
            phone=[contact.phone] if contact.phone else [],
            location=contact.location,
            urls=RmsUrls(
                linkedin=contact.linkedin or None,
                github=contact.github or None,
                website=contact.website or None,
            ),
        ),
    )

    professional = RmsProfessional(
        summary=merged.summary,
        experience=[
            RmsExperience(
                company=e.company,
                position=e.position,
                location=e.location,
                dates=RmsDates(start=e.start_date, end=e.end_date, current=e.current),
                description=e.description,
                achievements=list(e.achievements),
            )
            for e in merged.experience
        ],
        skills={k: list(v) for k, v in merged.skills.items()},
        education=[
            RmsEducation(
                institution=e.institution,
                degree=e.degree,
                field=e.field_of_study,
                location=e.location,
                dates=RmsDates(start=e.start_date, end=e.end_date, current=e.end_date == PRESENT),
                date=e.end_date,
                gpa=e.gpa,
            )
            for e in merged.education
        ],
        projects=[
            RmsProject(
                name=p.name,
                description=p.description,
                dates=RmsDates(start=p.start_date, end=p.end_date, current=p.current),
                achievements=list(p.achievements),
                technologies=list(p.technologies),
                url=p.url,
            )
            for p in merged.projects
        ],
        certifications=[
            RmsCertification(name=c.name, issuer=c.issuer, date=c.date) for c in merged.certifications
        ],
    )

    return RmsProfile(
        metadata=RmsMetadata(version=RMS_VERSION, created=merged.created_at, source=merged.source_type),
        personal=personal,
        professional=professional,
    )
