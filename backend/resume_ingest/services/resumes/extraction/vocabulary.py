# resume_ingest/services/resumes/extraction/vocabulary.py
"""Keyword tables used by the deterministic extractors.

Every heuristic in the pattern engine reads its words from here, so each one can be
tested against its table in isolation. Keys are lowercase unless noted.
"""
from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

# ============================================================================
# SECTION HEADINGS
# ============================================================================
SECTION_HEADINGS: Dict[str, Tuple[str, ...]] = {
    "summary": (
        "summary", "professional summary", "career summary", "executive summary",
        "profile", "professional profile", "career profile", "objective", "career objective",
        "professional objective", "about", "about me", "overview", "personal statement",
        "introduction",
    ),
    "experience": (
        "experience", "work experience", "professional experience", "relevant experience",
        "employment", "employment history", "work history", "career history",
        "professional background", "positions held", "industry experience",
    ),
    "education": (
        "education", "academic background", "academic history", "educational background",
        "academic qualifications", "education and training", "education & training",
    ),
    "skills": (
        "skills", "technical skills", "core competencies", "competencies", "key skills",
        "skills & abilities", "skills and abilities", "expertise", "areas of expertise",
        "technologies", "tech stack", "proficiencies",
    ),
    "projects": (
        "projects", "personal projects", "side projects", "key projects", "selected projects",
        "academic projects", "portfolio",
    ),
    "certifications": (
        "certifications", "certificates", "certification", "licenses", "licenses & certifications",
        "licenses and certifications", "credentials", "professional certifications",
    ),
    "awards": ("awards", "honors", "honors & awards", "honors and awards", "achievements", "accomplishments"),
    "publications": ("publications", "papers", "research"),
    "volunteer": ("volunteer", "volunteering", "volunteer experience", "community service"),
    "languages": ("languages", "language skills"),
    "interests": ("interests", "hobbies", "hobbies & interests"),
    "references": ("references",),
    "contact": ("contact", "contact information", "personal information", "personal details"),
}

# heading text -> section key, built once
HEADING_LOOKUP: Dict[str, str] = {
    heading: section for section, headings in SECTION_HEADINGS.items() for heading in headings
}

# ============================================================================
# DATES
# ============================================================================
MONTHS: Dict[str, str] = {
    "january": "01", "jan": "01",
    "february": "02", "feb": "02",
    "march": "03", "mar": "03",
    "april": "04", "apr": "04",
    "may": "05",
    "june": "06", "jun": "06",
    "july": "07", "jul": "07",
    "august": "08", "aug": "08",
    "september": "09", "sep": "09", "sept": "09",
    "october": "10", "oct": "10",
    "november": "11", "nov": "11",
    "december": "12", "dec": "12",
}

PRESENT_WORDS: FrozenSet[str] = frozenset({"present", "current", "now"})

# ============================================================================
# NAMES & TITLES
# ============================================================================
# Uppercase tokens that disqualify an ALL-CAPS two-word line from being a name.
NAME_TITLE_EXCLUSIONS: FrozenSet[str] = frozenset({
    "ENGINEER", "ENGINEERING", "DEVELOPER", "MANAGER", "DIRECTOR", "ANALYST", "SPECIALIST",
    "CONSULTANT", "DESIGNER", "ARCHITECT", "SCIENTIST", "ADMINISTRATOR", "COORDINATOR",
    "ASSOCIATE", "ASSOCIATION", "ASSISTANT", "INTERN", "LEAD", "SENIOR", "JUNIOR", "PRINCIPAL",
    "OFFICER", "EXECUTIVE", "PRESIDENT", "FOUNDER", "OWNER", "PROGRAMMER", "TECHNICIAN",
    "RESUME", "CURRICULUM", "VITAE", "CV", "PROFILE", "SUMMARY", "EXPERIENCE", "EDUCATION",
    "SKILLS", "PROJECTS", "CONTACT", "OBJECTIVE", "INFORMATION", "DETAILS", "UNIVERSITY",
    "COLLEGE", "INSTITUTE", "SCHOOL", "INC", "LLC", "CORP", "CORPORATION", "COMPANY",
    "SOLUTIONS", "SERVICES", "GROUP", "TECHNOLOGIES", "SOFTWARE", "SYSTEMS", "DATA",
})

# Role vocabulary used to tell a job-title line from a company line.
JOB_TITLE_KEYWORDS: Tuple[str, ...] = (
    "engineer", "developer", "manager", "director", "analyst", "specialist", "consultant",
    "intern", "internship", "lead", "architect", "designer", "scientist", "administrator",
    "coordinator", "associate", "officer", "president", "vice president", "vp", "founder",
    "co-founder", "head", "assistant", "technician", "programmer", "researcher", "executive",
    "representative", "supervisor", "strategist", "advisor", "instructor", "teacher",
    "tutor", "owner", "partner", "contractor", "freelancer", "accountant", "recruiter",
)

# ============================================================================
# LOCATIONS
# ============================================================================
KNOWN_LOCATIONS: Tuple[str, ...] = (
    "San Francisco, CA", "Los Angeles, CA", "San Diego, CA", "San Jose, CA", "Palo Alto, CA",
    "Mountain View, CA", "Sunnyvale, CA", "Oakland, CA", "New York, NY", "Brooklyn, NY",
    "Seattle, WA", "Redmond, WA", "Bellevue, WA", "Austin, TX", "Dallas, TX", "Houston, TX",
    "San Antonio, TX", "Boston, MA", "Cambridge, MA", "Chicago, IL", "Denver, CO",
    "Boulder, CO", "Atlanta, GA", "Miami, FL", "Orlando, FL", "Tampa, FL", "Portland, OR",
    "Phoenix, AZ", "Philadelphia, PA", "Pittsburgh, PA", "Washington, DC", "Arlington, VA",
    "Raleigh, NC", "Charlotte, NC", "Minneapolis, MN", "Detroit, MI", "Ann Arbor, MI",
    "Salt Lake City, UT", "Nashville, TN", "Columbus, OH", "Madison, WI",
)

US_STATE_CODES: FrozenSet[str] = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN", "IA",
    "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT", "VT",
    "VA", "WA", "WV", "WI", "WY", "DC",
})

# ============================================================================
# EDUCATION
# ============================================================================
# Matched case-insensitively.
DEGREE_KEYWORDS: Tuple[str, ...] = (
    "bachelor", "bachelors", "bachelor's", "master", "masters", "master's", "doctor",
    "doctorate", "associate of", "associate's", "diploma", "ph.d", "phd",
)
# Abbreviations are matched case-sensitively so "MS" does not fire on "ms" inside prose.
DEGREE_ABBREVIATIONS: Tuple[str, ...] = (
    "B.S.", "B.S", "BS", "B.A.", "B.A", "BA", "B.Sc.", "B.Sc", "BSc", "B.Eng", "BEng", "B.Tech",
    "BTech", "B.E.", "M.S.", "M.S", "MS", "M.A.", "M.A", "MA", "M.Sc.", "M.Sc", "MSc", "M.Eng",
    "MEng", "M.Tech", "MTech", "MBA", "M.B.A.", "Ph.D.", "PhD", "A.A.", "A.S.", "J.D.", "M.D.",
)
SCHOOL_KEYWORDS: Tuple[str, ...] = (
    "university", "college", "institute", "school", "academy", "polytechnic", "conservatory",
)

# ============================================================================
# SKILLS
# ============================================================================
TECHNICAL_SKILLS: List[str] = [
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Rust",
    "Kotlin", "Swift", "Scala", "React", "Angular", "Vue", "Node.js", "Express", "Django",
    "Flask", "FastAPI", "Spring", "Laravel", "HTML", "CSS", "SASS", "SCSS", "Bootstrap",
    "Tailwind", "jQuery", "GraphQL", "REST", "SQL", "MySQL", "PostgreSQL", "MongoDB", "Redis",
    "SQLite", "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Terraform", "Jenkins", "Git",
    "GitHub", "GitLab", "Linux", "Pandas", "NumPy", "TensorFlow", "PyTorch", "Machine Learning",
]

TOOLS: List[str] = [
    "Git", "Docker", "Kubernetes", "Jenkins", "Jira", "Confluence", "Slack", "Trello",
    "Figma", "Adobe", "Photoshop", "Illustrator", "Sketch", "InVision", "Postman",
    "VS Code", "IntelliJ", "Eclipse", "Sublime", "Atom", "Tableau", "Power BI", "Excel",
]

SOFT_SKILLS: List[str] = [
    "Leadership", "Communication", "Teamwork", "Problem Solving", "Critical Thinking",
    "Project Management", "Time Management", "Adaptability", "Creativity", "Innovation",
    "Collaboration", "Mentoring", "Negotiation", "Public Speaking", "Attention to Detail",
]

SKILL_VOCABULARIES: Dict[str, List[str]] = {
    "technical": TECHNICAL_SKILLS,
    "tools": TOOLS,
    "soft": SOFT_SKILLS,
}

# ============================================================================
# LINES
# ============================================================================
BULLET_CHARS: Tuple[str, ...] = ("•", "-", "*", "●", "▪", "◦", "‣", "–")
PLACEHOLDER_COMPANY = "Company Name"
PLACEHOLDER_POSITION = "Position Title"
PLACEHOLDER_EDUCATION = {
    "institution": "University Name",
    "degree": "Bachelor of Science",
    "field_of_study": "Computer Science",
}
