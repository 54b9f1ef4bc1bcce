"""
Data models for the Situation Report Registry.

Pydantic models for the structured report input, the classified markup
blocks, stored records and the consolidated briefing returned by the
synthesis model.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# STRUCTURED REPORT INPUT
# =============================================================================

class Incident(BaseModel):
    """A timed incident entry in the security section."""
    time: str = Field(description="Time of the incident, e.g. 1430hrs")
    description: str = Field(default="", description="What happened")


class ForceDiscipline(BaseModel):
    """Casualty and disciplinary figures. Empty strings fall back to defaults."""
    casualties: str = ""
    disciplinary_cases: str = ""


class ReportFields(BaseModel):
    """Structured fields captured by the daily report form."""
    report_date: str = Field(description="Day-label of the report, e.g. 16 FEB 26")
    unit_name: str
    day_number: str = Field(description="Attachment-day ordinal")
    operational_summary: str = ""
    security_situation: str = ""
    incidents: list[Incident] = Field(default_factory=list)
    action_taken: str = ""
    duties: list[str] = Field(default_factory=list)
    force_discipline: ForceDiscipline = Field(default_factory=ForceDiscipline)
    challenges: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    overall_summary: str = ""
    commander_name: str = ""
    supplementary_narrative: Optional[str] = Field(
        default=None,
        description="Orderly officer narrative; turns the document into an overall report"
    )


# =============================================================================
# MARKUP BLOCKS
# =============================================================================

class BlockKind(str, Enum):
    HEADING = "heading"
    BULLET = "bullet"
    BODY = "body"
    BLANK = "blank"


class Block(BaseModel):
    """One classified line of markup text."""
    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    text: str = ""


# =============================================================================
# ATTACHMENTS
# =============================================================================

class MediaAttachment(BaseModel):
    """A compressed image stored with a report as a data URL."""
    model_config = ConfigDict(frozen=True)

    data_url: str = Field(description="data:image/jpeg;base64,...")
    width: int = 0
    height: int = 0


# =============================================================================
# STORED RECORDS
# =============================================================================

class ReportStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"


class ReportRecord(BaseModel):
    """A persisted report. `report_date` is the day-label used for windowing."""
    id: str
    owner_id: str = ""
    report_date: str = ""
    unit: str = ""
    title: str = ""
    signing_officer: str = ""
    markup_text: str = ""
    attachments: list[MediaAttachment] = Field(default_factory=list)
    status: ReportStatus = ReportStatus.SUBMITTED
    created_at: datetime = Field(default_factory=_utcnow)


class ArticleRecord(BaseModel):
    """A magazine article submitted by a cadet."""
    id: str
    cadet_name: str
    company: str
    platoon: str
    content: str
    image: Optional[MediaAttachment] = None
    created_at: datetime = Field(default_factory=_utcnow)


class DocumentMetadata(BaseModel):
    """Header and signature values for an exported document."""
    title: str
    report_date: str = ""
    unit: str = ""
    commander_name: str = ""


class ExportedDocument(BaseModel):
    """Packed office document ready to be saved or streamed."""
    filename: str
    content: bytes


# =============================================================================
# CONSOLIDATION
# =============================================================================

class ConsolidationWindow(BaseModel):
    """The first N reporting days and the records that belong to them."""
    day_labels: list[str] = Field(default_factory=list)
    records: list[ReportRecord] = Field(default_factory=list)


class TimelineEntry(BaseModel):
    day_label: str = Field(description="Day-label exactly as it appears in the reports")
    events: list[str] = Field(default_factory=list)


class ConsolidatedBriefing(BaseModel):
    """Structured output of the multi-day synthesis."""
    executive_summary: str = Field(default="", description="Narrative overview of the period")
    key_achievements: list[str] = Field(default_factory=list)
    operational_trends: list[str] = Field(default_factory=list)
    critical_challenges: list[str] = Field(default_factory=list)
    strategic_recommendations: list[str] = Field(default_factory=list)
    incident_timeline: list[TimelineEntry] = Field(default_factory=list)


class WeeklySummary(BaseModel):
    """Structured output of the weekly roll-up of daily reports."""
    overall_security_situation: str = Field(
        default="", description="Security status across all reported areas for the week"
    )
    recurring_challenges: list[str] = Field(
        default_factory=list, description="Challenges that appeared in more than one daily report"
    )
    common_recommendations: list[str] = Field(
        default_factory=list, description="Recommendations made often or applicable everywhere"
    )
    weekly_summary: str = Field(default="", description="Narrative of the week's activities and tone")
