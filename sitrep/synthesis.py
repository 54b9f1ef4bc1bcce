"""
Synthesis module for the Situation Report Registry.

Handles the Gemini calls that turn many situation reports into one
consolidated briefing or a weekly executive summary, and converts those
results back into report markup so they export through the same document
path as a daily report.
Each call is made once; retrying is left to the caller.
"""

import json
import logging
from datetime import date
from typing import List, Optional, Sequence, Type, TypeVar

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel, ValidationError

from .config import (
    CONSOLIDATED_SIGNATORY,
    CONSOLIDATED_UNIT,
    GOOGLE_API_KEY,
    MODEL_NAME,
    UNDATED_DAY_LABEL,
    WEEKLY_TITLE,
)
from .docx_export import export_markup
from .exceptions import NoContentError, SynthesisError
from .models import (
    ConsolidatedBriefing,
    DocumentMetadata,
    ExportedDocument,
    ReportRecord,
    WeeklySummary,
)
from .prompts import get_consolidation_prompt, get_weekly_summary_prompt
from .template import bullet, heading
from .windowing import build_window, collect_transcripts

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

# Daily reports pasted as one block are separated by this line
DAILY_REPORT_SEPARATOR = "---"

# Global model instance - initialized once
_gemini_model: Optional[genai.GenerativeModel] = None


# =============================================================================
# INITIALIZATION
# =============================================================================

def configure_gemini() -> genai.GenerativeModel:
    """
    Configure Google Generative AI and return the model instance.

    Returns:
        Configured GenerativeModel instance

    Raises:
        ValueError: If GOOGLE_API_KEY is not set
    """
    global _gemini_model

    if not GOOGLE_API_KEY:
        raise ValueError("GOOGLE_API_KEY environment variable is not set")

    genai.configure(api_key=GOOGLE_API_KEY)
    _gemini_model = genai.GenerativeModel(MODEL_NAME)

    logger.info(f"Gemini API configured successfully with model: {MODEL_NAME}")
    return _gemini_model


def get_model() -> Optional[genai.GenerativeModel]:
    """Get the current Gemini model instance."""
    return _gemini_model


# =============================================================================
# SYNTHESIS CALL
# =============================================================================

def _parse_llm_response(response_text: str, schema: Type[ResultT]) -> ResultT:
    """Parse the model's JSON answer into `schema`."""
    text = (response_text or "").strip()

    # Handle markdown code blocks
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()

    try:
        return schema.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Failed to parse {schema.__name__} response: {e}")
        raise SynthesisError(f"AI returned an unreadable answer: {e}") from e


def _generate_json(prompt: str, model: genai.GenerativeModel) -> str:
    """
    Make one JSON-mode model call and return the raw answer text.

    Raises:
        SynthesisError: If the call fails or the answer is empty
    """
    try:
        response = model.generate_content(
            prompt,
            generation_config={"response_mime_type": "application/json"},
        )
        response_text = response.text
    except google_exceptions.ResourceExhausted as e:
        logger.error(f"⏳ Rate limit hit during synthesis: {e}")
        raise SynthesisError("AI service is rate limited, try again later") from e
    except (google_exceptions.ServiceUnavailable, google_exceptions.DeadlineExceeded) as e:
        logger.error(f"AI service unavailable during synthesis: {e}")
        raise SynthesisError("AI service is unavailable, try again later") from e
    except Exception as e:
        logger.error(f"❌ Synthesis failed: {e}")
        raise SynthesisError(f"AI failed to generate synthesis: {e}") from e

    if not response_text:
        raise SynthesisError("AI failed to generate synthesis: empty response")
    return response_text


def synthesize_briefing(
    transcripts: List[str],
    target_days: int,
    model: genai.GenerativeModel,
) -> ConsolidatedBriefing:
    """
    Ask the model for a consolidated briefing over the given transcripts.

    Args:
        transcripts: Report bodies in creation order
        target_days: Number of reporting days covered
        model: Configured Gemini model

    Returns:
        The parsed briefing

    Raises:
        SynthesisError: If the call fails or the answer cannot be parsed
    """
    prompt = get_consolidation_prompt(transcripts, target_days)
    logger.info(f"Synthesizing briefing from {len(transcripts)} report(s), {target_days} day(s)")
    return _parse_llm_response(_generate_json(prompt, model), ConsolidatedBriefing)


def consolidate_reports(
    records: Sequence[ReportRecord],
    days: int,
    model: genai.GenerativeModel,
) -> ConsolidatedBriefing:
    """
    Window the registry and synthesize a briefing for the first `days` days.

    Raises:
        EmptyWindowError: If no reporting day falls in the window
        NoContentError: If the window holds no report content
        SynthesisError: If the model call fails
    """
    window = build_window(records, days)
    transcripts = collect_transcripts(window)
    briefing = synthesize_briefing(transcripts, days, model)
    logger.info(f"✓ Generated synthesis for {len(window.day_labels)} operational days")
    return briefing


# =============================================================================
# WEEKLY SUMMARY
# =============================================================================

def split_daily_reports(text: str) -> List[str]:
    """Split pasted text into daily reports on `---` separator lines."""
    reports: List[str] = []
    current: List[str] = []
    for line in (text or "").splitlines():
        if line.strip() == DAILY_REPORT_SEPARATOR:
            reports.append("\n".join(current).strip())
            current = []
        else:
            current.append(line)
    reports.append("\n".join(current).strip())
    return [report for report in reports if report]


def summarize_week(
    start_date: str,
    end_date: str,
    reports: Sequence[str],
    model: genai.GenerativeModel,
) -> WeeklySummary:
    """
    Ask the model for a weekly executive summary of raw daily reports.

    Args:
        start_date: First day of the week (YYYY-MM-DD)
        end_date: Last day of the week (YYYY-MM-DD)
        reports: Daily report texts, blanks are ignored
        model: Configured Gemini model

    Raises:
        NoContentError: If no report has any text
        SynthesisError: If the call fails or the answer cannot be parsed
    """
    daily = [report.strip() for report in reports if report.strip()]
    if not daily:
        raise NoContentError(f"No daily report content for {start_date} to {end_date}")

    prompt = get_weekly_summary_prompt(start_date.strip(), end_date.strip(), daily)
    logger.info(f"Summarizing {len(daily)} daily report(s) for {start_date} to {end_date}")
    summary = _parse_llm_response(_generate_json(prompt, model), WeeklySummary)
    logger.info(f"✓ Weekly summary generated ({len(summary.recurring_challenges)} recurring challenge(s))")
    return summary


# =============================================================================
# BRIEFING EXPORT
# =============================================================================

def format_day_label(day: date) -> str:
    """Format a date the way report day-labels are written, e.g. 19 OCT 26."""
    return day.strftime("%d %b %y").upper()


def consolidated_title(days: int) -> str:
    return f"CONSOLIDATED PROGRESS REPORT (FIRST {days} DAYS)"


def briefing_to_markup(briefing: ConsolidatedBriefing) -> str:
    """
    Render a briefing as report markup.

    Sections with no content are left out; the executive summary is always
    present.
    """
    lines: List[str] = [heading("EXECUTIVE SUMMARY")]
    lines.extend(line.strip() for line in briefing.executive_summary.strip().splitlines())

    sections = (
        ("KEY ACHIEVEMENTS", briefing.key_achievements),
        ("OPERATIONAL TRENDS", briefing.operational_trends),
        ("CRITICAL CHALLENGES", briefing.critical_challenges),
        ("STRATEGIC RECOMMENDATIONS", briefing.strategic_recommendations),
    )
    for title, items in sections:
        items = [" ".join(item.split()) for item in items if item.strip()]
        if not items:
            continue
        lines.append("")
        lines.append(heading(title))
        lines.extend(bullet(item) for item in items)

    if briefing.incident_timeline:
        lines.append("")
        lines.append(heading("INCIDENT TIMELINE"))
        for entry in briefing.incident_timeline:
            # An empty label would give "**", which reads back as body text
            lines.append(heading(" ".join(entry.day_label.split()) or UNDATED_DAY_LABEL))
            lines.extend(bullet(" ".join(event.split())) for event in entry.events if event.strip())

    return "\n".join(lines)


def export_briefing(
    briefing: ConsolidatedBriefing,
    days: int,
    today: Optional[date] = None,
) -> ExportedDocument:
    """Export a briefing through the report document codec."""
    metadata = DocumentMetadata(
        title=consolidated_title(days),
        report_date=format_day_label(today or date.today()),
        unit=CONSOLIDATED_UNIT,
        commander_name=CONSOLIDATED_SIGNATORY,
    )
    return export_markup(briefing_to_markup(briefing), [], metadata)


def weekly_title(start_date: str, end_date: str) -> str:
    return f"{WEEKLY_TITLE} {start_date.strip()} TO {end_date.strip()}"


def weekly_summary_to_markup(summary: WeeklySummary) -> str:
    """Render a weekly summary as report markup; empty list sections are left out."""
    lines: List[str] = [heading("OVERALL SECURITY SITUATION")]
    lines.extend(line.strip() for line in summary.overall_security_situation.strip().splitlines())

    sections = (
        ("RECURRING CHALLENGES", summary.recurring_challenges),
        ("COMMON RECOMMENDATIONS", summary.common_recommendations),
    )
    for title, items in sections:
        items = [" ".join(item.split()) for item in items if item.strip()]
        if not items:
            continue
        lines.append("")
        lines.append(heading(title))
        lines.extend(bullet(item) for item in items)

    lines.append("")
    lines.append(heading("NARRATIVE SUMMARY"))
    lines.extend(line.strip() for line in summary.weekly_summary.strip().splitlines())
    return "\n".join(lines)


def export_weekly_summary(summary: WeeklySummary, start_date: str, end_date: str) -> ExportedDocument:
    """Export a weekly summary through the report document codec."""
    metadata = DocumentMetadata(
        title=weekly_title(start_date, end_date),
        report_date=f"{start_date.strip()} to {end_date.strip()}",
        unit=CONSOLIDATED_UNIT,
        commander_name=CONSOLIDATED_SIGNATORY,
    )
    return export_markup(weekly_summary_to_markup(summary), [], metadata)
