"""
Template module for the Situation Report Registry.

Compiles the structured daily report form into the canonical markup text
that is persisted, displayed and exported.
This module is stateless - returns strings without file I/O.
"""

from typing import Iterable, List

from .config import (
    CANONICAL_BULLET,
    CLOSING_BOILERPLATE,
    CLOSING_SALUTATION,
    DEFAULT_CASUALTIES,
    DEFAULT_DISCIPLINARY_CASES,
    HEADING_DELIMITER,
    LIST_JOINER,
)
from .models import ReportFields


def _clean(value: str) -> str:
    """Collapse a free-text value onto a single line."""
    return " ".join((value or "").split())


def _clean_items(items: Iterable[str]) -> List[str]:
    return [item for item in (_clean(i) for i in items) if item]


def heading(text: str) -> str:
    return f"{HEADING_DELIMITER}{text}{HEADING_DELIMITER}"


def bullet(text: str) -> str:
    return f"{CANONICAL_BULLET}{text}"


def signature_line(unit: str, commander_name: str) -> str:
    return f"OC {unit}: OC {commander_name}"


def report_title(fields: ReportFields) -> str:
    """Title stored with the record and used for the export filename."""
    return f"Situation Report {_clean(fields.unit_name)} {_clean(fields.report_date)}"


def compile_report(fields: ReportFields) -> str:
    """
    Compile structured report fields into canonical markup text.

    Section order is fixed. Sections 3, 4, 6 and 7 and the incident log are
    omitted when their input is empty; every other section is always present.

    Args:
        fields: The structured report fields

    Returns:
        Markup text, one block per line
    """
    date = _clean(fields.report_date)
    unit = _clean(fields.unit_name)
    lines: List[str] = []

    narrative = (fields.supplementary_narrative or "").strip()
    if narrative:
        # An orderly officer narrative turns the document into an overall report
        lines.append(heading(f"OVERALL REPORT AS ON {date}"))
        lines.extend(line.strip() for line in narrative.splitlines())
        lines.append("")
        lines.append(heading("OPERATIONAL DETAILS"))
    else:
        lines.append(heading(f"SITUATION REPORT AS ON {date}"))
        lines.append(heading(f"UNIT: {unit}"))

    # 1. Operational narrative
    lines.append("")
    lines.append(
        f"1. On Day {_clean(fields.day_number)} of the attachment, cadets within "
        f"{unit} {_clean(fields.operational_summary)}".rstrip()
    )

    # 2. Security situation + incident log
    lines.append("")
    lines.append(
        f"2. The general security situation remained "
        f"{_clean(fields.security_situation)}. Handled professionally:"
    )
    incidents = [
        (_clean(inc.time), _clean(inc.description))
        for inc in fields.incidents
        if _clean(inc.time) or _clean(inc.description)
    ]
    if incidents:
        lines.append(heading("INCIDENT LOG"))
        for time_label, description in incidents:
            lines.append(f"At {time_label}, {description}")

    # 3. Action taken
    action_taken = _clean(fields.action_taken)
    if action_taken:
        lines.append("")
        lines.append(f"{heading('3. Action Taken:')} {action_taken}")

    # 4. Duties conducted
    duties = _clean_items(fields.duties)
    if duties:
        lines.append("")
        lines.append(heading("4. DUTIES CONDUCTED"))
        lines.extend(bullet(duty) for duty in duties)

    # 5. Force discipline
    discipline = fields.force_discipline
    lines.append("")
    lines.append(heading("5. FORCE DISCIPLINE"))
    lines.append(bullet(_clean(discipline.casualties) or DEFAULT_CASUALTIES))
    lines.append(bullet(_clean(discipline.disciplinary_cases) or DEFAULT_DISCIPLINARY_CASES))

    # 6. / 7. collapse into a single prose line each
    challenges = _clean_items(fields.challenges)
    if challenges:
        lines.append("")
        lines.append(f"6. Challenges: {LIST_JOINER.join(challenges)}")

    recommendations = _clean_items(fields.recommendations)
    if recommendations:
        lines.append("")
        lines.append(f"7. Recommendations: {LIST_JOINER.join(recommendations)}")

    # Overall assessment + signature
    lines.append("")
    lines.append(heading("OVERALL ASSESSMENT"))
    overall = _clean(fields.overall_summary)
    if overall:
        lines.append(overall)
    lines.append("")
    lines.append(CLOSING_BOILERPLATE)
    lines.append("")
    lines.append(signature_line(unit, _clean(fields.commander_name)))
    lines.append(CLOSING_SALUTATION)

    return "\n".join(lines)
