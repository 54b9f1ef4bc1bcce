"""
Prompts module for the Situation Report Registry.

Contains the AI prompts used for multi-day consolidation and the weekly summary.
"""

from typing import List


def get_consolidation_prompt(transcripts: List[str], target_days: int) -> str:
    """
    Generate the prompt for the cumulative progress briefing.

    Args:
        transcripts: Report bodies in creation order
        target_days: Number of reporting days the briefing covers

    Returns:
        The formatted prompt string
    """
    reports = "\n".join(
        f"--- START OF REPORT ---\n{text}\n--- END OF REPORT ---" for text in transcripts
    )

    return f"""You are an AI Operational Strategic Analyst for a Command Registry. You have been provided with all SITUATION REPORTS (SITREPs) spanning Day 1 to Day {target_days} of a Cadet attachment.

Analyze the following transcripts carefully, looking for patterns, growth, and recurring issues:

{reports}

Your task is to synthesize this raw data into a comprehensive CUMULATIVE PROGRESS BRIEFING.
1. executive_summary: Narrate the overall trajectory and maturity of the attachment up to Day {target_days}. Focus on operational evolution.
2. key_achievements: List significant duties performed and operational goals successfully met.
3. operational_trends: Identify evolving patterns in performance, security stability, and cadet discipline.
4. critical_challenges: Highlight persistent or structural issues that require senior Command attention.
5. strategic_recommendations: Provide actionable, high-level advice for optimizing performance in the remainder of the attachment.
6. incident_timeline: For each reporting day, the day label exactly as written in the reports and the notable events of that day.

Ensure the tone is authoritative, formal, and suitable for high-level Command oversight. Use clean, professional text with no HTML or markdown.

IMPORTANT: Return ONLY a valid JSON object. No markdown, no explanation, no code blocks.

Your response must be exactly in this format:
{{"executive_summary": "...", "key_achievements": ["..."], "operational_trends": ["..."], "critical_challenges": ["..."], "strategic_recommendations": ["..."], "incident_timeline": [{{"day_label": "...", "events": ["..."]}}]}}"""


def get_weekly_summary_prompt(start_date: str, end_date: str, reports: List[str]) -> str:
    """
    Generate the prompt for the weekly executive summary.

    Args:
        start_date: First day of the reporting week (YYYY-MM-DD)
        end_date: Last day of the reporting week (YYYY-MM-DD)
        reports: Raw daily report texts

    Returns:
        The formatted prompt string
    """
    daily = "\n".join(f"---\nDaily Report:\n{text}\n---" for text in reports)

    return f"""You are an AI assistant compiling weekly reports from a collection of daily operational reports. Provide a concise, consolidated overview of the week that highlights the key operational aspects.

Daily reports from {start_date} to {end_date}:

{daily}

Analyze the daily reports and extract:
1. overall_security_situation: A general statement of the security status across all reported areas for the entire week.
2. recurring_challenges: Challenges that appeared in more than one daily report, one per list element.
3. common_recommendations: Recommendations mentioned frequently or applicable to every area, one per list element.
4. weekly_summary: A narrative summary of the week's activities, key findings and overall tone that draws on the security situation, recurring challenges and common recommendations.

Use clean, professional text with no HTML or markdown.

IMPORTANT: Return ONLY a valid JSON object. No markdown, no explanation, no code blocks.

Your response must be exactly in this format:
{{"overall_security_situation": "...", "recurring_challenges": ["..."], "common_recommendations": ["..."], "weekly_summary": "..."}}"""
