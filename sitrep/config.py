"""
Configuration module for the Situation Report Registry.

Loads environment variables and defines all constants used across the application.
Both CLI and Server can import settings from here.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# API CONFIGURATION
# =============================================================================

GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")  # Service key for server-side ops
SUPABASE_TABLE = os.getenv("SUPABASE_TABLE", "reports")
SUPABASE_ARTICLES_TABLE = os.getenv("SUPABASE_ARTICLES_TABLE", "articles")

# =============================================================================
# MODEL CONFIGURATION
# =============================================================================

MODEL_NAME = os.getenv("MODEL_NAME", "gemini-2.0-flash")

# =============================================================================
# MARKUP GRAMMAR
# =============================================================================

HEADING_DELIMITER = "*"
BULLET_MARKERS = (". ", "• ")
CANONICAL_BULLET = ". "

# All-caps body lines at least this long are styled as headings in exports
PSEUDO_HEADING_MIN_LENGTH = 4

# =============================================================================
# REPORT TEMPLATE PHRASES
# =============================================================================

DEFAULT_CASUALTIES = "No casualties reported"
DEFAULT_DISCIPLINARY_CASES = "No disciplinary cases reported"
LIST_JOINER = " and "

CLOSING_BOILERPLATE = (
    "Cadets continued to improve operational skills and professionalism. "
    "The security situation remains stable."
)
CLOSING_SALUTATION = "Respectfully Signed"

# =============================================================================
# IMAGE ATTACHMENTS
# =============================================================================

DAILY_MAX_ATTACHMENTS = 4
DAILY_MAX_DIMENSION = 600  # px, longest side
DAILY_JPEG_QUALITY = 0.6

ARTICLE_MAX_ATTACHMENTS = 1
ARTICLE_MAX_DIMENSION = 400
ARTICLE_JPEG_QUALITY = 0.7

# =============================================================================
# DOCUMENT EXPORT
# =============================================================================

PAGE_MARGIN_INCHES = 1.0
ATTACHMENT_DISPLAY_WIDTH_PX = 500
ATTACHMENT_DISPLAY_HEIGHT_PX = 330
MAGAZINE_PICTURE_SIZE_PX = 200
EXPORT_FONT = "Arial"

PROVENANCE_FOOTER = "Generated by the Command Situation Report Registry"

MAGAZINE_TITLE = "CADET MAGAZINE CONTRIBUTIONS"
MAGAZINE_COMPANIES = ["Alpha", "Bravo", "Charlie"]

# =============================================================================
# CONSOLIDATION
# =============================================================================

CONSOLIDATED_UNIT = "OVERALL ATTACHMENT"
CONSOLIDATED_SIGNATORY = "AI Operational System"
# Heading for timeline entries the model returned without a day-label
UNDATED_DAY_LABEL = "UNDATED"

WEEKLY_TITLE = "WEEKLY EXECUTIVE SUMMARY"

# =============================================================================
# DEFAULT PATHS (can be overridden via environment variables)
# =============================================================================

DEFAULT_OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "./Exported_Reports"))


def validate_config() -> tuple[bool, list[str]]:
    """
    Validate that required configuration is present.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not GOOGLE_API_KEY:
        errors.append("GOOGLE_API_KEY environment variable is not set")

    return len(errors) == 0, errors


def supabase_configured() -> bool:
    """Whether the Supabase persistence adapter can be used."""
    return bool(SUPABASE_URL and SUPABASE_SERVICE_KEY)
