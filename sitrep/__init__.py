"""
Core module for the Situation Report Registry.

This module contains all business logic for composing, displaying, exporting
and consolidating situation reports.
The functions here are stateless and do not interact with the file system directly.

Modules:
- config: Settings and constants
- exceptions: Error types surfaced to callers
- models: Pydantic data models
- template: Structured fields to report markup
- classifier: Shared markup line classifier
- renderer: On-screen HTML rendering
- docx_export: Word document export (reports and magazine)
- attachments: Image compression and attachment limits
- windowing: Selection of the first N reporting days
- prompts: AI prompts for consolidation and the weekly summary
- synthesis: Gemini consolidation, weekly summary and their export
- store: Report / article storage (Supabase or in-memory)
- access: Caller roles and permission checks
"""

from .config import (
    GOOGLE_API_KEY,
    MODEL_NAME,
    SUPABASE_URL,
    SUPABASE_SERVICE_KEY,
    SUPABASE_TABLE,
    SUPABASE_ARTICLES_TABLE,
    DEFAULT_OUTPUT_DIR,
    validate_config,
    supabase_configured,
)

from .exceptions import (
    SitrepError,
    WindowError,
    EmptyWindowError,
    NoContentError,
    AttachmentError,
    AttachmentLimitError,
    ImageProcessingError,
    AttachmentDecodeError,
    DocumentBuildError,
    SynthesisError,
    RecordNotFoundError,
    PermissionDeniedError,
)

from .models import (
    Incident,
    ForceDiscipline,
    ReportFields,
    BlockKind,
    Block,
    MediaAttachment,
    ReportStatus,
    ReportRecord,
    ArticleRecord,
    DocumentMetadata,
    ExportedDocument,
    ConsolidationWindow,
    TimelineEntry,
    ConsolidatedBriefing,
    WeeklySummary,
)

from .template import (
    compile_report,
    report_title,
    signature_line,
)

from .classifier import (
    normalize_markup,
    classify_line,
    classify,
)

from .renderer import (
    ElementKind,
    PresentationElement,
    PresentationTree,
    render,
    render_markup,
    render_report_page,
)

from .attachments import (
    AttachmentPolicy,
    DAILY_REPORT_POLICY,
    ARTICLE_POLICY,
    compress_image,
    compress_images,
    decode_attachment,
    check_capacity,
    add_attachments,
    remove_attachment,
)

from .docx_export import (
    DOCX_MEDIA_TYPE,
    is_pseudo_heading,
    sanitize_filename,
    encode_document,
    export_markup,
    export_report,
    export_report_async,
    build_magazine_docx,
)

from .windowing import (
    distinct_day_labels,
    build_window,
    window_reports,
    collect_transcripts,
)

from .synthesis import (
    configure_gemini,
    get_model,
    synthesize_briefing,
    consolidate_reports,
    briefing_to_markup,
    consolidated_title,
    export_briefing,
    format_day_label,
    split_daily_reports,
    summarize_week,
    weekly_summary_to_markup,
    weekly_title,
    export_weekly_summary,
)

from .store import (
    RecordStore,
    InMemoryRecordStore,
    SupabaseRecordStore,
)

from .access import (
    Role,
    AccessContext,
    require,
)

__all__ = [
    # Config
    'GOOGLE_API_KEY',
    'MODEL_NAME',
    'SUPABASE_URL',
    'SUPABASE_SERVICE_KEY',
    'SUPABASE_TABLE',
    'SUPABASE_ARTICLES_TABLE',
    'DEFAULT_OUTPUT_DIR',
    'validate_config',
    'supabase_configured',
    # Exceptions
    'SitrepError',
    'WindowError',
    'EmptyWindowError',
    'NoContentError',
    'AttachmentError',
    'AttachmentLimitError',
    'ImageProcessingError',
    'AttachmentDecodeError',
    'DocumentBuildError',
    'SynthesisError',
    'RecordNotFoundError',
    'PermissionDeniedError',
    # Models
    'Incident',
    'ForceDiscipline',
    'ReportFields',
    'BlockKind',
    'Block',
    'MediaAttachment',
    'ReportStatus',
    'ReportRecord',
    'ArticleRecord',
    'DocumentMetadata',
    'ExportedDocument',
    'ConsolidationWindow',
    'TimelineEntry',
    'ConsolidatedBriefing',
    'WeeklySummary',
    # Template
    'compile_report',
    'report_title',
    'signature_line',
    # Classifier
    'normalize_markup',
    'classify_line',
    'classify',
    # Renderer
    'ElementKind',
    'PresentationElement',
    'PresentationTree',
    'render',
    'render_markup',
    'render_report_page',
    # Attachments
    'AttachmentPolicy',
    'DAILY_REPORT_POLICY',
    'ARTICLE_POLICY',
    'compress_image',
    'compress_images',
    'decode_attachment',
    'check_capacity',
    'add_attachments',
    'remove_attachment',
    # DOCX Export
    'DOCX_MEDIA_TYPE',
    'is_pseudo_heading',
    'sanitize_filename',
    'encode_document',
    'export_markup',
    'export_report',
    'export_report_async',
    'build_magazine_docx',
    # Windowing
    'distinct_day_labels',
    'build_window',
    'window_reports',
    'collect_transcripts',
    # Synthesis
    'configure_gemini',
    'get_model',
    'synthesize_briefing',
    'consolidate_reports',
    'briefing_to_markup',
    'consolidated_title',
    'export_briefing',
    'format_day_label',
    'split_daily_reports',
    'summarize_week',
    'weekly_summary_to_markup',
    'weekly_title',
    'export_weekly_summary',
    # Store
    'RecordStore',
    'InMemoryRecordStore',
    'SupabaseRecordStore',
    # Access
    'Role',
    'AccessContext',
    'require',
]
