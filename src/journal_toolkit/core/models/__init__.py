"""
Core Models Package

Immutable data models for journal templates and manuscripts.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. A layout pass always sees one consistent snapshot of the template
2. Safe to hand to the pagination worker thread
3. Editing is explicit: every change returns a new value

| Stored JSON         | Model                 | Notes                              |
|---------------------|-----------------------|------------------------------------|
| template document   | `TemplateConfig`      | Defaults merged, legacy migrated   |
| `global` / sections | `SectionStyle`        | Overrides kept as partial mappings |
| paper document      | `StructuredPaperData` | Legacy string body normalized      |
"""

from .styles import BoxSpacing, SectionKind, SectionStyle, TextAlign, ZERO_BOX
from .template import (
    ColumnLayout,
    FooterConfig,
    HeaderConfig,
    HeaderTokenBlock,
    Orientation,
    PAGE_SIZES_MM,
    PageConfig,
    PageSize,
    TemplateConfig,
    default_template_config,
)
from .paper import (
    EndMatter,
    PaperAuthor,
    PaperMeta,
    PaperReference,
    PaperSection,
    PaperTable,
    StructuredPaperData,
)

__all__ = [
    # Styles
    "BoxSpacing",
    "SectionKind",
    "SectionStyle",
    "TextAlign",
    "ZERO_BOX",
    # Template
    "ColumnLayout",
    "FooterConfig",
    "HeaderConfig",
    "HeaderTokenBlock",
    "Orientation",
    "PAGE_SIZES_MM",
    "PageConfig",
    "PageSize",
    "TemplateConfig",
    "default_template_config",
    # Paper
    "EndMatter",
    "PaperAuthor",
    "PaperMeta",
    "PaperReference",
    "PaperSection",
    "PaperTable",
    "StructuredPaperData",
]
