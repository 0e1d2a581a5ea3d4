"""
Journal Toolkit Core Package

Shared data models, default template and validation used by every
layout and output module.

**DESIGN NOTES:**

1. **Immutable Data Models**
   - TemplateConfig and StructuredPaperData are frozen dataclasses
   - Edits produce new values (TemplateConfig.patch / with_section_override)

2. **Defaults Merged On Load**
   - Stored templates are merged field by field with DEFAULT_TEMPLATE_CONFIG
   - Missing keys never raise; malformed ones are logged and replaced
"""

from .defaults import DEFAULT_TEMPLATE_CONFIG, merge_with_defaults
from .models import SectionKind, SectionStyle, StructuredPaperData, TemplateConfig

__all__ = [
    "DEFAULT_TEMPLATE_CONFIG",
    "merge_with_defaults",
    "SectionKind",
    "SectionStyle",
    "StructuredPaperData",
    "TemplateConfig",
]
