"""
Module: core.defaults

Purpose:
    Default journal template (sensible academic journal defaults) and the
    field-by-field merge that fills missing keys of a stored template.
    Also migrates templates saved in the older flat "typography" format.

Key Functions:
    - merge_with_defaults(): Recursive fallback merge
    - migrate_legacy_typography(): Convert flat typography into global/sections

Dependencies:
    - copy (std)

Used By:
    - core.models.template.TemplateConfig.from_dict
    - core.utils.serialization
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATE_CONFIG: Dict[str, Any] = {
    "page": {
        "size": "A4",
        "orientation": "portrait",
        "margins": {"top": 25, "right": 20, "bottom": 25, "left": 20},
        "backgroundColor": "#ffffff",
        "printBackground": False,
    },
    "global": {
        "fontFamily": "'Times New Roman', Times, serif",
        "fontSize": 10,
        "fontColor": "#000000",
        "bold": False,
        "italic": False,
        "underline": False,
        "uppercase": False,
        "textAlign": "justify",
        "backgroundColor": "transparent",
        "lineHeight": 1.4,
        "margin": {"top": 0, "right": 0, "bottom": 0, "left": 0},
        "padding": {"top": 0, "right": 0, "bottom": 0, "left": 0},
    },
    "sections": {
        "title": {"fontSize": 18, "bold": True, "textAlign": "center", "lineHeight": 1.2,
                  "margin": {"top": 0, "right": 0, "bottom": 4, "left": 0}},
        "authors": {"textAlign": "center", "margin": {"top": 0, "right": 0, "bottom": 2, "left": 0}},
        "affiliations": {"fontSize": 9, "italic": True, "textAlign": "center", "fontColor": "#444444",
                         "margin": {"top": 0, "right": 0, "bottom": 4, "left": 0}},
        "abstract": {"padding": {"top": 0, "right": 10, "bottom": 0, "left": 10}},
        "keywords": {"fontSize": 9, "margin": {"top": 3, "right": 0, "bottom": 0, "left": 0}},
        "sectionHeadings": {"fontSize": 12, "bold": True, "uppercase": True, "textAlign": "left"},
        "bodyText": {},
        "references": {"fontSize": 9, "textAlign": "left"},
        "tables": {"fontSize": 9, "textAlign": "left"},
        "header": {"fontSize": 8, "fontColor": "#555555", "textAlign": "left"},
        "footer": {"fontSize": 8, "fontColor": "#555555", "textAlign": "left"},
    },
    "layout": {
        "columnCount": 2,
        "columnGap": 6,
        "abstractFullWidth": False,
        "titleFullWidth": True,
        "titleSeparator": False,
    },
    "header": {
        "blocks": [
            {"tokens": ["{{journalName}}"], "alignment": "left"},
            {"tokens": ["Vol. {{volume}}, Issue {{issue}}, {{year}}"], "alignment": "right"},
        ],
        "borderBottom": True,
        "borderColor": "#cccccc",
        "paddingBottom": 3,
        "marginBottom": 5,
    },
    "footer": {
        "leftContent": "{{journalName}}",
        "rightContent": "",
        "showPageNumber": True,
        "pageNumberPosition": "center",
        "borderTop": True,
        "borderColor": "#cccccc",
    },
    "abstractLabel": {
        "labelText": "Abstract",
        "labelBold": True,
    },
    "table": {
        "borderWidth": 1,
        "borderColor": "#000000",
        "headerBackgroundColor": "#f5f5f5",
        "headerTextColor": "#000000",
        "captionPrefix": "Table",
        "captionItalic": False,
        "preventBreak": True,
    },
    "reference": {
        "numberingStyle": "numbered",
        "hangingIndent": 8,
        "autoNumbering": True,
    },
    "numbering": {
        "tablePrefix": "Table",
        "figurePrefix": "Figure",
        "referenceStartNumber": 1,
    },
    "spacing": {
        "betweenSections": 8,
        "betweenParagraphs": 3,
        "afterHeading": 4,
    },
    "printRules": {
        "pageBreakBeforeSections": False,
        "avoidBreakInsideParagraphs": True,
    },
    "tokens": {
        "journalName": "International Research Journal of Education and Practice",
        "journalAbbreviation": "IRJEP",
        "issn": "",
    },
}

# Keys whose values are replaced whole rather than merged key by key
ATOMIC_KEYS = frozenset({"margin", "padding", "margins", "blocks"})


def merge_with_defaults(
    data: Mapping[str, Any],
    defaults: Mapping[str, Any] = DEFAULT_TEMPLATE_CONFIG,
) -> Dict[str, Any]:
    """
    Fill missing keys of a stored document from defaults.

    Nested mappings are merged recursively. Values present in data win,
    except None, which counts as missing. Lists and box values (see
    ATOMIC_KEYS) are taken whole. A value of the wrong shape (e.g. a
    string where a mapping is expected) is discarded in favour of the
    default.

    Args:
        data: Stored (possibly partial or outdated) document
        defaults: Fallback document

    Returns:
        New dict; neither input is modified

    Example:
        >>> merged = merge_with_defaults({"layout": {"columnCount": 1}})
        >>> merged["layout"]["columnCount"], merged["layout"]["columnGap"]
        (1, 6)
    """
    result: Dict[str, Any] = copy.deepcopy(dict(defaults))
    for key, value in data.items():
        if value is None:
            continue
        default_value = defaults.get(key)
        if isinstance(default_value, Mapping) and key not in ATOMIC_KEYS:
            if isinstance(value, Mapping):
                result[key] = merge_with_defaults(value, default_value)
            else:
                logger.warning(f"Ignoring malformed template key {key!r}: expected an object")
            continue
        result[key] = copy.deepcopy(value)
    return result


# Legacy flat typography key -> (section key, style key)
_LEGACY_SECTION_KEYS = {
    "titleFontSize": ("title", "fontSize"),
    "titleColor": ("title", "fontColor"),
    "titleBold": ("title", "bold"),
    "titleItalic": ("title", "italic"),
    "titleUnderline": ("title", "underline"),
    "titleAlign": ("title", "textAlign"),
    "sectionHeadingFontSize": ("sectionHeadings", "fontSize"),
    "sectionHeadingUppercase": ("sectionHeadings", "uppercase"),
    "sectionHeadingColor": ("sectionHeadings", "fontColor"),
    "sectionHeadingBold": ("sectionHeadings", "bold"),
    "sectionHeadingItalic": ("sectionHeadings", "italic"),
    "sectionHeadingUnderline": ("sectionHeadings", "underline"),
    "sectionHeadingAlign": ("sectionHeadings", "textAlign"),
    "tableFontSize": ("tables", "fontSize"),
    "referenceFontSize": ("references", "fontSize"),
}

_LEGACY_GLOBAL_KEYS = {
    "baseFontFamily": "fontFamily",
    "baseFontSize": "fontSize",
    "baseLineHeight": "lineHeight",
    "textAlign": "textAlign",
}


def migrate_legacy_typography(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert an old flat "typography" template into the section form.

    Documents that already carry "global" are returned unchanged (as a
    shallow copy). Legacy "abstract" indentation becomes the abstract
    section padding.

    Args:
        data: Stored template document

    Returns:
        Document using "global"/"sections" instead of "typography"
    """
    result = dict(data)
    typography = result.pop("typography", None)
    if not isinstance(typography, Mapping) or "global" in data:
        return result

    logger.info("Migrating legacy typography template to section styles")
    global_style = {
        style_key: typography[legacy_key]
        for legacy_key, style_key in _LEGACY_GLOBAL_KEYS.items()
        if legacy_key in typography
    }
    sections: Dict[str, Dict[str, Any]] = {}
    for legacy_key, (section, style_key) in _LEGACY_SECTION_KEYS.items():
        if legacy_key in typography:
            sections.setdefault(section, {})[style_key] = typography[legacy_key]
    if "headerFooterFontSize" in typography:
        for section in ("header", "footer"):
            sections.setdefault(section, {})["fontSize"] = typography["headerFooterFontSize"]

    legacy_abstract = result.get("abstract")
    if isinstance(legacy_abstract, Mapping):
        sections.setdefault("abstract", {})["padding"] = {
            "top": 0,
            "right": legacy_abstract.get("indentRight", 0),
            "bottom": 0,
            "left": legacy_abstract.get("indentLeft", 0),
        }
        result.pop("abstract")
        result.setdefault("abstractLabel", {
            key: legacy_abstract[key] for key in ("labelText", "labelBold") if key in legacy_abstract
        })

    result["global"] = global_style
    existing = result.get("sections")
    if isinstance(existing, Mapping):
        for section, override in existing.items():
            sections.setdefault(section, {}).update(override or {})
    result["sections"] = sections
    return result
