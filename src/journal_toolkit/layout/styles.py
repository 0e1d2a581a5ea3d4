"""
Module: layout.styles

Purpose:
    Resolve the effective style of each section kind: the template's
    global style with the kind's partial override laid on top.

Key Functions:
    - resolve_style(): Cascade one override onto a base style
    - resolve_section_style(): Effective style for one SectionKind
    - resolve_all_styles(): Effective style for every SectionKind

Cascade rules:
    1. A property present (and not None) in the override wins
    2. Otherwise the base value is used
    3. Margin/padding boxes are replaced whole, never merged per side
    4. Unknown override keys are ignored

Dependencies:
    - core.models: SectionStyle, SectionKind, TemplateConfig

Used By:
    - output.flowables: ParagraphStyle construction
    - measurement.reportlab_oracle: Measurement uses the same styles
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, Dict, Mapping, Optional

from ..core.models.styles import BoxSpacing, SectionKind, SectionStyle, TextAlign, override_from_dict
from ..core.models.template import TemplateConfig

logger = logging.getLogger(__name__)

_STYLE_ATTRS = frozenset(f.name for f in fields(SectionStyle))


def _coerce(attr: str, value: Any) -> Any:
    """Bring a loosely typed override value into SectionStyle's types."""
    if attr in ("margin", "padding") and not isinstance(value, BoxSpacing):
        return BoxSpacing.from_dict(value if isinstance(value, Mapping) else None)
    if attr == "text_align" and not isinstance(value, TextAlign):
        return TextAlign.parse(value)
    return value


def resolve_style(
    base: SectionStyle,
    override: Optional[Mapping[str, Any]] = None,
) -> SectionStyle:
    """
    Cascade a partial override onto a base style.

    Override keys may be SectionStyle attribute names or the persisted
    camelCase keys. Values that would make the style invalid (e.g. a
    non-positive font size) are dropped with a warning so the base value
    applies. Never raises.

    Args:
        base: Fully specified style (normally the template's global style)
        override: Partial override; None or empty returns base unchanged

    Returns:
        Fully specified SectionStyle

    Example:
        >>> style = resolve_style(SectionStyle(), {"font_size": 18})
        >>> style.font_size, style.line_height
        (18, 1.4)
    """
    if not override:
        return base

    values: Dict[str, Any] = {}
    camel = override_from_dict(override)
    for key, value in override.items():
        if key in _STYLE_ATTRS and value is not None:
            values[key] = _coerce(key, value)
    for key, value in camel.items():
        values.setdefault(key, value)

    for attr in ("font_size", "line_height"):
        if attr in values:
            value = values[attr]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                logger.warning(f"Ignoring invalid {attr} override: {value!r}")
                del values[attr]

    return replace(base, **values) if values else base


def resolve_section_style(config: TemplateConfig, kind: Any) -> SectionStyle:
    """
    Effective style for one section kind.

    An unknown kind (e.g. a key a newer editor wrote) degrades to the
    global style.
    """
    section = SectionKind.parse(kind)
    if section is None:
        logger.debug(f"Unknown section kind {kind!r}, using global style")
        return config.global_style
    return resolve_style(config.global_style, config.section_override(section))


def resolve_all_styles(config: TemplateConfig) -> Dict[SectionKind, SectionStyle]:
    """Effective style for all eleven section kinds."""
    return {kind: resolve_section_style(config, kind) for kind in SectionKind}
