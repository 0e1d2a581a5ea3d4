"""
Module: layout.tokens

Purpose:
    Replace {{placeholder}} tokens in header/footer templates with values
    from the journal template, the paper metadata and the page number.

Key Functions:
    - resolve_tokens(): Substitute every recognised placeholder

Key Classes:
    - TokenContext: Values available to placeholders

Recognised placeholders:
    {{journalName}} {{year}} {{doi}} {{volume}} {{issue}} {{issn}}
    {{pageNumber}} {{sectionName}}

    Anything else in double braces is left untouched.

Dependencies:
    - re (std)
    - datetime (std)

Used By:
    - layout.assembler: Header and footer resolution
    - layout.blocks: Table captions
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..core.models.paper import StructuredPaperData
from ..core.models.template import TemplateConfig

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{(\w+)\}\}")

KNOWN_TOKENS = frozenset({
    "journalName",
    "year",
    "doi",
    "volume",
    "issue",
    "issn",
    "pageNumber",
    "sectionName",
})


@dataclass(frozen=True)
class TokenContext:
    """
    Values available to placeholders. None resolves to "".

    Example:
        >>> ctx = TokenContext(journal_name="J. Ed.", volume="4", page_number=2)
        >>> resolve_tokens("{{journalName}} {{volume}} p{{pageNumber}}", ctx)
        'J. Ed. 4 p2'
    """

    journal_name: Optional[str] = None
    doi: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    issn: Optional[str] = None
    page_number: Optional[int] = None

    @classmethod
    def from_sources(
        cls,
        config: TemplateConfig,
        data: StructuredPaperData,
        page_number: Optional[int] = None,
    ) -> TokenContext:
        """Build a context from the template tokens and paper metadata."""
        return cls(
            journal_name=config.tokens.journal_name,
            doi=data.meta.doi,
            volume=data.meta.volume,
            issue=data.meta.issue,
            issn=config.tokens.issn,
            page_number=page_number,
        )


def resolve_tokens(
    template: str,
    context: TokenContext,
    *,
    today: Callable[[], date] = date.today,
) -> str:
    """
    Substitute placeholders in a header/footer template.

    Args:
        template: Text containing {{placeholder}} tokens
        context: Values to substitute
        today: Clock used for {{year}}; injectable for tests

    Returns:
        Resolved text. Unrecognised placeholders are left verbatim.
    """
    if "{{" not in template:
        return template

    values = {
        "journalName": context.journal_name,
        "doi": context.doi,
        "volume": context.volume,
        "issue": context.issue,
        "issn": context.issn,
        "pageNumber": None if context.page_number is None else str(context.page_number),
    }

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in KNOWN_TOKENS:
            return match.group(0)
        if name == "year":
            return str(today().year)
        if name == "sectionName":
            # Running section headers are not tracked per page
            logger.debug("{{sectionName}} is not supported yet, resolving to empty")
            return ""
        value = values.get(name)
        return "" if value is None else str(value)

    return TOKEN_PATTERN.sub(_substitute, template)
