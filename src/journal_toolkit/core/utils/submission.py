"""
Module: core.utils.submission

Purpose:
    Derive a fresh StructuredPaperData from a submission record, so a
    newly accepted submission opens in the paper editor with its title,
    authors, abstract and end matter already filled in.

Key Functions:
    - map_submission_to_paper(): Submission record -> StructuredPaperData

Used By:
    - cli (via --submission documents)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..models.paper import (
    AuthorDeclaration,
    CorrespondingAuthorInfo,
    EndMatter,
    PaperAuthor,
    PaperMeta,
    StructuredPaperData,
)

logger = logging.getLogger(__name__)


def _created_at(submission: Mapping[str, Any]) -> Optional[datetime]:
    """createdAt is epoch milliseconds."""
    value = submission.get("createdAt")
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning(f"Ignoring unreadable createdAt {value!r}")
        return None


def _display_date(moment: datetime) -> str:
    """'Jan 5, 2025' style date used in end matter."""
    return f"{moment:%b} {moment.day}, {moment.year}"


def map_submission_to_paper(submission: Mapping[str, Any]) -> StructuredPaperData:
    """
    Map a submission record to a new StructuredPaperData.

    Only data the submission carries is pre-filled. The body, tables and
    references start empty. The corresponding author (if any) is listed
    first and flagged; research authors follow in order.

    Args:
        submission: Submission record (camelCase keys)

    Returns:
        Fresh StructuredPaperData

    Example:
        >>> paper = map_submission_to_paper({"title": "T", "createdAt": 0})
        >>> paper.meta.received_date
        '1970-01-01'
    """
    corresponding = submission.get("correspondingAuthor") or {}
    created = _created_at(submission)

    authors = []
    if corresponding:
        authors.append(PaperAuthor(
            name=str(corresponding.get("name") or ""),
            affiliation="",
            email=corresponding.get("email") or None,
            is_corresponding=True,
        ))
    for author in submission.get("researchAuthors") or ():
        authors.append(PaperAuthor(
            name=str(author.get("name") or ""),
            affiliation=str(author.get("affiliation") or ""),
        ))

    end_matter = EndMatter(
        corresponding_author=CorrespondingAuthorInfo(
            name=str(corresponding.get("name") or ""),
            address=str(corresponding.get("address") or ""),
            email=str(corresponding.get("email") or ""),
        ),
        author_declaration=AuthorDeclaration(competing_interests="None"),
        date_of_submission=_display_date(created) if created else "",
    )

    paper = StructuredPaperData(
        meta=PaperMeta(
            article_type=str(submission.get("articleType") or ""),
            received_date=created.date().isoformat() if created else None,
        ),
        title=str(submission.get("title") or ""),
        authors=tuple(authors),
        abstract=str(submission.get("abstract") or ""),
        keywords=tuple(str(k) for k in submission.get("keywords") or ()),
        end_matter=end_matter,
    )
    logger.debug(f"Mapped submission with {len(authors)} author(s) to paper data")
    return paper
