"""
Module: paper

Purpose:
    Provides StructuredPaperData - the manuscript being laid out - and
    its parts: metadata, authors, body sections, tables, references and
    the optional end matter printed after the references.

Key Classes:
    - PaperMeta: DOI, volume, issue, dates, article type
    - PaperAuthor: Author with affiliation and corresponding flag
    - PaperSection: Heading + markup content, optional subsections
    - PaperTable: Caption, header row, body rows, notes
    - PaperReference: Reference text with optional author-supplied number
    - EndMatter: Contributors, declarations, checker entries, dates
    - StructuredPaperData: Root manuscript record

Dependencies:
    - dataclasses (std)

Used By:
    - layout.blocks: Content block construction
    - layout.assembler: Title block and token context
    - core.utils.submission: Submission mapping

Design Note:
    Stored documents are often partial (a paper being written). from_dict
    never raises for missing keys: strings default to "", lists to ().
    A legacy document whose body is one markup string is normalized into
    a single untitled section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _opt_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None or value == "" else str(value)


def _mappings(value: Any) -> Sequence[Mapping[str, Any]]:
    """List entries that are objects; anything else is treated as empty."""
    if not isinstance(value, (list, tuple)):
        return ()
    return [item for item in value if isinstance(item, Mapping)]


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class PaperMeta:
    """Publication metadata. Every field is optional free text."""

    doi: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    received_date: Optional[str] = None
    accepted_date: Optional[str] = None
    published_date: Optional[str] = None
    article_type: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "doi": self.doi,
            "volume": self.volume,
            "issue": self.issue,
            "pages": self.pages,
            "receivedDate": self.received_date,
            "acceptedDate": self.accepted_date,
            "publishedDate": self.published_date,
            "articleType": self.article_type,
        })

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> PaperMeta:
        data = data or {}
        return cls(
            doi=_opt_str(data, "doi"),
            volume=_opt_str(data, "volume"),
            issue=_opt_str(data, "issue"),
            pages=_opt_str(data, "pages"),
            received_date=_opt_str(data, "receivedDate"),
            accepted_date=_opt_str(data, "acceptedDate"),
            published_date=_opt_str(data, "publishedDate"),
            article_type=_opt_str(data, "articleType"),
        )


@dataclass(frozen=True)
class PaperAuthor:
    name: str
    affiliation: str = ""
    email: Optional[str] = None
    is_corresponding: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "name": self.name,
            "affiliation": self.affiliation,
            "email": self.email,
            "isCorresponding": self.is_corresponding,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PaperAuthor:
        return cls(
            name=_str(data, "name"),
            affiliation=_str(data, "affiliation"),
            email=_opt_str(data, "email"),
            is_corresponding=bool(data.get("isCorresponding", False)),
        )


@dataclass(frozen=True)
class PaperSection:
    """
    One body section.

    Attributes:
        heading: Section heading (may be empty for untitled sections)
        content: Markup content (pre-validated HTML subset)
        columns: False renders the section across all columns
        subsections: Nested sections, laid out inline after the content
    """

    heading: str = ""
    content: str = ""
    columns: bool = True
    subsections: Tuple[PaperSection, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True if neither this section nor any subsection has content."""
        return not self.content.strip() and all(s.is_empty for s in self.subsections)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"heading": self.heading, "content": self.content}
        if not self.columns:
            result["columns"] = False
        if self.subsections:
            result["subsections"] = [s.to_dict() for s in self.subsections]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PaperSection:
        return cls(
            heading=_str(data, "heading"),
            content=_str(data, "content"),
            columns=data.get("columns") is not False,
            subsections=tuple(cls.from_dict(s) for s in _mappings(data.get("subsections"))),
        )


@dataclass(frozen=True)
class PaperTable:
    """
    A data table.

    Stored table numbers are ignored; tables are always numbered 1..N in
    document order when blocks are built.
    """

    caption: str = ""
    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    notes: Optional[str] = None

    @property
    def column_count(self) -> int:
        widths = [len(self.headers)] + [len(row) for row in self.rows]
        return max(widths)

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "caption": self.caption,
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
            "notes": self.notes,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PaperTable:
        rows = data.get("rows") or ()
        return cls(
            caption=_str(data, "caption"),
            headers=tuple(str(h) for h in data.get("headers") or ()),
            rows=tuple(
                tuple("" if cell is None else str(cell) for cell in row)
                for row in rows if isinstance(row, (list, tuple))
            ),
            notes=_opt_str(data, "notes"),
        )


@dataclass(frozen=True)
class PaperReference:
    text: str
    number: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"number": self.number, "text": self.text})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PaperReference:
        number = data.get("number")
        try:
            number = int(number) if number is not None else None
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric reference number {number!r}")
            number = None
        return cls(text=_str(data, "text"), number=number)


# ─────────────────────────────────────────────────────────────────────────────
# End matter
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContributorParticular:
    number: int
    designation: str

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "designation": self.designation}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ContributorParticular:
        try:
            number = int(data.get("number", 0))
        except (TypeError, ValueError):
            number = 0
        return cls(number=number, designation=_str(data, "designation"))


@dataclass(frozen=True)
class CorrespondingAuthorInfo:
    name: str = ""
    address: str = ""
    email: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "address": self.address, "email": self.email}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> CorrespondingAuthorInfo:
        data = data or {}
        return cls(
            name=_str(data, "name"),
            address=_str(data, "address"),
            email=_str(data, "email"),
        )


@dataclass(frozen=True)
class AuthorDeclaration:
    competing_interests: str = "None"
    ethics_approval: str = ""
    informed_consent: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "competingInterests": self.competing_interests,
            "ethicsApproval": self.ethics_approval,
            "informedConsent": self.informed_consent,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> AuthorDeclaration:
        data = data or {}
        return cls(
            competing_interests=_str(data, "competingInterests") or "None",
            ethics_approval=_str(data, "ethicsApproval"),
            informed_consent=_str(data, "informedConsent"),
        )


@dataclass(frozen=True)
class CheckerEntry:
    method: str
    date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "date": self.date}


@dataclass(frozen=True)
class PlagiarismCheck:
    checker_entries: Tuple[CheckerEntry, ...] = ()
    image_consent: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "checkerEntries": [e.to_dict() for e in self.checker_entries],
            "imageConsent": self.image_consent,
        })

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> PlagiarismCheck:
        data = data or {}
        return cls(
            checker_entries=tuple(
                CheckerEntry(method=_str(e, "method"), date=_str(e, "date"))
                for e in _mappings(data.get("checkerEntries"))
            ),
            image_consent=_opt_str(data, "imageConsent"),
        )


@dataclass(frozen=True)
class EndMatter:
    """
    Declarations printed after the references.

    Free-text dates are kept verbatim ("Jan 5, 2025"); they are display
    strings, not parsed dates.
    """

    contributor_particulars: Tuple[ContributorParticular, ...] = ()
    corresponding_author: CorrespondingAuthorInfo = field(default_factory=CorrespondingAuthorInfo)
    author_declaration: AuthorDeclaration = field(default_factory=AuthorDeclaration)
    plagiarism_checking: PlagiarismCheck = field(default_factory=PlagiarismCheck)
    pharmacology: Optional[str] = None
    emendations: Optional[str] = None
    date_of_submission: Optional[str] = None
    date_of_peer_review: Optional[str] = None
    date_of_acceptance: Optional[str] = None
    date_of_publishing: Optional[str] = None

    @property
    def dates(self) -> Tuple[Tuple[str, str], ...]:
        """(label, value) pairs for the dates that are filled in."""
        labelled = (
            ("Date of Submission", self.date_of_submission),
            ("Date of Peer Review", self.date_of_peer_review),
            ("Date of Acceptance", self.date_of_acceptance),
            ("Date of Publishing", self.date_of_publishing),
        )
        return tuple((label, value) for label, value in labelled if value)

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "contributorParticulars": [c.to_dict() for c in self.contributor_particulars],
            "correspondingAuthor": self.corresponding_author.to_dict(),
            "authorDeclaration": self.author_declaration.to_dict(),
            "plagiarismChecking": self.plagiarism_checking.to_dict(),
            "pharmacology": self.pharmacology,
            "emendations": self.emendations,
            "dateOfSubmission": self.date_of_submission,
            "dateOfPeerReview": self.date_of_peer_review,
            "dateOfAcceptance": self.date_of_acceptance,
            "dateOfPublishing": self.date_of_publishing,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EndMatter:
        return cls(
            contributor_particulars=tuple(
                ContributorParticular.from_dict(c)
                for c in _mappings(data.get("contributorParticulars"))
            ),
            corresponding_author=CorrespondingAuthorInfo.from_dict(data.get("correspondingAuthor")),
            author_declaration=AuthorDeclaration.from_dict(data.get("authorDeclaration")),
            plagiarism_checking=PlagiarismCheck.from_dict(data.get("plagiarismChecking")),
            pharmacology=_opt_str(data, "pharmacology"),
            emendations=_opt_str(data, "emendations"),
            date_of_submission=_opt_str(data, "dateOfSubmission"),
            date_of_peer_review=_opt_str(data, "dateOfPeerReview"),
            date_of_acceptance=_opt_str(data, "dateOfAcceptance"),
            date_of_publishing=_opt_str(data, "dateOfPublishing"),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Root record
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StructuredPaperData:
    """
    Root manuscript record (immutable).

    Attributes:
        meta: Publication metadata
        title: Paper title (may be empty while drafting)
        authors: Authors in byline order
        abstract: Abstract markup
        keywords: Keyword strings
        body: Body sections in order
        tables: Tables in document order
        references: Reference list
        end_matter: Optional declarations block

    Example:
        >>> paper = StructuredPaperData.from_dict({"title": "T", "body": "<p>x</p>"})
        >>> paper.body[0].heading, paper.body[0].content
        ('', '<p>x</p>')
    """

    meta: PaperMeta = field(default_factory=PaperMeta)
    title: str = ""
    authors: Tuple[PaperAuthor, ...] = ()
    abstract: str = ""
    keywords: Tuple[str, ...] = ()
    body: Tuple[PaperSection, ...] = ()
    tables: Tuple[PaperTable, ...] = ()
    references: Tuple[PaperReference, ...] = ()
    end_matter: Optional[EndMatter] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "meta": self.meta.to_dict(),
            "title": self.title,
            "authors": [a.to_dict() for a in self.authors],
            "abstract": self.abstract,
            "keywords": list(self.keywords),
            "body": [s.to_dict() for s in self.body],
            "tables": [t.to_dict() for t in self.tables],
            "references": [r.to_dict() for r in self.references],
        }
        if self.end_matter is not None:
            result["endMatter"] = self.end_matter.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> StructuredPaperData:
        data = data or {}
        end_matter = data.get("endMatter")
        return cls(
            meta=PaperMeta.from_dict(data.get("meta")),
            title=_str(data, "title"),
            authors=tuple(PaperAuthor.from_dict(a) for a in _mappings(data.get("authors"))),
            abstract=_str(data, "abstract"),
            keywords=tuple(str(k) for k in data.get("keywords") or () if k),
            body=normalize_body(data.get("body")),
            tables=tuple(PaperTable.from_dict(t) for t in _mappings(data.get("tables"))),
            references=tuple(
                PaperReference.from_dict(r) for r in _mappings(data.get("references"))
            ),
            end_matter=EndMatter.from_dict(end_matter) if isinstance(end_matter, Mapping) else None,
        )


def normalize_body(body: Any) -> Tuple[PaperSection, ...]:
    """
    Normalize a stored body into sections.

    A list of section objects is parsed as-is; a non-empty legacy string
    becomes one untitled section; anything else is an empty body.
    """
    if isinstance(body, str):
        if not body:
            return ()
        logger.debug("Normalizing legacy string body into one untitled section")
        return (PaperSection(heading="", content=body),)
    return tuple(PaperSection.from_dict(s) for s in _mappings(body))
