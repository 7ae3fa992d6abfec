"""Parser for tagged model output.

The system prompt makes the model emit its answer as a sequence of sections,
each introduced by a bracketed all-caps marker on its own line::

    [SUMMARY]
    ...
    [OPENING]
    ...

A section body runs from its marker up to the next bracketed all-caps token,
whichever tag that happens to be, or to the end of the text. Missing markers
yield empty bodies; the parser never raises.
"""

import re
from dataclasses import asdict, dataclass
from typing import Dict, Sequence

SUMMARY = "SUMMARY"
OPENING = "OPENING"
QUALIFYING_QUESTIONS = "QUALIFYING QUESTIONS"
VALUE_FRAMING = "VALUE FRAMING"
OBJECTIONS = "OBJECTIONS"
CLOSING = "CLOSING"
COACH_TIPS = "COACH TIPS"

# Order the model is instructed to follow
SCRIPT_SECTION_TAGS: tuple[str, ...] = (
    SUMMARY,
    OPENING,
    QUALIFYING_QUESTIONS,
    VALUE_FRAMING,
    OBJECTIONS,
    CLOSING,
    COACH_TIPS,
)

# Any bracketed run of capitals and whitespace counts as a boundary, so a
# skipped section still ends the previous one at whatever tag comes next.
NEXT_MARKER_PATTERN = re.compile(r"\[[A-Z\s]+\]")


def marker(tag: str) -> str:
    """Return the literal marker for a tag name, e.g. ``[SUMMARY]``."""
    return f"[{tag}]"


def extract_section(raw_text: str, tag: str) -> str:
    """Extract the body following the first ``[tag]`` marker.

    Args:
        raw_text: Unparsed model output
        tag: Tag name without brackets (case-sensitive)

    Returns:
        Stripped section body, or an empty string if the marker is absent
    """
    if not raw_text:
        return ""

    token = marker(tag)
    start = raw_text.find(token)
    if start == -1:
        return ""

    rest = raw_text[start + len(token):]
    boundary = NEXT_MARKER_PATTERN.search(rest)
    body = rest if boundary is None else rest[: boundary.start()]
    return body.strip()


def parse_sections(raw_text: str, tags: Sequence[str] = SCRIPT_SECTION_TAGS) -> Dict[str, str]:
    """Split raw text into one body per requested tag.

    Each tag is searched over the full text independently, so markers that
    appear out of the canonical order are still found.

    Args:
        raw_text: Unparsed model output
        tags: Tag names to extract, in canonical order

    Returns:
        Mapping with exactly one entry per tag; values may be empty
    """
    return {tag: extract_section(raw_text, tag) for tag in tags}


@dataclass(frozen=True)
class ScriptSections:
    """Typed view of the seven sections of a generated sales script."""

    summary: str = ""
    opening: str = ""
    qualifying_questions: str = ""
    value_framing: str = ""
    objections: str = ""
    closing: str = ""
    coach_tips: str = ""

    @classmethod
    def from_mapping(cls, sections: Dict[str, str]) -> "ScriptSections":
        return cls(
            summary=sections.get(SUMMARY, ""),
            opening=sections.get(OPENING, ""),
            qualifying_questions=sections.get(QUALIFYING_QUESTIONS, ""),
            value_framing=sections.get(VALUE_FRAMING, ""),
            objections=sections.get(OBJECTIONS, ""),
            closing=sections.get(CLOSING, ""),
            coach_tips=sections.get(COACH_TIPS, ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @property
    def is_empty(self) -> bool:
        return not any(self.to_dict().values())


def parse_script_output(raw_text: str) -> ScriptSections:
    """Parse a full model response into its seven script sections."""
    return ScriptSections.from_mapping(parse_sections(raw_text or "", SCRIPT_SECTION_TAGS))
