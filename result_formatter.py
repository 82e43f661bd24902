"""
Turns the free-text AI answer into display blocks.

The reply has no schema; each line is classified on its own by simple
patterns (numbered header, "- label: value", "- bullet", prose).  Blocks are
plain data so any presentation layer (Jinja template, JSON API) can draw them.
"""
import re
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Markdown emphasis / heading / code markers removed from every line
_MARKUP_CHARS = re.compile(r"[*_#`]")
_SECTION_RE   = re.compile(r"^[0-9]+\.")
_SECTION_PREFIX_RE = re.compile(r"^[0-9]+\.\s*")


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class SectionHeader(_Block):
    kind:  Literal["section"] = "section"
    title: str


class LabeledItem(_Block):
    kind:  Literal["labeled"] = "labeled"
    label: str
    value: str


class BulletItem(_Block):
    kind: Literal["bullet"] = "bullet"
    text: str


class ParagraphText(_Block):
    kind: Literal["paragraph"] = "paragraph"
    text: str


DisplayBlock = Annotated[
    Union[SectionHeader, LabeledItem, BulletItem, ParagraphText],
    Field(discriminator="kind"),
]


def classify_line(line: str) -> Optional[DisplayBlock]:
    """Classify one line of the reply; None for lines that are blank after cleanup."""
    clean = _MARKUP_CHARS.sub("", line).strip()
    if not clean:
        return None

    if _SECTION_RE.match(clean):
        return SectionHeader(title=_SECTION_PREFIX_RE.sub("", clean, count=1))

    if clean.startswith("-"):
        body = clean[1:]
        if ":" in body:
            label, value = body.split(":", 1)
            return LabeledItem(label=label.strip(), value=value.strip())
        return BulletItem(text=body.strip())

    return ParagraphText(text=clean)


def format_analysis(text: str) -> list[DisplayBlock]:
    """Split the reply into lines and classify each one, preserving order."""
    blocks = (classify_line(line) for line in (text or "").split("\n"))
    return [block for block in blocks if block is not None]
