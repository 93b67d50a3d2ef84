"""
Allow-listed markup for catalog answers and scripted replies.

Answers may embed anchors of the form <a href="URL" ...>label</a>. Nothing
else is treated as markup: any other tag stays inert text and is escaped on
rendering. Links whose scheme is not in ALLOWED_SCHEMES are rendered as their
label only.
"""
import html
import re
from dataclasses import dataclass
from typing import Tuple, Union
from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https", "mailto")

ANCHOR_PATTERN = re.compile(
    r"""<a\s+[^>]*?href\s*=\s*(?P<quote>["'])(?P<url>.*?)(?P=quote)[^>]*>(?P<label>.*?)</a\s*>""",
    re.IGNORECASE | re.DOTALL,
)


@dataclass(frozen=True)
class LinkSpan:
    label: str
    url: str

    @property
    def is_safe(self) -> bool:
        return urlparse(self.url).scheme.lower() in ALLOWED_SCHEMES


@dataclass(frozen=True)
class RichText:
    segments: Tuple[Union[str, LinkSpan], ...]

    @property
    def links(self) -> Tuple[LinkSpan, ...]:
        return tuple(segment for segment in self.segments if isinstance(segment, LinkSpan))

    @property
    def plain_text(self) -> str:
        return "".join(segment.label if isinstance(segment, LinkSpan) else segment for segment in self.segments)

    def to_html(self) -> str:
        parts = []
        for segment in self.segments:
            if isinstance(segment, LinkSpan):
                label = html.escape(segment.label)
                if segment.is_safe:
                    url = html.escape(segment.url, quote=True)
                    parts.append(f'<a href="{url}" target="_blank" rel="noopener noreferrer">{label}</a>')
                else:
                    parts.append(label)
            else:
                parts.append(html.escape(segment))
        return "".join(parts)

    def to_terminal(self) -> str:
        parts = []
        for segment in self.segments:
            if isinstance(segment, LinkSpan):
                url = segment.url[len("mailto:"):] if segment.url.lower().startswith("mailto:") else segment.url
                parts.append(segment.label if url == segment.label else f"{segment.label} ({url})")
            else:
                parts.append(segment)
        return "".join(parts)


def parse_markup(raw: str) -> RichText:
    segments = []
    position = 0
    for match in ANCHOR_PATTERN.finditer(raw or ""):
        if match.start() > position:
            segments.append(raw[position:match.start()])
        segments.append(LinkSpan(label=match.group("label"), url=html.unescape(match.group("url"))))
        position = match.end()
    if raw and position < len(raw):
        segments.append(raw[position:])
    return RichText(segments=tuple(segments))
