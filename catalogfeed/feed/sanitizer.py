"""Text cleaning for feed fields.

Every text value written to the feed goes through ``TextSanitizer.clean``
so that it fits on one line, never contains the field separator and can
be encoded with the feed charset.
"""

import html
import re
from enum import Enum
from urllib.parse import quote, quote_plus, unquote, unquote_plus

from catalogfeed.domain.value_objects import Charset
from catalogfeed.feed import encoding


class TextRole(str, Enum):
    """How a value is cleaned."""

    PLAIN = "plain"
    LINK = "link"


SEPARATOR_REPLACEMENT = "-"

_BR_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG = re.compile(r"<[^<>]*>")
_WHITESPACE = re.compile(r"\s+")
_LEADING_QUOTES = re.compile(r"^[\"'\s]+")
_URL_AUTHORITY = re.compile(r"^(https?://[^/?#]*)(.*)$", re.IGNORECASE | re.DOTALL)
_DIGIT_AFTER_TEXT = re.compile(r"([^\d\s])(\d)")


def strip_html(text: str) -> str:
    """Decode entities and remove markup without gluing words together.

    Entity decoding and tag removal repeat until the text is stable, so
    double-escaped markup is removed as well.

    Args:
        text: Text that may contain HTML.

    Returns:
        Plain text.
    """
    while True:
        stripped = html.unescape(text)
        stripped = stripped.replace("><", "> <")
        stripped = _BR_TAG.sub(" ", stripped)
        stripped = _TAG.sub("", stripped)
        if stripped == text:
            return stripped
        text = stripped


def clean_references(text: str) -> str:
    """Remove hyphens from a title ("AB-12" -> "AB12")."""
    return text.replace("-", "")


def split_references(text: str) -> str:
    """Separate letters from following digits ("Model5X" -> "Model 5X")."""
    return _DIGIT_AFTER_TEXT.sub(r"\1 \2", text)


class TextSanitizer:
    """Cleans field values for one feed run.

    Example usage:
        sanitizer = TextSanitizer(charset=Charset.UTF8, field_separator="|")
        sanitizer.clean("<p>Red &amp; Blue</p>")  # "Red & Blue"
        sanitizer.clean("http://shop/img/a b.jpg", TextRole.LINK)
    """

    def __init__(
        self,
        charset: Charset = Charset.UTF8,
        field_separator: str = "|",
        repair_mojibake: bool = False,
    ) -> None:
        """Initialize sanitizer.

        Args:
            charset: Charset the feed is written in.
            field_separator: Separator that must never appear inside a value.
            repair_mojibake: Also undo double-encoded UTF-8 text.
        """
        self.charset = charset
        self.field_separator = field_separator
        self.repair_mojibake = repair_mojibake

    def clean(self, text: bytes | str | None, role: TextRole = TextRole.PLAIN) -> str:
        """Clean a value for the given role.

        Args:
            text: Raw value from the store.
            role: PLAIN for text fields, LINK for URLs.

        Returns:
            Cleaned value.
        """
        if role is TextRole.LINK:
            return self.clean_url(text)
        return self.clean_text(text)

    def clean_text(self, text: bytes | str | None) -> str:
        """Clean a plain text field.

        With mojibake repair on, the repair runs on the cleaned text and
        cleaning repeats until the repair finds nothing more.

        Args:
            text: Raw value from the store.

        Returns:
            Single-line text without markup or field separators.
        """
        value = encoding.to_utf8(text)
        while True:
            cleaned = encoding.encode(self._normalize(value), self.charset.value)
            if not self.repair_mojibake:
                return cleaned
            repaired = encoding.to_utf8(encoding.fix_utf8(cleaned))
            if repaired == cleaned:
                return cleaned
            value = repaired

    def _normalize(self, value: str) -> str:
        value = strip_html(value)
        if self.field_separator:
            value = value.replace(self.field_separator, SEPARATOR_REPLACEMENT)
        value = _WHITESPACE.sub(" ", value).strip()
        return _LEADING_QUOTES.sub("", value)

    def clean_url(self, text: bytes | str | None) -> str:
        """Percent-encode a URL part by part.

        The scheme and host are kept as they are. Each path segment and
        each query key and value is encoded on its own, after decoding any
        existing escapes so nothing is encoded twice.

        Args:
            text: URL built from store data.

        Returns:
            URL safe to place in a feed field.
        """
        value = self._repair(text).strip()

        base, _, query = value.partition("?")
        match = _URL_AUTHORITY.match(base)
        if match:
            prefix, path = match.group(1), match.group(2)
        else:
            prefix, path = "", base

        segments = [quote(unquote(part), safe="") for part in path.split("/")]
        url = prefix + "/".join(segments)

        if query:
            params = []
            for param in query.split("&"):
                params.append(
                    "=".join(quote_plus(unquote_plus(part)) for part in param.split("="))
                )
            url += "?" + "&".join(params)
        elif value.endswith("?"):
            url += "?"

        return encoding.encode(url, self.charset.value)

    def _repair(self, text: bytes | str | None) -> str:
        if self.repair_mojibake:
            return encoding.fix_utf8(text)
        return encoding.to_utf8(text)
