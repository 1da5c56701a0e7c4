"""Character set repair for feed text.

Store databases often mix UTF-8 with Windows-1252 text. These helpers turn
any input into clean text for the feed charset and never raise:

- ``to_utf8`` keeps valid UTF-8 and maps every stray byte through
  Windows-1252. The five bytes Windows-1252 leaves undefined (0x81, 0x8D,
  0x8F, 0x90, 0x9D) map to the Latin-1 code point of the same value.
- ``to_latin1`` does the same and then replaces characters outside
  ISO-8859-1 with ``?``.
- ``fix_utf8`` undoes UTF-8 text that was decoded as Windows-1252 one or
  more times ("Ã©" becomes "é").
"""

import codecs

ERROR_HANDLER = "catalogfeed.cp1252"


def _cp1252_char(byte: int) -> str:
    try:
        return bytes([byte]).decode("cp1252")
    except UnicodeDecodeError:
        return chr(byte)


# Byte value -> character for the whole high half of the byte range
_HIGH_BYTES: dict[int, str] = {b: _cp1252_char(b) for b in range(0x80, 0x100)}

# C1 control characters -> their Windows-1252 printable equivalents
_C1_TRANSLATION = {b: _HIGH_BYTES[b] for b in range(0x80, 0xA0)}

# Character -> single byte, for re-reading mis-decoded text
_SINGLE_BYTE = {ch: b for b, ch in _HIGH_BYTES.items()}
_SINGLE_BYTE.update({chr(b): b for b in range(0x80, 0x100) if chr(b) not in _SINGLE_BYTE})


def _repair_invalid_bytes(exc: UnicodeError) -> tuple[str, int]:
    """Decode error handler mapping each invalid byte through Windows-1252."""
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    chunk = exc.object[exc.start:exc.end]
    return "".join(_HIGH_BYTES.get(b, chr(b)) for b in chunk), exc.end


codecs.register_error(ERROR_HANDLER, _repair_invalid_bytes)


def to_utf8(value: bytes | str | None) -> str:
    """Return text with malformed Windows-1252 content repaired.

    Args:
        value: Raw bytes or already decoded text.

    Returns:
        Clean Unicode text.
    """
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors=ERROR_HANDLER)
    return str(value).translate(_C1_TRANSLATION)


def to_latin1(value: bytes | str | None) -> str:
    """Return text restricted to ISO-8859-1.

    Args:
        value: Raw bytes or already decoded text.

    Returns:
        Text whose characters all encode to ISO-8859-1.
    """
    text = to_utf8(value)
    return text.encode("iso-8859-1", errors="replace").decode("iso-8859-1")


def _as_single_bytes(text: str) -> bytes | None:
    out = bytearray()
    for ch in text:
        code = ord(ch)
        if code < 0x80:
            out.append(code)
        elif ch in _SINGLE_BYTE:
            out.append(_SINGLE_BYTE[ch])
        else:
            return None
    return bytes(out)


def fix_utf8(value: bytes | str | None) -> str:
    """Repair text that went through one or more bad UTF-8 round trips.

    Args:
        value: Raw bytes or already decoded text.

    Returns:
        Repaired text; input that is not double encoded comes back unchanged.
    """
    text = to_utf8(value)
    while True:
        raw = _as_single_bytes(text)
        if raw is None:
            return text
        try:
            fixed = raw.decode("utf-8")
        except UnicodeDecodeError:
            return text
        if fixed == text:
            return text
        text = fixed


def encode(text: bytes | str | None, charset: str) -> str:
    """Repair text and narrow it to a feed charset.

    Args:
        text: Raw bytes or text.
        charset: "UTF-8" or "ISO-8859-1".

    Returns:
        Text safe to encode with the given charset.
    """
    if charset.upper() in ("ISO-8859-1", "LATIN1", "LATIN-1"):
        return to_latin1(text)
    return to_utf8(text)
