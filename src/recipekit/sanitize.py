"""Plain-text sanitization for user-supplied names."""

import re

HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
DECIMAL_ENTITY_PATTERN = re.compile(r"&#(\d+);")
HEX_ENTITY_PATTERN = re.compile(r"&#x([0-9a-fA-F]+);")

HTML_ENTITIES: dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&#x27;": "'",
    "&#x2F;": "/",
    "&#47;": "/",
}


def strip_html_tags(value: str) -> str:
    """Remove tags until none are left, so "<scr<script>ipt>" goes too."""
    result = value
    while True:
        stripped = HTML_TAG_PATTERN.sub("", result)
        if stripped == result:
            return stripped
        result = stripped


def _decode_codepoint(codepoint: int) -> str:
    try:
        return chr(codepoint)
    except (ValueError, OverflowError):
        return ""


def decode_html_entities(value: str) -> str:
    """Decode common named entities and numeric character references."""
    result = value
    for entity, char in HTML_ENTITIES.items():
        result = result.replace(entity, char)

    result = DECIMAL_ENTITY_PATTERN.sub(lambda m: _decode_codepoint(int(m.group(1))), result)
    result = HEX_ENTITY_PATTERN.sub(lambda m: _decode_codepoint(int(m.group(1), 16)), result)
    return result


def sanitize_text(value: str) -> str:
    """
    Reduce user input to plain text.

    Removes NUL bytes, strips tags, decodes entities (which may reveal
    encoded tags), strips tags again and trims whitespace.
    """
    result = value.replace("\0", "")
    result = strip_html_tags(result)
    result = decode_html_entities(result)
    result = strip_html_tags(result)
    # Entities such as "&#0;" decode to NUL
    return result.replace("\0", "").strip()
