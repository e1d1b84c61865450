_ESCAPES = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
]


def escape_xml(value) -> str:
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    for raw, entity in _ESCAPES:
        text = text.replace(raw, entity)
    return text


def unescape_xml(value):
    if not isinstance(value, str):
        return value
    # Reverse order so "&amp;lt;" decodes to "&lt;", not "<".
    for raw, entity in reversed(_ESCAPES):
        value = value.replace(entity, raw)
    return value
