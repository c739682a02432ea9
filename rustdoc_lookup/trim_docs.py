"""Logic for cutting documentation down to a short excerpt."""

DEFAULT_EXCERPT_CHARS = 300
TRUNCATION_MARKER = "…"


def trim_docs(
    docs: str | None,
    limit: int = DEFAULT_EXCERPT_CHARS,
    marker: str = TRUNCATION_MARKER,
) -> str:
    """Return the part of `docs` shown next to a signature.

    Text stops at the first `#` (the start of a section like `# Examples`)
    when it appears within the first `limit` characters, otherwise after
    `limit` characters. `marker` is appended whenever anything was cut.
    """
    if not docs:
        return ""
    heading = docs.find("#")
    if 0 < heading < limit:
        excerpt = docs[:heading]
    else:
        excerpt = docs[:limit]
    if len(excerpt) < len(docs):
        return excerpt + marker
    return excerpt
