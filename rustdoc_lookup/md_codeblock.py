"""Markdown presentation of index entries."""

DECLARATION_KEYWORDS = ("struct ", "enum ", "union ")


def md_codeblock(lang: str, code: str) -> str:
    """Wrap `code` in a fenced Markdown code block."""
    return f"```{lang}\n{code.rstrip()}\n```"


def split_entry(text: str) -> tuple[str, str]:
    """Split an entry's text into its rendered signature and doc excerpt.

    Functions render on one line. Type declarations span their body up to
    the closing `}` or `;` line, followed by any `impl` lines.
    """
    lines = text.split("\n")
    if not text.startswith(DECLARATION_KEYWORDS):
        return lines[0], "\n".join(lines[1:])

    end = 0
    if lines[0].endswith("{"):
        while end < len(lines) - 1 and lines[end] != "}":
            end += 1
    end += 1
    while end < len(lines) and lines[end].startswith("impl "):
        if lines[end].endswith("{"):
            while end < len(lines) - 1 and lines[end] != "}":
                end += 1
        end += 1
    return "\n".join(lines[:end]), "\n".join(lines[end:])


def md_entry(text: str, lang: str = "rs") -> str:
    """Fence an entry's signature and leave its doc excerpt as prose below."""
    signature, docs = split_entry(text)
    out = md_codeblock(lang, signature)
    if docs.strip():
        out += "\n" + docs.rstrip()
    return out
