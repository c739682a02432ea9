"""Exception types raised while building and loading the documentation index.

Build errors cross process boundaries, so each type pickles with the
arguments it was constructed from.
"""


class DocIndexError(Exception):
    """Base class for all index build and load failures."""


class MalformedDocument(DocIndexError):
    """A rustdoc JSON document does not match the expected schema."""

    def __init__(self, source: str, detail: str) -> None:
        """Record the offending document and the parser diagnostic."""
        super().__init__(f"malformed document {source}: {detail}")
        self.source = source
        self.detail = detail

    def __reduce__(self):
        return type(self), (self.source, self.detail)


class BrokenInvariant(DocIndexError):
    """An item id is missing or resolves to an unexpected kind."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        item_id: str | None = None,
    ) -> None:
        """Attach the document and item the violation was found in."""
        context = []
        if source:
            context.append(f"document {source}")
        if item_id is not None:
            context.append(f"item {item_id}")
        full = f"{message} ({', '.join(context)})" if context else message
        super().__init__(full)
        self.message = message
        self.source = source
        self.item_id = item_id

    def __reduce__(self):
        return type(self), (self.message, self.source, self.item_id)


class UnsupportedConstruct(DocIndexError):
    """A type expression or item kind the renderer does not model."""

    def __init__(self, construct: str, item_id: str | None = None) -> None:
        """Record the unhandled variant tag."""
        message = f"unsupported {construct}"
        if item_id is not None:
            message += f" in item {item_id}"
        super().__init__(message)
        self.construct = construct
        self.item_id = item_id

    def __reduce__(self):
        return type(self), (self.construct, self.item_id)


class MalformedIndex(DocIndexError):
    """A persisted index blob is truncated or not an index at all."""
