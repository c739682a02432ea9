"""Per-document output of the item graph visitor."""

from dataclasses import dataclass, field

PATH_SEPARATOR = "::"


@dataclass
class SkippedItem:
    """An item left out of the index because it could not be rendered."""

    item_id: str
    path: str
    reason: str


@dataclass
class Accumulator:
    """Collects (path, text) entries while a document is walked.

    `paths[i]` is always the path whose rendered text is `texts[i]`; entries
    are only ever added through `add`.
    """

    paths: list[str] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)
    segment_stack: list[str] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)

    def add(self, path: str, text: str) -> None:
        self.paths.append(path)
        self.texts.append(text)

    def path_with(self, last: str) -> str:
        """Join the current traversal stack and `last` into a path."""
        return PATH_SEPARATOR.join([s for s in self.segment_stack if s] + [last])

    def __len__(self) -> int:
        return len(self.paths)
