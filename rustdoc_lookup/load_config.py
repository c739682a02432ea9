"""Logic for loading and merging configuration files."""

from pathlib import Path
from typing import Any

import yaml

from rustdoc_lookup.deep_merge import deep_merge

AUTO_TRAITS = ["RefUnwindSafe", "Send", "Sync", "Unpin", "UnwindSafe"]
BLANKET_TRAITS = [
    "Any",
    "Borrow",
    "BorrowMut",
    "From",
    "Into",
    "ToOwned",
    "TryFrom",
    "TryInto",
]

DEFAULT_CONFIG: dict[str, Any] = {
    "render": {
        "doc_excerpt_chars": 300,
        "truncation_marker": "…",
        "max_inherent_items": 10,
        "max_trait_impls": 10,
        "denied_traits": sorted(AUTO_TRAITS + BLANKET_TRAITS),
    },
    "query": {
        "separator": "::",
        "exact_match_score": 10000,
        "qualifier_threshold": 100,
        "verbatim_leaf_bonus": 1000,
        "top_n": 10,
    },
    "build": {
        "workers": None,
        "output": "doc.bin",
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = deep_merge(DEFAULT_CONFIG, {})
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config
