"""Label selector helpers."""

from __future__ import annotations

from collections.abc import Mapping

NO_SELECTOR = "<none>"


def match_labels(
    selector: Mapping[str, str] | None, labels: Mapping[str, str] | None
) -> bool:
    """Return True when every key/value pair of *selector* is present in *labels*.

    A missing label counts as the empty string, so an empty selector
    matches anything.
    """
    labels = labels or {}
    return all(labels.get(key, "") == value for key, value in (selector or {}).items())


def format_label_selector(match_labels: Mapping[str, str] | None) -> str:
    """Render equality labels as a selector string such as ``app=web,tier=front``.

    Keys are sorted; an empty or missing selector renders as ``<none>``.
    """
    if not match_labels:
        return NO_SELECTOR
    return ",".join(f"{key}={value}" for key, value in sorted(match_labels.items()))