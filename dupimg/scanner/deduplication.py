"""
Deduplication module for the scanner package.

Finds redundant images among fingerprint entries with an anchor sweep: each
entry is compared against every entry after it in a fixed order (ascending
identity), so every pair is compared exactly once.

Similarity is not transitive, so the result is the set of files judged
redundant against at least one other file, not a set of equivalence classes.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Optional

from ..config import COMPARE_PROGRESS_MIN
from ..models import DuplicateMatch, FingerprintEntry
from ..similarity import SimilarityComparer
from .dependencies import progress_bar


def comparison_order(entries: Iterable[FingerprintEntry]) -> list[FingerprintEntry]:
    """Entries with a valid fingerprint, in sweep order (ascending identity)."""
    return sorted((e for e in entries if e.is_valid), key=lambda e: e.identity)


def iter_matches(
    entries: Iterable[FingerprintEntry],
    comparer: SimilarityComparer,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
) -> Iterator[DuplicateMatch]:
    """
    Yield every matching pair found by the anchor sweep.

    For a match, the newer entry (greater timestamp) is the duplicate; on a
    timestamp tie the later-iterated entry is. The same entry may appear as
    a duplicate in several matches.

    Args:
        entries: Fingerprint entries (failed fingerprints are skipped)
        comparer: Threshold matcher
        progress_callback: Optional callback(done, total) for comparisons
        show_progress: Whether to show a tqdm progress bar

    Yields:
        DuplicateMatch records
    """
    candidates = comparison_order(entries)
    n = len(candidates)
    total_comparisons = (n * (n - 1)) // 2

    pbar: Optional[Any] = None
    if show_progress and total_comparisons > COMPARE_PROGRESS_MIN:
        pbar = progress_bar(total_comparisons, "Comparing images", "cmp")

    comparison_count = 0
    try:
        for i, anchor in enumerate(candidates):
            for candidate in candidates[i + 1:]:
                comparison_count += 1
                score = comparer.similarity(anchor.fingerprint, candidate.fingerprint)
                if score >= comparer.threshold:
                    if anchor.compare_to(candidate) <= 0:
                        yield DuplicateMatch(kept=anchor, duplicate=candidate, similarity=score)
                    else:
                        yield DuplicateMatch(kept=candidate, duplicate=anchor, similarity=score)

            done_in_row = n - i - 1
            if pbar is not None and done_in_row:
                pbar.update(done_in_row)
            if progress_callback and done_in_row:
                progress_callback(comparison_count, total_comparisons)
    finally:
        if pbar is not None:
            pbar.close()


def find_duplicates(
    entries: Iterable[FingerprintEntry],
    comparer: SimilarityComparer,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
    match_callback: Optional[Callable[[DuplicateMatch], None]] = None,
) -> list[FingerprintEntry]:
    """
    Resolve the entries to remove, deduplicated by identity.

    Args:
        entries: Fingerprint entries, typically ``store.values()``
        comparer: Threshold matcher
        progress_callback: Optional callback(done, total) for comparisons
        show_progress: Whether to show a tqdm progress bar
        match_callback: Optional callback(match) for every matching pair

    Returns:
        Duplicate entries in the order they were first flagged
    """
    seen: set[str] = set()
    duplicates: list[FingerprintEntry] = []
    for match in iter_matches(entries, comparer, progress_callback, show_progress):
        if match_callback:
            match_callback(match)
        if match.duplicate.identity not in seen:
            seen.add(match.duplicate.identity)
            duplicates.append(match.duplicate)
    return duplicates


__all__ = [
    'comparison_order',
    'iter_matches',
    'find_duplicates',
]
