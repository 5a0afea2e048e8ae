"""Find the most export-worthy array of records inside a nested payload.

The payload is walked breadth-first from a node labelled ``root``. Every list
met within ``max_depth`` is a potential candidate: its dict elements become
rows and the list is scored on row count, depth and preferred path tokens.
The highest score wins; on a tie the earlier (shallower) list is kept.
Lists are evaluated as a unit and never searched for nested lists.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from rowscout.config import SearchOptions, build_options
from rowscout.models import ExportableRows

logger = logging.getLogger(__name__)

SearchInput = SearchOptions | Mapping[str, Any] | int | None


def normalize_search_options(options: SearchInput = None) -> SearchOptions:
    """Resolve every accepted option form into one SearchOptions.

    A bare ``int`` is the legacy form and means ``max_depth``.
    """
    if options is None:
        return SearchOptions()
    if isinstance(options, SearchOptions):
        return options
    if isinstance(options, int) and not isinstance(options, bool):
        logger.info("Export row discovery used legacy max_depth argument: %d", options)
        return SearchOptions(max_depth=options)
    if isinstance(options, Mapping):
        return build_options(SearchOptions, dict(options))
    logger.warning("Ignoring unsupported search options of type %s", type(options).__name__)
    return SearchOptions()


def _compile(pattern: str | None, label: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning("Ignoring invalid %s %r: %s", label, pattern, exc)
        return None


def _contains_any(path: str, tokens: list[str]) -> bool:
    lower = path.lower()
    return any(token.lower() in lower for token in tokens)


def _contains_all(path: str, tokens: list[str]) -> bool:
    lower = path.lower()
    return all(token.lower() in lower for token in tokens)


def score_path(path: str, preferred_tokens: list[str]) -> int:
    """+2 for each preferred token found in ``path`` (case-insensitive)."""
    lower = path.lower()
    return sum(2 for token in preferred_tokens if token.lower() in lower)


def score_candidate(
    path: str, depth: int, rows: list[dict[str, Any]], options: SearchOptions
) -> int:
    """Score a candidate list. Pure function of its arguments."""
    if options.prefer_large_datasets:
        row_score = min(len(rows) * 2, 40)
    else:
        row_score = min(len(rows), 20)
    # Shallow preference lets small top-level lists beat large nested ones.
    if options.prefer_shallow:
        depth_score = max(0, 20 - depth * 5)
    else:
        depth_score = max(0, 5 - depth // 2)
    return row_score + depth_score + score_path(path, options.preferred_path_tokens)


def extract_rows(items: list[Any], options: SearchOptions) -> list[dict[str, Any]]:
    """Keep the elements of ``items`` that count as rows."""
    min_keys = options.min_object_keys
    if not options.allow_empty_object_rows:
        min_keys = max(min_keys, 1)
    return [item for item in items if isinstance(item, dict) and len(item) >= min_keys]


def find_exportable_rows(payload: Any, options: SearchInput = None) -> ExportableRows | None:
    """Find the best export-friendly array of objects in ``payload``.

    Returns None when the payload is empty or nothing qualifies. Never raises
    on bad options; they fall back to defaults.
    """
    if payload is None:
        logger.info("Exportable row discovery skipped: payload is empty")
        return None

    opts = normalize_search_options(options)
    include_re = _compile(opts.include_path_pattern, "include_path_pattern")
    exclude_re = _compile(opts.exclude_path_pattern, "exclude_path_pattern")

    queue: deque[tuple[Any, str, int]] = deque([(payload, "root", 0)])
    best: ExportableRows | None = None
    candidate_count = 0
    inspected_node_count = 0

    while queue:
        if (
            opts.max_inspected_nodes is not None
            and inspected_node_count >= opts.max_inspected_nodes
        ):
            logger.warning(
                "Stopping export row discovery: max_inspected_nodes=%d reached",
                opts.max_inspected_nodes,
            )
            break

        value, path, depth = queue.popleft()
        inspected_node_count += 1

        if depth > opts.max_depth:
            continue

        if _contains_any(path, opts.excluded_path_tokens):
            logger.debug("Skipping %s: path contains an excluded token", path)
            continue

        if isinstance(value, (list, tuple)):
            if not _contains_all(path, opts.require_path_tokens):
                logger.debug("Skipping %s: required path tokens are missing", path)
                continue
            if include_re is not None and not include_re.search(path):
                logger.debug("Skipping %s: include pattern does not match", path)
                continue
            if exclude_re is not None and exclude_re.search(path):
                logger.debug("Skipping %s: exclude pattern matches", path)
                continue

            if not value:
                if opts.min_rows == 0 and best is None:
                    best = ExportableRows(rows=[], path=path, depth=depth, score=0)
                continue

            rows = extract_rows(list(value), opts)
            if not rows:
                continue
            if len(rows) < opts.min_rows:
                logger.debug("Skipping %s: %d rows is below min_rows", path, len(rows))
                continue
            if len(rows) / len(value) < opts.min_object_ratio:
                logger.debug("Skipping %s: too few object rows among elements", path)
                continue

            if opts.max_candidates is not None and candidate_count >= opts.max_candidates:
                logger.warning(
                    "Stopping export row discovery: max_candidates=%d reached",
                    opts.max_candidates,
                )
                break

            candidate_count += 1
            score = score_candidate(path, depth, rows, opts)
            if best is None or score > best.score:
                best = ExportableRows(rows=rows, path=path, depth=depth, score=score)
            continue

        if isinstance(value, dict) and depth < opts.max_depth:
            for key, child in value.items():
                queue.append((child, f"{path}.{key}", depth + 1))

    if best is None:
        logger.warning(
            "No exportable rows discovered (max_depth=%d, min_rows=%d, inspected=%d)",
            opts.max_depth,
            opts.min_rows,
            inspected_node_count,
        )
        return None

    best = replace(
        best, candidate_count=candidate_count, inspected_node_count=inspected_node_count
    )
    logger.info(
        "Exportable rows discovered at %s "
        "(depth=%d, rows=%d, score=%s, candidates=%d, inspected=%d)",
        best.path,
        best.depth,
        len(best.rows),
        best.score,
        candidate_count,
        inspected_node_count,
    )
    return best
