"""Network file loading — build a ReferralGraph from a delimited text file.

Format: one record per line. ``user`` registers a user; ``referrer,candidate``
registers both (if needed) and adds the referral. Blank lines and ``#``
comments are skipped. Files are only ever read.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from refnet.domain.errors import NetworkFileError, ReferralNetworkError
from refnet.infrastructure.graph.referral_graph import ReferralGraph

logger = logging.getLogger(__name__)


def parse_records(
    lines: Iterable[str], *, delimiter: str = ","
) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_number, fields)`` for every non-empty, non-comment line."""
    for line_no, row in enumerate(csv.reader(lines, delimiter=delimiter), start=1):
        fields = [f.strip() for f in row]
        while fields and not fields[-1]:
            fields.pop()
        if not fields or fields[0].startswith("#"):
            continue
        yield line_no, fields


def load_records(
    graph: ReferralGraph,
    lines: Iterable[str],
    *,
    delimiter: str = ",",
    source: str = "<memory>",
) -> ReferralGraph:
    """Apply every record in *lines* to *graph* and return it.

    Raises:
        NetworkFileError: A record is malformed or violates a graph rule.
            The error keeps the code of the underlying graph error.
    """
    for line_no, fields in parse_records(lines, delimiter=delimiter):
        if len(fields) > 2:
            raise NetworkFileError(
                f"{source}:{line_no}: expected 'user' or 'referrer,candidate'",
                path=source,
                line=line_no,
            )
        try:
            for user_id in fields:
                graph.add_user(user_id)
            if len(fields) == 2:
                graph.add_referral(fields[0], fields[1])
        except ReferralNetworkError as exc:
            raise NetworkFileError(
                f"{source}:{line_no}: {exc}",
                code=exc.code,
                path=source,
                line=line_no,
                **exc.detail,
            ) from exc
    return graph


def load_network(path: Path, *, delimiter: str = ",") -> ReferralGraph:
    """Read *path* into a new ReferralGraph.

    Raises:
        NetworkFileError: The file is missing, unreadable, not UTF-8, or
            holds a bad record.
    """
    if not path.is_file():
        raise NetworkFileError(f"Network file not found: {path}", path=str(path))
    try:
        with path.open(encoding="utf-8", newline="") as fh:
            graph = load_records(ReferralGraph(), fh, delimiter=delimiter, source=str(path))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise NetworkFileError(f"Cannot read network file {path}: {exc}", path=str(path)) from exc
    logger.debug(
        "Loaded network %s: %d users, %d referrals",
        path,
        graph.user_count,
        graph.referral_count,
    )
    return graph
