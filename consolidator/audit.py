"""JSONL audit journal for consolidation passes.

Every redirect and removal is appended as one JSON line, followed by a
summary line when the pass ends.  Reading the file back gives the journal an
interrupted pass needs to resume without double-redirecting.
"""

from __future__ import annotations

import json
import os
from collections import Counter, defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from consolidator.dedup.result import ConsolidationReport, SubstitutionJournal
from consolidator.utils.logger import log_warning

EVENT_REDIRECT = "redirect"
EVENT_REMOVAL = "removal"
EVENT_SUMMARY = "summary"


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class AuditLog:
    """Append-only JSONL writer bound to one pass."""

    def __init__(self, path: Union[str, Path], pass_id: str):
        self.path = Path(path)
        self.pass_id = pass_id

    def _append(self, entry: Dict[str, Any]) -> None:
        row = {"timestamp": _now(), "pass_id": self.pass_id, **entry}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as fh:
            fh.write(json.dumps(row, ensure_ascii=False) + "\n")
            fh.flush()

    def record_redirect(self, node_id: str, old_target: Optional[str], new_target: str) -> None:
        self._append({"event": EVENT_REDIRECT, "node_id": node_id, "from": old_target, "to": new_target})

    def record_removal(self, resource_id: str) -> None:
        self._append({"event": EVENT_REMOVAL, "resource_id": resource_id})

    def record_summary(self, report: ConsolidationReport) -> None:
        self._append({
            "event": EVENT_SUMMARY,
            "dry_run": report.dry_run,
            "resources_scanned": report.resources_scanned,
            "duplicates_found": report.duplicates_found,
            "references_replaced": report.references_replaced,
            "duplicates_removed": report.duplicates_removed,
            "failures": len(report.failures),
        })


def load_audit(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read every well-formed row of an audit file (missing file: empty list)."""
    rows: List[Dict[str, Any]] = []
    if not os.path.exists(path):
        return rows
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError:
                log_warning("Skipping malformed audit line", path=str(path))
                continue
            if isinstance(row, dict):
                rows.append(row)
    return rows


def journal_from_audit(rows: List[Dict[str, Any]], pass_id: str) -> SubstitutionJournal:
    """Rebuild the redirect journal of one pass from audit rows."""
    journal: SubstitutionJournal = {}
    for row in rows:
        if row.get("pass_id") != pass_id or row.get("event") != EVENT_REDIRECT:
            continue
        node_id = row.get("node_id")
        new_target = row.get("to")
        if node_id is None or new_target is None:
            continue
        journal[str(node_id)] = (row.get("from"), str(new_target))
    return journal


def summarize(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate audit rows per pass."""
    by_event = Counter(str(r.get("event", "<unknown>")) for r in rows)
    per_pass: Dict[str, Dict[str, int]] = defaultdict(lambda: {"redirects": 0, "removals": 0})
    completed = set()
    for r in rows:
        pid = str(r.get("pass_id", "<unknown>"))
        event = r.get("event")
        if event == EVENT_REDIRECT:
            per_pass[pid]["redirects"] += 1
        elif event == EVENT_REMOVAL:
            per_pass[pid]["removals"] += 1
        elif event == EVENT_SUMMARY:
            completed.add(pid)
            per_pass[pid]  # register passes that changed nothing
    return {
        "total": len(rows),
        "by_event": dict(by_event),
        "passes": {pid: dict(counts) for pid, counts in per_pass.items()},
        "incomplete_passes": sorted(pid for pid in per_pass if pid not in completed),
    }
