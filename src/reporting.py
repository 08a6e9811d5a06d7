"""Human-readable diagnostics and file exports for resolution results."""
from __future__ import annotations

import csv
import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from resolution.models import ResolutionResult

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "name",
    "constraint",
    "source",
    "status",
    "strategy",
    "location",
    "version",
    "framework_fallback",
    "attempts",
]


def remedies(result: ResolutionResult,
             hint: Optional[Callable[[str], Optional[str]]] = None) -> List[str]:
    """Suggestions for fixing an unresolved dependency."""
    name = result.request.name
    lines = [
        f"verify that '{name}' is spelled correctly",
        f"if '{name}' is packaged, be sure it is installed and declared as a dependency",
        f"if '{name}' is a plain module or file, be sure its directory is on the load path "
        "(sys.path, or load_path in the startup config)",
    ]
    if hint is not None:
        extra = hint(name)
        if extra:
            lines.append(extra)
    return lines


def describe_failure(result: ResolutionResult,
                     hint: Optional[Callable[[str], Optional[str]]] = None) -> str:
    """Multi-line explanation of why each strategy failed, plus remedies."""
    request = result.request
    wanted = f" ({request.constraint})" if request.constraint is not None else ""
    lines = [f"Could not find '{request.name}'{wanted} as either a library or package "
             f"[{result.status.value}, requested from {request.source}]"]
    for attempt in result.attempts:
        lines.append(f"  * {attempt.provenance}")
    lines.append(f"Please be sure that '{request.name}':")
    for line in remedies(result, hint):
        lines.append(f"  * {line}")
    return "\n".join(lines)


def _record(result: ResolutionResult) -> Dict[str, Any]:
    request = result.request
    return {
        "name": request.name,
        "constraint": str(request.constraint) if request.constraint is not None else None,
        "source": request.source,
        "status": result.status.value,
        "strategy": result.strategy.value if result.strategy else None,
        "location": result.location,
        "version": result.version,
        "framework_fallback": result.framework_fallback,
        "attempts": [
            {
                "strategy": a.strategy.value,
                "outcome": a.outcome.kind.value,
                "location": a.outcome.location,
                "reason": a.outcome.reason,
                "duration_ms": a.duration_ms,
            }
            for a in result.attempts
        ],
    }


def export_json(results: Iterable[ResolutionResult], path: str,
                policy: Optional[Dict[str, Any]] = None) -> None:
    """Write results (and optionally the policy snapshot) as JSON.

    Raises:
        OSError: when the file cannot be written.
    """
    data: Dict[str, Any] = {"dependencies": [_record(r) for r in results]}
    if policy is not None:
        data["policy"] = policy
    with open(path, 'w', encoding='utf-8') as file:
        json.dump(data, file, ensure_ascii=False, indent=4)
    logger.info("JSON file has been successfully exported at: %s", path)


def export_csv(results: Iterable[ResolutionResult], path: str) -> None:
    """Write one CSV row per result; attempts are flattened to ``strategy=outcome``.

    Raises:
        OSError: when the file cannot be written.
    """
    rows = [CSV_HEADERS]
    for result in results:
        rec = _record(result)
        rows.append([
            rec["name"],
            rec["constraint"] or "",
            rec["source"],
            rec["status"],
            rec["strategy"] or "",
            rec["location"] or "",
            rec["version"] or "",
            str(rec["framework_fallback"]).lower(),
            ";".join(f"{a['strategy']}={a['outcome']}" for a in rec["attempts"]),
        ])
    with open(path, 'w', newline='', encoding='utf-8') as file:
        csv.writer(file).writerows(rows)
    logger.info("CSV file has been successfully exported at: %s", path)


def render_summary(results: Iterable[ResolutionResult],
                   scope: Optional[List[str]] = None) -> str:
    """Plain text table of outcomes for console output."""
    lines = []
    for result in results:
        where = result.provenance if result.resolved else result.status.value
        lines.append(f"{result.request.name:<30} {where}")
    if scope is not None:
        lines.append(f"generator scope: {', '.join(scope) if scope else '(empty)'}")
    return "\n".join(lines)
