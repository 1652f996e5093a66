"""Track applicant pipeline stages in CSV tables with file locking.

``entities.csv`` holds each applicant's current stage; ``status_history.csv``
is append-only and records every transition.
"""
from __future__ import annotations

import csv
import fcntl
from datetime import datetime, timezone

from compbench.config import DATA_DIR
from compbench.errors import StageUnchangedError, UnknownStageError
from compbench.log import get_logger
from compbench.models import FunnelStage, StatusHistoryEntry, TrackedEntity

log = get_logger(__name__)

ENTITIES_CSV = DATA_DIR / "entities.csv"
HISTORY_CSV = DATA_DIR / "status_history.csv"
ENTITY_HEADERS: list[str] = ["entity_id", "stage", "created_at", "updated_at"]
HISTORY_HEADERS: list[str] = ["entity_id", "from_stage", "to_stage", "changed_at", "note"]

_TS_FMT = "%Y-%m-%dT%H:%M:%S.%f%z"


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def _now() -> str:
    return datetime.now(timezone.utc).strftime(_TS_FMT)


def parse_stage(value: str | FunnelStage) -> FunnelStage:
    try:
        return FunnelStage(value)
    except ValueError:
        raise UnknownStageError(f"Unknown stage: {value!r}") from None


def _init_csv(path, headers: list[str]) -> None:
    if path.exists():
        return
    with open(path, "w", newline="", encoding="utf-8") as f:
        _lock(f)
        csv.writer(f).writerow(headers)
        _unlock(f)
    log.info("Created tracker table → %s", path.name)


def ensure_tracker() -> None:
    ENTITIES_CSV.parent.mkdir(parents=True, exist_ok=True)
    _init_csv(ENTITIES_CSV, ENTITY_HEADERS)
    _init_csv(HISTORY_CSV, HISTORY_HEADERS)


def _read(path) -> list[dict[str, str]]:
    with open(path, "r", encoding="utf-8") as f:
        _lock(f, exclusive=False)
        rows = list(csv.DictReader(f))
        _unlock(f)
    return rows


def _append(path, headers: list[str], row: dict[str, str]) -> None:
    with open(path, "a", newline="", encoding="utf-8") as f:
        _lock(f)
        csv.DictWriter(f, fieldnames=headers).writerow(row)
        _unlock(f)


def _rewrite_entities(rows: list[dict[str, str]]) -> None:
    with open(ENTITIES_CSV, "w", newline="", encoding="utf-8") as f:
        _lock(f)
        w = csv.DictWriter(f, fieldnames=ENTITY_HEADERS)
        w.writeheader()
        w.writerows(rows)
        _unlock(f)


def get_entity_rows() -> list[dict[str, str]]:
    ensure_tracker()
    return _read(ENTITIES_CSV)


def add_entity(entity_id: str, stage: str | FunnelStage = FunnelStage.NEW) -> bool:
    """Register an applicant; returns False if the id is already tracked."""
    ensure_tracker()
    target = parse_stage(stage)
    if any(r["entity_id"] == entity_id for r in get_entity_rows()):
        return False
    ts = _now()
    _append(ENTITIES_CSV, ENTITY_HEADERS, {
        "entity_id": entity_id, "stage": target.value,
        "created_at": ts, "updated_at": ts,
    })
    _append(HISTORY_CSV, HISTORY_HEADERS, {
        "entity_id": entity_id, "from_stage": "", "to_stage": target.value,
        "changed_at": ts, "note": "",
    })
    log.debug("Tracked %s at %s", entity_id, target.value)
    return True


def record_transition(entity_id: str, to_stage: str | FunnelStage, note: str = "") -> bool:
    """Move an applicant to *to_stage* and append the change to history.

    Returns False when the applicant is unknown.
    """
    target = parse_stage(to_stage)
    rows = get_entity_rows()
    row = next((r for r in rows if r["entity_id"] == entity_id), None)
    if row is None:
        return False
    current = parse_stage(row["stage"])
    if current == target:
        raise StageUnchangedError(f"{entity_id} is already at {target.value}")

    ts = _now()
    _append(HISTORY_CSV, HISTORY_HEADERS, {
        "entity_id": entity_id, "from_stage": current.value,
        "to_stage": target.value, "changed_at": ts, "note": note,
    })
    row["stage"] = target.value
    row["updated_at"] = ts
    _rewrite_entities(rows)
    log.debug("Updated %s: %s → %s", entity_id, current.value, target.value)
    return True


def load_entities() -> list[TrackedEntity]:
    """All applicants with their history, most recent change first."""
    ensure_tracker()
    history: dict[str, list[StatusHistoryEntry]] = {}
    for h in _read(HISTORY_CSV):
        try:
            entry = StatusHistoryEntry(
                to_stage=FunnelStage(h["to_stage"]),
                changed_at=datetime.strptime(h["changed_at"], _TS_FMT),
                from_stage=FunnelStage(h["from_stage"]) if h.get("from_stage") else None,
                note=h.get("note") or "",
            )
        except ValueError as exc:
            log.warning("Skipping malformed history row for %s: %s", h.get("entity_id"), exc)
            continue
        history.setdefault(h["entity_id"], []).append(entry)

    entities: list[TrackedEntity] = []
    for r in get_entity_rows():
        try:
            stage = FunnelStage(r["stage"])
        except ValueError:
            log.warning("Skipping %s with unknown stage %r", r.get("entity_id"), r.get("stage"))
            continue
        # reversed file order breaks timestamp ties
        entries = list(reversed(history.get(r["entity_id"], [])))
        entries.sort(key=lambda e: e.changed_at, reverse=True)
        entities.append(TrackedEntity(entity_id=r["entity_id"], stage=stage, history=entries))
    return entities
