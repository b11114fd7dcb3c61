# -*- coding: utf-8 -*-
"""Daily log aggregation shared by the tracking domains.

A daily log is a collection of entries persisted as one JSON blob under a
date-scoped key (``<domain>Log_<YYYY-MM-DD>``) or, for running histories, an
unscoped key (``<domain>Log``). Totals are always recomputed from the entries;
a stored total is never trusted.
"""

from __future__ import annotations

import json
import logging
import math
import threading
import time
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Callable, ClassVar, Dict, Generic, Iterator, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, PersistenceError, ValidationError
from .kv import KeyLocks, KeyValueStore

logger = logging.getLogger(__name__)

_LIST_KEYS = ("history", "log", "entries")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def validate_model(model: Type[BaseModel], data: Any) -> BaseModel:
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if not isinstance(data, dict):
        raise ValidationError("Entry must be an object")
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError("Please fill in all fields correctly", details=_format_errors(exc)) from exc


def load_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """Read a JSON blob; read or parse failures are logged and yield ``default``."""
    try:
        raw = store.get(key)
    except PersistenceError:
        logger.exception("failed to read %s", key)
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("discarding unparseable blob under %s", key)
        return default


def save_json(store: KeyValueStore, key: str, value: Any) -> bool:
    """Write a JSON blob; failures are logged and reported as ``False``."""
    try:
        store.set(key, json.dumps(value, ensure_ascii=False))
    except PersistenceError:
        logger.exception("failed to persist %s", key)
        return False
    return True


class LogEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    timestamp: Optional[str] = Field(None, description="ISO8601 instant")


class DailyLogView(BaseModel):
    date: Optional[str] = Field(None, description="YYYY-MM-DD, null for running histories")
    count: int = 0
    entries: List[Dict[str, Any]] = Field(default_factory=list)
    totals: Dict[str, Union[int, float]] = Field(default_factory=dict)
    persisted: bool = True


class RunningCounter:
    """Scalar persisted independently of any single day."""

    def __init__(self, store: KeyValueStore, key: str, default: float = 0) -> None:
        self.store = store
        self.key = key
        self.default = default
        self.value = self._load()

    def _load(self) -> float:
        try:
            raw = self.store.get(self.key)
        except PersistenceError:
            logger.exception("failed to read counter %s", self.key)
            return self.default
        if raw is None or not raw.strip():
            return self.default
        try:
            value = float(raw)
        except ValueError:
            logger.warning("counter %s holds non-numeric value %r", self.key, raw)
            return self.default
        return int(value) if value.is_integer() else value

    def set(self, value: float) -> bool:
        self.value = value
        try:
            self.store.set(self.key, str(value))
        except PersistenceError:
            logger.exception("failed to persist counter %s", self.key)
            return False
        return True

    def add(self, delta: float) -> bool:
        return self.set(self.value + delta)


E = TypeVar("E", bound=LogEntry)


class DailyLog(Generic[E]):
    """Collection of entries plus derived totals for one domain.

    Subclasses set the class attributes and may override ``check_entry``,
    ``after_append``, ``after_delete`` and ``view_fields``.
    """

    domain: ClassVar[str] = ""
    entry_model: ClassVar[Type[LogEntry]] = LogEntry
    view_model: ClassVar[Type[DailyLogView]] = DailyLogView
    # derived total name -> entry attribute
    total_fields: ClassVar[Dict[str, str]] = {}
    integer_totals: ClassVar[frozenset] = frozenset()
    newest_first: ClassVar[bool] = False
    scoped: ClassVar[bool] = True
    # None persists a bare JSON array; otherwise {<list_key>: [...], "date": ...}
    list_key: ClassVar[Optional[str]] = None

    def __init__(
        self,
        store: KeyValueStore,
        *,
        locks: KeyLocks | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.store = store
        self.locks = locks or KeyLocks()
        # Guards date/entries against a rollover racing a mutation.
        self._guard = threading.RLock()
        self._today = today or date.today
        self.date: Optional[str] = None
        self.entries: List[E] = []
        self.totals: Dict[str, Union[int, float]] = {}
        self.persisted = True
        self.load()

    # ---- keys ----

    def today(self) -> str:
        return self._today().isoformat()

    def key_for(self, day: Optional[str]) -> str:
        if not self.scoped:
            return f"{self.domain}Log"
        return f"{self.domain}Log_{day}"

    @property
    def key(self) -> str:
        return self.key_for(self.date)

    # ---- load / persist ----

    def load(self, day: Optional[str] = None) -> DailyLogView:
        self.date = (day or self.today()) if self.scoped else None
        blob = load_json(self.store, self.key, None)
        self.entries = self._decode(blob)
        self.totals = self.compute_totals(self.entries)
        self.persisted = True
        logger.debug("loaded %s with %d entries", self.key, len(self.entries))
        return self.view()

    def _decode(self, blob: Any) -> List[E]:
        if blob is None:
            return []
        raw_entries: Any = blob
        if isinstance(blob, dict):
            raw_entries = next((blob[k] for k in _LIST_KEYS if isinstance(blob.get(k), list)), [])
        if not isinstance(raw_entries, list):
            logger.warning("unexpected blob shape under %s, starting empty", self.key)
            return []
        entries: List[E] = []
        seen: set[str] = set()
        for raw in raw_entries:
            try:
                entry = self.entry_model.model_validate(raw)
            except PydanticValidationError as exc:
                logger.warning("dropping invalid entry under %s: %s", self.key, _format_errors(exc))
                continue
            if not entry.id or entry.id in seen:
                entry.id = self._new_id(seen)
            seen.add(entry.id)
            entries.append(entry)  # type: ignore[arg-type]
        return entries

    def encode(self) -> Any:
        items = [e.model_dump(mode="json") for e in self.entries]
        if self.list_key is None:
            return items
        blob: Dict[str, Any] = {self.list_key: items, "date": self.date}
        blob.update(self.extra_blob_fields())
        return blob

    def extra_blob_fields(self) -> Dict[str, Any]:
        return {}

    def persist(self) -> bool:
        self.persisted = save_json(self.store, self.key, self.encode())
        return self.persisted

    # ---- totals ----

    def compute_totals(self, entries: List[E]) -> Dict[str, Union[int, float]]:
        totals: Dict[str, Union[int, float]] = {}
        for name, attr in self.total_fields.items():
            values = [getattr(e, attr) or 0 for e in entries]
            if name in self.integer_totals:
                totals[name] = int(sum(values))
            else:
                totals[name] = round(math.fsum(values), 1)
        return totals

    # ---- mutations ----

    def _roll_day(self) -> None:
        if self.scoped and self.date != self.today():
            logger.info("%s rolled over to %s", self.domain, self.today())
            self.load()

    @contextmanager
    def _locked_day(self) -> Iterator[None]:
        """Roll to today if needed, then hold the day's key lock."""
        with self._guard:
            self._roll_day()
            with self.locks.for_key(self.key):
                yield

    def _new_id(self, taken: set[str] | None = None) -> str:
        existing = taken if taken is not None else {e.id for e in self.entries}
        candidate = int(time.time() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def check_entry(self, entry: E) -> None:
        """Domain validation hook; raise ValidationError to reject."""

    def after_append(self, entry: E) -> Optional[bool]:
        """Side effects of an append; return False when a side write failed."""
        return None

    def after_delete(self, entry: E) -> Optional[bool]:
        return None

    def append(self, data: Any) -> DailyLogView:
        entry: E = validate_model(self.entry_model, data)  # type: ignore[assignment]
        self.check_entry(entry)
        with self._locked_day():
            ids = {e.id for e in self.entries}
            if entry.id is None:
                entry.id = self._new_id(ids)
            elif entry.id in ids:
                raise ValidationError(f"Entry id {entry.id} already exists")
            if not entry.timestamp:
                entry.timestamp = utc_now_iso()
            if self.newest_first:
                self.entries.insert(0, entry)
            else:
                self.entries.append(entry)
            self.totals = self.compute_totals(self.entries)
            side_ok = self.after_append(entry) is not False
            self.persisted = self.persist() and side_ok
            logger.debug("appended %s to %s", entry.id, self.key)
            return self.view()

    def get(self, entry_id: str) -> E:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise NotFoundError(f"Entry {entry_id} not found")

    def delete(self, entry_id: str) -> DailyLogView:
        with self._locked_day():
            entry = self.get(entry_id)
            self.entries = [e for e in self.entries if e.id != entry_id]
            self.totals = self.compute_totals(self.entries)
            side_ok = self.after_delete(entry) is not False
            self.persisted = self.persist() and side_ok
            logger.debug("deleted %s from %s", entry_id, self.key)
            return self.view()

    def reset(self) -> DailyLogView:
        with self._locked_day():
            self.entries = []
            self.totals = self.compute_totals(self.entries)
            self.persist()
            return self.view()

    # ---- views ----

    def view_fields(self) -> Dict[str, Any]:
        return {}

    def view(self) -> DailyLogView:
        return self.view_model(
            date=self.date,
            count=len(self.entries),
            entries=[e.model_dump(mode="json") for e in self.entries],
            totals=dict(self.totals),
            persisted=self.persisted,
            **self.view_fields(),
        )

    def current(self) -> DailyLogView:
        with self._guard:
            self._roll_day()
            return self.view()


def round_half_up(value: float) -> int:
    """Round .5 away from negative infinity, the way the mobile client does."""
    return int(math.floor(value + 0.5))
