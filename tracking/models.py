"""Typed entity models for the performance tracking store.

Field names are snake_case in Python and camelCase on the wire, so a dumped
``Store`` is exactly the persisted document layout.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from tracking.numbers import clamp_percent, parse_number, parse_optional_date

logger = logging.getLogger("perf.models")


def new_id() -> str:
    """Return a fresh unique entity id."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Return UTC datetime for default timestamps."""
    return datetime.now(UTC)


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class TaskStatus(str, Enum):
    """Board column of a task. Declaration order is the board order."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"


class PlanStatus(str, Enum):
    """Lifecycle of a plan. Never set directly, see ``tracking.status``."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"


class Period(str, Enum):
    FIRST_HALF = "firstHalf"
    SECOND_HALF = "secondHalf"


class ObjectiveCategory(str, Enum):
    PERSONAL = "personal"
    PROJECT = "project"


def _coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


class TrackingModel(BaseModel):
    """Base model with camelCase aliases for the persisted document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Objective(TrackingModel):
    """Static catalog entry; see ``tracking.catalog``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    organizational_unit: str
    weight_percent: float
    category: ObjectiveCategory


class SubItem(TrackingModel):
    """Plan checklist line carrying its own progress."""

    id: str = Field(default_factory=new_id)
    label: str = ""
    progress_percent: int = 0
    done: bool = False

    @field_validator("progress_percent", mode="before")
    @classmethod
    def _progress(cls, value: Any) -> int:
        return clamp_percent(value)

    def with_done(self, done: bool) -> SubItem:
        """Toggle ``done``; this always overwrites progress with 100 or 0."""
        return self.model_copy(update={"done": done, "progress_percent": 100 if done else 0})

    def with_progress(self, progress: Any) -> SubItem:
        """Set progress without touching ``done``."""
        return self.model_copy(update={"progress_percent": clamp_percent(progress)})


class Deliverable(TrackingModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    done: bool = False


class Plan(TrackingModel):
    """Action plan under an objective."""

    id: str = Field(default_factory=new_id)
    objective_id: str
    name: str
    description: str = ""
    owner: str = ""
    priority: Priority = Priority.MEDIUM
    manual_progress_percent: int = 0
    blocked: bool = False
    start_date: date | None = None
    target_date: date | None = None
    notes: str = ""
    sub_items: list[SubItem] = Field(default_factory=list)
    deliverables: list[Deliverable] = Field(default_factory=list)
    # Stored for consumers of the raw document; rewritten on every save.
    status: PlanStatus = PlanStatus.TODO

    @field_validator("manual_progress_percent", mode="before")
    @classmethod
    def _manual_progress(cls, value: Any) -> int:
        return clamp_percent(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> Priority:
        return _coerce_enum(Priority, value, Priority.MEDIUM)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> PlanStatus:
        return _coerce_enum(PlanStatus, value, PlanStatus.TODO)

    @field_validator("start_date", "target_date", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> date | None:
        return parse_optional_date(value)

    @property
    def delivered_count(self) -> int:
        return sum(1 for item in self.deliverables if item.done)


class Subtask(TrackingModel):
    """Informational checklist item; never feeds the task status."""

    id: str = Field(default_factory=new_id)
    title: str = ""
    done: bool = False


class Task(TrackingModel):
    id: str = Field(default_factory=new_id)
    plan_id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    start_date: date | None = None
    deadline: date | None = None
    subtasks: list[Subtask] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> Priority:
        return _coerce_enum(Priority, value, Priority.MEDIUM)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> TaskStatus:
        return _coerce_enum(TaskStatus, value, TaskStatus.TODO)

    @field_validator("start_date", "deadline", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> date | None:
        return parse_optional_date(value)


class Kpi(TrackingModel):
    """Metric under an objective, optionally driven by linked plans."""

    id: str = Field(default_factory=new_id)
    objective_id: str
    name: str
    target: float = 0.0
    manual_current: float = 0.0
    unit: str = "%"
    linked_plan_ids: list[str] = Field(default_factory=list)

    @field_validator("target", "manual_current", mode="before")
    @classmethod
    def _numbers(cls, value: Any) -> float:
        return parse_number(value)


class JournalEntry(TrackingModel):
    id: str = Field(default_factory=new_id)
    text: str
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("timestamp", mode="after")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def note_key(objective_id: str, period: Period) -> str:
    """Key of an evaluation note in ``Store.notes``."""
    return f"{objective_id}_{Period(period).value}"


def _valid_entries(kind: str, model_cls: type[TrackingModel], raw: Any) -> dict[str, TrackingModel]:
    """Validate entries one by one; an invalid entry is dropped, never the whole map."""
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Ignoring %s: expected a mapping, got %s", kind, type(raw).__name__)
        return {}
    kept: dict[str, TrackingModel] = {}
    for key, value in raw.items():
        try:
            kept[str(key)] = model_cls.model_validate(value)
        except ValidationError as exc:
            logger.warning("Dropping invalid %s entry %r (%d errors)", kind, key, exc.error_count())
    return kept


_ENTITY_MODELS: dict[str, type[TrackingModel]] = {"plans": Plan, "tasks": Task, "kpis": Kpi}


class Store(TrackingModel):
    """Root aggregate: five independent maps keyed by id."""

    plans: dict[str, Plan] = Field(default_factory=dict)
    tasks: dict[str, Task] = Field(default_factory=dict)
    kpis: dict[str, Kpi] = Field(default_factory=dict)
    notes: dict[str, float] = Field(default_factory=dict)
    journal: dict[str, list[JournalEntry]] = Field(default_factory=dict)

    @field_validator("plans", "tasks", "kpis", mode="before")
    @classmethod
    def _entities(cls, value: Any, info: ValidationInfo) -> dict[str, TrackingModel]:
        return _valid_entries(info.field_name, _ENTITY_MODELS[info.field_name], value)

    @field_validator("journal", mode="before")
    @classmethod
    def _journal(cls, value: Any) -> dict[str, list[TrackingModel]]:
        if not isinstance(value, dict):
            return {}
        journal: dict[str, list[TrackingModel]] = {}
        for objective_id, entries in value.items():
            if not isinstance(entries, list):
                logger.warning("Ignoring journal of %r: expected a list", objective_id)
                continue
            indexed = dict(enumerate(entries))
            journal[str(objective_id)] = list(_valid_entries("journal", JournalEntry, indexed).values())
        return journal

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> dict[str, float]:
        if not isinstance(value, dict):
            return {}
        return {str(key): parse_number(raw) for key, raw in value.items()}

    @classmethod
    def empty(cls) -> Store:
        return cls()

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Store:
        return cls.model_validate(document)

    def clone(self) -> Store:
        """Return an independent copy; mutating it never affects ``self``."""
        return Store(
            plans={key: plan.model_copy(deep=True) for key, plan in self.plans.items()},
            tasks={key: task.model_copy(deep=True) for key, task in self.tasks.items()},
            kpis={key: kpi.model_copy(deep=True) for key, kpi in self.kpis.items()},
            notes=dict(self.notes),
            journal={
                key: [entry.model_copy() for entry in entries]
                for key, entries in self.journal.items()
            },
        )

    def note(self, objective_id: str, period: Period) -> float:
        """Evaluation note, 0 when absent."""
        return float(self.notes.get(note_key(objective_id, period), 0.0))
