"""Wire models exchanged with the presentation layer and the remote engine."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, field_validator


MAX_DISPLAY_MESSAGE_CHARS = 120
ELLIPSIS = "..."
HISTORY_LIMIT = 6
START_OPTION = "Start Identification"


class UIDirective(str, Enum):
    START = "start"
    OBSERVATION = "observation"
    PHYSICAL_TEST = "physical_test"
    CHEMICAL_TEST = "chemical_test"
    CONCLUSION = "conclusion"


class ActionType(str, Enum):
    SELECTED = "selected"
    REMOVED = "removed"


def truncate_display_message(message: str) -> str:
    if len(message) <= MAX_DISPLAY_MESSAGE_CHARS:
        return message
    return message[: MAX_DISPLAY_MESSAGE_CHARS - len(ELLIPSIS)] + ELLIPSIS


class Observation(BaseModel):
    source: StrictStr
    value: Union[bool, str] = True

    model_config = ConfigDict(extra="forbid", frozen=True)


ObservationSet = Dict[str, Observation]


class HistoryTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: StrictStr

    model_config = ConfigDict(extra="forbid", frozen=True)


class Decision(BaseModel):
    """One UI state handed to the presentation layer.

    ``ui_directive`` also accepts the legacy ``ui_component`` key on input.
    """

    display_message: StrictStr
    ui_directive: UIDirective = Field(validation_alias=AliasChoices("ui_directive", "ui_component"))
    progress: int = Field(default=0, ge=0, le=100, strict=True)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, strict=True)
    options: List[StrictStr] = Field(default_factory=list)
    identified_mineral: Optional[StrictStr] = None
    completed_categories: Optional[List[StrictStr]] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @field_validator("progress", "confidence", mode="before")
    @classmethod
    def reject_bool(cls, v: object) -> object:
        if isinstance(v, bool):
            raise ValueError("must be a number, not a boolean")
        return v

    def guarded(self) -> "Decision":
        """Return a copy whose display_message fits the render budget."""
        message = truncate_display_message(self.display_message)
        if message == self.display_message:
            return self
        return self.model_copy(update={"display_message": message})

    @property
    def is_terminal(self) -> bool:
        return self.ui_directive == UIDirective.CONCLUSION


INITIAL_DECISION = Decision(
    display_message="System Ready. Initialize session to begin identification.",
    ui_directive=UIDirective.START,
    progress=0,
    confidence=0.0,
    options=[START_OPTION],
    identified_mineral=None,
)


class IdentifyRequest(BaseModel):
    history: List[HistoryTurn] = Field(default_factory=list)
    current_state: ObservationSet = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")


class SelectRequest(BaseModel):
    option: StrictStr = Field(..., min_length=1, max_length=200)

    model_config = ConfigDict(extra="forbid")


class RetractRequest(BaseModel):
    key: StrictStr = Field(..., min_length=1, max_length=200)

    model_config = ConfigDict(extra="forbid")


class ObservedTrait(BaseModel):
    key: str
    source: str


class SessionView(BaseModel):
    session_id: str
    message: str
    confidence: float
    progress: int
    options: List[str]
    loading: bool
    offline: bool
    ui_directive: UIDirective
    identified_mineral: Optional[str] = None
    observations: List[ObservedTrait] = Field(default_factory=list)
    notice: Optional[str] = None
    signal_unstable: bool = False
    completed_categories: Optional[List[str]] = None


__all__ = [
    "MAX_DISPLAY_MESSAGE_CHARS",
    "HISTORY_LIMIT",
    "START_OPTION",
    "UIDirective",
    "ActionType",
    "truncate_display_message",
    "Observation",
    "ObservationSet",
    "HistoryTurn",
    "Decision",
    "INITIAL_DECISION",
    "IdentifyRequest",
    "SelectRequest",
    "RetractRequest",
    "ObservedTrait",
    "SessionView",
]
