"""
Pydantic models for generated game artifacts.
Why: LLM output is untrusted; anything that does not validate is retried.
JSON uses camelCase (the wire shape the game UI reads).
"""

import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

CO_STAR_ELEMENTS = ("context", "objective", "style", "tone", "audience", "response")

BotchedElement = Literal["context", "objective", "style", "tone", "audience", "response"]

OPTION_IDS = ("A", "B", "C", "D")

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> List[str]:
    return [s for s in _SENTENCE_BREAK.split(text) if s.strip()]


class _Artifact(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class CaseData(_Artifact):
    id: str
    title: str
    backstory: str
    faulty_prompt: str
    faulty_output: str
    botched_element: BotchedElement
    botched_explanation: str
    ideal_prompt: str

    @field_validator("botched_element", mode="before")
    @classmethod
    def _lower_element(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class KeyPoint(_Artifact):
    emoji: str
    label: str
    value: str


class AuditBug(_Artifact):
    id: str
    text: str
    explanation: str


class AuditCaseData(_Artifact):
    id: str
    title: str
    original_prompt: str
    key_points: List[KeyPoint]
    ai_output: str
    sentences: List[str] = Field(default_factory=list)
    bugs: List[AuditBug]

    @model_validator(mode="after")
    def _split_output(self) -> "AuditCaseData":
        # Always derived from ai_output; bugs[].text must match one of these
        self.sentences = split_sentences(self.ai_output)
        return self


class RectificationOption(_Artifact):
    id: str
    prompt_text: str
    is_correct: bool
    explanation: str


class RectificationOptionSet(_Artifact):
    options: List[RectificationOption]

    @model_validator(mode="after")
    def _one_correct_of_four(self) -> "RectificationOptionSet":
        ids = sorted(option.id for option in self.options)
        if tuple(ids) != OPTION_IDS:
            raise ValueError(f"expected options A-D, got {ids}")
        correct = sum(1 for option in self.options if option.is_correct)
        if correct != 1:
            raise ValueError(f"expected exactly one correct option, got {correct}")
        return self

    def sorted_options(self) -> List[RectificationOption]:
        return sorted(self.options, key=lambda option: option.id)


class PlayerPrompt(_Artifact):
    """A player's CO-STAR breakdown of their fixed prompt."""

    context: str = ""
    objective: str = ""
    style: str = ""
    tone: str = ""
    audience: str = ""
    response: str = ""


class ElementScores(_Artifact):
    context: int = Field(ge=0, le=100)
    objective: int = Field(ge=0, le=100)
    style: int = Field(ge=0, le=100)
    tone: int = Field(ge=0, le=100)
    audience: int = Field(ge=0, le=100)
    response: int = Field(ge=0, le=100)


class VerdictData(_Artifact):
    success: bool
    overall_score: int = Field(ge=0, le=100)
    element_scores: ElementScores
    new_output: str
    case_summary: str


class ElementFeedback(_Artifact):
    element: str
    status: Literal["missing", "partial", "complete"]
    comment: str

    @field_validator("status", mode="before")
    @classmethod
    def _lower_status(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class MentorFeedback(_Artifact):
    feedback: List[ElementFeedback]
    overall_assessment: str
    is_ready: bool
    improved_prompt: Optional[str] = None
