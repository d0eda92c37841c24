import re

from pydantic import BaseModel, Field, computed_field

MIN_FACTOR = 2
MAX_FACTOR = 9
MIN_LEVEL = 1
MAX_LEVEL = 5
DEFAULT_TIME = 60.0

_QUESTION_RE = re.compile(r"^\s*(\d+)\s*[×xX*]\s*(\d+)\s*$")


class Card(BaseModel):
    x: int = Field(ge=MIN_FACTOR, le=MAX_FACTOR)
    y: int = Field(ge=MIN_FACTOR, le=MAX_FACTOR)
    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)
    time: float = Field(default=DEFAULT_TIME, ge=0)

    @computed_field
    @property
    def question(self) -> str:
        return f"{self.x}×{self.y}"

    @computed_field
    @property
    def answer(self) -> int:
        return self.x * self.y

    @classmethod
    def from_question(cls, question: str, **state) -> "Card":
        """Build a card from "6×3" (or "6x3") plus optional level/time."""
        match = _QUESTION_RE.match(question or "")
        if not match:
            raise ValueError(f"Invalid question: {question!r}")
        return cls(x=int(match.group(1)), y=int(match.group(2)), **state)
