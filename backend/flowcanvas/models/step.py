"""Pydantic models for step-type metadata."""

from enum import Enum

from pydantic import BaseModel


class StepCategory(str, Enum):
    """Categories used to group step types in the palette and docs."""

    TRIGGER = "trigger"
    ACTION = "action"
    LOGIC = "logic"
    DATA = "data"
    MARKET = "market"
    SOLANA = "solana"
    NOTIFY = "notify"
    CALC = "calc"


class StepDoc(BaseModel):
    """Documentation for a step type, including the outputs it produces."""

    type: str
    name: str
    category: StepCategory
    description: str
    inputs: list[str] = []
    outputs: list[str] = []
    example: str | None = None


class StepOption(BaseModel):
    """An entry of the "add next step" palette."""

    value: str
    label: str
    category: StepCategory
    description: str


class CategoryInfo(BaseModel):
    """Display information for a palette category."""

    category: StepCategory
    label: str
    icon: str
    description: str
    color: str


class PaletteCategory(BaseModel):
    """A palette category together with its step options."""

    info: CategoryInfo
    options: list[StepOption]


class NetworkCompatibility(BaseModel):
    """Advisory compatibility report for a batch of step types."""

    network: str
    incompatible: list[str] = []
    warnings: dict[str, str] = {}
