"""Validation schema for Eleven rules configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

MODE_NAMES = ("1v1", "2v2")


def _validate_modes(value: dict[str, int], label: str) -> dict[str, int]:
    missing = [mode for mode in MODE_NAMES if mode not in value]
    if missing:
        raise ValueError(f"{label} missing for modes: {', '.join(missing)}")
    for mode, amount in value.items():
        if mode not in MODE_NAMES:
            raise ValueError(f"Unknown game mode: {mode!r}")
        if amount <= 0:
            raise ValueError(f"{label} for {mode} must be positive.")
    return value


class RuleSet(BaseModel):
    target_sum: int = Field(11, gt=1, description="Sum a number card must make together with the cards it captures.")
    hand_size: int = Field(4, gt=0, description="Cards dealt to each player per deal.")
    board_size: int = Field(4, ge=0, description="Cards laid face up on the board at the start of a round.")
    scopa_multipliers: dict[str, int] = Field(
        default_factory=lambda: {"1v1": 5, "2v2": 10},
        description="Points per pending board-clearing bonus at round end.",
    )
    win_thresholds: dict[str, int] = Field(
        default_factory=lambda: {"1v1": 62, "2v2": 124},
        description="Cumulative score that wins the match.",
    )
    validate_captures: bool = Field(
        True,
        description="Reject capture sets that are not among the legal options for the played card.",
    )

    model_config = {"frozen": True}

    @field_validator("scopa_multipliers")
    @classmethod
    def validate_multipliers(cls, value: dict[str, int]) -> dict[str, int]:
        return _validate_modes(value, "Scopa multiplier")

    @field_validator("win_thresholds")
    @classmethod
    def validate_thresholds(cls, value: dict[str, int]) -> dict[str, int]:
        return _validate_modes(value, "Win threshold")

    def scopa_multiplier(self, mode: str) -> int:
        return self.scopa_multipliers[mode]

    def win_threshold(self, mode: str) -> int:
        return self.win_thresholds[mode]


DEFAULT_RULES = RuleSet()
