from __future__ import annotations

from dataclasses import dataclass

LACTATING_AND_DRY_REASON = "A cow cannot be both lactating and dry"


@dataclass(frozen=True, slots=True)
class LactationStatus:
    """Three independent flags; in_calf overlaps both milking and dry phases."""

    lactating: bool = False
    dry: bool = True
    in_calf: bool = False

    def with_flags(
        self,
        *,
        lactating: bool | None = None,
        dry: bool | None = None,
        in_calf: bool | None = None,
    ) -> LactationStatus:
        return LactationStatus(
            lactating=self.lactating if lactating is None else lactating,
            dry=self.dry if dry is None else dry,
            in_calf=self.in_calf if in_calf is None else in_calf,
        )

    @property
    def is_unspecified(self) -> bool:
        return not (self.lactating or self.dry or self.in_calf)


@dataclass(frozen=True, slots=True)
class StatusValidation:
    valid: bool
    reason: str | None = None


def validate_status(status: LactationStatus) -> StatusValidation:
    if status.lactating and status.dry:
        return StatusValidation(valid=False, reason=LACTATING_AND_DRY_REASON)
    return StatusValidation(valid=True)
