from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ...attendance.model import AttendanceEvent
from ...core.enums import AttendanceFlag
from ...core.settings import TimeKeepingSettings
from .base import FlagContext, FlagRule
from .rules import LongSessionRule, LowAccuracyRule, MissingCheckoutRule, OvernightSessionRule, ShortSessionRule


@dataclass(frozen=True)
class AnomalyFlagger:
    rules: Sequence[FlagRule]

    def flags_for(self, event: AttendanceEvent, ctx: FlagContext) -> tuple[AttendanceFlag, ...]:
        return tuple(rule.flag for rule in self.rules if rule.applies(event, ctx))


@dataclass
class FlagRuleFactory:
    """Factory Pattern: build the configured rule set."""

    def build(self, settings: TimeKeepingSettings) -> AnomalyFlagger:
        return AnomalyFlagger(
            rules=(
                MissingCheckoutRule(),
                LowAccuracyRule(settings.low_accuracy_meters),
                ShortSessionRule(settings.short_session_minutes),
                LongSessionRule(settings.long_session_minutes),
                OvernightSessionRule(),
            )
        )
