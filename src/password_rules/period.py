import calendar
import re
from datetime import date, timedelta
from enum import StrEnum
from typing import Annotated, Optional, TypeVar

import annotated_types
import pydantic

__all__ = ("Period", "PeriodUnit")

D = TypeVar("D", bound=date)

PERIOD_PATTERN = re.compile(r"(?P<amount>\d+)-(?P<unit>days|weeks|months|years)")


class PeriodUnit(StrEnum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


def _add_months(moment: D, months: int) -> D:
    year, month = divmod(moment.month - 1 + months, 12)
    year += moment.year
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class Period(pydantic.BaseModel):
    """
    A calendar period such as "3 months", used by the non-standard
    ``x-expires-after`` property.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    amount: Annotated[int, annotated_types.Ge(0)]
    unit: PeriodUnit

    @classmethod
    def try_parse(cls, value: str) -> Optional["Period"]:
        """
        Parses ``<digits>-<unit>``, e.g. ``3-months``. The whole value must match
        and the unit is case-sensitive.
        """
        match = PERIOD_PATTERN.fullmatch(value)
        if match is None:
            return None

        try:
            amount = int(match["amount"])
        except ValueError:
            # more digits than sys.get_int_max_str_digits() allows
            return None
        return cls(amount=amount, unit=PeriodUnit(match["unit"]))

    def add_to(self, moment: D) -> D:
        """
        Returns the moment the period ends when it starts at ``moment``.

        Months and years are calendar months; when the target month is shorter the
        day is clamped, so one month after January 31st is the last day of
        February.
        """
        match self.unit:
            case PeriodUnit.DAYS:
                return moment + timedelta(days=self.amount)
            case PeriodUnit.WEEKS:
                return moment + timedelta(weeks=self.amount)
            case PeriodUnit.MONTHS:
                return _add_months(moment, self.amount)
            case PeriodUnit.YEARS:
                return _add_months(moment, self.amount * 12)
            case _:
                raise RuntimeError("Unexpected period unit %r" % self.unit)

    def __str__(self) -> str:
        return f"{self.amount}-{self.unit}"
