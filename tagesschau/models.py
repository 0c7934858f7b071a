import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum, IntEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tagesschau.errors import ClockError, InvalidDate

# Wire format of the ``date`` query parameter (YYMMDD).
DATE_FORMAT = "%y%m%d"

# Years strptime maps a two-digit %y back into.
SHORT_YEAR_MIN = 1969
SHORT_YEAR_MAX = 2068

_DIRECTIVE = re.compile(r"%.")


class Region(IntEnum):
    """The German federal states. Values are the codes the API expects."""

    BADEN_WUERTTEMBERG = 1
    BAYERN = 2
    BERLIN = 3
    BRANDENBURG = 4
    BREMEN = 5
    HAMBURG = 6
    HESSEN = 7
    MECKLENBURG_VORPOMMERN = 8
    NIEDERSACHSEN = 9
    NORDRHEIN_WESTFALEN = 10
    RHEINLAND_PFALZ = 11
    SAARLAND = 12
    SACHSEN = 13
    SACHSEN_ANHALT = 14
    SCHLESWIG_HOLSTEIN = 15
    THUERINGEN = 16


class Ressort(Enum):
    """Editorial sections. NONE leaves the section unspecified."""

    NONE = ""
    INLAND = "inland"
    AUSLAND = "ausland"
    WIRTSCHAFT = "wirtschaft"
    SPORT = "sport"
    VIDEO = "video"
    INVESTIGATIV = "investigativ"
    WISSEN = "wissen"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True, order=True)
class CalendarDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if any(isinstance(part, bool) for part in (self.year, self.month, self.day)):
            raise InvalidDate(
                f"Invalid calendar date: {self.year}-{self.month}-{self.day}"
            )
        try:
            date(self.year, self.month, self.day)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidDate(
                f"Invalid calendar date: {self.year}-{self.month}-{self.day}"
            ) from exc

    @classmethod
    def from_parts(cls, year: int, month: int, day: int) -> "CalendarDate":
        return cls(year, month, day)

    @classmethod
    def from_date(cls, d: date) -> "CalendarDate":
        return cls(d.year, d.month, d.day)

    @classmethod
    def parse(cls, text: str, fmt: str = DATE_FORMAT) -> "CalendarDate":
        """Parse a date string, by default in the API's wire format."""
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError as exc:
            raise InvalidDate(f"Unable to parse date {text!r} as {fmt!r}") from exc
        return cls.from_date(parsed.date())

    @classmethod
    def today(cls, timezone: str | None = None) -> "CalendarDate":
        """Return today's date in the given IANA zone, or in local time if None."""
        try:
            if timezone is None:
                now = datetime.now().astimezone()
            else:
                now = datetime.now(ZoneInfo(timezone))
        except (ZoneInfoNotFoundError, ValueError, OSError, OverflowError) as exc:
            raise ClockError(
                f"Unable to retrieve current date for {timezone or 'local time'}"
            ) from exc
        return cls.from_date(now.date())

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def next_day(self) -> "CalendarDate":
        return self.from_date(self.to_date() + timedelta(days=1))

    def format(self, fmt: str = DATE_FORMAT) -> str:
        """Format with strftime directives.

        ``%Y`` is always four digits wide. ``%y`` is only defined for
        1969-2068, the window ``parse`` maps two-digit years back into; other
        years raise ``InvalidDate`` instead of producing an ambiguous value.
        """
        d = self.to_date()

        def directive(match: re.Match) -> str:
            token = match.group()
            if token == "%Y":
                return f"{self.year:04d}"
            if token == "%y":
                if not SHORT_YEAR_MIN <= self.year <= SHORT_YEAR_MAX:
                    raise InvalidDate(
                        f"{self} cannot be expressed with a two-digit year"
                    )
                return f"{self.year % 100:02d}"
            return d.strftime(token)

        return _DIRECTIVE.sub(directive, fmt)

    def __str__(self) -> str:
        return self.to_date().isoformat()


@dataclass(frozen=True, slots=True)
class DateRange:
    dates: tuple[CalendarDate, ...] = ()

    @classmethod
    def between(cls, start: CalendarDate, end: CalendarDate) -> "DateRange":
        """Every day from start to end, inclusive. Empty if end is before start."""
        first = start.to_date()
        span = (end.to_date() - first).days
        return cls(
            tuple(
                CalendarDate.from_date(first + timedelta(days=offset))
                for offset in range(span + 1)
            )
        )

    @classmethod
    def from_dates(cls, dates: Iterable[CalendarDate]) -> "DateRange":
        return cls(tuple(dates))

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self) -> Iterator[CalendarDate]:
        return iter(self.dates)

    def __contains__(self, item: object) -> bool:
        return item in self.dates


@dataclass(frozen=True, slots=True)
class Now:
    """Today's date, in ``timezone`` (IANA name) or local time when None."""

    timezone: str | None = None


@dataclass(frozen=True, slots=True)
class OnDate:
    date: CalendarDate


@dataclass(frozen=True, slots=True)
class InRange:
    dates: DateRange


Timeframe = Now | OnDate | InRange


def resolve_dates(timeframe: Timeframe) -> list[CalendarDate]:
    """Turn a timeframe into the concrete dates to query, in request order."""
    if isinstance(timeframe, Now):
        return [CalendarDate.today(timeframe.timezone)]
    if isinstance(timeframe, OnDate):
        return [timeframe.date]
    if isinstance(timeframe, InRange):
        return list(timeframe.dates)
    raise TypeError(f"Unsupported timeframe: {timeframe!r}")


@dataclass(frozen=True, slots=True)
class RequestConfig:
    ressort: Ressort = Ressort.NONE
    regions: frozenset[Region] = frozenset()
    timeframe: Timeframe = Now()
    sort_by_date: bool = False

    def with_ressort(self, ressort: Ressort) -> "RequestConfig":
        return replace(self, ressort=ressort)

    def with_regions(self, regions: Iterable[Region]) -> "RequestConfig":
        return replace(self, regions=frozenset(regions))

    def with_timeframe(self, timeframe: Timeframe) -> "RequestConfig":
        return replace(self, timeframe=timeframe)

    def with_sorting(self, sort_by_date: bool = True) -> "RequestConfig":
        return replace(self, sort_by_date=sort_by_date)

    def region_codes(self) -> str:
        """Comma-joined region codes in ascending order."""
        return ",".join(str(int(region)) for region in sorted(self.regions))


def build_config(
    ressort: Ressort = Ressort.NONE,
    regions: Iterable[Region] = (),
    timeframe: Timeframe | None = None,
    sort_by_date: bool = False,
) -> RequestConfig:
    """Build a request configuration. The timeframe defaults to today."""
    return RequestConfig(
        ressort=ressort,
        regions=frozenset(regions),
        timeframe=timeframe if timeframe is not None else Now(),
        sort_by_date=sort_by_date,
    )
