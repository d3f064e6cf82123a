import calendar
from datetime import date, datetime, timezone

MONTH_NAMES = [
    "JANEIRO", "FEVEREIRO", "MARÇO", "ABRIL", "MAIO", "JUNHO",
    "JULHO", "AGOSTO", "SETEMBRO", "OUTUBRO", "NOVEMBRO", "DEZEMBRO",
]


def today() -> date:
    return date.today()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def month_bounds(year: int, month: int):
    """Primeiro e último dia do mês."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def clamp_day(year: int, month: int, day: int) -> date:
    # Dia 31 em fevereiro vira o último dia do mês
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))


def competence_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} DE {year}"
