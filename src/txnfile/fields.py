from __future__ import annotations

import datetime
import re
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Optional

from .errors import FieldParseError
from .layout import Column, Justify
from .logging_setup import get_logger

log = get_logger("txnfile.fields")

AMOUNT_RE = re.compile(r"\d+(?:\.\d+)?")
DATE_RE = re.compile(r"(\d{4})(\d{2})(\d{2})")
INT_RE = re.compile(r"\d+")

_CENTS = Decimal("0.01")
_NO_DATE = "00000000"


def fit(text: str, width: int, justify: Justify = Justify.LEFT) -> str:
    # Si no cabe se trunca (se conservan los primeros caracteres)
    text = text[:width]
    if justify is Justify.LEFT:
        return text.ljust(width)
    if justify is Justify.ZERO:
        return text.rjust(width, "0")
    return text.rjust(width)


def pad_line(text: str, width: int) -> str:
    return text.ljust(width)[:width]


def format_amount(value: Decimal) -> str:
    # Siempre 2 decimales, sin separadores ni signo (el signo va en indicator)
    q = abs(Decimal(value)).quantize(_CENTS, rounding=ROUND_HALF_EVEN)
    return f"{q:.2f}"


def format_date(value: Optional[datetime.date]) -> str:
    if value is None:
        return _NO_DATE
    # strftime no rellena el año < 1000 en todas las plataformas
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def parse_amount(raw: str) -> Decimal:
    if not AMOUNT_RE.fullmatch(raw):
        raise ValueError(f"monto inválido: {raw!r}")
    return Decimal(raw)


def parse_date(raw: str) -> Optional[datetime.date]:
    if raw == "" or raw == _NO_DATE:
        return None
    m = DATE_RE.fullmatch(raw)
    if not m:
        raise ValueError(f"fecha inválida: {raw!r}")
    return datetime.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def parse_int(raw: str) -> int:
    if not INT_RE.fullmatch(raw):
        raise ValueError(f"entero inválido: {raw!r}")
    return int(raw)


_PARSERS = {
    "amount": (parse_amount, "un monto"),
    "date": (parse_date, "una fecha YYYYMMDD"),
    "int": (parse_int, "un entero"),
}


def render(column: Column, value: Any) -> str:
    if column.kind == "amount":
        text = format_amount(value if value is not None else Decimal("0"))
    elif column.kind == "date":
        text = format_date(value)
    elif column.kind == "int":
        number = int(value or 0)
        if column.justify is Justify.ZERO:
            return f"{number:0{column.width}d}"[: column.width]
        text = str(number)
    else:
        text = "" if value is None else str(value)
    return fit(text, column.width, column.justify)


def parse(column: Column, line: str, record_name: str, strict: bool = False) -> Any:
    """
    Recorta la columna de la línea y la convierte al tipo de la columna.
    - vacío => default de la columna, sin aviso (campo no informado)
    - no parseable => default + warning, o FieldParseError si strict
    """
    raw = line[column.start : column.end].strip()
    if column.kind not in _PARSERS:
        return raw
    if raw == "":
        return column.default

    parser, expected = _PARSERS[column.kind]
    try:
        return parser(raw)
    except ValueError:
        if strict:
            raise FieldParseError(record_name, column.name, raw, expected) from None
        log.warning("%s.%s: %r no es %s, se usa %r", record_name, column.name, raw, expected, column.default)
        return column.default
