from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type

from .errors import (
    BadBatchHeaderError,
    BadBatchTrailerError,
    BadFileHeaderError,
    BadFileTrailerError,
    BadLineError,
    BadRecordError,
    UnexpectedRecordTypeError,
)


class Justify(enum.Enum):
    LEFT = "left"    # alineado a la izquierda, relleno con blancos
    RIGHT = "right"  # alineado a la derecha, relleno con blancos
    ZERO = "zero"    # alineado a la derecha, relleno con ceros


class RecordKind(enum.Enum):
    FILE_HEADER = "0"
    BATCH_HEADER = "1"
    RECORD = "2"
    BATCH_TRAILER = "7"
    FILE_TRAILER = "9"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def from_tag(cls, tag: str, line_no: Optional[int] = None) -> RecordKind:
        for kind in cls:
            if kind.value == tag:
                return kind
        raise UnexpectedRecordTypeError(tag, line_no)


@dataclass(frozen=True)
class Column:
    """
    Una columna de un registro de ancho fijo.
    - start/end: offsets [start, end) sobre la línea
    - kind: str | int | amount | date
    - default: valor cuando la columna no se puede parsear (modo lenient)
    """
    name: str
    start: int
    end: int
    kind: str = "str"
    justify: Justify = Justify.LEFT
    default: Any = ""

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class RecordLayout:
    kind: RecordKind
    width: int
    columns: List[Column]
    error: Type[BadLineError]

    @property
    def name(self) -> str:
        return self.kind.name.lower()


_ZERO = Decimal("0")


def _amount(name: str, start: int, end: int, justify: Justify = Justify.RIGHT) -> Column:
    return Column(name, start, end, kind="amount", justify=justify, default=_ZERO)


def _date(name: str, start: int) -> Column:
    return Column(name, start, start + 8, kind="date", justify=Justify.ZERO, default=None)


def _int(name: str, start: int, end: int, justify: Justify) -> Column:
    return Column(name, start, end, kind="int", justify=justify, default=0)


# Offsets sobre la línea sin terminador; el tag ocupa siempre [0, 1)
FILE_HEADER = RecordLayout(
    kind=RecordKind.FILE_HEADER,
    width=170,
    columns=[
        Column("customer_number", 1, 9, justify=Justify.ZERO),
        Column("customer_name", 9, 44),
        Column("remitter_name", 44, 64),
        _date("file_created", 64),
        _date("processing_date", 72),
        Column("description", 80, 100),
    ],
    error=BadFileHeaderError,
)

BATCH_HEADER = RecordLayout(
    kind=RecordKind.BATCH_HEADER,
    width=170,
    columns=[
        Column("bsb_number", 1, 8),
        Column("account_number", 8, 17),
        Column("account_name", 17, 52),
        _date("transaction_date", 52),
        _amount("amount", 60, 76),
        Column("indicator", 76, 78),
    ],
    error=BadBatchHeaderError,
)

RECORD = RecordLayout(
    kind=RecordKind.RECORD,
    width=168,
    columns=[
        Column("bsb_number", 1, 8, justify=Justify.RIGHT),
        Column("account_number", 8, 17, justify=Justify.RIGHT),
        Column("account_name", 17, 52),
        _date("transaction_date", 52),
        _amount("amount", 60, 76),
        Column("indicator", 76, 78, justify=Justify.RIGHT),
        Column("transaction_code", 78, 80, justify=Justify.RIGHT),
        Column("description", 80, 120),
        _int("reference_number", 120, 130, Justify.LEFT),
        Column("secondary_reference_number", 130, 140),
        Column("cheque_number", 140, 148),
    ],
    error=BadRecordError,
)

BATCH_TRAILER = RecordLayout(
    kind=RecordKind.BATCH_TRAILER,
    width=170,
    columns=[
        Column("bsb_number", 1, 8, justify=Justify.RIGHT),
        Column("account_number", 8, 17, justify=Justify.RIGHT),
        Column("account_name", 17, 52),
        _date("transaction_date", 52),
        _amount("amount", 60, 76),
        Column("indicator", 76, 78, justify=Justify.RIGHT),
        Column("batch_type", 78, 80, justify=Justify.RIGHT),
        _int("reference_number", 80, 86, Justify.ZERO),
        _int("total_debit_transactions", 86, 92, Justify.RIGHT),
        _int("total_credit_transactions", 92, 98, Justify.RIGHT),
        _amount("total_debit_amount", 98, 114),
        _amount("total_credit_amount", 114, 130),
    ],
    error=BadBatchTrailerError,
)

FILE_TRAILER = RecordLayout(
    kind=RecordKind.FILE_TRAILER,
    width=170,
    columns=[
        Column("customer_number", 1, 9, justify=Justify.ZERO),
        Column("customer_name", 9, 44),
        _int("total_debit_transactions", 44, 50, Justify.LEFT),
        _int("total_credit_transactions", 50, 56, Justify.LEFT),
        _amount("total_debit_amount", 56, 72, Justify.LEFT),
        _amount("total_credit_amount", 72, 88, Justify.LEFT),
    ],
    error=BadFileTrailerError,
)

LAYOUTS: Dict[RecordKind, RecordLayout] = {
    layout.kind: layout
    for layout in (FILE_HEADER, BATCH_HEADER, RECORD, BATCH_TRAILER, FILE_TRAILER)
}
