from __future__ import annotations

from typing import Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel

from .fields import pad_line, parse, render
from .layout import LAYOUTS, RecordKind, RecordLayout
from .models import BatchHeader, BatchTrailer, FileHeader, FileTrailer, Record


TxnRecord = Union[FileHeader, BatchHeader, Record, BatchTrailer, FileTrailer]

MODELS: Dict[RecordKind, Type[BaseModel]] = {
    RecordKind.FILE_HEADER: FileHeader,
    RecordKind.BATCH_HEADER: BatchHeader,
    RecordKind.RECORD: Record,
    RecordKind.BATCH_TRAILER: BatchTrailer,
    RecordKind.FILE_TRAILER: FileTrailer,
}

_KINDS: Dict[Type[BaseModel], RecordKind] = {model: kind for kind, model in MODELS.items()}


def kind_of(obj: TxnRecord) -> RecordKind:
    try:
        return _KINDS[type(obj)]
    except KeyError:
        raise TypeError(f"no es un registro TXN: {type(obj).__name__}") from None


def encode(obj: TxnRecord) -> str:
    """
    Serializa un registro a su línea de ancho fijo, sin terminador.
    Nunca falla ni valida: eso lo hace el Writer antes de llamar aquí.
    """
    layout = LAYOUTS[kind_of(obj)]
    chars = list(pad_line(layout.kind.tag, layout.width))
    for col in layout.columns:
        chars[col.start : col.end] = render(col, getattr(obj, col.name))
    return pad_line("".join(chars), layout.width)


def check_length(layout: RecordLayout, line: str) -> None:
    # ancho + "\n" o ancho + "\r\n"
    if len(line) not in (layout.width + 1, layout.width + 2):
        raise layout.error(layout.width, len(line.rstrip("\r\n")))


def decode(kind: RecordKind, line: str, strict: bool = False) -> TxnRecord:
    layout = LAYOUTS[kind]
    check_length(layout, line)
    values = {col.name: parse(col, line, layout.name, strict=strict) for col in layout.columns}
    return MODELS[kind](**values)


def decode_line(line: str, strict: bool = False, line_no: Optional[int] = None) -> Tuple[RecordKind, TxnRecord]:
    kind = RecordKind.from_tag(line[:1], line_no)
    return kind, decode(kind, line, strict=strict)
