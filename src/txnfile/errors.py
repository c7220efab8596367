from __future__ import annotations

from typing import List, Optional


class TxnError(Exception):
    """Base de todos los errores del formato TXN."""


class InsufficientBatchesError(TxnError):
    def __init__(self) -> None:
        super().__init__("txn: no hay batches suficientes (mínimo 1)")


class UnexpectedRecordTypeError(TxnError):
    def __init__(self, tag: str, line_no: Optional[int] = None) -> None:
        self.tag = tag
        self.line_no = line_no
        where = f" (línea {line_no})" if line_no is not None else ""
        super().__init__(f"txn: tipo de registro inesperado {tag!r}{where}, se esperaba 0, 1, 2, 7 o 9")


class SequenceError(TxnError):
    """Registro fuera de orden: detalle/trailer sin batch abierto, header duplicado, etc."""

    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        where = f" (línea {line_no})" if line_no is not None else ""
        super().__init__(f"txn: {message}{where}")


class BadLineError(TxnError):
    kind_name = "registro"

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"txn: bad {self.kind_name}, se esperaban {expected} caracteres y llegaron {got}")


class BadFileHeaderError(BadLineError):
    kind_name = "file header"


class BadBatchHeaderError(BadLineError):
    kind_name = "batch header"


class BadRecordError(BadLineError):
    kind_name = "record"


class BadBatchTrailerError(BadLineError):
    kind_name = "batch trailer"


class BadFileTrailerError(BadLineError):
    kind_name = "file trailer"


class InvalidRecordError(TxnError):
    def __init__(self, batch_index: int, record_index: int, problems: List[str]) -> None:
        self.batch_index = batch_index
        self.record_index = record_index
        self.problems = list(problems)
        detail = "; ".join(self.problems) or "registro inválido"
        super().__init__(
            f"txn: registro inválido (batch {batch_index}, record {record_index}): {detail}"
        )


class FieldParseError(TxnError):
    def __init__(self, kind: str, field: str, raw: str, expected: str) -> None:
        self.kind = kind
        self.field = field
        self.raw = raw
        super().__init__(f"txn: {kind}.{field} = {raw!r} no es {expected} válido")
