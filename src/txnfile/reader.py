from __future__ import annotations

from os import PathLike
from typing import BinaryIO, List, Optional, Union

from .codec import decode
from .errors import InvalidRecordError, SequenceError
from .layout import RecordKind
from .logging_setup import get_logger
from .models import Batch, BatchTrailer, FileHeader, FileTrailer, Record, TxnFile

log = get_logger("txnfile.reader")


class Reader:
    """
    Lee un archivo TXN línea a línea.

    Estado explícito:
    - ``file_header`` / ``file_trailer``: None hasta que aparecen
    - batch actual: None hasta el primer batch header ('1') y después de cada '7'

    Un record '2' inválido se descarta y se guarda en ``rejected``;
    con ``strict=True`` corta la lectura (y los campos mal formados también).
    """

    def __init__(self, source: BinaryIO, strict: bool = False) -> None:
        self.strict = strict
        self.file_header: Optional[FileHeader] = None
        self.batches: List[Batch] = []
        self.file_trailer: Optional[FileTrailer] = None
        self.rejected: List[InvalidRecordError] = []
        self._source = source
        self._current: Optional[Batch] = None
        self._record_pos = 0
        self._line_no = 0

    def read_all(self) -> List[Batch]:
        while True:
            line = self._readline()
            if line is None:
                return self.batches
            self._dispatch(line)

    def _readline(self) -> Optional[str]:
        raw = self._source.readline()
        if not raw:
            return None
        self._line_no += 1
        if isinstance(raw, bytes):
            # latin-1: un byte = un carácter, las columnas no se corren
            return raw.decode("latin-1")
        return raw

    def _dispatch(self, line: str) -> None:
        n = self._line_no
        kind = RecordKind.from_tag(line[:1], n)

        if self.file_trailer is not None:
            raise SequenceError(f"registro {kind.tag!r} después del file trailer", n)

        if kind is RecordKind.FILE_HEADER:
            if self.file_header is not None:
                raise SequenceError("file header duplicado", n)
            self.file_header = self._decode(kind, line)

        elif kind is RecordKind.BATCH_HEADER:
            header = self._decode(kind, line)
            self._current = Batch(batch_header=header)
            self.batches.append(self._current)
            self._record_pos = 0
            log.debug("línea %d: batch %d abierto", n, len(self.batches) - 1)

        elif kind is RecordKind.RECORD:
            batch = self._require_batch("record", n)
            record: Record = self._decode(kind, line)
            pos = self._record_pos
            self._record_pos += 1
            if record.is_valid():
                batch.records.append(record)
                return
            err = InvalidRecordError(len(self.batches) - 1, pos, record.problems())
            if self.strict:
                raise err
            log.warning("línea %d descartada: %s", n, err)
            self.rejected.append(err)

        elif kind is RecordKind.BATCH_TRAILER:
            batch = self._require_batch("batch trailer", n)
            trailer: BatchTrailer = self._decode(kind, line)
            batch.batch_trailer = trailer
            self._current = None

        elif kind is RecordKind.FILE_TRAILER:
            self.file_trailer = self._decode(kind, line)

    def _decode(self, kind: RecordKind, line: str):
        return decode(kind, line, strict=self.strict)

    def _require_batch(self, what: str, line_no: int) -> Batch:
        if self._current is None:
            raise SequenceError(f"{what} sin batch header abierto", line_no)
        return self._current

    def as_file(self) -> TxnFile:
        return TxnFile(
            file_header=self.file_header or FileHeader(),
            batches=self.batches,
            file_trailer=self.file_trailer or FileTrailer(),
        )


def read_txn(path: Union[str, PathLike], strict: bool = False) -> TxnFile:
    with open(path, "rb") as fh:
        reader = Reader(fh, strict=strict)
        reader.read_all()
    return reader.as_file()
