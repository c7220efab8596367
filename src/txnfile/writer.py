from __future__ import annotations

import datetime
from os import PathLike
from typing import BinaryIO, List, Optional, Union

from .codec import TxnRecord, encode
from .errors import InsufficientBatchesError, InvalidRecordError
from .logging_setup import get_logger
from .models import Batch, FileHeader, FileTrailer, TxnFile, WriterOptions, new_batch
from .totals import Totals, apply_file_totals, build_batch_trailer, sum_totals

log = get_logger("txnfile.writer")


class Writer:
    """
    Escribe un archivo TXN completo sobre un sink binario.

    - Las líneas se acumulan en un buffer y se mandan al sink cuando el buffer
      supera ``options.buffer_size`` o en ``flush()``. Hay que llamar a flush.
    - Si el sink falla (OSError, o ValueError de un archivo cerrado), el error
      queda guardado: todo write/flush posterior lo vuelve a lanzar y
      ``error()`` lo devuelve.
    """

    def __init__(
        self,
        sink: BinaryIO,
        options: Optional[WriterOptions] = None,
        today: Optional[datetime.date] = None,
    ) -> None:
        self.options = options or WriterOptions()
        self._today = today or datetime.date.today()
        self.file_header = FileHeader(
            file_created=self._today,
            processing_date=self._today,
            description="ACCOUNT TRANSACTIONS",
        )
        self.batches: List[Batch] = [new_batch(self._today)]
        self.file_trailer = FileTrailer()
        self._sink = sink
        self._buf = bytearray()
        self._err: Optional[Exception] = None

    @property
    def terminator(self) -> str:
        return "\r\n" if self.options.crlf_line_endings else "\n"

    def write(self) -> None:
        """
        Header, batches (header, records, trailer calculado) y trailer de archivo.
        - Sin batches => InsufficientBatchesError sin escribir nada
        - Un record inválido corta todo con InvalidRecordError antes de emitir
          la primera línea: el buffer queda vacío y se puede reintentar
        Los trailers calculados quedan en ``self.batches`` y ``self.file_trailer``.
        """
        if len(self.batches) < 1:
            raise InsufficientBatchesError()
        self._check_error()

        for k, batch in enumerate(self.batches):
            for i, r in enumerate(batch.records):
                if not r.is_valid():
                    raise InvalidRecordError(k, i, r.problems())

        omit = self.options.omit_batch_totals
        self._emit(self.file_header)

        per_batch: List[Totals] = []
        for k, batch in enumerate(self.batches):
            self._emit(batch.batch_header)

            totals = Totals()
            for i, r in enumerate(batch.records):
                if not omit:
                    totals = totals.add(r, i)
                self._emit(r)

            batch.batch_trailer = build_batch_trailer(
                batch.batch_header,
                totals,
                reference_number=k,
                batch_type=batch.batch_trailer.batch_type,
                today=self._today,
            )
            self._emit(batch.batch_trailer)
            per_batch.append(totals)
            log.debug("batch %d: %d records, neto %s %s", k, len(batch.records), *totals.net())

        trailer = self.file_trailer
        if not trailer.customer_number:
            trailer.customer_number = self.file_header.customer_number
        if not trailer.customer_name:
            trailer.customer_name = self.file_header.customer_name
        # Algunos bancos piden una línea de balance al final; no se emite
        apply_file_totals(trailer, sum_totals(per_batch))
        self._emit(trailer)

    def flush(self) -> None:
        self._drain()
        flush = getattr(self._sink, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except (OSError, ValueError) as exc:
            self._err = exc
            raise

    def error(self) -> Optional[Exception]:
        return self._err

    def _check_error(self) -> None:
        if self._err is not None:
            raise self._err

    def _emit(self, obj: TxnRecord) -> None:
        line = encode(obj) + self.terminator
        self._buf += line.encode("ascii", errors="replace")
        if len(self._buf) >= self.options.buffer_size:
            self._drain()

    def _drain(self) -> None:
        self._check_error()
        if not self._buf:
            return
        try:
            self._sink.write(bytes(self._buf))
        except (OSError, ValueError) as exc:
            self._err = exc
            raise
        self._buf.clear()


def write_txn(
    path: Union[str, PathLike],
    txn: TxnFile,
    options: Optional[WriterOptions] = None,
) -> TxnFile:
    """
    Escribe ``txn`` en ``path`` y devuelve el archivo con los trailers calculados.
    """
    with open(path, "wb") as fh:
        w = Writer(fh, options)
        w.file_header = txn.file_header
        w.batches = list(txn.batches)
        w.file_trailer = txn.file_trailer
        w.write()
        w.flush()
    return TxnFile(file_header=w.file_header, batches=w.batches, file_trailer=w.file_trailer)
