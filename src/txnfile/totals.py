from __future__ import annotations

import datetime
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Optional, Tuple, Union

from .logging_setup import get_logger
from .models import BATCH_TXN, CREDIT, DEBIT, BatchHeader, BatchTrailer, FileTrailer, Record

log = get_logger("txnfile.totals")

_ZERO = Decimal("0")


@dataclass(frozen=True)
class Totals:
    debit_count: int = 0
    debit_amount: Decimal = _ZERO
    credit_count: int = 0
    credit_amount: Decimal = _ZERO

    def add(self, record: Record, index: Optional[int] = None) -> Totals:
        """
        Suma un registro según su indicator; el signo del monto guardado no cuenta.
        Un indicator distinto de DR/CR se avisa y queda fuera de los totales.
        """
        amount = abs(record.amount)
        if record.indicator == DEBIT:
            return replace(self, debit_count=self.debit_count + 1, debit_amount=self.debit_amount + amount)
        if record.indicator == CREDIT:
            return replace(self, credit_count=self.credit_count + 1, credit_amount=self.credit_amount + amount)

        log.warning("indicator desconocido %r en record %s, fuera de los totales", record.indicator, index)
        return self

    def merge(self, other: Totals) -> Totals:
        return Totals(
            debit_count=self.debit_count + other.debit_count,
            debit_amount=self.debit_amount + other.debit_amount,
            credit_count=self.credit_count + other.credit_count,
            credit_amount=self.credit_amount + other.credit_amount,
        )

    def net(self) -> Tuple[Decimal, str]:
        # neto = créditos - débitos; CR si >= 0
        balance = self.credit_amount - self.debit_amount
        return abs(balance), (CREDIT if balance >= 0 else DEBIT)


def batch_totals(records: Iterable[Record]) -> Totals:
    totals = Totals()
    for i, r in enumerate(records):
        totals = totals.add(r, i)
    return totals


def sum_totals(parts: Iterable[Totals]) -> Totals:
    out = Totals()
    for t in parts:
        out = out.merge(t)
    return out


def build_batch_trailer(
    header: BatchHeader,
    totals: Totals,
    reference_number: int,
    batch_type: str = BATCH_TXN,
    today: Optional[datetime.date] = None,
) -> BatchTrailer:
    """
    Trailer de batch: cuenta copiada del header, neto con su indicator,
    contadores/montos del batch y la posición del batch como referencia.
    """
    amount, indicator = totals.net()
    return BatchTrailer(
        bsb_number=header.bsb_number,
        account_number=header.account_number,
        account_name=header.account_name,
        transaction_date=header.transaction_date or today or datetime.date.today(),
        amount=amount,
        indicator=indicator,
        batch_type=batch_type or BATCH_TXN,
        reference_number=reference_number,
        total_debit_transactions=totals.debit_count,
        total_credit_transactions=totals.credit_count,
        total_debit_amount=totals.debit_amount,
        total_credit_amount=totals.credit_amount,
    )


def apply_file_totals(trailer: FileTrailer, totals: Totals) -> FileTrailer:
    trailer.total_debit_transactions = totals.debit_count
    trailer.total_credit_transactions = totals.credit_count
    trailer.total_debit_amount = totals.debit_amount
    trailer.total_credit_amount = totals.credit_amount
    return trailer


def trailer_totals(trailer: Union[BatchTrailer, FileTrailer]) -> Totals:
    return Totals(
        debit_count=trailer.total_debit_transactions,
        debit_amount=trailer.total_debit_amount,
        credit_count=trailer.total_credit_transactions,
        credit_amount=trailer.total_credit_amount,
    )
