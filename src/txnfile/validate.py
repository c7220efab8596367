from __future__ import annotations

from typing import List

from .models import TxnFile
from .totals import Totals, batch_totals, sum_totals, trailer_totals


def _compare(where: str, expected: Totals, got: Totals) -> List[str]:
    out: List[str] = []
    for name in ("debit_count", "credit_count", "debit_amount", "credit_amount"):
        e = getattr(expected, name)
        g = getattr(got, name)
        if e != g:
            out.append(f"{where}: {name} esperado {e}, trailer dice {g}")
    return out


def reconcile(txn: TxnFile, omit_batch_totals: bool = False) -> List[str]:
    """
    Chequeo contable de un archivo leído (la lectura no valida totales):
    - cada batch trailer cuadra con la suma de sus records (DR/CR)
    - neto = |créditos - débitos| y su indicator
    - reference_number = posición del batch
    - file trailer = suma de todos los batches
    Con ``omit_batch_totals`` se esperan todos los totales en cero.
    Devuelve la lista de diferencias; vacía si todo cuadra.
    """
    problems: List[str] = []
    parts: List[Totals] = []

    for k, batch in enumerate(txn.batches):
        where = f"batch {k}"
        expected = Totals() if omit_batch_totals else batch_totals(batch.records)
        trailer = batch.batch_trailer

        problems += _compare(where, expected, trailer_totals(trailer))

        amount, indicator = expected.net()
        if trailer.amount != amount or trailer.indicator != indicator:
            problems.append(
                f"{where}: neto esperado {amount} {indicator}, trailer dice {trailer.amount} {trailer.indicator}"
            )
        if trailer.reference_number != k:
            problems.append(f"{where}: reference_number {trailer.reference_number}, se esperaba {k}")

        parts.append(expected)

    problems += _compare("file trailer", sum_totals(parts), trailer_totals(txn.file_trailer))
    return problems
