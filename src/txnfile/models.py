from __future__ import annotations

import datetime
import re
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


DEBIT = "DR"
CREDIT = "CR"
BATCH_TXN = "ST"
BATCH_PAY = "SP"

BSB_RE = re.compile(r"\d{3}-\d{3}")


class _TxnModel(BaseModel):
    # el Writer se arma asignando campos; sin esto un float quedaría como float
    model_config = ConfigDict(validate_assignment=True)


class FileHeader(_TxnModel):
    customer_number: str = Field("", description="Zero filled to 8, e.g. 00123456")
    customer_name: str = ""
    remitter_name: str = ""
    file_created: Optional[datetime.date] = None
    processing_date: Optional[datetime.date] = None
    description: str = Field("", description="e.g. ACCOUNT TRANSACTIONS or DEFT PAYMENTS")


class BatchHeader(_TxnModel):
    bsb_number: str = Field("", description="Routing number NNN-NNN, e.g. 182-222")
    account_number: str = ""
    account_name: str = ""
    transaction_date: Optional[datetime.date] = None
    amount: Decimal = Decimal("0")
    indicator: str = ""


class Record(_TxnModel):
    bsb_number: str = ""
    account_number: str = ""
    account_name: str = ""
    transaction_date: Optional[datetime.date] = None
    amount: Decimal = Field(Decimal("0"), description="Sin signo; la dirección la da indicator")
    indicator: str = Field("", description="DR o CR")
    transaction_code: str = Field("", description="13 debit, 50 credit")
    description: str = ""
    reference_number: int = 0
    secondary_reference_number: str = ""
    cheque_number: str = ""

    def problems(self) -> List[str]:
        out: List[str] = []
        if self.indicator not in (DEBIT, CREDIT):
            out.append(f"indicator {self.indicator!r} no es DR/CR")
        if not BSB_RE.fullmatch(self.bsb_number):
            out.append(f"bsb_number {self.bsb_number!r} no tiene formato NNN-NNN")
        return out

    def is_valid(self) -> bool:
        return not self.problems()


class BatchTrailer(_TxnModel):
    bsb_number: str = ""
    account_number: str = ""
    account_name: str = ""
    transaction_date: Optional[datetime.date] = None
    amount: Decimal = Field(Decimal("0"), description="Neto |credit - debit|")
    indicator: str = ""
    batch_type: str = Field(BATCH_TXN, description="ST transacciones, SP pagos")
    reference_number: int = Field(0, description="Posición del batch en el archivo")
    total_debit_transactions: int = 0
    total_credit_transactions: int = 0
    total_debit_amount: Decimal = Decimal("0")
    total_credit_amount: Decimal = Decimal("0")


class FileTrailer(_TxnModel):
    customer_number: str = ""
    customer_name: str = ""
    total_debit_transactions: int = 0
    total_credit_transactions: int = 0
    total_debit_amount: Decimal = Decimal("0")
    total_credit_amount: Decimal = Decimal("0")


class Batch(_TxnModel):
    batch_header: BatchHeader = Field(default_factory=BatchHeader)
    records: List[Record] = Field(default_factory=list)
    batch_trailer: BatchTrailer = Field(default_factory=BatchTrailer)


class TxnFile(_TxnModel):
    file_header: FileHeader = Field(default_factory=FileHeader)
    batches: List[Batch] = Field(default_factory=list)
    file_trailer: FileTrailer = Field(default_factory=FileTrailer)


class WriterOptions(_TxnModel):
    omit_batch_totals: bool = Field(False, description="Bancos que no resumen créditos/débitos")
    crlf_line_endings: bool = Field(False, description="\\r\\n en vez de \\n")
    buffer_size: int = Field(4096, gt=0)


def new_batch(today: Optional[datetime.date] = None) -> Batch:
    today = today or datetime.date.today()
    return Batch(
        batch_header=BatchHeader(transaction_date=today),
        batch_trailer=BatchTrailer(transaction_date=today, batch_type=BATCH_TXN),
    )
