from __future__ import annotations

import datetime
from decimal import Decimal
from typing import List

import pytest

from txnfile.models import CREDIT, DEBIT, Record


DEMO_DATE = datetime.date(2017, 1, 23)


def make_record(indicator: str, amount: str, **kw) -> Record:
    base = dict(
        bsb_number="182-222",
        account_number="123456789",
        account_name="DEMO ACCOUNT NUMBER 2",
        transaction_date=DEMO_DATE,
        amount=Decimal(amount),
        indicator=indicator,
        transaction_code="13" if indicator == DEBIT else "50",
        description="TEST TRANS",
    )
    base.update(kw)
    return Record(**base)


@pytest.fixture
def demo_records() -> List[Record]:
    """
    Dos débitos (2721.78 + 120.00) y dos créditos (1210.00 + 2448.96).
    """
    return [
        make_record(DEBIT, "2721.78", description="DDR GL481         Tower Australia", reference_number=245397),
        make_record(CREDIT, "1210.00", description="TEST TRANS        SIMPSON DESERT O"),
        make_record(DEBIT, "120.00", description="TEST TRANS               payment"),
        make_record(CREDIT, "2448.96", description="PAYMENT 1246      ATHM", reference_number=1),
    ]
