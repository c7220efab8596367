from __future__ import annotations

import io
import json
from decimal import Decimal

import pytest

from txnfile import logging_setup, pipeline
from txnfile.models import CREDIT, TxnFile, WriterOptions
from txnfile.reader import Reader, read_txn
from txnfile.validate import reconcile
from txnfile.writer import Writer, write_txn


def _demo_writer(buf, records) -> Writer:
    w = Writer(buf)
    w.file_header.customer_number = "123456"
    w.file_header.customer_name = "ABC PTY LIMITED"
    w.file_header.remitter_name = "MACQUARIE BANK"
    w.batches[0].records = records

    bh = w.batches[0].batch_header
    bh.bsb_number = "182-222"
    bh.account_number = "123456789"
    bh.account_name = "DEMO ACCOUNT NUMBER 2"
    bh.amount = Decimal("426.32")
    bh.indicator = CREDIT

    w.file_trailer.customer_number = w.file_header.customer_number
    w.file_trailer.customer_name = w.file_header.customer_name
    return w


def test_demo_write_then_read(demo_records):
    total_credit = demo_records[1].amount + demo_records[3].amount
    total_debit = demo_records[0].amount + demo_records[2].amount

    buf = io.BytesIO()
    w = _demo_writer(buf, demo_records)
    w.write()
    w.flush()
    assert w.error() is None

    buf.seek(0)
    ff = Reader(buf)
    batches = ff.read_all()

    assert len(batches) == 1
    assert len(batches[0].records) == 4
    assert [r.description for r in batches[0].records] == [r.description for r in demo_records]

    bt = ff.batches[0].batch_trailer
    assert bt.amount == abs(bt.total_credit_amount - bt.total_debit_amount)
    assert bt.amount == Decimal("817.18")
    assert bt.indicator == CREDIT

    ft = ff.file_trailer
    assert ft.customer_number == "00123456"
    assert ft.total_debit_transactions == 2
    assert ft.total_credit_transactions == 2
    assert ft.total_debit_amount == total_debit == Decimal("2841.78")
    assert ft.total_credit_amount == total_credit == Decimal("3658.96")

    assert reconcile(ff.as_file()) == []


def test_reconcile_detects_tampered_trailer(demo_records):
    buf = io.BytesIO()
    w = _demo_writer(buf, demo_records)
    w.write()
    w.flush()
    buf.seek(0)

    r = Reader(buf)
    r.read_all()
    txn = r.as_file()
    txn.batches[0].batch_trailer.total_debit_amount = Decimal("1.00")
    txn.file_trailer.total_credit_transactions = 7

    problems = reconcile(txn)
    assert any("batch 0" in p and "debit_amount" in p for p in problems)
    assert any("file trailer" in p and "credit_count" in p for p in problems)


def test_reconcile_omitted_totals(demo_records):
    buf = io.BytesIO()
    w = _demo_writer(buf, demo_records)
    w.options = WriterOptions(omit_batch_totals=True)
    w.write()
    w.flush()
    buf.seek(0)

    r = Reader(buf)
    r.read_all()
    assert reconcile(r.as_file(), omit_batch_totals=True) == []
    assert reconcile(r.as_file()), "Con totales omitidos el cuadre normal debe fallar"


def test_write_txn_and_read_txn(tmp_path, demo_records):
    w = _demo_writer(io.BytesIO(), demo_records)
    txn = TxnFile(file_header=w.file_header, batches=w.batches, file_trailer=w.file_trailer)

    path = tmp_path / "out" / "Test_TXN_20170123.txn"
    path.parent.mkdir()
    written = write_txn(path, txn, WriterOptions(crlf_line_endings=True))
    back = read_txn(path)

    assert path.read_bytes().count(b"\r\n") == 8
    assert back.batches[0].batch_trailer == written.batches[0].batch_trailer
    assert back.file_trailer.total_credit_amount == Decimal("3658.96")


@pytest.fixture
def _quiet_logging(monkeypatch):
    # evita que el CLI cambie el logging del resto de la suite
    monkeypatch.setattr(logging_setup, "_CONFIGURED", True)


def test_cli_dump_and_verify(tmp_path, demo_records, _quiet_logging, capsys):
    w = _demo_writer(io.BytesIO(), demo_records)
    txn_path = tmp_path / "demo.txn"
    write_txn(txn_path, TxnFile(file_header=w.file_header, batches=w.batches, file_trailer=w.file_trailer))
    out_path = tmp_path / "json" / "demo.json"

    rc = pipeline.main([str(txn_path), "--out", str(out_path), "--verify"])

    assert rc == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert len(payload["batches"][0]["records"]) == 4
    assert payload["file_trailer"]["total_debit_amount"] == "2841.78"
    assert "Totales OK" in capsys.readouterr().err


def test_cli_verify_omitted_totals(tmp_path, demo_records, _quiet_logging, capsys):
    w = _demo_writer(io.BytesIO(), demo_records)
    txn_path = tmp_path / "omit.txn"
    txn = TxnFile(file_header=w.file_header, batches=w.batches, file_trailer=w.file_trailer)
    write_txn(txn_path, txn, WriterOptions(omit_batch_totals=True))
    out_path = tmp_path / "omit.json"

    assert pipeline.main([str(txn_path), "--out", str(out_path), "--verify"]) == 1
    assert "MISMATCH" in capsys.readouterr().err

    rc = pipeline.main([str(txn_path), "--out", str(out_path), "--verify", "--omit-batch-totals"])
    assert rc == 0
    assert "Totales OK" in capsys.readouterr().err


def test_cli_reports_broken_file(tmp_path, _quiet_logging):
    bad = tmp_path / "bad.txn"
    bad.write_bytes(b"5 garbage\n")
    assert pipeline.main([str(bad)]) == 1


def test_cli_missing_file(tmp_path, _quiet_logging):
    with pytest.raises(SystemExit):
        pipeline.main([str(tmp_path / "nope.txn")])
