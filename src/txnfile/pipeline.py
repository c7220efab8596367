from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .errors import TxnError
from .logging_setup import configure_logging
from .reader import Reader
from .validate import reconcile


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Lector de archivos TXN (ancho fijo)")
    parser.add_argument("file", help="Ruta al archivo .txn")
    parser.add_argument("--out", default="", help="Ruta de salida JSON (opcional)")
    parser.add_argument("--strict", action="store_true", help="Campos mal formados y records inválidos cortan la lectura")
    parser.add_argument("--verify", action="store_true", help="Cuadrar trailers contra los records")
    parser.add_argument("--omit-batch-totals", action="store_true", help="El banco no informa totales (se esperan en cero)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING... (o TXNFILE_LOG_LEVEL)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    txn_path = Path(args.file)
    if not txn_path.exists():
        raise SystemExit(f"No existe el archivo: {txn_path}")

    console = Console(stderr=True)
    console.print(f"Procesando: {txn_path}", style="bold")

    with txn_path.open("rb") as fh:
        reader = Reader(fh, strict=args.strict)
        try:
            reader.read_all()
        except TxnError as exc:
            console.print(f"Error: {exc}", style="bold red")
            return 1

    txn = reader.as_file()
    payload = txn.model_dump(mode="json")

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        console.print(f"OK -> {out_path}", style="bold green")
    else:
        print(json.dumps(payload, ensure_ascii=False, indent=2))

    total = sum(len(b.records) for b in txn.batches)
    console.print(f"Batches: {len(txn.batches)}  Records: {total}", style="bold cyan")
    if reader.rejected:
        console.print(f"Records descartados: {len(reader.rejected)}", style="bold yellow")
        for err in reader.rejected:
            console.print(f"  {err}")

    if args.verify:
        problems = reconcile(txn, omit_batch_totals=args.omit_batch_totals)
        if problems:
            console.print("MISMATCH", style="bold red")
            for p in problems:
                console.print(f"  {p}")
            return 1
        console.print("Totales OK", style="bold green")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
