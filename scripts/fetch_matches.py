#!/usr/bin/env python3
import argparse
import asyncio
import json
import sys

from dotenv import find_dotenv, load_dotenv

# .env override
dotenv_path = find_dotenv(usecwd=True)
if dotenv_path:
    load_dotenv(dotenv_path, override=True)

from aggregation.pipeline import get_matches  # noqa: E402

def main() -> None:
    ap = argparse.ArgumentParser(description="Partite del giorno con i canali di trasmissione (JSON su stdout)")
    ap.add_argument("--date", default=None, type=str, help="Data dd-mm-aaaa (default: oggi)")
    ap.add_argument("--no-cache", action="store_true", help="Ignora la cache e rilegge le fonti")
    ap.add_argument("--summary", action="store_true", help="Stampa un riepilogo leggibile invece del JSON")
    args = ap.parse_args()

    matches = asyncio.run(get_matches(args.date, use_cache=False if args.no_cache else None))

    if args.summary:
        if not matches:
            print("Nessuna partita con trasmissione trovata.")
            return
        print(f"Totale partite con trasmissione: {len(matches)}")
        for m in matches:
            print(f"\n{m.campeonato}")
            print(f"{m.nome_times[0]} x {m.nome_times[1]}")
            print(f"Orario: {m.hora}")
            print(f"Stadio: {m.estadio or '-'}")
            print(f"Trasmissione: {', '.join(m.canais)}")
        return

    print(json.dumps([m.to_dict() for m in matches], ensure_ascii=False, indent=2))

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(1)
