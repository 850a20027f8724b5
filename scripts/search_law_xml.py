#!/usr/bin/env python3
"""Find every provision of a statute corpus that mentions given words.

Reads the law index, scans each listed e-Gov statute XML file in a single
streaming pass, and writes one citation record per law that has at least
one match. Records hold structural addresses (part/chapter/.../article/
paragraph/item/sub-item or supplementary provision), not the text itself.

Output is a JSON array written incrementally in index order; progress goes
to stderr.

Usage:
    python3 scripts/search_law_xml.py \
        --index-file data/index.json --work data/xml \
        --output out/junyou.json -s 準用 -s 読み替え

    # Parallel, tolerating broken files:
    python3 scripts/search_law_xml.py -i data/index.json -w data/xml \
        -o out/junyou.json -s 準用 --workers 8 --skip-errors \
        --summary out/junyou.summary.json
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from multiprocessing import Pool
from pathlib import Path
from typing import Any

from lawcite.address import CitationRecord
from lawcite.errors import CitationScanError, IndexFormatError
from lawcite.io_utils import CitationArrayWriter, save_json
from lawcite.law_index import LawIndexEntry, load_law_index
from lawcite.matcher import SearchTerms, search_file
from lawcite.xml_events import DEFAULT_CHUNK_SIZE

log = logging.getLogger("search_law_xml")


def _scan_one(
    args: tuple[LawIndexEntry, Path, SearchTerms, int],
) -> tuple[CitationRecord | None, str | None]:
    """Scan one indexed file. Returns (record, None) or (None, error)."""
    entry, work_dir, terms, chunk_size = args
    path = entry.resolve(work_dir)
    try:
        return search_file(path, terms, chunk_size=chunk_size), None
    except CitationScanError as exc:
        return None, str(exc)
    except OSError as exc:
        return None, f"{path}: {exc}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record the structural location of every statute provision "
        "that contains any of the search words.",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Path of the JSON file to write",
    )
    parser.add_argument(
        "--work", "-w",
        type=Path,
        required=True,
        help="Directory holding the statute XML files",
    )
    parser.add_argument(
        "--index-file", "-i",
        type=Path,
        required=True,
        help="JSON index listing the statute files to scan",
    )
    parser.add_argument(
        "--search-words", "-s",
        action="extend",
        nargs="+",
        required=True,
        help="Word(s) to search for; a provision matches if it contains any",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of parallel worker processes (default: 1)",
    )
    parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Log and skip documents that fail to parse instead of aborting",
    )
    parser.add_argument(
        "--include-empty",
        action="store_true",
        help="Also write records for laws with no matches",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Bytes fed to the XML parser per read (default: {DEFAULT_CHUNK_SIZE})",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional path for a JSON run summary (counts and failures)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    work_dir: Path = args.work
    if not work_dir.is_dir():
        log.error("Work directory not found: %s", work_dir)
        return 1
    if not args.index_file.exists():
        log.error("Index file not found: %s", args.index_file)
        return 1
    if args.workers < 1:
        log.error("--workers must be >= 1, got %d", args.workers)
        return 1

    try:
        terms = SearchTerms.from_iterable(args.search_words)
    except ValueError as exc:
        log.error("Invalid search words: %s", exc)
        return 1

    t0 = time.time()
    log.info("[START] load index: %s", args.index_file)
    try:
        entries = load_law_index(args.index_file)
    except IndexFormatError as exc:
        log.error("Bad index file: %s", exc)
        return 1
    log.info("[END] load index: %d laws", len(entries))

    work_items = [(e, work_dir, terms, args.chunk_size) for e in entries]
    failures: list[dict[str, Any]] = []
    scanned = 0
    aborted = False

    log.info("[START] write %s (search words: %s)", args.output, ", ".join(terms.terms))
    with CitationArrayWriter(args.output) as writer:
        if args.workers == 1:
            results = map(_scan_one, work_items)
            pool = None
        else:
            pool = Pool(processes=args.workers)
            results = pool.imap(_scan_one, work_items)
        try:
            for entry, (record, error) in zip(entries, results):
                if record is None:
                    failures.append({"file": entry.file, "error": error})
                    if not args.skip_errors:
                        log.error("Failed to scan %s: %s", entry.file, error)
                        aborted = True
                        break
                    log.warning("Skipping %s: %s", entry.file, error)
                    continue
                scanned += 1
                if record.is_empty and not args.include_empty:
                    log.debug("No matches in %s", entry.file)
                    continue
                writer.write(record)
                log.info(
                    "[DATA] %s (%s): %d locations",
                    entry.file, record.num, len(record.chapter_data),
                )
        finally:
            if pool is not None:
                if aborted:
                    pool.terminate()
                else:
                    pool.close()
                pool.join()
        written = writer.count

    elapsed = time.time() - t0
    print(
        f"Scanned {scanned}/{len(entries)} laws, wrote {written} records, "
        f"{len(failures)} failures in {elapsed:.1f}s",
        file=sys.stderr,
    )

    if args.summary is not None:
        save_json(
            {
                "index_file": str(args.index_file),
                "output": str(args.output),
                "search_words": list(terms.terms),
                "laws_indexed": len(entries),
                "laws_scanned": scanned,
                "records_written": written,
                "aborted": aborted,
                "failures": failures,
                "elapsed_sec": round(elapsed, 3),
            },
            args.summary,
        )

    return 1 if aborted else 0


if __name__ == "__main__":
    sys.exit(main())
