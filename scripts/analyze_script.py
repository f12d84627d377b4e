import argparse
import csv
import json
import logging
import os
import sys

from dotenv import load_dotenv

from script_auditor.analyzer import analyze_script
from script_auditor.catalog import DEFAULT_CATALOG_PATH, load_catalog
from script_auditor.errors import ProviderError
from script_auditor.logger import setup_logging
from script_auditor.normalizer import normalize
from script_auditor.utils import summarize

DEFAULT_MODEL = "google/gemini-flash-1.5"
INDEX_HEADER = ["id", "filename", "model", "overall_score", "readability_score", "implemented"]

logger = logging.getLogger("analyze_script")


def _read(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Analyze script files and write the results as JSON.")
    parser.add_argument("paths", nargs="+", help="script text files")
    parser.add_argument("--model", default=os.environ.get("DEFAULT_MODEL", DEFAULT_MODEL))
    parser.add_argument("--out", default="outputs", help="output directory")
    parser.add_argument("--raw", metavar="FILE",
                        help="normalize a saved provider response instead of calling the provider "
                             "(the script files then only supply fallback text)")
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging()
    catalog = load_catalog(os.environ.get("MODEL_CATALOG_PATH", DEFAULT_CATALOG_PATH))

    os.makedirs(args.out, exist_ok=True)
    index_csv = os.path.join(args.out, "index.csv")
    if not os.path.exists(index_csv):
        with open(index_csv, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(INDEX_HEADER)

    failures = 0
    for p in args.paths:
        if not os.path.exists(p):
            print(f"File not found: {p}")
            failures += 1
            continue

        script = _read(p)
        if args.raw:
            result = normalize(_read(args.raw), script)
        else:
            try:
                result = analyze_script(script, args.model, catalog)
            except ProviderError as e:
                logger.error("%s: %s", p, e)
                failures += 1
                continue

        base = os.path.splitext(os.path.basename(p))[0]
        outj = os.path.join(args.out, f"{base}.json")
        with open(outj, "w", encoding="utf-8") as f:
            json.dump(result, f, ensure_ascii=False, indent=2)

        summary = summarize(result)
        implemented = f"{summary['implemented']}/{summary['suggestions']}"
        with open(index_csv, "a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow([
                base, os.path.basename(p), args.model,
                summary["overall_score"], summary["readability_score"], implemented,
            ])

        print(f"Done: {outj} | Overall: {summary['overall_score']} | Implemented: {implemented}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
