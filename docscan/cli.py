# docscan/cli.py
import argparse
import json
import logging
import pathlib
import sys
import time

from .config import IMAGE_GLOB_PATTERNS, OUT_DIR, SUMMARY_FILENAME_PREFIX
from .errors import DocScanError
from .scanner import scan_document

log = logging.getLogger(__name__)

_TYPES = {"png": "image/png", "jpeg": "image/jpeg", "jpg": "image/jpeg"}


def _collect(input_path: pathlib.Path) -> list:
    if input_path.is_dir():
        paths = set()
        for pattern in IMAGE_GLOB_PATTERNS:
            paths.update(input_path.glob(pattern))
            paths.update(input_path.glob(pattern.upper()))
        return sorted(paths)
    return [input_path]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Turn photos of documents into black/white scans")
    parser.add_argument("--path", required=True, help="Image file or directory")
    parser.add_argument("--type", choices=sorted(_TYPES), default="png", help="Output format")
    parser.add_argument("--quality", type=float, default=None, help="JPEG quality in [0, 1]")
    parser.add_argument("--out", default=str(OUT_DIR), help="Output directory")
    parser.add_argument("--print-url", action="store_true", help="Print each data: reference to stdout")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    input_path = pathlib.Path(args.path)
    if not input_path.exists():
        log.error("Path not found: %s", input_path)
        return 2

    image_paths = _collect(input_path)
    if not image_paths:
        log.warning("No images matching %s found at: %s", ", ".join(IMAGE_GLOB_PATTERNS), input_path)
        return 0
    log.info("Processing %d image(s) from %s", len(image_paths), input_path)

    out_dir = pathlib.Path(args.out)
    results = {}
    failures = 0
    start_time = time.time()

    for img_path in image_paths:
        try:
            result = scan_document(img_path, _TYPES[args.type], args.quality, out_dir=out_dir)
        except (DocScanError, OSError) as e:
            failures += 1
            log.error("Error processing %s: %s", img_path.name, e)
            continue

        if result.file.name in results.values():
            log.warning("%s overwrote an earlier output named %s", img_path.name, result.file.name)
        results[img_path.name] = result.file.name
        if args.print_url:
            print(result.url)

    if results:
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        summary_path = out_dir / f"{SUMMARY_FILENAME_PREFIX}{timestamp}.json"
        summary_path.write_text(json.dumps(results, indent=2))
        log.info("Summary: %d converted, %d failed, %.1fs elapsed",
                 len(results), failures, time.time() - start_time)
        log.info("Summary saved to: %s", summary_path)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
