from __future__ import annotations
import argparse, json, sys
from dataclasses import replace
from dotenv import load_dotenv
from jsonrescue import JsonProcessingError, JsonProcessor, OutputFormat, ProcessingContext, ProcessorConfig
from jsonrescue.core.logging_utils import setup_logging


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    ap = argparse.ArgumentParser(description="Recover JSON from a generated response")
    ap.add_argument("file", nargs="?", help="Response file (default: stdin)")
    ap.add_argument("--resource", default="response", help="Resource name used in messages")
    ap.add_argument("--text", action="store_true", help="Expect a free-text response instead of JSON")
    ap.add_argument("--runlog", help="Append a JSONL record per processed response")
    ap.add_argument("--indent", type=int, default=2, help="Indentation of the printed JSON")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING")

    config = ProcessorConfig.from_env()
    if args.runlog:
        config = replace(config, runlog_path=args.runlog)

    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            content = f.read()
    else:
        content = sys.stdin.read()

    context = ProcessingContext(
        resource_name=args.resource,
        output_format=OutputFormat.TEXT if args.text else OutputFormat.JSON,
    )

    try:
        result = JsonProcessor(config=config).process(content, context)
    except JsonProcessingError as e:
        print(f"error: {e}", file=sys.stderr)
        if e.applied_sanitizers:
            print(f"applied: {' -> '.join(e.applied_sanitizers)}", file=sys.stderr)
        return 1

    if context.expects_text:
        print(result.data)
    else:
        print(json.dumps(result.data, indent=args.indent, ensure_ascii=False))
    print(f"tier: {result.tier}; steps: {' -> '.join(result.steps) or 'none'}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
