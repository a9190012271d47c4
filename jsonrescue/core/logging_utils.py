"""
Logging utilities for JSON processing.
"""
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging for command-line use.

    Args:
        level: Log level name (e.g., "INFO", "DEBUG")
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )


def append_runlog(log_file: str, data: Dict[str, Any]) -> None:
    """
    Append data to a JSONL run log file.

    Args:
        log_file: Path to log file
        data: Data to log
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    log_entry = {
        "timestamp": datetime.now().isoformat(),
        **data
    }

    with open(log_file, 'a', encoding='utf-8') as f:
        f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')


def read_runlog(log_file: str) -> list[Dict[str, Any]]:
    """
    Read entries from a JSONL run log file.

    Args:
        log_file: Path to log file

    Returns:
        List of log entries
    """
    if not os.path.exists(log_file):
        return []

    entries = []
    with open(log_file, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    # Skip malformed lines
                    continue

    return entries
