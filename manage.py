#!/usr/bin/env python
"""Command-line entry point for the mutual friends backend."""
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


def main() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.dev")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError("Couldn't import Django. Install the project with `pip install -e .` first.") from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
