#!/usr/bin/env python3
"""
PrayLine statusline entry point.

Reads the host payload from stdin, loads the user config and prints one
line to stdout. Whatever happens, the host must not see a crash: failures
are logged to stderr and an empty line is written instead.
"""

import logging
import sys
from typing import Optional, TextIO

from .config import load_config, load_environment
from .render import render
from .utils.logger import log_exception, log_structured, setup_logger
from .utils.stdin import read_stdin


def run(stdin: Optional[TextIO] = None) -> str:
    """Produce the statusline text without writing it."""
    stdin_data = read_stdin(stdin)
    config = load_config()
    return render(stdin_data, config)


def main(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    out = stdout if stdout is not None else sys.stdout
    logger = logging.getLogger("prayline")

    try:
        load_environment()
        logger = setup_logger("prayline")
        output = run(stdin)
    except Exception:
        log_exception(logger)
        output = ""

    log_structured(logger, logging.DEBUG, "Statusline rendered", length=len(output))
    out.write(output)
    out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
