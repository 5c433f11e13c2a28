"""ANSI color helpers for the statusline."""

RESET = '\033[0m'
DIM = '\033[2m'
CYAN = '\033[36m'
YELLOW = '\033[33m'
GREEN = '\033[32m'


def _wrap(code: str, text: str) -> str:
    return f"{code}{text}{RESET}"


def cyan(text: str) -> str:
    return _wrap(CYAN, text)


def yellow(text: str) -> str:
    return _wrap(YELLOW, text)


def green(text: str) -> str:
    return _wrap(GREEN, text)


def dim(text: str) -> str:
    return _wrap(DIM, text)
