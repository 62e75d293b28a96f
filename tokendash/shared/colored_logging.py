#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Console logging for the TokenDash CLI.

Level names are colored with a palette matching the display theme, so log
output reads well next to the dark or light charts. Colors are dropped when
the target stream is not a terminal or NO_COLOR is set.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(funcName)s:%(lineno)d] - %(message)s'

# Third-party loggers that flood DEBUG output while charts are rendered
NOISY_LOGGERS = ('matplotlib', 'PIL')

THEME_PALETTES = {
    'dark': {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    },
    'light': {
        'DEBUG': '\033[34m',
        'INFO': '\033[32m',
        'WARNING': '\033[35m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    },
}


def _wants_colors(stream: IO) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    return hasattr(stream, 'isatty') and stream.isatty()


class ColoredFormatter(logging.Formatter):
    """Formatter wrapping the level name in the theme's ANSI color"""

    RESET = '\033[0m'

    def __init__(
        self,
        fmt: str = DEFAULT_FORMAT,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
        theme: str = 'dark',
        stream: Optional[IO] = None,
    ):
        """
        Args:
            fmt: Format string for log messages
            datefmt: Format string for timestamps
            use_colors: Request colors; ignored when the stream is not a terminal
            theme: 'dark' or 'light' palette
            stream: Stream the handler writes to (defaults to stderr)
        """
        super().__init__(fmt, datefmt)
        if theme not in THEME_PALETTES:
            raise ValueError(f"theme must be one of {list(THEME_PALETTES)}")
        self.palette = THEME_PALETTES[theme]
        self.use_colors = use_colors and _wants_colors(stream if stream is not None else sys.stderr)

    def format(self, record: logging.LogRecord) -> str:
        color = self.palette.get(record.levelname) if self.use_colors else None
        if color is None:
            return super().format(record)
        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def setup_colored_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    datefmt: Optional[str] = None,
    theme: str = 'dark',
    stream: Optional[IO] = None,
) -> logging.Handler:
    """
    Replace the root logger handlers with a single colored handler.

    Args:
        level: Logging level as a number or a name such as "DEBUG"
        fmt: Format string for log messages
        datefmt: Format string for timestamps
        theme: Display theme whose palette colors the level names
        stream: Target stream (defaults to stderr)

    Returns:
        The installed handler
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level}")

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    stream = stream if stream is not None else sys.stderr
    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(ColoredFormatter(fmt=fmt, datefmt=datefmt, theme=theme, stream=stream))

    root.setLevel(level)
    root.addHandler(console_handler)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return console_handler
