#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error types raised by the TokenDash engine.

All errors are raised synchronously by the operation that detects them and
no partial result is ever returned alongside them.
"""


class TokenDashError(Exception):
    """Base class for engine errors"""
    pass


class InvalidParameterError(TokenDashError, ValueError):
    """A caller supplied a parameter outside the operation's contract"""
    pass


class NotFoundError(TokenDashError, LookupError):
    """A drill-down referenced a point or segment absent from its parent"""
    pass
