"""
Purpose: Count console-style logging calls in source text.
Constraints: Pure helpers only; no I/O or side effects.
"""

# Imports
import re
from functools import lru_cache
from re import Pattern
from typing import Iterable, Iterator, Tuple, Union

from console_cleaner.core.models import MatchSpan

MethodNames = Union[str, Iterable[str]]

# `console` must start a token: `myconsole.log(` is not a console call,
# `window.console.log(` is.
_CALL_PREFIX = r"(?<![\w$])console\s*\.\s*(?:{methods})\s*\("


# Helpers
def normalize_methods(methods: MethodNames) -> Tuple[str, ...]:
    """Return method names in configured order with blanks and duplicates dropped."""
    if isinstance(methods, str):
        methods = [methods]
    ordered = []
    for name in methods or ():
        name = str(name).strip()
        if name and name not in ordered:
            ordered.append(name)
    return tuple(ordered)


def build_method_alternation(methods: MethodNames) -> str:
    """Join escaped method names into a regex alternation (``log|warn|...``)."""
    return "|".join(re.escape(name) for name in normalize_methods(methods))


def call_prefix(methods: MethodNames) -> str:
    """Regex source matching ``console . <method> (`` for the given names."""
    return _CALL_PREFIX.format(methods=build_method_alternation(methods))


@lru_cache(maxsize=32)
def _compiled_call_pattern(methods: Tuple[str, ...]) -> Pattern[str]:
    return re.compile(call_prefix(methods), re.DOTALL)


def build_call_pattern(methods: MethodNames) -> Pattern[str]:
    """Compiled detector pattern; cached per method tuple."""
    return _compiled_call_pattern(normalize_methods(methods))


# Public API
def iter_console_calls(text: str, methods: MethodNames) -> Iterator[MatchSpan]:
    """Yield every ``console.<method>(`` occurrence in text.

    The span covers the call prefix only (up to and including the opening
    parenthesis); argument balance is never checked.
    """
    names = normalize_methods(methods)
    if not text or not names:
        return
    for match in _compiled_call_pattern(names).finditer(text):
        yield MatchSpan(start=match.start(), end=match.end(), text=match.group(0))


def count_console_calls(text: str, methods: MethodNames) -> int:
    """Return the number of console call occurrences in text.

    Calls inside comments and string literals are counted as well. Never
    raises; empty text or an empty method list yields 0.
    """
    return sum(1 for _ in iter_console_calls(text, methods))
