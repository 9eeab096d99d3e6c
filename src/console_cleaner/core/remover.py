"""
Purpose: Remove console-style logging calls from source text.
Constraints: Pure helpers only; no I/O or side effects.

Removal is a fixed sequence of regex passes, each applied to the output of
the previous one. The sequence repeats until a round changes nothing, at
most ``MAX_REMOVAL_ROUNDS`` times:

1. statement lines holding a single call without ``;`` in its arguments
2. statement lines holding a (possibly multi-line) call with one level of
   nested parentheses
3. calls anywhere in a line, repeated until nothing changes or
   ``MAX_BRACE_PASS_ITERATIONS`` is reached; calls whose arguments carry a
   brace or ``function`` are kept, as are calls inside comments (string
   literals are skipped when locating comments)
4. ``// console.xxx(`` comment lines
5. ``/* ... console.xxx( ... */`` block comments (also found with string
   literals skipped)
6. blank-line normalization (only when one of the passes above changed
   something, so untouched text comes back byte-for-byte)
"""

# Imports
import re
from bisect import bisect_right
from functools import lru_cache
from re import Match, Pattern
from typing import Callable, List, NamedTuple, Tuple

from console_cleaner.core.detector import MethodNames, build_call_pattern, call_prefix, normalize_methods

MAX_BRACE_PASS_ITERATIONS = 5
MAX_REMOVAL_ROUNDS = 10

# Optional trailing semicolon, then the line terminator (or end of text).
_STATEMENT_END = r"[ \t]*;?[ \t]*(?:\r?\n|\Z)"

# Comments and quoted strings, leftmost first; a comment marker inside a
# string (a "src/**/*.js" glob, a URL) never opens a comment.
_LEXICAL_TOKEN = re.compile(
    r"""//[^\r\n]*|/\*.*?(?:\*/|\Z)|'(?:\\.|[^'\\\r\n])*'|"(?:\\.|[^"\\\r\n])*"|`(?:\\.|[^`\\])*`""",
    re.DOTALL,
)
_BLANK_RUN = re.compile(r"\n\s*\n\s*\n\s*\n")
_WHITESPACE_ONLY_LINE = re.compile(r"^[ \t]+(?=\r?$)", re.MULTILINE)


class _RemovalPatterns(NamedTuple):
    single_line: Pattern[str]
    nested_multi_line: Pattern[str]
    brace_call: Pattern[str]
    commented_line: Pattern[str]


@lru_cache(maxsize=32)
def _removal_patterns(methods: Tuple[str, ...]) -> _RemovalPatterns:
    prefix = call_prefix(methods)
    return _RemovalPatterns(
        single_line=re.compile(
            rf"^[ \t]*{prefix}[^;\n]*\){_STATEMENT_END}",
            re.MULTILINE,
        ),
        nested_multi_line=re.compile(
            rf"^[ \t]*{prefix}[^)]*(?:\([^()]*\)[^)]*)*\){_STATEMENT_END}",
            re.MULTILINE,
        ),
        brace_call=re.compile(
            rf"[ \t]*{prefix}[^;{{}}]*?\)[ \t]*;?",
            re.DOTALL,
        ),
        commented_line=re.compile(
            rf"^[ \t]*//[ \t]*{prefix}.*(?:\r?\n|\Z)",
            re.MULTILINE,
        ),
    )


# Helpers
def _comment_spans(text: str) -> List[Tuple[int, int]]:
    """Offsets of ``//`` and ``/* */`` comments; string literals are stepped over."""
    return [match.span() for match in _LEXICAL_TOKEN.finditer(text) if match.group(0).startswith("/")]


def _inside_spans(spans: List[Tuple[int, int]], starts: List[int], position: int) -> bool:
    index = bisect_right(starts, position) - 1
    return index >= 0 and position < spans[index][1]


def _brace_call_eraser(text: str) -> Callable[[Match[str]], str]:
    spans = _comment_spans(text)
    starts = [start for start, _ in spans]

    def _erase(match: Match[str]) -> str:
        snippet = match.group(0)
        if "{" in snippet or "}" in snippet or "function" in snippet:
            return snippet
        # Commented calls belong to the comment passes.
        if _inside_spans(spans, starts, match.start()):
            return snippet
        return ""

    return _erase


def _collapse_blank_run(match: Match[str]) -> str:
    newline = "\r\n" if "\r\n" in match.group(0) else "\n"
    return "\n" + newline + newline


def remove_single_line_statements(text: str, methods: MethodNames) -> str:
    return _removal_patterns(normalize_methods(methods)).single_line.sub("", text)


def remove_nested_statements(text: str, methods: MethodNames) -> str:
    return _removal_patterns(normalize_methods(methods)).nested_multi_line.sub("", text)


def remove_inline_calls(text: str, methods: MethodNames) -> str:
    """Erase calls not anchored to their own line, until fixpoint or the iteration ceiling."""
    pattern = _removal_patterns(normalize_methods(methods)).brace_call
    result = text
    for _ in range(MAX_BRACE_PASS_ITERATIONS):
        updated = pattern.sub(_brace_call_eraser(result), result)
        if updated == result:
            break
        result = updated
    return result


def remove_commented_statements(text: str, methods: MethodNames) -> str:
    return _removal_patterns(normalize_methods(methods)).commented_line.sub("", text)


def remove_block_comments(text: str, methods: MethodNames) -> str:
    """Drop closed ``/* */`` comments that mention a call."""
    pattern = build_call_pattern(methods)
    pieces = []
    last = 0
    for start, end in _comment_spans(text):
        body = text[start:end]
        if body.startswith("/*") and len(body) >= 4 and body.endswith("*/") and pattern.search(body):
            pieces.append(text[last:start])
            last = end
    if not pieces:
        return text
    pieces.append(text[last:])
    return "".join(pieces)


def normalize_blank_lines(text: str) -> str:
    """Collapse 3+ blank lines to 2 and empty out whitespace-only lines."""
    collapsed = _BLANK_RUN.sub(_collapse_blank_run, text)
    return _WHITESPACE_ONLY_LINE.sub("", collapsed)


_REMOVAL_PASSES = (
    remove_single_line_statements,
    remove_nested_statements,
    remove_inline_calls,
    remove_commented_statements,
    remove_block_comments,
)


# Public API
def remove_console_calls(text: str, methods: MethodNames) -> str:
    """Return text with console calls for the given methods removed.

    Never raises. When no pass matches, the original string is returned
    unchanged, which callers use to skip rewriting a file.
    """
    names = normalize_methods(methods)
    if not text or not names:
        return text
    result = text
    for _ in range(MAX_REMOVAL_ROUNDS):
        previous = result
        for removal_pass in _REMOVAL_PASSES:
            result = removal_pass(result, names)
        if result == previous:
            break
    if result == text:
        return text
    return normalize_blank_lines(result)
