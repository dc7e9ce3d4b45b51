"""
ABACUS Emulator — Integer Token Stream

Whitespace-separated integer tokens read from a text source. The loader
and the INPUT instruction share one TokenStream, so INPUT picks up exactly
where program entry stopped (values typed after the -1 on the same line
are the first INPUT values).

Lines are pulled from the source only when a token is needed, so prompts
written before a read appear before the user types.
"""

import re
from collections import deque
from typing import Iterable, Optional, TextIO, Union

from .errors import MalformedInput


# ASCII decimal integer with optional sign, as scanf("%d") accepts
INT_TOKEN = re.compile(r'[+-]?[0-9]+')


class TokenStream:
    """Lazy tokenizer over a text stream or an in-memory string."""

    def __init__(self, source: Union[TextIO, str, Iterable[str]]):
        if isinstance(source, str):
            source = source.splitlines()
        self._lines = iter(source)
        self._pending = deque()
        self._eof = False

    def _fill(self) -> bool:
        while not self._pending:
            if self._eof:
                return False
            try:
                line = next(self._lines, None)
            except UnicodeDecodeError as e:
                self._eof = True
                bad = e.object[e.start:e.end].decode("utf-8", "backslashreplace")
                raise MalformedInput(bad) from e
            if line is None:
                self._eof = True
                return False
            self._pending.extend(line.split())
        return True

    def peek(self) -> Optional[str]:
        """Next token without consuming it, or None at end of input."""
        if not self._fill():
            return None
        return self._pending[0]

    def next_token(self) -> Optional[str]:
        if not self._fill():
            return None
        return self._pending.popleft()

    def at_eof(self) -> bool:
        return self.peek() is None

    def next_int(self, lo: Optional[int] = None, hi: Optional[int] = None) -> int:
        """Consume one integer token.

        Raises MalformedInput if input is exhausted or undecodable, the
        token is not a decimal integer, or the value falls outside [lo, hi].
        """
        token = self.next_token()
        if token is None or not INT_TOKEN.fullmatch(token):
            raise MalformedInput(token)
        try:
            value = int(token)
        except ValueError as e:
            # digit strings past the interpreter conversion limit
            raise MalformedInput(token) from e
        if (lo is not None and value < lo) or (hi is not None and value > hi):
            raise MalformedInput(token)
        return value
