from __future__ import annotations

import math
import sys
from typing import Iterable, Sequence, TextIO

from storefront.domain.errors import MalformedInputError


class EndOfInput(EOFError):
    """The input stream is exhausted."""


class Console:
    """Line-oriented terminal I/O. Streams are injectable for tests."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None, stderr: TextIO | None = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def say(self, msg: str = "") -> None:
        print(msg, file=self.stdout)

    def warn(self, msg: str) -> None:
        print(msg, file=self.stderr)

    def ask(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EndOfInput()
        return line.rstrip("\r\n")

    def ask_int(self, prompt: str, field: str) -> int:
        raw = self.ask(prompt).strip()
        try:
            return int(raw)
        except ValueError as exc:
            raise MalformedInputError(f"{field} must be a whole number, got '{raw}'.") from exc

    def ask_float(self, prompt: str, field: str) -> float:
        raw = self.ask(prompt).strip()
        try:
            value = float(raw)
        except ValueError as exc:
            raise MalformedInputError(f"{field} must be a number, got '{raw}'.") from exc
        if not math.isfinite(value):
            raise MalformedInputError(f"{field} must be a finite number, got '{raw}'.")
        return value

    def read_choice(self) -> int:
        # returns only once a number is given
        while True:
            raw = self.ask("Please make your choice: ")
            try:
                return int(raw.strip())
            except ValueError:
                self.say("Your input is invalid!")

    def print_table(self, headers: Sequence[str], rows: Iterable[Sequence[object]]) -> int:
        count = 0
        for row in rows:
            if count == 0:
                self.say("\t".join(headers))
            self.say("\t".join(str(v) for v in row))
            count += 1
        if count == 0:
            self.say("No rows.")
        return count
