"""Diagnostic lines for engine invocations."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .models import Failure

PREFIX = "[tabsort]"


class Diagnostics:
    """Collects failures and prints progress to ``stderr``.

    Failures are always printed; progress lines only when ``verbose``.
    """

    def __init__(self, stderr: Optional[TextIO] = None, verbose: bool = False):
        self.stderr = stderr if stderr is not None else sys.stderr
        self.verbose = verbose
        self.failures: List[Failure] = []

    def info(self, msg: str) -> None:
        if not self.verbose:
            return
        print(f"{PREFIX} {msg}", file=self.stderr)

    def record(self, kind: str, operation: str, target=None, exc: Optional[BaseException] = None) -> Failure:
        failure = Failure(kind=kind, operation=operation, target=target, detail=str(exc) if exc else "")
        self.failures.append(failure)
        print(f"{PREFIX} {failure.describe()}", file=self.stderr)
        return failure
