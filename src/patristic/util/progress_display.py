"""Progress reporting for long running calculations.

A function decorated with display_wrap receives a ``ui`` argument, a
ProgressContext, which it uses to report progress. Callers control display
through a ``show_progress`` argument.
"""

from __future__ import annotations

import functools
import sys
import threading
from collections.abc import Callable, Generator, Iterable, Sized
from collections.abc import Sequence as PySeq
from typing import Any, TypeVar

from tqdm import tqdm

T = TypeVar("T")


class ProgressContext:
    def __init__(
        self,
        progress_bar_type: type[tqdm] | None = None,
        depth: int = -1,
        message: str | None = None,
        mininterval: float = 1.0,
    ) -> None:
        self.progress_bar_type = progress_bar_type
        self.progress_bar: tqdm | None = None
        self.progress: float = 0
        self.depth = depth
        self.message = message
        self.mininterval = mininterval

    def set_new_progress_bar(self) -> None:
        if self.progress_bar_type:
            self.progress_bar = self.progress_bar_type(
                total=1,
                position=self.depth,
                leave=True,
                bar_format="{desc} {percentage:3.0f}%|{bar}|{elapsed}<{remaining}",
                mininterval=self.mininterval,
                dynamic_ncols=True,
            )

    def subcontext(self) -> ProgressContext:
        return ProgressContext(
            progress_bar_type=self.progress_bar_type,
            depth=self.depth + 1,
            message=self.message,
            mininterval=self.mininterval,
        )

    def display(self, msg: str | None = None, progress: float | None = None) -> None:
        if not self.progress_bar:
            self.set_new_progress_bar()
        if self.progress_bar is None:
            return

        updated = False
        if progress is not None:
            self.progress = min(progress, 1.0)
            self.progress_bar.n = self.progress
            updated = True
        else:
            self.progress_bar.n = 1
        if msg is not None and msg != self.message:
            self.message = msg
            self.progress_bar.set_description(self.message, refresh=False)
            updated = True
        if updated:
            self.progress_bar.refresh()

    def done(self) -> None:
        if self.progress_bar:
            self.progress_bar.close()
            self.progress_bar = None

    def series(
        self,
        items: Iterable[T],
        noun: str = "",
        start: float | None = None,
        end: float = 1.0,
        count: int | None = None,
    ) -> Generator[T]:
        """Wrap a looped-over iterable with a progress bar"""
        if count is None:
            if not isinstance(items, Sized):
                items = list(items)
            count = len(items)
        if count == 0:
            return

        start = 0.0 if start is None else start
        step = (end - start) / count
        noun = f"{noun} " if noun else noun
        template = f"{noun}%{len(str(count))}d/{count}"
        for i, item in enumerate(items):
            self.display(msg=template % (i + 1), progress=start + step * i)
            yield item
        self.display(progress=end)

    def map(self, f: Callable[[Any], T], s: PySeq[Any], **kw: Any) -> list[T]:
        return list(self.series(map(f, s), count=len(s), **kw))


class NullContext(ProgressContext):
    """A UI context which discards all output."""

    def subcontext(self) -> NullContext:
        return self

    def display(self, *args: Any, **kw: Any) -> None:
        pass

    def done(self) -> None:
        pass


NULL_CONTEXT = NullContext()
CURRENT = threading.local()
CURRENT.context = None


def display_wrap(slow_function: Callable[..., T]) -> Callable[..., T]:
    """Decorator which give the function its own UI context.
    The function will receive an extra argument, 'ui',
    which is used to report progress etc."""

    @functools.wraps(slow_function)
    def f(*args: Any, **kw: Any) -> T:
        if getattr(CURRENT, "context", None) is None:
            klass = tqdm if sys.stdout.isatty() else None
            CURRENT.context = NULL_CONTEXT if klass is None else ProgressContext(klass)
        parent = CURRENT.context
        show_progress = kw.pop("show_progress", None)
        subcontext = NULL_CONTEXT if not show_progress else parent.subcontext()
        kw["ui"] = CURRENT.context = subcontext
        try:
            result = slow_function(*args, **kw)
        finally:
            CURRENT.context = parent
            subcontext.done()
        return result

    return f
