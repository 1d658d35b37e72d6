"""Cooperative cancellation signal shared by a job and its engine."""

from ..errors import CopyCanceled


class CancellationToken:
    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CopyCanceled()
