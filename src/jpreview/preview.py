"""Presentation-side state: request sequencing and the current result."""

from __future__ import annotations

import logging

from jpreview._fold import SliceRangeUpdate
from jpreview.decorator import DecorationResult
from jpreview.errors import DecorationError, FoldError

logger = logging.getLogger(__name__)


class PreviewController:
    """Keep only the newest decoration result.

    Every preview request takes a number from :meth:`begin`.  Results are
    handed back with that number and are dropped unless it is still the
    latest one issued, so a slow pass can never overwrite a newer one.
    """

    def __init__(self) -> None:
        self.result: DecorationResult | None = None
        self.error: DecorationError | None = None
        self._seq: int = 0

    @property
    def latest(self) -> int:
        return self._seq

    def begin(self) -> int:
        self._seq += 1
        return self._seq

    def is_stale(self, seq: int) -> bool:
        return seq != self._seq

    def deliver(self, seq: int, result: DecorationResult) -> bool:
        if self.is_stale(seq):
            logger.debug("dropping stale result %d (latest %d)", seq, self._seq)
            return False
        self.result = result
        self.error = None
        return True

    def fail(self, seq: int, error: DecorationError) -> bool:
        """Record a failed pass; the previous result stays current."""
        if self.is_stale(seq):
            logger.debug("dropping stale error %d (latest %d)", seq, self._seq)
            return False
        self.error = error
        return True

    def toggle_fold(self, node_id: int) -> SliceRangeUpdate:
        if self.result is None:
            raise FoldError("nothing decorated yet", node_id)
        return self.result.toggle_fold(node_id)
