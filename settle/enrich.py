"""Outcome classification.

When a resource lands in a failure state, its status payload usually
says why (an error code and message next to the state). ``enrich``
swaps the waiter's generic "unexpected state" error for that diagnostic.
"""

from __future__ import annotations

from dataclasses import replace

from settle.core.exceptions import EnrichedFailureError, UnexpectedStateError
from settle.types import Extractor, Outcome, OutcomeKind

__all__ = ["enrich", "enriched"]


def enrich[P](outcome: Outcome[P], extractor: Extractor[P]) -> BaseException | None:
    """Return the most specific error for ``outcome``.

    Only a failure caused by an unexpected state is rewritten, and only
    when ``extractor`` finds a diagnostic in the payload. The generic
    error is replaced, not chained. Every other outcome's error (or
    None, on success) is returned unchanged.
    """
    error = outcome.error
    if outcome.kind is not OutcomeKind.FAILURE or not isinstance(error, UnexpectedStateError):
        return error

    diagnostic = extractor(outcome.payload)
    if diagnostic is None:
        return error

    code, message = diagnostic
    return EnrichedFailureError(
        code,
        message,
        state=error.state or "",
        expected=error.expected,
        payload=outcome.payload,
    )


def enriched[P](outcome: Outcome[P], extractor: Extractor[P]) -> Outcome[P]:
    """Copy of ``outcome`` carrying the error chosen by ``enrich``."""
    return replace(outcome, error=enrich(outcome, extractor))
