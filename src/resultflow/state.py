"""UI-facing view states.

A projected flow always reads ``Loading(True)``, zero or more
``RenderSuccess``/``RenderFailure`` values, then ``Loading(False)``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Loading:
    """Whether the UI should currently show a loading indicator."""

    is_loading: bool


@dataclass(frozen=True, slots=True)
class RenderSuccess[T]:
    """The requested operation completed; ``output`` is ready to render."""

    output: T


@dataclass(frozen=True, slots=True)
class RenderFailure:
    """The requested operation failed; ``error`` describes why."""

    error: BaseException


type ViewState[T] = Loading | RenderSuccess[T] | RenderFailure
