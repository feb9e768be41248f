# topmark:header:start
#
#   project      : ThrowLine
#   file         : annotations.py
#   file_relpath : src/throwline/throw/annotations.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Documentation-only intent markers.

These decorators record *why* a piece of code is the way it is, so the intent
is searchable and introspectable, without changing behavior. Each one attaches
an `Annotation` to the target's ``__throwline_annotations__`` tuple and returns
the target unchanged.

Markers:
    - `canonical`: the reference version of code that is copied elsewhere.
    - `careful`: handle with care; ``of_what`` says why.
    - `probationary`: kept on trial; ``reason`` says what is being evaluated.
    - `scaffolding`: temporary support code.
    - `unsupported`: present but not supported.
    - `indexer`: marks lookup-style accessors (``__getitem__`` overloads and the
      like) so they are easy to locate.

Example:
    ```python
    @careful("Do not generate ids automatically.")
    def message_id(self) -> str: ...

    assert has_annotation(message_id, AnnotationKind.CAREFUL)
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, TypeVar

_T = TypeVar("_T")

ANNOTATIONS_ATTR: Final[str] = "__throwline_annotations__"


class AnnotationKind(str, Enum):
    """Kinds of intent markers."""

    CANONICAL = "canonical"
    CAREFUL = "careful"
    PROBATIONARY = "probationary"
    SCAFFOLDING = "scaffolding"
    UNSUPPORTED = "unsupported"
    INDEXER = "indexer"


@dataclass(frozen=True)
class Annotation:
    """One intent marker attached to a target.

    Attributes:
        kind (AnnotationKind): The marker kind.
        text (str): Free text (canon, what to be careful of, reason, description).
        key_type (type | None): For `indexer`, the key type.
        value_type (type | None): For `indexer`, the value type.
    """

    kind: AnnotationKind
    text: str = ""
    key_type: type | None = field(default=None)
    value_type: type | None = field(default=None)


def _attach(target: _T, annotation: Annotation) -> _T:
    existing: tuple[Annotation, ...] = getattr(target, ANNOTATIONS_ATTR, ())
    setattr(target, ANNOTATIONS_ATTR, (*existing, annotation))
    return target


def _marker(kind: AnnotationKind, text: str | None = None, **extra: Any):
    annotation = Annotation(kind, text or "", **extra)

    def _decorator(target: _T) -> _T:
        return _attach(target, annotation)

    return _decorator


def canonical(canon: str | None = None):
    """Mark the reference version of code that is reused elsewhere."""
    return _marker(AnnotationKind.CANONICAL, canon)


def careful(of_what: str | None = None):
    """Mark code that must be changed with care."""
    return _marker(AnnotationKind.CAREFUL, of_what)


def probationary(reason: str | None = None):
    """Mark code kept on trial."""
    return _marker(AnnotationKind.PROBATIONARY, reason)


def scaffolding(target: _T) -> _T:
    """Mark temporary support code."""
    return _attach(target, Annotation(AnnotationKind.SCAFFOLDING))


def unsupported(target: _T) -> _T:
    """Mark code that is present but not supported."""
    return _attach(target, Annotation(AnnotationKind.UNSUPPORTED))


def indexer(
    description: str | None = None,
    *,
    key_type: type | None = None,
    value_type: type | None = None,
):
    """Mark a lookup-style accessor, optionally with its key and value types."""
    return _marker(AnnotationKind.INDEXER, description, key_type=key_type, value_type=value_type)


def get_annotations(obj: Any) -> tuple[Annotation, ...]:
    """Return the intent markers attached to ``obj``, in application order.

    Properties are looked through to their getter.
    """
    if isinstance(obj, property) and obj.fget is not None:
        obj = obj.fget
    return tuple(getattr(obj, ANNOTATIONS_ATTR, ()))


def has_annotation(obj: Any, kind: AnnotationKind) -> bool:
    """Return True if ``obj`` carries a marker of ``kind``."""
    return any(a.kind is kind for a in get_annotations(obj))
