# topmark:header:start
#
#   project      : ThrowLine
#   file         : __init__.py
#   file_relpath : src/throwline/throw/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Signal records, the notification bus and the raising operations.

Design:
    - A raise builds one `Throw`, publishes it once on a `NotificationBus`,
      then applies the severity policy of its `ThrowMode`.
    - Subscribers decide by setting ``handled``; the decision is final when
      publish returns.
    - Objects that want to track their own history use a `ThrowLedger`.
"""

from __future__ import annotations

from throwline.throw.annotations import (
    Annotation,
    AnnotationKind,
    canonical,
    careful,
    get_annotations,
    has_annotation,
    indexer,
    probationary,
    scaffolding,
    unsupported,
)
from throwline.throw.bus import NotificationBus, ThrowHandler, default_bus
from throwline.throw.ledger import Throwable, ThrowLedger
from throwline.throw.model import Advisory, Throw, ThrowableStatus, ThrowFormat, ThrowMode
from throwline.throw.raising import (
    ErrorFactory,
    Thrower,
    advisory,
    rethrow_framework,
    rethrow_hard,
    rethrow_soft,
    throw_framework,
    throw_hard,
    throw_soft,
)
from throwline.throw.sinks import AdvisorySink, log_sink, null_sink, stream_sink

__all__ = [
    "Advisory",
    "AdvisorySink",
    "Annotation",
    "AnnotationKind",
    "ErrorFactory",
    "NotificationBus",
    "Throw",
    "ThrowFormat",
    "ThrowHandler",
    "ThrowLedger",
    "ThrowMode",
    "Throwable",
    "ThrowableStatus",
    "Thrower",
    "advisory",
    "canonical",
    "careful",
    "default_bus",
    "get_annotations",
    "has_annotation",
    "indexer",
    "log_sink",
    "null_sink",
    "probationary",
    "rethrow_framework",
    "rethrow_hard",
    "rethrow_soft",
    "scaffolding",
    "stream_sink",
    "throw_framework",
    "throw_hard",
    "throw_soft",
    "unsupported",
]
