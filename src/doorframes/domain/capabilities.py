"""Host geometry capability probing."""

from __future__ import annotations

import logging

from ..contracts import GeometryDocumentProtocol

logger = logging.getLogger(__name__)


def solid_booleans_available(document: GeometryDocumentProtocol) -> bool:
    """Report whether the document offers true solid-boolean subtraction.

    Checked once per assembly run; the result is stable for a session. A
    document that advertises booleans can still fail an individual
    subtraction, which the corner join engine handles per corner.
    """
    advertised = bool(getattr(document, "supports_solid_booleans", False))
    available = advertised and callable(getattr(document, "subtract", None))
    logger.debug(f"Solid booleans available: {available}")
    return available
