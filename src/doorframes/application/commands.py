"""Application commands (use cases) for frame generation."""

from __future__ import annotations

import logging
from typing import Callable

from doorframes.contracts import GeometryDocumentProtocol
from doorframes.domain import FrameAssembler, FrameConfigurationError, FrameParameters
from doorframes.infrastructure.brep import BrepDocument

from .dtos import BuildFrameOutput

logger = logging.getLogger(__name__)

DocumentFactory = Callable[[bool], GeometryDocumentProtocol]


def _default_document(solid_booleans: bool) -> GeometryDocumentProtocol:
    return BrepDocument(supports_solid_booleans=solid_booleans)


class BuildFrameCommand:
    """Command to build a five-piece frame into a geometry document.

    Args:
        document_factory: Creates a fresh document given whether solid
            booleans should be offered. Defaults to the in-memory BREP
            document.
    """

    def __init__(self, document_factory: DocumentFactory | None = None) -> None:
        self.document_factory = document_factory or _default_document

    def execute(
        self,
        parameters: FrameParameters,
        document: GeometryDocumentProtocol | None = None,
        solid_booleans: bool = True,
    ) -> BuildFrameOutput:
        """Build the frame.

        Args:
            parameters: Validated frame parameters.
            document: Existing document to rebuild into. A new document is
                created when omitted.
            solid_booleans: Capability of a newly created document; ignored
                when ``document`` is given.

        Returns:
            BuildFrameOutput with the join result, or with errors when the
            parameters describe an unbuildable frame.
        """
        if document is None:
            document = self.document_factory(solid_booleans)

        try:
            result = FrameAssembler(document).build(parameters)
        except FrameConfigurationError as e:
            logger.error(f"Frame configuration rejected: {e}")
            return BuildFrameOutput(document=document, errors=[str(e)])

        return BuildFrameOutput(document=document, result=result)
