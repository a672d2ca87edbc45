from abc import ABC, abstractmethod
from typing import Any


class AbstractPDFGenerator(ABC):
    """Interface of a quotation PDF generator.

    Data oriented: callers hand over the quotation, the implementation owns
    the layout.
    """

    @abstractmethod
    async def generate_quotation_pdf(self, quotation: Any) -> bytes:
        """Generates the PDF of a quotation.

        Args:
            quotation: object exposing reference, quote_number, client_name,
                       currency, valid_until, status and parts.

        Returns:
            The binary content of the PDF.

        Raises:
            PDFGenerationException: if the document cannot be built.
        """
        raise NotImplementedError
