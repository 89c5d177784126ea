from abc import ABC, abstractmethod

from fleetlead.parsing.models import ParsedCompany


class BaseCompanyParser(ABC):
    @abstractmethod
    def parse(self, text: str) -> ParsedCompany:
        """Read company fields out of the OCR text of one vehicle photo.

        Fields not present in the text come back blank, never guessed.

        Raises:
            ParsingError: the provider failed or replied with the wrong shape.
        """
