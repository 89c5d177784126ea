from fleetlead.parsing.base import BaseCompanyParser
from fleetlead.parsing.factory import ParserFactory
from fleetlead.parsing.parser import CompanyParser

__all__ = ["BaseCompanyParser", "CompanyParser", "ParserFactory"]
