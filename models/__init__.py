from .card import CardRecord, Payload
from .limits import ExtractionLimits
from .scrape_request import ScrapeRequest, ScrapeResult, ScrapeStats, ScrapeStatus
from .snapshot import DomSnapshot

__all__ = ['CardRecord', 'Payload', 'ExtractionLimits', 'DomSnapshot',
           'ScrapeRequest', 'ScrapeResult', 'ScrapeStats', 'ScrapeStatus',]
