"""PrescriptionAnalyzer — abstract base for prescription analysis backends."""
import asyncio
from abc import ABC, abstractmethod

from scriptscan.analysis.encoder import ImageBlob
from scriptscan.constants import LANG_ENGLISH
from scriptscan.prescription import PrescriptionInfo


class PrescriptionAnalyzer(ABC):
    @abstractmethod
    async def analyze(
        self,
        image: ImageBlob,
        api_key: str,
        language: str = LANG_ENGLISH,
        cancel: asyncio.Event | None = None,
    ) -> PrescriptionInfo:
        """Analyze one prescription image.

        Raises EncodingError, TransportError or ApiRequestError on failure, and
        AnalysisCancelled once ``cancel`` is set. Unparseable replies are not
        failures: they come back as a raw-text-only result.
        """
        ...
