from abc import ABC, abstractmethod

from fin_core.models import ReceiptData


class ReceiptExtractor(ABC):
    """Turn raw recognized receipt text into a ReceiptData."""

    name: str = "base"

    @abstractmethod
    def extract(self, raw_text: str) -> ReceiptData: ...
