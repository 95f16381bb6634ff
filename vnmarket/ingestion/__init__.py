from vnmarket.ingestion.base import BaseSource
from vnmarket.ingestion.fmarket_source import FMarketSource
from vnmarket.ingestion.sjc_source import SjcSource
from vnmarket.ingestion.vci_source import VciSource

__all__ = ["BaseSource", "FMarketSource", "SjcSource", "VciSource"]
