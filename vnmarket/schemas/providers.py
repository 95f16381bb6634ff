"""Raw record shapes returned by the upstream provider clients."""

from typing import Optional

from pydantic import BaseModel, Field


class VciSymbol(BaseModel):
    """One row of the VCI symbol listing (stocks, indices, ETFs, bonds...)."""

    symbol: str
    board: str = ""
    # STOCK, ETF, BOND, CW, ...
    type: str = ""
    organ_name: str = Field(default="", alias="organName")
    organ_short_name: Optional[str] = Field(default=None, alias="organShortName")
    en_organ_name: Optional[str] = Field(default=None, alias="enOrganName")
    listed: bool = True

    class Config:
        populate_by_name = True
        extra = "ignore"

    def exchange(self) -> str:
        """Map the VCI board code to the venue code used in the cache."""
        return "HOSE" if self.board == "HSX" else self.board

    def is_stock(self) -> bool:
        return self.type == "STOCK"

    def display_name(self) -> str:
        return self.organ_short_name or self.organ_name


class FundListing(BaseModel):
    """One open-ended fund product from FMarket."""

    short_name: str = Field(alias="shortName")
    name: str

    class Config:
        populate_by_name = True
        extra = "ignore"


class GoldPrice(BaseModel):
    """SJC gold quote. Fetched on demand, not part of the asset sync."""

    type_name: str = Field(alias="TypeName")
    branch_name: Optional[str] = Field(default=None, alias="BranchName")
    buy: Optional[float] = Field(default=None, alias="BuyValue")
    sell: Optional[float] = Field(default=None, alias="SellValue")

    class Config:
        populate_by_name = True
        extra = "ignore"
