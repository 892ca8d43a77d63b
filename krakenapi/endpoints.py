"""Kraken REST endpoint paths, one member per logical operation."""

from enum import Enum

API_VERSION = "0"


class KrakenMethod(Enum):
    """
    Endpoint catalogue.

    Each value is (method name, is_public); the URL path is derived as
    /<version>/<public|private>/<name>.
    """
    SERVER_TIME = ("Time", True)
    SYSTEM_STATUS = ("SystemStatus", True)
    ASSET_INFO = ("Assets", True)
    ASSET_PAIRS = ("AssetPairs", True)
    TICKER = ("Ticker", True)
    OHLC = ("OHLC", True)
    ORDER_BOOK = ("Depth", True)
    RECENT_TRADES = ("Trades", True)
    RECENT_SPREADS = ("Spread", True)

    ACCOUNT_BALANCE = ("Balance", False)
    TRADE_BALANCE = ("TradeBalance", False)
    OPEN_ORDERS = ("OpenOrders", False)
    CLOSED_ORDERS = ("ClosedOrders", False)
    QUERY_ORDERS = ("QueryOrders", False)
    TRADES_HISTORY = ("TradesHistory", False)
    ADD_ORDER = ("AddOrder", False)
    CANCEL_ORDER = ("CancelOrder", False)

    def __init__(self, method_name: str, is_public: bool):
        self.method_name = method_name
        self.is_public = is_public

    @property
    def path(self) -> str:
        visibility = "public" if self.is_public else "private"
        return f"/{API_VERSION}/{visibility}/{self.method_name}"
