# ============================================================================
# Kraken REST Client v0.1.0
# Result Types - Decoded Kraken Payloads
# ============================================================================
#
# Purpose: Typed containers for every decoded Kraken response
#
# All prices, volumes and balances are decimal.Decimal. Times reported by
# Kraken as fractional seconds are kept as Decimal to avoid float rounding.
#
# ============================================================================

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


# ============================================================================
# Envelope
# ============================================================================

@dataclass
class KrakenResponse(Generic[T]):
    """
    Kraken response envelope.

    Kraken answers every call with {"error": [...], "result": ...}; result is
    None whenever error is non-empty.
    """
    error: List[str] = field(default_factory=list)
    result: Optional[T] = None

    @property
    def is_success(self) -> bool:
        return not self.error


# ============================================================================
# Public market data
# ============================================================================

@dataclass
class ServerTime:
    unixtime: int
    rfc1123: str


@dataclass
class SystemStatus:
    status: str
    timestamp: str


@dataclass
class AssetInfo:
    name: str
    asset_class: str
    altname: str
    decimals: int
    display_decimals: int


@dataclass
class AssetPair:
    name: str
    altname: str
    wsname: Optional[str]
    base: str
    quote: str
    pair_decimals: int
    lot_decimals: int
    order_min: Optional[Decimal] = None


@dataclass
class PriceLevel:
    """Best ask or bid: [price, whole lot volume, lot volume]."""
    price: Decimal
    whole_lot_volume: Decimal
    lot_volume: Decimal


@dataclass
class LastTrade:
    price: Decimal
    lot_volume: Decimal


@dataclass
class TickerInfo:
    """
    Ticker for one pair.

    The *_today/*_24h pairs mirror Kraken's two-element arrays.
    """
    pair: str
    ask: PriceLevel
    bid: PriceLevel
    last_trade: LastTrade
    volume_today: Decimal
    volume_24h: Decimal
    vwap_today: Decimal
    vwap_24h: Decimal
    trades_today: int
    trades_24h: int
    low_today: Decimal
    low_24h: Decimal
    high_today: Decimal
    high_24h: Decimal
    opening_price: Decimal

    @property
    def spread(self) -> Decimal:
        return self.ask.price - self.bid.price


@dataclass
class Candle:
    time: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    vwap: Decimal
    volume: Decimal
    count: int


@dataclass
class OHLCResult:
    pair: str
    candles: List[Candle]
    last: int


@dataclass
class OrderBookEntry:
    price: Decimal
    volume: Decimal
    timestamp: int


@dataclass
class OrderBook:
    pair: str
    asks: List[OrderBookEntry]
    bids: List[OrderBookEntry]

    def best_ask(self) -> Optional[OrderBookEntry]:
        return self.asks[0] if self.asks else None

    def best_bid(self) -> Optional[OrderBookEntry]:
        return self.bids[0] if self.bids else None


@dataclass
class Trade:
    price: Decimal
    volume: Decimal
    time: Decimal
    side: str
    order_type: str
    misc: str
    trade_id: Optional[int] = None


@dataclass
class RecentTrades:
    pair: str
    trades: List[Trade]
    last: str


@dataclass
class Spread:
    time: int
    bid: Decimal
    ask: Decimal


@dataclass
class RecentSpreads:
    pair: str
    spreads: List[Spread]
    last: int


# ============================================================================
# Private account data
# ============================================================================

@dataclass
class TradeBalance:
    equivalent_balance: Decimal
    trade_balance: Decimal
    margin: Optional[Decimal] = None
    unrealized_pnl: Optional[Decimal] = None
    cost_basis: Optional[Decimal] = None
    floating_valuation: Optional[Decimal] = None
    equity: Optional[Decimal] = None
    free_margin: Optional[Decimal] = None
    margin_level: Optional[Decimal] = None


@dataclass
class OrderDescription:
    pair: str
    side: str
    order_type: str
    price: Optional[Decimal]
    price2: Optional[Decimal]
    leverage: str
    order: str
    close: str = ""


@dataclass
class OrderInfo:
    txid: str
    status: str
    open_time: Decimal
    description: OrderDescription
    volume: Decimal
    volume_executed: Decimal
    cost: Decimal
    fee: Decimal
    price: Decimal
    misc: str = ""
    oflags: str = ""
    close_time: Optional[Decimal] = None
    reason: Optional[str] = None
    userref: Optional[int] = None


@dataclass
class OpenOrders:
    orders: Dict[str, OrderInfo]


@dataclass
class ClosedOrders:
    orders: Dict[str, OrderInfo]
    count: int


@dataclass
class TradeHistoryEntry:
    txid: str
    order_txid: str
    pair: str
    time: Decimal
    side: str
    order_type: str
    price: Decimal
    cost: Decimal
    fee: Decimal
    volume: Decimal
    margin: Decimal
    misc: str = ""


@dataclass
class TradesHistory:
    trades: Dict[str, TradeHistoryEntry]
    count: int


@dataclass
class AddOrderResult:
    description: str
    txids: List[str]
    close_description: Optional[str] = None


@dataclass
class CancelOrderResult:
    count: int
    pending: bool = False
