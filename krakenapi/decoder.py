# ============================================================================
# Kraken REST Client v0.1.0
# Response Decoder - JSON -> Typed Results
# ============================================================================
#
# Purpose: Decode raw Kraken response bodies into KrakenResponse[T]
#
# MANDATE:
#   - Decode or fail: any shape mismatch raises DecodeError
#   - All numeric strings converted via DecimalGateway
#   - The envelope's error list is surfaced as-is, never interpreted here
#
# Error Codes:
#   - KRAKEN-CLI-002: Response body does not match the expected shape
#
# ============================================================================

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from krakenapi.decimal_gateway import DecimalGateway
from krakenapi.errors import DecodeError, KrakenErrorCode
from krakenapi.results import (
    AddOrderResult,
    AssetInfo,
    AssetPair,
    CancelOrderResult,
    Candle,
    ClosedOrders,
    KrakenResponse,
    LastTrade,
    OHLCResult,
    OpenOrders,
    OrderBook,
    OrderBookEntry,
    OrderDescription,
    OrderInfo,
    PriceLevel,
    RecentSpreads,
    RecentTrades,
    ServerTime,
    Spread,
    SystemStatus,
    TickerInfo,
    Trade,
    TradeBalance,
    TradeHistoryEntry,
    TradesHistory,
)

logger = logging.getLogger(__name__)

_gateway = DecimalGateway()

# Exceptions that mean "the JSON is not shaped like we expected"
_SHAPE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)

TRADE_SIDES = {"b": "buy", "s": "sell"}
TRADE_ORDER_TYPES = {"m": "market", "l": "limit"}


def decode_response(
    body: str,
    result_decoder: Callable[[Any], Any],
    path: Optional[str] = None
) -> KrakenResponse:
    """
    Decode a Kraken response body.

    Args:
        body: Raw response text
        result_decoder: Converts the JSON `result` value into the target shape
        path: Endpoint path, used in log lines only

    Returns:
        KrakenResponse whose result is the decoded payload, or None when the
        error list is non-empty

    Raises:
        DecodeError: On invalid JSON or any shape mismatch
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        _log_failure(path, f"invalid JSON: {e}")
        raise DecodeError(f"invalid JSON from {path or 'response'}: {e}") from e

    if not isinstance(data, dict):
        _log_failure(path, f"top level is {type(data).__name__}")
        raise DecodeError(f"expected a JSON object from {path or 'response'}")

    errors = data.get("error")
    if not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
        _log_failure(path, "missing or malformed 'error' field")
        raise DecodeError(f"missing or malformed 'error' field from {path or 'response'}")

    if errors:
        return KrakenResponse(error=list(errors), result=None)

    if "result" not in data:
        _log_failure(path, "missing 'result' field")
        raise DecodeError(f"missing 'result' field from {path or 'response'}")

    try:
        result = result_decoder(data["result"])
    except _SHAPE_ERRORS as e:
        _log_failure(path, f"{type(e).__name__}: {e}")
        raise DecodeError(
            f"unexpected result shape from {path or 'response'}: {type(e).__name__}: {e}"
        ) from e

    return KrakenResponse(error=[], result=result)


def _log_failure(path: Optional[str], reason: str) -> None:
    logger.error(
        f"[{KrakenErrorCode.DECODE_FAILURE}] Decode failed | "
        f"path={path} | reason={reason}"
    )


# ============================================================================
# Helpers
# ============================================================================

def _dec(value: Any) -> Decimal:
    return _gateway.to_decimal(value)


def _opt_dec(value: Any) -> Optional[Decimal]:
    return _gateway.to_optional_decimal(value)


def _require_dict(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _split_pair_and_last(result: Any) -> Tuple[str, Any, Any]:
    """Split {"<PAIR>": [...], "last": ...} into (pair, rows, last)."""
    result = _require_dict(result, "result")
    pairs = [key for key in result if key != "last"]
    if len(pairs) != 1:
        raise ValueError(f"expected exactly one pair key, got {pairs}")
    pair = pairs[0]
    return pair, result[pair], result["last"]


# ============================================================================
# Public market data
# ============================================================================

def decode_server_time(result: Any) -> ServerTime:
    return ServerTime(unixtime=int(result["unixtime"]), rfc1123=str(result["rfc1123"]))


def decode_system_status(result: Any) -> SystemStatus:
    return SystemStatus(status=str(result["status"]), timestamp=str(result["timestamp"]))


def decode_asset_info(result: Any) -> Dict[str, AssetInfo]:
    assets = {}
    for name, item in _require_dict(result, "result").items():
        assets[name] = AssetInfo(
            name=name,
            asset_class=str(item["aclass"]),
            altname=str(item["altname"]),
            decimals=int(item["decimals"]),
            display_decimals=int(item["display_decimals"]),
        )
    return assets


def decode_asset_pairs(result: Any) -> Dict[str, AssetPair]:
    pairs = {}
    for name, item in _require_dict(result, "result").items():
        pairs[name] = AssetPair(
            name=name,
            altname=str(item["altname"]),
            wsname=item.get("wsname"),
            base=str(item["base"]),
            quote=str(item["quote"]),
            pair_decimals=int(item["pair_decimals"]),
            lot_decimals=int(item["lot_decimals"]),
            order_min=_opt_dec(item.get("ordermin")),
        )
    return pairs


def _price_level(values: List[Any]) -> PriceLevel:
    return PriceLevel(
        price=_dec(values[0]),
        whole_lot_volume=_dec(values[1]),
        lot_volume=_dec(values[2]),
    )


def decode_ticker(result: Any) -> Dict[str, TickerInfo]:
    tickers = {}
    for pair, item in _require_dict(result, "result").items():
        tickers[pair] = TickerInfo(
            pair=pair,
            ask=_price_level(item["a"]),
            bid=_price_level(item["b"]),
            last_trade=LastTrade(price=_dec(item["c"][0]), lot_volume=_dec(item["c"][1])),
            volume_today=_dec(item["v"][0]),
            volume_24h=_dec(item["v"][1]),
            vwap_today=_dec(item["p"][0]),
            vwap_24h=_dec(item["p"][1]),
            trades_today=int(item["t"][0]),
            trades_24h=int(item["t"][1]),
            low_today=_dec(item["l"][0]),
            low_24h=_dec(item["l"][1]),
            high_today=_dec(item["h"][0]),
            high_24h=_dec(item["h"][1]),
            opening_price=_dec(item["o"]),
        )
    return tickers


def decode_ohlc(result: Any) -> OHLCResult:
    pair, rows, last = _split_pair_and_last(result)
    candles = [
        Candle(
            time=int(row[0]),
            open=_dec(row[1]),
            high=_dec(row[2]),
            low=_dec(row[3]),
            close=_dec(row[4]),
            vwap=_dec(row[5]),
            volume=_dec(row[6]),
            count=int(row[7]),
        )
        for row in rows
    ]
    return OHLCResult(pair=pair, candles=candles, last=int(last))


def _book_side(rows: List[Any]) -> List[OrderBookEntry]:
    return [
        OrderBookEntry(price=_dec(row[0]), volume=_dec(row[1]), timestamp=int(row[2]))
        for row in rows
    ]


def decode_order_book(result: Any) -> OrderBook:
    books = _require_dict(result, "result")
    if len(books) != 1:
        raise ValueError(f"expected exactly one pair key, got {list(books)}")
    pair, book = next(iter(books.items()))
    return OrderBook(pair=pair, asks=_book_side(book["asks"]), bids=_book_side(book["bids"]))


def decode_recent_trades(result: Any) -> RecentTrades:
    pair, rows, last = _split_pair_and_last(result)
    trades = []
    for row in rows:
        trades.append(Trade(
            price=_dec(row[0]),
            volume=_dec(row[1]),
            time=_dec(row[2]),
            side=TRADE_SIDES.get(row[3], row[3]),
            order_type=TRADE_ORDER_TYPES.get(row[4], row[4]),
            misc=str(row[5]),
            # Older responses stop at misc
            trade_id=int(row[6]) if len(row) > 6 else None,
        ))
    return RecentTrades(pair=pair, trades=trades, last=str(last))


def decode_recent_spreads(result: Any) -> RecentSpreads:
    pair, rows, last = _split_pair_and_last(result)
    spreads = [Spread(time=int(row[0]), bid=_dec(row[1]), ask=_dec(row[2])) for row in rows]
    return RecentSpreads(pair=pair, spreads=spreads, last=int(last))


# ============================================================================
# Private account data
# ============================================================================

def decode_balance(result: Any) -> Dict[str, Decimal]:
    return {asset: _dec(amount) for asset, amount in _require_dict(result, "result").items()}


def decode_trade_balance(result: Any) -> TradeBalance:
    return TradeBalance(
        equivalent_balance=_dec(result["eb"]),
        trade_balance=_dec(result["tb"]),
        margin=_opt_dec(result.get("m")),
        unrealized_pnl=_opt_dec(result.get("n")),
        cost_basis=_opt_dec(result.get("c")),
        floating_valuation=_opt_dec(result.get("v")),
        equity=_opt_dec(result.get("e")),
        free_margin=_opt_dec(result.get("mf")),
        margin_level=_opt_dec(result.get("ml")),
    )


def _order_description(descr: Dict[str, Any]) -> OrderDescription:
    return OrderDescription(
        pair=str(descr["pair"]),
        side=str(descr["type"]),
        order_type=str(descr["ordertype"]),
        price=_opt_dec(descr.get("price")),
        price2=_opt_dec(descr.get("price2")),
        leverage=str(descr.get("leverage", "none")),
        order=str(descr.get("order", "")),
        close=str(descr.get("close") or ""),
    )


def _order_info(txid: str, item: Dict[str, Any]) -> OrderInfo:
    userref = item.get("userref")
    return OrderInfo(
        txid=txid,
        status=str(item["status"]),
        open_time=_dec(item["opentm"]),
        description=_order_description(_require_dict(item["descr"], "descr")),
        volume=_dec(item["vol"]),
        volume_executed=_dec(item["vol_exec"]),
        cost=_dec(item["cost"]),
        fee=_dec(item["fee"]),
        price=_dec(item["price"]),
        misc=str(item.get("misc", "")),
        oflags=str(item.get("oflags", "")),
        close_time=_opt_dec(item.get("closetm")),
        reason=item.get("reason"),
        userref=int(userref) if userref is not None else None,
    )


def _orders(value: Any) -> Dict[str, OrderInfo]:
    return {
        txid: _order_info(txid, _require_dict(item, "order"))
        for txid, item in _require_dict(value, "orders").items()
    }


def decode_open_orders(result: Any) -> OpenOrders:
    return OpenOrders(orders=_orders(result["open"]))


def decode_closed_orders(result: Any) -> ClosedOrders:
    return ClosedOrders(orders=_orders(result["closed"]), count=int(result["count"]))


def decode_query_orders(result: Any) -> Dict[str, OrderInfo]:
    return _orders(result)


def decode_trades_history(result: Any) -> TradesHistory:
    trades = {}
    for txid, item in _require_dict(result["trades"], "trades").items():
        trades[txid] = TradeHistoryEntry(
            txid=txid,
            order_txid=str(item["ordertxid"]),
            pair=str(item["pair"]),
            time=_dec(item["time"]),
            side=str(item["type"]),
            order_type=str(item["ordertype"]),
            price=_dec(item["price"]),
            cost=_dec(item["cost"]),
            fee=_dec(item["fee"]),
            volume=_dec(item["vol"]),
            margin=_dec(item.get("margin", "0")),
            misc=str(item.get("misc", "")),
        )
    return TradesHistory(trades=trades, count=int(result["count"]))


def decode_add_order(result: Any) -> AddOrderResult:
    descr = _require_dict(result["descr"], "descr")
    txids = result.get("txid", [])
    if not isinstance(txids, list):
        raise TypeError("txid must be a list")
    return AddOrderResult(
        description=str(descr["order"]),
        txids=[str(txid) for txid in txids],
        close_description=descr.get("close"),
    )


def decode_cancel_order(result: Any) -> CancelOrderResult:
    return CancelOrderResult(count=int(result["count"]), pending=bool(result.get("pending", False)))
