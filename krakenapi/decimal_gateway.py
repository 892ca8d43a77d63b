# ============================================================================
# Kraken REST Client v0.1.0
# Decimal Gateway - Exact Numeric Conversion
# ============================================================================
#
# Purpose: Ensures all prices, volumes and balances use decimal.Decimal
#
# MANDATE:
#   - Kraken sends numeric values as JSON strings; they MUST pass through here
#   - Float contamination is FORBIDDEN (floats are converted via str())
#   - Values keep the exchange's own precision unless a quantum is requested
#   - Outgoing amounts are rendered in plain notation, never exponent form
#
# Error Codes:
#   - KRAKEN-DEC-001: Decimal conversion failed
#
# ============================================================================

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)

Numeric = Union[str, int, float, Decimal]


class DecimalGateway:
    """
    Central conversion layer between Kraken JSON values and decimal.Decimal.

    Example Usage:
        gateway = DecimalGateway()

        price = gateway.to_decimal("30010.10000")       # Decimal('30010.10000')
        qty = gateway.to_decimal("1.25", precision=DecimalGateway.CRYPTO_PRECISION)
        body_value = gateway.to_param(Decimal("1E-8"))  # '0.00000001'
    """

    CRYPTO_PRECISION = Decimal('0.00000001')  # 8 decimal places (satoshi)
    FIAT_PRECISION = Decimal('0.01')

    def to_decimal(
        self,
        value: Optional[Numeric],
        precision: Optional[Decimal] = None
    ) -> Decimal:
        """
        Convert a numeric value to Decimal.

        Without `precision` the value is converted exactly. With it, the value
        is quantized using ROUND_HALF_EVEN.

        Raises:
            ValueError: If value is None, boolean, non-finite or not numeric
                (KRAKEN-DEC-001)
        """
        if value is None or isinstance(value, bool):
            logger.error(
                f"[KRAKEN-DEC-001] Decimal conversion failed | "
                f"value={value} | type={type(value).__name__}"
            )
            raise ValueError(f"KRAKEN-DEC-001: Cannot convert '{value}' to Decimal")

        try:
            # Always go through str() so floats never leak binary noise
            decimal_value = value if isinstance(value, Decimal) else Decimal(str(value).strip())
            if not decimal_value.is_finite():
                raise ValueError("non-finite value")
            if precision is not None:
                decimal_value = decimal_value.quantize(precision, rounding=ROUND_HALF_EVEN)
            return decimal_value
        except (InvalidOperation, ValueError, TypeError) as e:
            logger.error(
                f"[KRAKEN-DEC-001] Decimal conversion failed | "
                f"value={value} | type={type(value).__name__} | error={e}"
            )
            raise ValueError(
                f"KRAKEN-DEC-001: Cannot convert '{value}' to Decimal"
            ) from e

    def to_optional_decimal(self, value: Optional[Numeric]) -> Optional[Decimal]:
        """Like to_decimal, but None and empty strings map to None."""
        if value is None or value == "":
            return None
        return self.to_decimal(value)

    def to_param(self, value: Numeric) -> str:
        """
        Render an amount for a request body.

        Returns a plain decimal string ("0.00000001", never "1E-8").
        """
        decimal_value = self.to_decimal(value)
        rendered = format(decimal_value, 'f')
        if '.' in rendered:
            rendered = rendered.rstrip('0').rstrip('.')
        return rendered or '0'

