"""Protocol constants for concentrated-liquidity pools.

Centralizes tick and price bounds, fee denominators and tick-array geometry.
Values must match the settlement program bit for bit; quotes computed with
different constants diverge from on-chain execution.
"""

# Tick range supported by the pool program
MIN_TICK_INDEX = -443636
MAX_TICK_INDEX = 443636

# sqrt(1.0001^tick) * 2^64 at the tick bounds
MIN_SQRT_PRICE_X64 = 4295048016
MAX_SQRT_PRICE_X64 = 79226673515401279992447579055

# Q64.64 fixed-point resolution
Q64_RESOLUTION = 64
Q64 = 1 << Q64_RESOLUTION

# Integer widths used by account fields
U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
U256_MAX = (1 << 256) - 1

# Tick arrays
TICK_ARRAY_SIZE = 88
MAX_SWAP_TICK_ARRAYS = 3

# Fee rate is in hundredths of a basis point: fee = amount * rate / 1_000_000
FEE_RATE_MUL_VALUE = 1_000_000
# Protocol fee rate is in basis points of the collected fee
PROTOCOL_FEE_RATE_MUL_VALUE = 10_000

# Upper bound for base fee rates accepted by fee tiers (6%)
MAX_FEE_RATE = 60_000
# Upper bound for protocol fee rates (25% of the fee)
MAX_PROTOCOL_FEE_RATE = 2_500
# Clamp applied to static + adaptive fee rate (10%)
FEE_RATE_HARD_LIMIT = 100_000

# Token-2022 transfer fees are in basis points of the transferred amount
TRANSFER_FEE_BPS_DENOMINATOR = 10_000

# Adaptive fee scaling
VOLATILITY_ACCUMULATOR_SCALE_FACTOR = 10_000
REDUCTION_FACTOR_DENOMINATOR = 10_000
ADAPTIVE_FEE_CONTROL_FACTOR_DENOMINATOR = 100_000
# Seconds after which the volatility reference is considered stale
MAX_REFERENCE_AGE = 3_600

# Mainnet pool program
WHIRLPOOL_PROGRAM_ID = "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc"

# Settlement program error codes that quotes can predict
ERROR_CODE_INTERMEDIATE_TOKEN_AMOUNT_MISMATCH = 0x17A3
ERROR_CODE_TRADE_IS_NOT_ENABLED = 0x17B0
