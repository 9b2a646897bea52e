"""
Cross-chain deposits through liquidity pools.
"""
from .ccmp_utils import CCMPUtils
from .deposit_and_call import DepositAndCallManager
from .liquidity_pool import LiquidityPool
from .liquidity_pool_utils import LiquidityPoolUtils

__all__ = [
    "CCMPUtils",
    "DepositAndCallManager",
    "LiquidityPool",
    "LiquidityPoolUtils",
]
