from .base_client import BrokerClient
from .base_rebalancer import BaseRebalancer
from .models import (
    # Order vocabulary
    TransactionType,
    OrderType,
    ProductType,
    OrderVariety,
    # Brokerage state models
    Holding,
    DayPosition,
    # Market data models
    PriceQuote,
    DepthLevel,
    QuoteDepth,
    MarginInfo,
    # Allocation models
    AllocationRecord,
    AllocationResult,
    # Order models
    OrderRequest,
    OrderResult,
    ExecutedOrder,
    FailedOrder,
    # Rebalancing phase models
    PortfolioSnapshot,
    RebalancePlan,
    ExecutionReport,
    # Rebalancing result models
    RebalanceResult,
    CalculateRebalanceResult,
)
from .exceptions import (
    BrokerError,
    ConfigurationError,
    BrokerConnectionError,
    SessionInitError,
    BrokerAPIError,
    FetchError,
    OrderExecutionError,
    InvalidTradeType,
)

__version__ = "1.0.0"

__all__ = [
    "BrokerClient",
    "BaseRebalancer",
    "TransactionType",
    "OrderType",
    "ProductType",
    "OrderVariety",
    "Holding",
    "DayPosition",
    "PriceQuote",
    "DepthLevel",
    "QuoteDepth",
    "MarginInfo",
    "AllocationRecord",
    "AllocationResult",
    "OrderRequest",
    "OrderResult",
    "ExecutedOrder",
    "FailedOrder",
    "PortfolioSnapshot",
    "RebalancePlan",
    "ExecutionReport",
    "RebalanceResult",
    "CalculateRebalanceResult",
    "BrokerError",
    "ConfigurationError",
    "BrokerConnectionError",
    "SessionInitError",
    "BrokerAPIError",
    "FetchError",
    "OrderExecutionError",
    "InvalidTradeType",
    "__version__",
]
