from .client import KiteClient
from .executor import OrderExecutor
from .order_builder import OrderBuilder
from .rebalancer import KiteRebalancer

__version__ = "1.0.0"

__all__ = [
    "KiteClient",
    "KiteRebalancer",
    "OrderBuilder",
    "OrderExecutor",
    "__version__",
]
