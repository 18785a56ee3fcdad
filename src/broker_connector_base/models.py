from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

# Order vocabulary
class TransactionType:
    """Order sides accepted by the order builder"""
    BUY = "BUY"
    SELL = "SELL"

class OrderType:
    """Order pricing styles"""
    MARKET = "MARKET"
    LIMIT = "LIMIT"

class ProductType:
    """Order product types"""
    CNC = "CNC"  # delivery, fully paid

class OrderVariety:
    """Order varieties understood by the broker"""
    REGULAR = "regular"

# Brokerage state models
class Holding(BaseModel):
    """Holding as reported at market open, plus the same-day delta once aggregated"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trading_symbol: str = Field(alias='tradingsymbol')
    exchange: str = 'NSE'
    instrument_token: Optional[int] = None
    opening_quantity: int = 0
    day_quantity: int = 0
    holding_quantity: Optional[int] = None  # None until aggregated
    last_price: float = 0.0

class DayPosition(BaseModel):
    """Net quantity traded today for a symbol"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trading_symbol: str = Field(alias='tradingsymbol')
    quantity: int = 0

# Market data models
class PriceQuote(BaseModel):
    """Last traded price for a quote symbol"""
    quote_symbol: str
    last_price: float = 0.0
    instrument_token: Optional[int] = None

class DepthLevel(BaseModel):
    """One resting price level of the order book"""
    price: float
    quantity: int = 0
    orders: int = 0

class QuoteDepth(BaseModel):
    """Order book depth for a quote symbol, best level first on each side"""
    quote_symbol: str
    buy: List[DepthLevel] = Field(default_factory=list)
    sell: List[DepthLevel] = Field(default_factory=list)

class MarginInfo(BaseModel):
    """Funds available in a margin segment"""
    segment: str
    enabled: bool = True
    net: float = 0.0
    available_cash: float = 0.0
    utilised_debits: float = 0.0

# Allocation models
class AllocationRecord(BaseModel):
    """Per-symbol allocation decision"""
    model_config = ConfigDict(frozen=True)

    trading_symbol: str
    quote_symbol: str
    instrument_token: Optional[int] = None
    opening_quantity: int
    holding_quantity: int
    ltp: float
    current_value: float
    difference: float
    buy_quantity: int = Field(default=0, ge=0)
    buy_amount: float = 0.0
    proposed_value: float
    sell_quantity: int = Field(default=0, ge=0)

    @field_serializer('ltp', 'current_value', 'difference', 'buy_amount', 'proposed_value', when_used='json')
    def format_money(self, value: float) -> str:
        return f"{value:.2f}"

class AllocationResult(BaseModel):
    """Allocation records keyed by symbol, in holdings order"""
    model_config = ConfigDict(frozen=True)

    records: Dict[str, AllocationRecord] = Field(default_factory=dict)
    total_buy_amount: float = 0.0
    target_value: float = 0.0
    max_current_value: float = 0.0

    @property
    def queued_records(self) -> List[AllocationRecord]:
        """Records that need a buy order"""
        return [record for record in self.records.values() if record.buy_quantity > 0]

# Order models
class OrderRequest(BaseModel):
    """Order ready to be submitted to the broker"""
    model_config = ConfigDict(frozen=True)

    trading_symbol: str
    exchange: str
    quantity: int = Field(gt=0)
    transaction_type: Literal['BUY', 'SELL']
    order_type: Literal['MARKET', 'LIMIT'] = 'MARKET'
    price: Optional[float] = None
    product: str = ProductType.CNC

    @model_validator(mode='after')
    def check_price(self) -> 'OrderRequest':
        if self.order_type == OrderType.LIMIT and self.price is None:
            raise ValueError(f"LIMIT order for {self.trading_symbol} requires a price")
        if self.order_type == OrderType.MARKET and self.price is not None:
            raise ValueError(f"MARKET order for {self.trading_symbol} must not carry a price")
        return self

    def to_kite_params(self) -> dict:
        """Keyword arguments for KiteConnect.place_order (without variety)"""
        params = {
            "tradingsymbol": self.trading_symbol,
            "exchange": self.exchange,
            "quantity": self.quantity,
            "transaction_type": self.transaction_type,
            "order_type": self.order_type,
            "product": self.product,
        }
        if self.price is not None:
            params["price"] = self.price
        return params

class OrderResult(BaseModel):
    """Standardized order placement result"""
    order_id: str
    symbol: str
    quantity: int
    status: str = "PLACED"

class ExecutedOrder(BaseModel):
    """Order accepted by the broker, paired with its confirmation"""
    order: OrderRequest
    result: OrderResult

class FailedOrder(BaseModel):
    """Order the broker refused, with the captured error"""
    order: OrderRequest
    error: str
    error_type: str

# Rebalancing phase models
class PortfolioSnapshot(BaseModel):
    """Fetched phase: aggregated holdings and the prices to value them"""
    model_config = ConfigDict(frozen=True)

    holdings: List[Holding]
    day_positions: List[DayPosition] = Field(default_factory=list)
    quotes: Dict[str, PriceQuote] = Field(default_factory=dict)
    benchmark_quote: Optional[PriceQuote] = None
    fetched_at: datetime = Field(default_factory=datetime.now)

class RebalancePlan(BaseModel):
    """Allocated phase: allocation decisions and the orders built from them"""
    model_config = ConfigDict(frozen=True)

    snapshot: PortfolioSnapshot
    allocation: AllocationResult
    orders: List[OrderRequest] = Field(default_factory=list)

class ExecutionReport(BaseModel):
    """Executed phase: submitted orders partitioned into executed and failed"""
    model_config = ConfigDict(frozen=True)

    plan: Optional[RebalancePlan] = None
    executed: List[ExecutedOrder] = Field(default_factory=list)
    failed: List[FailedOrder] = Field(default_factory=list)

    @property
    def allocation_records(self) -> Dict[str, AllocationRecord]:
        return self.plan.allocation.records if self.plan else {}

    @property
    def executed_orders(self) -> List[OrderRequest]:
        return [item.order for item in self.executed]

    @property
    def executed_results(self) -> List[OrderResult]:
        return [item.result for item in self.executed]

    @property
    def failed_orders(self) -> List[FailedOrder]:
        return list(self.failed)

    @property
    def total_buy_amount(self) -> float:
        return self.plan.allocation.total_buy_amount if self.plan else 0.0

    @property
    def max_current_value(self) -> float:
        return self.plan.allocation.max_current_value if self.plan else 0.0

    @property
    def target_value(self) -> float:
        return self.plan.allocation.target_value if self.plan else 0.0

# Rebalancing result models
class CalculateRebalanceResult(BaseModel):
    """Result of rebalance calculation (preview)"""
    plan: Optional[RebalancePlan] = None
    success: bool
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)

class RebalanceResult(BaseModel):
    """Result of rebalance operation"""
    report: Optional[ExecutionReport] = None
    success: bool
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
