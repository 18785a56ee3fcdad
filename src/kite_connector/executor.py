"""Submit orders one at a time, isolating failures"""

from typing import List, Optional
import logging

from broker_connector_base import (
    BrokerClient,
    ExecutedOrder,
    ExecutionReport,
    FailedOrder,
    OrderRequest,
    OrderVariety,
    RebalancePlan,
)


class OrderExecutor:
    """Place each order exactly once, in order; a failed order never stops the batch"""

    def __init__(self, broker: BrokerClient, variety: str = OrderVariety.REGULAR,
                 logger: Optional[logging.Logger] = None):
        self.broker = broker
        self.variety = variety
        self.logger = logger or logging.getLogger(__name__)

    def execute(self, orders: List[OrderRequest], plan: Optional[RebalancePlan] = None) -> ExecutionReport:
        executed = []
        failed = []

        for order in orders:
            try:
                result = self.broker.place_order(order, variety=self.variety)
            except Exception as e:
                self.logger.error(f"Error executing order {order.transaction_type} {order.quantity} "
                                  f"{order.trading_symbol}: {e}")
                failed.append(FailedOrder(order=order, error=str(e), error_type=type(e).__name__))
                continue

            executed.append(ExecutedOrder(order=order, result=result))

        if orders:
            self.logger.info(f"Executed {len(executed)} of {len(orders)} orders ({len(failed)} failed)")
        return ExecutionReport(plan=plan, executed=executed, failed=failed)
