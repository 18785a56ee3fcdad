"""Equal-value rebalancer: lift every holding toward a common target value"""

from typing import List, Optional
import logging

try:
    from broker_connector_base import (
        BaseRebalancer,
        BrokerClient,
        CalculateRebalanceResult,
        ExecutionReport,
        FetchError,
        OrderRequest,
        PortfolioSnapshot,
        RebalancePlan,
        RebalanceResult,
        TransactionType,
        AllocationResult,
    )
    from app_config import AppConfig, get_config
    from rebalance_calculator import (
        TargetAllocator,
        ValuationEngine,
        aggregate_holdings,
        quote_symbol,
        quote_symbols,
    )
    from .executor import OrderExecutor
    from .order_builder import OrderBuilder
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure packages are installed."
    )


class KiteRebalancer(BaseRebalancer):
    """Fetch, allocate and execute, threading each phase's result into the next"""

    def __init__(self, broker_client: BrokerClient, config: Optional[AppConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        super().__init__(broker_client, logger)
        self.exchange = self.config.kite.exchange
        self.allocator = TargetAllocator(logger=self.logger)
        self.order_builder = OrderBuilder(
            broker=broker_client,
            exchange=self.exchange,
            limit_order_symbols=self.config.rebalance.limit_order_symbols,
            depth_level=self.config.rebalance.limit_depth_level,
            product=self.config.kite.product,
            logger=self.logger,
        )
        self.executor = OrderExecutor(
            broker=broker_client,
            variety=self.config.kite.order_variety,
            logger=self.logger,
        )

    def fetch_portfolio(self) -> PortfolioSnapshot:
        """
        Load holdings, day positions and last traded prices.

        Raises:
            FetchError: any of the three fetches failed; the run cannot continue
        """
        holdings = self.broker.get_holdings()
        day_positions = self.broker.get_positions()
        aggregated = aggregate_holdings(holdings, day_positions, logger=self.logger)

        holding_keys = quote_symbols([h.trading_symbol for h in aggregated], self.exchange)
        request_keys = list(holding_keys)
        benchmark_key = None
        if self.config.rebalance.benchmark_symbol:
            benchmark_key = quote_symbol(self.config.rebalance.benchmark_symbol, self.exchange)
            if benchmark_key not in request_keys:
                request_keys.append(benchmark_key)

        quotes = self.broker.get_ltp(request_keys)

        snapshot = PortfolioSnapshot(
            holdings=aggregated,
            day_positions=day_positions,
            quotes={key: quotes[key] for key in holding_keys if key in quotes},
            benchmark_quote=quotes.get(benchmark_key) if benchmark_key else None,
        )
        self._log_portfolio_snapshot(snapshot)
        return snapshot

    def plan_rebalance(self, snapshot: PortfolioSnapshot, target_value: Optional[float] = None) -> RebalancePlan:
        """Allocate against the snapshot and build a BUY order for every positive buy quantity"""
        valuation = ValuationEngine(
            holdings=snapshot.holdings,
            quotes=snapshot.quotes,
            exchange=self.exchange,
            excluded_symbols=self.config.rebalance.excluded_symbols,
            logger=self.logger,
        )
        allocation = self.allocator.allocate(valuation, target_value)
        self._log_allocation_table(allocation)

        orders = [
            self.order_builder.build_order(record, TransactionType.BUY)
            for record in allocation.queued_records
        ]
        self._log_planned_orders(orders, allocation.total_buy_amount)

        return RebalancePlan(snapshot=snapshot, allocation=allocation, orders=orders)

    def execute_orders(self, plan: Optional[RebalancePlan]) -> ExecutionReport:
        """Submit the plan's orders; without a plan there is nothing to submit"""
        if plan is None:
            self.logger.info("No rebalance plan - nothing to execute")
            return ExecutionReport()

        self.logger.info(f"Executing {len(plan.orders)} buy orders")
        return self.executor.execute(plan.orders, plan=plan)

    def calculate_rebalance(self, target_value: Optional[float] = None) -> CalculateRebalanceResult:
        """Calculate rebalance without executing (preview)"""
        self.logger.info("Calculating rebalance")
        try:
            snapshot = self.fetch_portfolio()
            plan = self.plan_rebalance(snapshot, target_value)
        except FetchError as e:
            self.logger.error(f"Rebalance calculation failed: {e}")
            return CalculateRebalanceResult(success=False, error=str(e))

        return CalculateRebalanceResult(
            plan=plan,
            success=True,
            warnings=self._check_available_funds(plan),
        )

    def rebalance_account(self, target_value: Optional[float] = None) -> RebalanceResult:
        """Calculate and submit rebalancing orders"""
        self.logger.info("Starting rebalance")
        try:
            snapshot = self.fetch_portfolio()
            plan = self.plan_rebalance(snapshot, target_value)
        except FetchError as e:
            self.logger.error(f"Rebalance failed: {e}")
            return RebalanceResult(success=False, error=str(e))

        warnings = self._check_available_funds(plan)
        report = self.execute_orders(plan)

        for failure in report.failed:
            warnings.append(
                f"Order failed: {failure.order.transaction_type} {failure.order.quantity} "
                f"{failure.order.trading_symbol} ({failure.error_type}: {failure.error})"
            )

        self.logger.info(f"Rebalance completed: {len(report.executed)} executed, {len(report.failed)} failed")
        return RebalanceResult(report=report, success=True, warnings=warnings)

    def _check_available_funds(self, plan: RebalancePlan) -> List[str]:
        """Warn when the planned buys cost more than the equity cash available"""
        if not plan.orders:
            return []

        try:
            margins = self.broker.get_margins('equity')
        except FetchError as e:
            warning = f"Could not check available funds: {e}"
            self.logger.warning(warning)
            return [warning]

        total_buy_amount = plan.allocation.total_buy_amount
        if total_buy_amount > margins.available_cash:
            warning = (
                f"Total buy amount {total_buy_amount:,.2f} exceeds available cash "
                f"{margins.available_cash:,.2f}; some orders may be rejected"
            )
            self.logger.warning(warning)
            return [warning]

        self.logger.debug(f"Funds check: {total_buy_amount:,.2f} needed, {margins.available_cash:,.2f} available")
        return []

    def _log_portfolio_snapshot(self, snapshot: PortfolioSnapshot):
        """Log aggregated holdings"""
        self.logger.info(f"====== PORTFOLIO SNAPSHOT ({len(snapshot.holdings)} holdings) ======")
        for holding in snapshot.holdings:
            self.logger.info(f"  {holding.trading_symbol}: {holding.opening_quantity:,} opening "
                             f"{holding.day_quantity:+,} today = {holding.holding_quantity:,}")
        if snapshot.benchmark_quote:
            self.logger.info(f"Benchmark {snapshot.benchmark_quote.quote_symbol}: "
                             f"{snapshot.benchmark_quote.last_price:,.2f}")
        self.logger.info("=" * 40)

    def _log_allocation_table(self, allocation: AllocationResult):
        """Log per-symbol allocation; * marks the holding that set the max current value"""
        self.logger.info(f"====== ALLOCATION (target {allocation.target_value:,.2f}) ======")
        for record in allocation.records.values():
            marker = "*" if record.current_value == allocation.max_current_value else " "
            self.logger.info(
                f" {marker}{record.trading_symbol}: {record.holding_quantity:,} @ {record.ltp:.2f} "
                f"= {record.current_value:,.2f}, gap {record.difference:,.2f}, "
                f"buy {record.buy_quantity:,} ({record.buy_amount:,.2f}) -> {record.proposed_value:,.2f}"
            )
        self.logger.info(f"Max Current Value: {allocation.max_current_value:,.2f}")
        self.logger.info(f"Total Buy Amount: {allocation.total_buy_amount:,.2f}")
        self.logger.info("=" * 35)

    def _log_planned_orders(self, orders: List[OrderRequest], total_buy_amount: float):
        """Log planned orders"""
        stage = "PLANNED ORDERS"
        self.logger.info(f"====== {stage} ======")

        if not orders:
            self.logger.info("No trades required - every holding is at or above the target value")
            self.logger.info("=" * (len(stage) + 14))
            return

        self.logger.info(f"Total Orders: {len(orders)}")
        self.logger.info(f"Total Buy Value: {total_buy_amount:,.2f}")
        for order in orders:
            price = f" @ {order.price:.2f}" if order.price is not None else ""
            self.logger.info(f"  {order.transaction_type} {order.quantity:,} {order.trading_symbol} "
                             f"{order.order_type}{price}")
        self.logger.info("=" * (len(stage) + 14))
