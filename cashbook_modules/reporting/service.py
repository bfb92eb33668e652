"""
Reporting Module Service (``cashbook_modules.reporting.service``).

Responsibility
--------------
Orchestrates statement generation -- profit and loss, balance sheet, cash
flow, trial balance, general ledger and columnar profit and loss -- by
bridging the kernel selectors (``LedgerSelector``, ``JournalSelector``)
to the pure transformation functions in ``statements.py``.  This is a
**read-only** service: nothing is posted.

Architecture position
---------------------
**Modules layer** -- ``ReportingService`` is the sole public entry point
for statement generation.  Constructor: ``session`` + ``clock`` +
``config``; without a config it reads the ``reporting`` block of the
active cashbook configuration.

Invariants enforced
-------------------
* Read-only -- no mutations to the journal.
* Period statements read period activity; balance statements read
  cumulative balances.  Reversed entries are excluded by the selectors.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.

Failure modes
-------------
* Invalid request (unknown type, from_date after to_date, missing
  dates or year/mode)  -> ``InvalidReportRequestError`` before any query.
* Imbalanced balance sheet or trial balance with
  ``config.raise_on_imbalance``  -> ``AggregationInconsistencyError``.
  Otherwise the report carries ``is_balanced=False``.

Audit relevance
---------------
Structured log events are emitted for every report generation, carrying
report type, company and period.  Every imbalance is logged as a warning.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_config import get_active_config
from cashbook_kernel.domain.aggregation import bucket_activity, running_balances
from cashbook_kernel.domain.clock import Clock, SystemClock
from cashbook_kernel.domain.dtos import AccountRef
from cashbook_kernel.domain.periods import ColumnMode, periods_for
from cashbook_kernel.exceptions import AggregationInconsistencyError, InvalidReportRequestError
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.models.payable_receivable import PayableReceivableType
from cashbook_kernel.selectors.journal_selector import JournalSelector
from cashbook_kernel.selectors.ledger_selector import LedgerSelector
from cashbook_kernel.services.chart_of_accounts import ChartOfAccountsRegistry
from cashbook_kernel.services.payables_service import PayablesService
from cashbook_modules.reporting.config import ReportingConfig, RetainedEarningsBasis
from cashbook_modules.reporting.models import (
    BalanceSheetReport,
    CashFlowReport,
    ColumnarProfitLossReport,
    GeneralLedgerReport,
    ProfitLossReport,
    ReportMetadata,
    ReportType,
    TrialBalanceReport,
)
from cashbook_modules.reporting.statements import (
    build_balance_sheet,
    build_cash_flow,
    build_columnar_profit_loss,
    build_general_ledger,
    build_profit_loss,
    build_trial_balance,
    compute_net_income,
    render_to_dict,
)

logger = get_logger("modules.reporting.service")

Report = (
    ProfitLossReport
    | BalanceSheetReport
    | CashFlowReport
    | TrialBalanceReport
    | GeneralLedgerReport
    | ColumnarProfitLossReport
)


class ReportingService:
    """
    Financial statement generation service.

    Contract
    --------
    * Every public method returns a typed report DTO.
    * All methods are **read-only**.

    Guarantees
    ----------
    * Report generation delegates to pure functions in ``statements.py``;
      no financial logic lives in this class.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT cache reports; every call re-reads the journal.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.from_dict(get_active_config().reporting)
        self._ledger = LedgerSelector(session)
        self._journal = JournalSelector(session)
        self._registry = ChartOfAccountsRegistry(session)
        self._payables = PayablesService(session)

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _build_metadata(
        self,
        report_type: ReportType,
        company_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        year: int | None = None,
        column_mode: ColumnMode | None = None,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            company_id=company_id,
            entity_name=self._config.entity_name,
            generated_at=self._clock.now().isoformat(),
            from_date=from_date,
            to_date=to_date,
            year=year,
            column_mode=column_mode.value if column_mode else None,
        )

    def _active_chart(self, company_id: UUID) -> list[AccountRef]:
        return [
            AccountRef.from_model(account)
            for account in self._registry.list_active_accounts(company_id)
        ]

    @staticmethod
    def _check_range(report_type: ReportType, from_date: date | None, to_date: date | None) -> None:
        if to_date is None:
            raise InvalidReportRequestError(report_type.value, "to_date is required")
        if from_date is not None and from_date > to_date:
            raise InvalidReportRequestError(
                report_type.value,
                f"from_date {from_date} is after to_date {to_date}",
            )

    def _flag_imbalance(
        self,
        report_type: ReportType,
        event: str,
        left,
        right,
    ) -> None:
        discrepancy = left - right
        logger.warning(
            event,
            extra={
                "left": str(left),
                "right": str(right),
                "discrepancy": str(discrepancy),
            },
        )
        if self._config.raise_on_imbalance:
            raise AggregationInconsistencyError(
                report_type=report_type.value,
                left=str(left),
                right=str(right),
                discrepancy=str(discrepancy),
            )

    # =========================================================================
    # Public API
    # =========================================================================

    def get_report(
        self,
        report_type: ReportType | str,
        company_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        year: int | None = None,
        column_mode: ColumnMode | str | None = None,
    ) -> Report:
        """
        Generate any report by type.

        Date-range reports take ``from_date``/``to_date``; the trial
        balance and general ledger need only ``to_date``; the columnar
        P&L takes ``year`` and ``column_mode``.

        Raises:
            InvalidReportRequestError: Unknown type or bad parameters.
        """
        try:
            kind = ReportType(report_type)
        except ValueError:
            raise InvalidReportRequestError(str(report_type), "unknown report type") from None

        match kind:
            case ReportType.PROFIT_LOSS:
                if from_date is None:
                    raise InvalidReportRequestError(kind.value, "from_date is required")
                return self.profit_loss(company_id, from_date, to_date)
            case ReportType.BALANCE_SHEET:
                return self.balance_sheet(company_id, to_date, from_date=from_date)
            case ReportType.CASH_FLOW:
                if from_date is None:
                    raise InvalidReportRequestError(kind.value, "from_date is required")
                return self.cash_flow(company_id, from_date, to_date)
            case ReportType.TRIAL_BALANCE:
                return self.trial_balance(company_id, to_date, from_date=from_date)
            case ReportType.GENERAL_LEDGER:
                return self.general_ledger(company_id, to_date, from_date=from_date)
            case ReportType.COLUMNAR_PROFIT_LOSS:
                if year is None or column_mode is None:
                    raise InvalidReportRequestError(kind.value, "year and column_mode are required")
                return self.columnar_profit_loss(company_id, year, column_mode)

    def profit_loss(
        self,
        company_id: UUID,
        from_date: date,
        to_date: date,
    ) -> ProfitLossReport:
        """P&L over activity dated from_date..to_date inclusive."""
        self._check_range(ReportType.PROFIT_LOSS, from_date, to_date)
        with LogContext.bind(company_id=str(company_id), report_type=ReportType.PROFIT_LOSS.value):
            activity = self._ledger.period_activity(company_id, from_date, to_date)
            metadata = self._build_metadata(
                ReportType.PROFIT_LOSS, company_id, from_date=from_date, to_date=to_date,
            )
            report = build_profit_loss(activity, self._config, metadata)

            logger.info(
                "profit_loss_generated",
                extra={
                    "from_date": from_date.isoformat(),
                    "to_date": to_date.isoformat(),
                    "total_revenue": str(report.total_revenue),
                    "net_income": str(report.net_income),
                },
            )
        return report

    def balance_sheet(
        self,
        company_id: UUID,
        to_date: date,
        from_date: date | None = None,
    ) -> BalanceSheetReport:
        """
        Balance sheet as of ``to_date`` from cumulative balances.

        ``from_date`` is required only with the PERIOD retained-earnings
        basis, where it bounds the net income rolled into equity.
        """
        self._check_range(ReportType.BALANCE_SHEET, from_date, to_date)
        basis = self._config.retained_earnings_basis
        if basis == RetainedEarningsBasis.PERIOD and from_date is None:
            raise InvalidReportRequestError(
                ReportType.BALANCE_SHEET.value,
                "from_date is required for the period retained earnings basis",
            )

        with LogContext.bind(company_id=str(company_id), report_type=ReportType.BALANCE_SHEET.value):
            balances = self._ledger.cumulative_balances(company_id, to_date)
            period_net_income = None
            if basis == RetainedEarningsBasis.PERIOD:
                period_net_income = compute_net_income(
                    self._ledger.period_activity(company_id, from_date, to_date)
                )

            open_items = self._payables.open_totals(company_id)
            metadata = self._build_metadata(
                ReportType.BALANCE_SHEET, company_id, from_date=from_date, to_date=to_date,
            )
            report = build_balance_sheet(
                balances,
                self._config,
                metadata,
                open_receivables=open_items[PayableReceivableType.RECEIVABLE],
                open_payables=open_items[PayableReceivableType.PAYABLE],
                period_net_income=period_net_income,
                chart=self._active_chart(company_id),
            )

            logger.info(
                "balance_sheet_generated",
                extra={
                    "to_date": to_date.isoformat(),
                    "total_assets": str(report.total_assets),
                    "total_liabilities": str(report.total_liabilities),
                    "total_equity": str(report.total_equity),
                    "is_balanced": report.is_balanced,
                },
            )
            if not report.is_balanced:
                self._flag_imbalance(
                    ReportType.BALANCE_SHEET,
                    "balance_sheet_imbalanced",
                    report.total_assets,
                    report.total_liabilities + report.total_equity,
                )
        return report

    def cash_flow(
        self,
        company_id: UUID,
        from_date: date,
        to_date: date,
    ) -> CashFlowReport:
        """Indirect-method cash flow over activity dated from_date..to_date."""
        self._check_range(ReportType.CASH_FLOW, from_date, to_date)
        with LogContext.bind(company_id=str(company_id), report_type=ReportType.CASH_FLOW.value):
            activity = self._ledger.period_activity(company_id, from_date, to_date)
            metadata = self._build_metadata(
                ReportType.CASH_FLOW, company_id, from_date=from_date, to_date=to_date,
            )
            report = build_cash_flow(activity, self._config, metadata)

            logger.info(
                "cash_flow_generated",
                extra={
                    "from_date": from_date.isoformat(),
                    "to_date": to_date.isoformat(),
                    "net_cash_flow": str(report.net_cash_flow),
                },
            )
        return report

    def trial_balance(
        self,
        company_id: UUID,
        to_date: date,
        from_date: date | None = None,
    ) -> TrialBalanceReport:
        """Trial balance of cumulative balances as of ``to_date``."""
        self._check_range(ReportType.TRIAL_BALANCE, from_date, to_date)
        with LogContext.bind(company_id=str(company_id), report_type=ReportType.TRIAL_BALANCE.value):
            balances = self._ledger.cumulative_balances(company_id, to_date)
            metadata = self._build_metadata(
                ReportType.TRIAL_BALANCE, company_id, from_date=from_date, to_date=to_date,
            )
            report = build_trial_balance(
                balances, self._config, metadata, chart=self._active_chart(company_id),
            )

            logger.info(
                "trial_balance_generated",
                extra={
                    "to_date": to_date.isoformat(),
                    "account_count": len(report.accounts),
                    "total_debits": str(report.total_debits),
                    "total_credits": str(report.total_credits),
                    "is_balanced": report.is_balanced,
                },
            )
            if not report.is_balanced:
                self._flag_imbalance(
                    ReportType.TRIAL_BALANCE,
                    "trial_balance_imbalanced",
                    report.total_debits,
                    report.total_credits,
                )
        return report

    def general_ledger(
        self,
        company_id: UUID,
        to_date: date,
        from_date: date | None = None,
    ) -> GeneralLedgerReport:
        """Per-account cumulative detail with running balances as of ``to_date``."""
        self._check_range(ReportType.GENERAL_LEDGER, from_date, to_date)
        with LogContext.bind(company_id=str(company_id), report_type=ReportType.GENERAL_LEDGER.value):
            balances = self._ledger.cumulative_balances(company_id, to_date)
            lines = self._journal.lines(company_id, to_date=to_date)
            metadata = self._build_metadata(
                ReportType.GENERAL_LEDGER, company_id, from_date=from_date, to_date=to_date,
            )
            report = build_general_ledger(
                balances,
                running_balances(lines, to_date),
                self._config,
                metadata,
                chart=self._active_chart(company_id),
            )

            logger.info(
                "general_ledger_generated",
                extra={
                    "to_date": to_date.isoformat(),
                    "account_count": len(report.accounts),
                    "line_count": len(lines),
                    "is_balanced": report.is_balanced,
                },
            )
        return report

    def columnar_profit_loss(
        self,
        company_id: UUID,
        year: int,
        column_mode: ColumnMode | str,
    ) -> ColumnarProfitLossReport:
        """P&L for ``year`` with a column per month or quarter."""
        try:
            mode = ColumnMode(column_mode)
        except ValueError:
            raise InvalidReportRequestError(
                ReportType.COLUMNAR_PROFIT_LOSS.value,
                f"column_mode must be one of {[m.value for m in ColumnMode]}",
            ) from None

        with LogContext.bind(
            company_id=str(company_id), report_type=ReportType.COLUMNAR_PROFIT_LOSS.value,
        ):
            periods = periods_for(year, mode)
            from_date, to_date = periods[0].from_date, periods[-1].to_date
            lines = self._journal.lines(company_id, from_date=from_date, to_date=to_date)
            metadata = self._build_metadata(
                ReportType.COLUMNAR_PROFIT_LOSS,
                company_id,
                from_date=from_date,
                to_date=to_date,
                year=year,
                column_mode=mode,
            )
            report = build_columnar_profit_loss(
                bucket_activity(lines, periods), periods, self._config, metadata,
            )

            logger.info(
                "columnar_profit_loss_generated",
                extra={
                    "year": year,
                    "column_mode": mode.value,
                    "period_count": len(periods),
                    "net_income": str(report.grand_totals.net_income),
                },
            )
        return report

    def to_dict(self, report: object) -> dict:
        """
        Convert any report DTO to a plain dict for JSON serialization.

        Delegates to the pure render_to_dict function.
        """
        return render_to_dict(report, self._config.display_precision)
