"""
Domain Models for the Commission Dashboard Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

# =============================================================================
# ENUMERATIONS
# =============================================================================


class Branch(str, Enum):
    """Office locations of the brokerage."""

    KRAKOW = "Kraków"
    WARSZAWA = "Warszawa"
    OLSZTYN = "Olsztyn"


class TrancheStatus(str, Enum):
    REALIZED = "realized"
    FORECAST = "forecast"


class DealSide(str, Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    RENTAL = "rental"
    LEASE = "lease"


class AgentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _money(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class DateRange:
    """A reporting window inside one calendar year."""

    start_month: int
    end_month: int
    year: int

    def contains(self, month: int, year: int) -> bool:
        return year == self.year and self.start_month <= month <= self.end_month

    @property
    def length(self) -> int:
        return self.end_month - self.start_month + 1

    def months(self) -> list[int]:
        return list(range(self.start_month, self.end_month + 1))

    @classmethod
    def from_dict(cls, data: dict) -> "DateRange":
        return cls(
            start_month=int(data.get("start_month", 1)),
            end_month=int(data.get("end_month", 12)),
            year=int(data["year"]),
        )


@dataclass
class Transaction:
    """One closed or pending property deal."""

    branch: Branch
    month: int
    year: int
    agent: str
    net_commission: Decimal
    property_value: Decimal = Decimal("0")
    id: str | None = None  # None = not yet persisted
    property_type: str = ""
    side: DealSide = DealSide.SALE
    address: str = ""
    cost: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        tx_id = data.get("id")
        return cls(
            id=str(tx_id) if tx_id is not None else None,
            branch=Branch(data["branch"]),
            month=int(data["month"]),
            year=int(data["year"]),
            agent=data["agent"],
            property_type=data.get("property_type", ""),
            side=DealSide(data.get("side", DealSide.SALE.value)),
            address=data.get("address", ""),
            net_commission=_money(data["net_commission"]),
            property_value=_money(data.get("property_value")),
            cost=_money(data.get("cost")),
            credit=_money(data.get("credit")),
        )


@dataclass
class Tranche:
    """A dated, probability-weighted slice of a transaction's commission."""

    transaction_id: str | None
    month: int
    year: int
    amount: Decimal
    status: TrancheStatus
    probability: int = 100
    note: str | None = None
    id: str | None = None

    @property
    def effective_probability(self) -> int:
        """Realized installments always count as certain."""
        if self.status == TrancheStatus.REALIZED:
            return 100
        return self.probability

    @classmethod
    def from_dict(cls, data: dict) -> "Tranche":
        transaction_id = data.get("transaction_id")
        tranche_id = data.get("id")
        return cls(
            id=str(tranche_id) if tranche_id is not None else None,
            transaction_id=str(transaction_id) if transaction_id is not None else None,
            month=int(data["month"]),
            year=int(data["year"]),
            amount=_money(data["amount"]),
            status=TrancheStatus(data.get("status", TrancheStatus.FORECAST.value)),
            probability=int(data.get("probability", 100)),
            note=data.get("note"),
        )


@dataclass
class Agent:
    """A sales representative belonging to one branch."""

    name: str
    branch: Branch
    status: AgentStatus = AgentStatus.ACTIVE
    id: str | None = None
    email: str | None = None
    phone: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == AgentStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: dict) -> "Agent":
        agent_id = data.get("id")
        return cls(
            id=str(agent_id) if agent_id is not None else None,
            name=data["name"],
            branch=Branch(data["branch"]),
            status=AgentStatus(data.get("status", AgentStatus.ACTIVE.value)),
            email=data.get("email"),
            phone=data.get("phone"),
        )


@dataclass
class BranchTarget:
    """Planned amount for a branch in one month."""

    branch: Branch
    year: int
    month: int
    planned_amount: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "BranchTarget":
        return cls(
            branch=Branch(data["branch"]),
            year=int(data["year"]),
            month=int(data["month"]),
            planned_amount=_money(data.get("planned_amount")),
        )


@dataclass
class AgentPerformance:
    """Activity figures recorded for an agent (whole year when month is None)."""

    agent_name: str
    branch: Branch
    year: int
    month: int | None = None
    commission_with_credit: Decimal = Decimal("0")
    acquisition_meetings: int = 0
    new_contracts: int = 0
    presentations: int = 0
    apartments: int = 0
    houses: int = 0
    plots: int = 0
    other_properties: int = 0
    total_properties: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "AgentPerformance":
        month = data.get("month")
        return cls(
            agent_name=data["agent_name"],
            branch=Branch(data["branch"]),
            year=int(data["year"]),
            month=int(month) if month is not None else None,
            commission_with_credit=_money(data.get("commission_with_credit")),
            acquisition_meetings=int(data.get("acquisition_meetings", 0)),
            new_contracts=int(data.get("new_contracts", 0)),
            presentations=int(data.get("presentations", 0)),
            apartments=int(data.get("apartments", 0)),
            houses=int(data.get("houses", 0)),
            plots=int(data.get("plots", 0)),
            other_properties=int(data.get("other_properties", 0)),
            total_properties=int(data.get("total_properties", 0)),
        )


@dataclass
class DashboardInput:
    """Complete input for one dashboard request.

    ``tranches`` is None when no installment data is available at all;
    the aggregations then run over raw transactions. ``agents`` is None
    when no agent records were supplied. ``agent_branch`` narrows the
    agent ranking to one office; ``current_year`` defaults to today's.
    """

    date_range: DateRange
    transactions: list[Transaction] = field(default_factory=list)
    tranches: list[Tranche] | None = None
    agents: list[Agent] | None = None
    branch_targets: list[BranchTarget] = field(default_factory=list)
    agent_performance: list[AgentPerformance] = field(default_factory=list)
    agent_branch: Branch | None = None
    current_year: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardInput":
        tranches = data.get("tranches")
        agents = data.get("agents")
        agent_branch = data.get("agent_branch")
        current_year = data.get("current_year")
        return cls(
            agent_branch=Branch(agent_branch) if agent_branch else None,
            current_year=int(current_year) if current_year is not None else None,
            date_range=DateRange.from_dict(data["date_range"]),
            transactions=[Transaction.from_dict(t) for t in data.get("transactions", [])],
            tranches=[Tranche.from_dict(t) for t in tranches] if tranches is not None else None,
            agents=[Agent.from_dict(a) for a in agents] if agents is not None else None,
            branch_targets=[BranchTarget.from_dict(t) for t in data.get("branch_targets", [])],
            agent_performance=[AgentPerformance.from_dict(p) for p in data.get("agent_performance", [])],
        )


# =============================================================================
# DERIVED / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class EffectiveTranche:
    """One resolved installment, explicit or implicit, inside a date window."""

    transaction: Transaction
    month: int
    year: int
    amount: Decimal
    status: TrancheStatus
    probability: int
    realized_amount: Decimal
    forecast_weighted_amount: Decimal
    forecast_full_amount: Decimal
    value_share: Decimal
    proportional_cost: Decimal
    proportional_credit: Decimal
    outcome: Decimal
    is_implicit: bool = False

    @property
    def transaction_id(self) -> str | None:
        return self.transaction.id

    @property
    def is_realized(self) -> bool:
        return self.status == TrancheStatus.REALIZED


@dataclass
class PeriodTotals:
    """Totals of one group of effective tranches (or raw transactions)."""

    outcome: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    cost: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    realized_total: Decimal = Decimal("0")
    forecast_weighted_total: Decimal = Decimal("0")
    forecast_full_total: Decimal = Decimal("0")
    property_value: Decimal = Decimal("0")
    transaction_count: int = 0

    @property
    def average_commission(self) -> Decimal:
        if self.transaction_count == 0:
            return Decimal("0")
        return self.commission / self.transaction_count


@dataclass
class BranchTotals:
    branch: Branch
    totals: PeriodTotals
    commission_rate: Decimal = Decimal("0")  # percent of property value


@dataclass
class AgentTotals:
    agent: str
    outcome: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    transaction_count: int = 0
    branch: Branch | None = None
    rank: int = 0


@dataclass
class MonthTotals:
    month: int
    outcome: Decimal = Decimal("0")
    realized_total: Decimal = Decimal("0")
    forecast_weighted_total: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    property_value: Decimal = Decimal("0")
    transaction_count: int = 0
    commission_growth: Decimal = Decimal("0")  # percent vs previous month in series


@dataclass
class TrendDelta:
    current: Decimal
    previous: Decimal
    change: Decimal  # percent, or absolute delta for counts
    label: str


@dataclass
class PeriodTrend:
    previous_range: DateRange
    outcome: TrendDelta
    commission: TrendDelta
    property_value: TrendDelta
    transaction_count: TrendDelta


@dataclass
class PlanActual:
    branch: Branch
    month: int
    planned: Decimal
    actual: Decimal
    realization_percent: Decimal


@dataclass
class BranchPlanSummary:
    """Plan vs actual for one branch across a year."""

    branch: Branch
    months: list[PlanActual] = field(default_factory=list)
    planned_to_date: Decimal = Decimal("0")
    actual_to_date: Decimal = Decimal("0")
    planned_year: Decimal = Decimal("0")
    actual_year: Decimal = Decimal("0")
    realization_to_date: Decimal = Decimal("0")


@dataclass
class PlanReport:
    year: int
    up_to_month: int
    branches: list[BranchPlanSummary] = field(default_factory=list)
    planned_total: Decimal = Decimal("0")
    actual_total: Decimal = Decimal("0")
    realization_percent: Decimal = Decimal("0")


@dataclass
class BranchActivity:
    branch: Branch
    agent_count: int = 0
    commission_with_credit: Decimal = Decimal("0")
    acquisition_meetings: int = 0
    new_contracts: int = 0
    presentations: int = 0
    total_properties: int = 0


@dataclass
class ActivityReport:
    branches: list[BranchActivity] = field(default_factory=list)
    top_agents: list[AgentPerformance] = field(default_factory=list)


@dataclass
class ProcessingContext:
    """
    Holds all intermediate state during dashboard processing.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    date_range: DateRange
    working_set: list[Transaction]
    unfiltered: list[Transaction]
    tranches_by_transaction: dict[str, list[Tranche]] | None
    fallback_mode: bool = False
    available_years: list[int] = field(default_factory=list)

    # Step results (populated as we go)
    effective: list[EffectiveTranche] = field(default_factory=list)
    summary: PeriodTotals = field(default_factory=PeriodTotals)
    branches: list[BranchTotals] = field(default_factory=list)
    agents: list[AgentTotals] = field(default_factory=list)
    monthly: list[MonthTotals] = field(default_factory=list)
    trend: PeriodTrend | None = None
    plan: PlanReport | None = None
    activity: ActivityReport | None = None


@dataclass
class DashboardResult:
    """Final output of dashboard processing."""

    date_range: dict
    mode: str
    summary: dict
    trend: dict
    branches: list
    agents: list
    monthly: list
    available_years: list = field(default_factory=list)
    plan_vs_actual: dict | None = None
    activity: dict | None = None
