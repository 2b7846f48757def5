"""
Agent Ranking

Groups outcomes by agent name and ranks agents by descending outcome.
When a roster is given, every rostered agent gets a row, sales or not.
"""

from typing import Iterable

from ..models import Agent, AgentTotals, Branch, EffectiveTranche, Transaction


class AgentRanker:
    """Ranks agents by outcome. Ties keep roster order, then first-seen order."""

    def rank(
        self,
        tranches: list[EffectiveTranche],
        top: int | None = None,
        roster: Iterable[Agent] | None = None,
        branch: Branch | None = None,
    ) -> list[AgentTotals]:
        by_agent = self._seed(roster)
        seen: dict[str, set] = {}

        for tranche in tranches:
            transaction = tranche.transaction
            totals = by_agent.setdefault(
                transaction.agent, AgentTotals(agent=transaction.agent, branch=transaction.branch)
            )
            totals.outcome += tranche.outcome
            totals.commission += tranche.amount
            seen.setdefault(transaction.agent, set()).add(tranche.transaction_id)

        for agent, totals in by_agent.items():
            totals.transaction_count = len(seen.get(agent, ()))

        return self._ordered(list(by_agent.values()), top, branch)

    def rank_transactions(
        self,
        transactions: list[Transaction],
        top: int | None = None,
        roster: Iterable[Agent] | None = None,
        branch: Branch | None = None,
    ) -> list[AgentTotals]:
        """Fallback ranking over raw transactions (commission - cost + credit)."""
        by_agent = self._seed(roster)

        for transaction in transactions:
            totals = by_agent.setdefault(
                transaction.agent, AgentTotals(agent=transaction.agent, branch=transaction.branch)
            )
            totals.outcome += transaction.net_commission - transaction.cost + transaction.credit
            totals.commission += transaction.net_commission
            totals.transaction_count += 1

        return self._ordered(list(by_agent.values()), top, branch)

    def _seed(self, roster: Iterable[Agent] | None) -> dict[str, AgentTotals]:
        # Rostered agents report under their own branch, not the deal's
        return {agent.name: AgentTotals(agent=agent.name, branch=agent.branch) for agent in roster or []}

    def _ordered(self, agents: list[AgentTotals], top: int | None, branch: Branch | None) -> list[AgentTotals]:
        if branch is not None:
            agents = [a for a in agents if a.branch == branch]
        # sorted() is stable, so equal outcomes stay in insertion order
        ranked = sorted(agents, key=lambda a: a.outcome, reverse=True)
        if top is not None:
            ranked = ranked[:top]
        for position, totals in enumerate(ranked, start=1):
            totals.rank = position
        return ranked
