"""
Agent Activity

Summarises recorded agent activity (meetings, contracts, presentations)
per branch and picks the top agents by commission.
"""

from ..models import ActivityReport, AgentPerformance, Branch, BranchActivity


class ActivityAggregator:
    """Reduces agent performance records for one year."""

    DEFAULT_TOP_AGENTS = 10

    def aggregate(self, records: list[AgentPerformance], top: int = DEFAULT_TOP_AGENTS) -> ActivityReport:
        branches = []
        for branch in Branch:
            rows = [r for r in records if r.branch == branch]
            activity = BranchActivity(branch=branch, agent_count=len({r.agent_name for r in rows}))
            for row in rows:
                activity.commission_with_credit += row.commission_with_credit
                activity.acquisition_meetings += row.acquisition_meetings
                activity.new_contracts += row.new_contracts
                activity.presentations += row.presentations
                activity.total_properties += row.total_properties
            branches.append(activity)

        top_agents = sorted(records, key=lambda r: r.commission_with_credit, reverse=True)[:top]
        return ActivityReport(branches=branches, top_agents=top_agents)
