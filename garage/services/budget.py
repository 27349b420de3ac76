import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from garage.core.errors import InsufficientBudgetError, ValidationError
from garage.core.money import ZERO, to_money
from garage.schemas.teams import Contribution, Team
from garage.services import validation as v


class BudgetLedger:
    """Derives a team's budget from its sponsor contributions.

    ``budget.total`` is always the sum of recorded contributions and is never
    assigned directly; ``budget.spent`` only grows through ``reserve``. Works on
    the working copy handed out by ``TeamRepository.edit``.
    """

    def available(self, team: Team) -> Decimal:
        return to_money(team.budget.total) - to_money(team.budget.spent)

    def recompute(self, team: Team) -> None:
        team.budget.total = sum((c.amount for c in team.contributions), ZERO)

    def record_contribution(self, team: Team, sponsor_id, amount, date: Optional[datetime] = None,
                            description=None) -> Contribution:
        sponsor = next((sp for sp in team.sponsors if sp.id == sponsor_id), None)
        if sponsor is None:
            raise ValidationError("Sponsor does not belong to this team.")
        amount = v.non_negative_money(amount, "contribution amount")

        contribution = Contribution(
            id=str(uuid.uuid4()),
            sponsor_id=sponsor.id,
            sponsor_name=sponsor.name,
            amount=amount,
            date=date or datetime.now(timezone.utc),
            description=v.optional_text(description),
        )
        team.contributions.append(contribution)
        self.recompute(team)
        return contribution

    def ensure_available(self, team: Team, cost) -> Decimal:
        cost = v.non_negative_money(cost, "cost")
        available = self.available(team)
        if cost > available:
            raise InsufficientBudgetError("Insufficient budget", required=cost, available=available)
        return cost

    def reserve(self, team: Team, cost) -> None:
        cost = self.ensure_available(team, cost)
        team.budget.spent = to_money(team.budget.spent) + cost
