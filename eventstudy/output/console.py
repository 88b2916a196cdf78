"""Plain-text rendering of company and group results."""

from __future__ import annotations

from eventstudy.analysis.groups import Group
from eventstudy.config import DAY_OFFSET, ClassificationConfig
from eventstudy.data.models import Company

# Days shown on each side of the event in the company view.
_DISPLAY_RADIUS = 5


def render_company(
    company: Company,
    offset: int = DAY_OFFSET,
    radius: int = _DISPLAY_RADIUS,
    thresholds: ClassificationConfig | None = None,
) -> str:
    """Describe one company: EPS, surprise, group, and values near day 0.

    Price index offset + 1 and return index offset are the event day.
    The group uses the given Beat/Miss thresholds (default ±5%).
    """
    lines = [
        "===== Stock Information =====",
        f"Symbol: {company.symbol}",
        f"EPS Estimate: {company.eps_estimate:g}",
        f"Actual EPS: {company.actual_eps:g}",
        f"Surprise %: {company.surprise_pct:.2f}%",
        f"Group: {company.classification(thresholds).value}",
        f"Earnings Date: {company.earnings_date}",
    ]
    if not company.retrieved:
        lines.append("")
        lines.append("No price data retrieved.")
        return "\n".join(lines)

    lines.append("")
    lines.append("Prices around earnings date:")
    event_price = offset + 1
    for i in range(max(0, event_price - radius),
                   min(len(company.prices), event_price + radius + 1)):
        lines.append(f"Day {i - event_price}: ${company.prices[i]:.2f}")

    lines.append("")
    lines.append("Abnormal Returns around earnings date:")
    ar = company.abnormal_returns
    for i in range(max(0, offset - radius), min(len(ar), offset + radius + 1)):
        lines.append(f"Day {i - offset}: {ar[i] * 100:.4f}%")
    return "\n".join(lines)


def render_group(group: Group, metric: str = "caar", offset: int = DAY_OFFSET) -> str:
    """Tabulate a group's AAR or CAAR by relative day, in percent.

    Raises:
        ValueError: If metric is not "aar" or "caar".
    """
    metric = metric.lower()
    if metric not in ("aar", "caar"):
        raise ValueError(f"Invalid metric {metric!r}. Must be 'aar' or 'caar'.")
    values = group.caar if metric == "caar" else group.aar
    name = metric.upper()

    lines = [
        f"===== {group.label} Group {name} =====",
        f"Number of stocks: {len(group)}",
        "",
        f"Day\t{name}",
    ]
    for i, v in enumerate(values):
        lines.append(f"{i - offset}\t{v * 100:.6f}%")
    return "\n".join(lines)
