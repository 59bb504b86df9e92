from ..results import MonteCarloSummary


def generate_insights(summary: MonteCarloSummary, success_target: float = 85.0) -> str:
    """Return a short plain-language outlook for a Monte Carlo summary."""
    success = summary.success_rate
    median_final = summary.median_final_balance
    last_age = summary.ages[-1] + 1 if summary.ages else "end"

    if success >= success_target:
        outlook = "high chance of success"
    elif success >= 60.0:
        outlook = "moderate chance of success"
    else:
        outlook = "plan may be at risk"

    text = (
        f"Your plan has a {outlook} ({success:.1f}% of {summary.run_count} paths). "
        f"Median projected balance at age {last_age} is ${median_final:,.0f}."
    )
    if summary.ruin_ages:
        ages = summary.ruin_ages
        typical = ages[len(ages) // 2]
        text += f" Paths that run out of money typically do so around age {typical}."
    return text
