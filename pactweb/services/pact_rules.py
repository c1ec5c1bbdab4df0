from datetime import tzinfo

from pactweb.schemas.activity import Activity
from pactweb.schemas.activity_log import UserProgress
from pactweb.schemas.pact import Pact, PactCardOut, PactOut, PactProgressOut
from pactweb.services.formatting import format_currency, format_date, format_date_range

NO_DESCRIPTION = "No description available"


def plural(count: int, word: str, plural_word: str | None = None) -> str:
    return word if count == 1 else (plural_word or f"{word}s")


def remaining_slots(pact: Pact, activities: list[Activity]) -> int:
    return max(0, pact.max_activities_per_user - len(activities))


def can_add_activity(pact: Pact, activities: list[Activity]) -> bool:
    return len(activities) < pact.max_activities_per_user


def can_confirm_join(pact: Pact, activities: list[Activity]) -> bool:
    return len(activities) == pact.max_activities_per_user


def action_label(pact: Pact, activities: list[Activity]) -> str:
    if can_confirm_join(pact, activities):
        return "Confirm Join"
    return "Add Activities" if pact.max_activities_per_user > 1 else "Add Activity"


def slots_message(pact: Pact, activities: list[Activity]) -> str:
    if can_confirm_join(pact, activities):
        return "You have added the maximum number of activities."
    left = remaining_slots(pact, activities)
    return f"You can add {left} more {plural(left, 'activity', 'activities')}."


def activity_limit_message(pact: Pact) -> str:
    return f"You've reached the maximum number of activities ({pact.max_activities_per_user}) for this pact."


def progress_map(progress: UserProgress | None) -> dict[str, PactProgressOut]:
    if progress is None:
        return {}
    return {
        item.pact_id: PactProgressOut(target_days=item.target_days, activity_days=item.activity_days)
        for item in progress.results
    }


def split_by_membership(pacts: list[Pact], user_id: str | None) -> tuple[list[Pact], list[Pact]]:
    """(pacts the user takes part in, pacts left to explore), keeping backend order."""
    mine = [p for p in pacts if p.has_participant(user_id)]
    explore = [p for p in pacts if not p.has_participant(user_id)]
    return mine, explore


def to_card(pact: Pact, href: str, progress: PactProgressOut | None, tz: tzinfo) -> PactCardOut:
    count = len(pact.participants)
    return PactCardOut(
        id=pact.id,
        title=pact.title,
        description=pact.description or NO_DESCRIPTION,
        href=href,
        participants_label=f"{count} {plural(count, 'Participant')}",
        days_per_week_label=f"{pact.min_days_per_week} days/week",
        date_range_label=(
            format_date_range(pact.start_date, pact.end_date, tz) if (pact.start_date or pact.end_date) else None
        ),
        skip_fine_label=format_currency(pact.skip_fine),
        leave_fine_label=format_currency(pact.leave_fine),
        progress=progress,
    )


def to_pact_out(pact: Pact, tz: tzinfo) -> PactOut:
    return PactOut(
        id=pact.id,
        title=pact.title,
        description=pact.description,
        status=pact.status,
        min_days_per_week=pact.min_days_per_week,
        max_activities_per_user=pact.max_activities_per_user,
        participant_count=len(pact.participants),
        start_date_label=format_date(pact.start_date, tz) if pact.start_date else None,
        skip_fine_label=format_currency(pact.skip_fine),
        leave_fine_label=format_currency(pact.leave_fine),
    )
