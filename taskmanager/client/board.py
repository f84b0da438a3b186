"""Board view state derived from a fetched task list."""

from datetime import date
from typing import Dict, List, Optional

COLUMNS = [
    {"id": "pending", "title": "To Do", "color": "warning"},
    {"id": "in_progress", "title": "In Progress", "color": "primary"},
    {"id": "completed", "title": "Completed", "color": "success"},
]

STATUS_BADGES = {
    "pending": "badge-pending",
    "in_progress": "badge-in-progress",
    "completed": "badge-completed",
}

PRIORITY_BADGES = {
    "low": "badge-low",
    "medium": "badge-medium",
    "high": "badge-high",
}

PRIORITY_COLORS = {
    "low": "text-gray-500",
    "medium": "text-warning-500",
    "high": "text-danger-500",
}


def _due_date(task: dict) -> Optional[date]:
    value = task.get("due_date")
    if not value:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def group_by_status(tasks: List[dict]) -> Dict[str, List[dict]]:
    """Tasks per column, in the order they were fetched. Unknown statuses are dropped."""
    board = {column["id"]: [] for column in COLUMNS}
    for task in tasks:
        if task.get("status") in board:
            board[task["status"]].append(task)
    return board


def is_overdue(task: dict, today: Optional[date] = None) -> bool:
    due = _due_date(task)
    if due is None or task.get("status") == "completed":
        return False
    return due < (today or date.today())


def status_badge(status: str) -> str:
    return STATUS_BADGES.get(status, STATUS_BADGES["pending"])


def priority_badge(priority: str) -> str:
    return PRIORITY_BADGES.get(priority, PRIORITY_BADGES["medium"])


def format_status(status: str) -> str:
    # "in_progress" -> "in progress"
    return status.replace("_", " ")


def priority_color(priority: str) -> str:
    return PRIORITY_COLORS.get(priority, "text-gray-500")


def filter_tasks(tasks: List[dict], status_filter: str = "all") -> List[dict]:
    if status_filter == "all":
        return list(tasks)
    return [task for task in tasks if task.get("status") == status_filter]


def completion_rate(stats: dict) -> Optional[int]:
    """Percentage shown as "% Complete" on the stats cards, None while there are no tasks."""
    total = stats.get("total_tasks") or 0
    if total <= 0:
        return None
    return round(stats.get("completed_tasks", 0) / total * 100)
