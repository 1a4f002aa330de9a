from sqlalchemy import case, func, select, true, false
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.utils.validation import completion_rate, VALID_PRIORITIES


def _sum_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def _count_of(model, *criteria):
    query = select(func.count()).select_from(model)
    if criteria:
        query = query.where(*criteria)
    return query.scalar_subquery()


async def user_stats(db: AsyncSession, user_id: int) -> dict:
    """Aggregate one user's tasks in a single query."""
    columns = [
        func.count(Task.id).label("total_tasks"),
        _sum_where(Task.completed == true()).label("completed_tasks"),
        _sum_where(Task.completed == false()).label("pending_tasks"),
    ]
    for priority in reversed(VALID_PRIORITIES):
        columns.append(_sum_where(Task.priority == priority).label(f"{priority}_priority_tasks"))

    row = (await db.execute(select(*columns).where(Task.user_id == user_id))).one()
    stats = {key: int(value or 0) for key, value in row._mapping.items()}

    return {
        "user_id": user_id,
        **stats,
        "completion_rate": completion_rate(stats["completed_tasks"], stats["total_tasks"]),
    }


async def overall_stats(db: AsyncSession) -> dict:
    columns = [
        _count_of(User).label("total_users"),
        _count_of(Task).label("total_tasks"),
        _count_of(Task, Task.completed == true()).label("completed_tasks"),
        _count_of(Task, Task.completed == false()).label("pending_tasks"),
    ]
    for priority in reversed(VALID_PRIORITIES):
        columns.append(_count_of(Task, Task.priority == priority).label(f"{priority}_priority_tasks"))

    row = (await db.execute(select(*columns))).one()
    stats = {key: int(value or 0) for key, value in row._mapping.items()}
    stats["completion_rate"] = completion_rate(stats["completed_tasks"], stats["total_tasks"])
    return stats
