from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.schemas.task import TaskCreate
from taskboard.utils.validation import id_in_range


def _task_with_username():
    return select(
        Task.id, Task.title, Task.description, Task.priority, Task.completed,
        Task.user_id, Task.created_at, Task.updated_at, User.username
    ).outerjoin(User, Task.user_id == User.id)


async def list_tasks(
    db: AsyncSession,
    user_id: int | None = None,
    completed: bool | None = None,
    priority: str | None = None,
):
    """Filters are AND-ed; a filter left as None is not applied."""
    query = _task_with_username()

    if user_id is not None:
        query = query.where(Task.user_id == user_id)
    if completed is not None:
        query = query.where(Task.completed == completed)
    if priority:
        query = query.where(Task.priority == priority)

    query = query.order_by(Task.created_at.desc(), Task.id.desc())
    result = await db.execute(query)
    return [dict(row) for row in result.mappings()]


async def get_task_by_id(db: AsyncSession, task_id: int) -> dict | None:
    result = await db.execute(_task_with_username().where(Task.id == task_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def user_exists(db: AsyncSession, user_id: int) -> bool:
    if not id_in_range(user_id):
        return False
    result = await db.execute(select(User.id).where(User.id == user_id))
    return result.scalar_one_or_none() is not None


async def create_task(db: AsyncSession, task_data: TaskCreate) -> Task:
    new_task = Task(
        title=task_data.title,
        description=task_data.description,
        priority=task_data.priority,
        user_id=task_data.user_id,
        completed=False,
    )
    db.add(new_task)
    await db.commit()
    return new_task


async def update_task(db: AsyncSession, task_id: int, changes: dict) -> int:
    """Write only the supplied columns and refresh updated_at; returns rows affected."""
    stmt = (
        update(Task)
        .where(Task.id == task_id)
        .values(**changes, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.commit()
    return result.rowcount


async def delete_task(db: AsyncSession, task_id: int) -> int:
    result = await db.execute(
        delete(Task).where(Task.id == task_id).execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount
