from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.dependencies import get_db, valid_task_id
from taskboard.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from taskboard.services import tasks as task_service
from taskboard.utils.errors import query_guard
from taskboard.utils.validation import parse_id_filter

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    user_id: str | None = None,
    completed: str | None = None,
    priority: str | None = None,
    db: AsyncSession = Depends(get_db)
):
    owner_id = None
    if user_id:
        owner_id = parse_id_filter(user_id, "Invalid user ID")
        if owner_id is None:
            return []
    # Only the literal "true" selects completed tasks
    completed_flag = completed == "true" if completed is not None else None

    with query_guard("Failed to fetch tasks"):
        return await task_service.list_tasks(
            db, user_id=owner_id, completed=completed_flag, priority=priority
        )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int = Depends(valid_task_id), db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to fetch task"):
        task = await task_service.get_task_by_id(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to validate user"):
        owner_found = await task_service.user_exists(db, task_data.user_id)
    if not owner_found:
        raise HTTPException(status_code=400, detail="User not found")

    with query_guard("Failed to create task"):
        task = await task_service.create_task(db, task_data)

    return {
        "id": task.id,
        "title": task_data.title,
        "description": task_data.description,
        "priority": task_data.priority,
        "user_id": task_data.user_id,
        "completed": False,
        "message": "Task created successfully",
    }


@router.put("/{task_id}")
async def update_task(
    update_data: TaskUpdate,
    task_id: int = Depends(valid_task_id),
    db: AsyncSession = Depends(get_db),
):
    with query_guard("Failed to update task"):
        affected = await task_service.update_task(db, task_id, update_data.changes())
    if affected == 0:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Task updated successfully"}


@router.delete("/{task_id}")
async def delete_task(task_id: int = Depends(valid_task_id), db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to delete task"):
        affected = await task_service.delete_task(db, task_id)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Task deleted successfully"}
