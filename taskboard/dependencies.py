from fastapi import Depends, Request

from taskboard.database import Database
from taskboard.utils.validation import parse_positive_id


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)):
    async with database.sessionmaker() as db:
        try:
            yield db
        finally:
            await db.close()


def valid_user_id(user_id: str) -> int:
    return parse_positive_id(user_id, "Invalid user ID", not_found_message="User not found")


def valid_task_id(task_id: str) -> int:
    return parse_positive_id(task_id, "Invalid task ID", not_found_message="Task not found")
