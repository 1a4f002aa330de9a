from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.dependencies import get_db, valid_user_id
from taskboard.models.task import Task as TaskModel
from taskboard.models.user import User as UserModel, PLACEHOLDER_PASSWORD_HASH
from taskboard.schemas.user import UserCreate, UserResponse, UserUpdate
from taskboard.utils.errors import query_guard, DUPLICATE_EMAIL

router = APIRouter(prefix="/api/users", tags=["users"])

# password_hash is never projected
user_columns = (
    UserModel.id,
    UserModel.username.label("name"),
    UserModel.email,
    UserModel.created_at,
    UserModel.updated_at,
)


@router.get("", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to fetch users"):
        result = await db.execute(
            select(*user_columns).order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        return [dict(row) for row in result.mappings()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int = Depends(valid_user_id), db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to fetch user"):
        result = await db.execute(select(*user_columns).where(UserModel.id == user_id))
        user = result.mappings().first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return dict(user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate, db: AsyncSession = Depends(get_db)):
    new_user = UserModel(
        username=user.name,
        email=user.email,
        password_hash=PLACEHOLDER_PASSWORD_HASH,
    )
    with query_guard("Failed to create user", duplicate_message=DUPLICATE_EMAIL):
        db.add(new_user)
        await db.commit()

    return {
        "id": new_user.id,
        "name": user.name,
        "email": user.email,
        "message": "User created successfully",
    }


@router.put("/{user_id}")
async def update_user(
    user_update: UserUpdate,
    user_id: int = Depends(valid_user_id),
    db: AsyncSession = Depends(get_db),
):
    stmt = (
        update(UserModel)
        .where(UserModel.id == user_id)
        .values(**user_update.changes(), updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    with query_guard("Failed to update user", duplicate_message=DUPLICATE_EMAIL):
        result = await db.execute(stmt)
        await db.commit()

    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User updated successfully"}


@router.delete("/{user_id}")
async def delete_user(user_id: int = Depends(valid_user_id), db: AsyncSession = Depends(get_db)):
    # Tasks first, then the user, all-or-nothing
    with query_guard("Failed to delete user"):
        async with db.begin():
            await db.execute(
                delete(TaskModel)
                .where(TaskModel.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(
                delete(UserModel)
                .where(UserModel.id == user_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise HTTPException(status_code=404, detail="User not found")

    return {"message": "User and associated tasks deleted successfully"}
