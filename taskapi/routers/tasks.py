from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Response

from taskapi.dependencies import get_current_user_id, get_task_store
from taskapi.schemas.task import TaskCreate, TaskOut, TaskUpdate
from taskapi.stores.base import TaskStore

# every route here requires a valid bearer token; the dependency runs before
# the store dependency so a rejected request never touches the database
router = APIRouter(prefix="/api/tasks", tags=["tasks"], dependencies=[Depends(get_current_user_id)])

# ids are 32-bit INTEGER primary keys
MAX_TASK_ID = 2**31 - 1

TaskID = Annotated[int, Path(gt=0, le=MAX_TASK_ID, description="Task ID")]


@router.post("", response_model=TaskOut, status_code=201)
def create_task(task: TaskCreate, store: TaskStore = Depends(get_task_store)):
    return store.create(task.title, task.description)


@router.get("", response_model=List[TaskOut])
def list_tasks(store: TaskStore = Depends(get_task_store)):
    return store.get_all()


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: TaskID, store: TaskStore = Depends(get_task_store)):
    return store.get_by_id(task_id)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task: TaskUpdate, task_id: TaskID, store: TaskStore = Depends(get_task_store)):
    return store.update(task_id, task.changes())


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: TaskID, store: TaskStore = Depends(get_task_store)):
    store.delete(task_id)
    return Response(status_code=204)
