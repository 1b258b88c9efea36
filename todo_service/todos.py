"""
Todo routes — list, create, fetch, replace, complete and delete todo items.
A store call that returns nothing is a 404; any other failure is a 500
carrying the raw error text.
"""

import logging

from bson import ObjectId
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from todo_service.database import TODOS, get_db
from todo_service.dependencies import todo_object_id
from todo_service.exceptions import ServerException, TodoNotFoundException
from todo_service.models import (
    MessageResponse,
    TodoComplete,
    TodoCreate,
    TodoList,
    TodoOut,
    TodoReplace,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _update(db: AsyncIOMotorDatabase, todo_id: ObjectId, changes: dict) -> dict:
    try:
        todo = await db[TODOS].find_one_and_update(
            {"_id": todo_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
    except Exception as e:
        raise ServerException(str(e))
    if not todo:
        raise TodoNotFoundException()
    return todo


@router.get("", response_model=TodoList)
async def list_todos(db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        return await db[TODOS].find().to_list(length=None)
    except Exception as e:
        raise ServerException(str(e))


@router.post("", response_model=TodoOut, status_code=201)
async def create_todo(todo: TodoCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    doc = todo.model_dump(by_alias=True)
    try:
        result = await db[TODOS].insert_one(doc)
    except Exception as e:
        raise ServerException(str(e))
    doc["_id"] = result.inserted_id
    logger.info("Created todo %s", result.inserted_id)
    return doc


@router.get("/{id}", response_model=TodoOut)
async def get_todo(
    todo_id: ObjectId = Depends(todo_object_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    try:
        todo = await db[TODOS].find_one({"_id": todo_id})
    except Exception as e:
        raise ServerException(str(e))
    if not todo:
        raise TodoNotFoundException()
    return todo


@router.put("/{id}", response_model=TodoOut)
async def replace_todo(
    todo: TodoReplace,
    todo_id: ObjectId = Depends(todo_object_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    # isComplete keeps its stored value when the caller leaves it out
    return await _update(db, todo_id, todo.model_dump(by_alias=True, exclude_none=True))


@router.put("/{id}/complete", response_model=TodoOut)
async def complete_todo(
    todo: TodoComplete,
    todo_id: ObjectId = Depends(todo_object_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    return await _update(db, todo_id, todo.model_dump(by_alias=True))


@router.delete("/{id}", response_model=MessageResponse)
async def delete_todo(
    todo_id: ObjectId = Depends(todo_object_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    try:
        todo = await db[TODOS].find_one_and_delete({"_id": todo_id})
    except Exception as e:
        raise ServerException(str(e))
    if not todo:
        raise TodoNotFoundException()
    logger.info("Deleted todo %s", todo_id)
    return {"message": "Todo deleted successfully"}
