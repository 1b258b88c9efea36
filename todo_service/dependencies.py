from bson import ObjectId
from fastapi import HTTPException

from todo_service.exceptions import TodoNotFoundException, UserNotFoundException


def to_object_id(value: str, not_found: type[HTTPException]) -> ObjectId:
    # A string that can't be an ObjectId can't name a stored document.
    if not ObjectId.is_valid(value):
        raise not_found()
    return ObjectId(value)


def todo_object_id(id: str) -> ObjectId:
    return to_object_id(id, TodoNotFoundException)


def user_object_id(id: str) -> ObjectId:
    return to_object_id(id, UserNotFoundException)
