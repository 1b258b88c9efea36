"""
User routes — registration, login, deletion and account updates.

Passwords are bcrypt hashed on every write and only ever compared through
bcrypt. Email and username uniqueness is enforced by unique indexes; a
rejected insert/update is reported as a 400.
"""

import logging
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from todo_service.database import USERS, ensure_indexes, get_db
from todo_service.dependencies import to_object_id, user_object_id
from todo_service.exceptions import (
    EmailTakenException,
    InvalidCredentialsException,
    ServerException,
    UsernameTakenException,
    UserNotFoundException,
)
from todo_service.models import (
    LoginResponse,
    MessageResponse,
    PasswordUpdate,
    RegisterResponse,
    UserDetailsUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)
from todo_service.security import check_password_async, create_token, hash_password_async

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_users_db(db: AsyncIOMotorDatabase = Depends(get_db)) -> AsyncIOMotorDatabase:
    """Uniqueness lives in the unique indexes, so user writes wait until they exist."""
    if not await ensure_indexes(db):
        logger.error("Refusing user write, unique indexes are missing")
        raise ServerException("User indexes are unavailable, try again later")
    return db


async def _duplicate_key_exception(
    db: AsyncIOMotorDatabase, e: DuplicateKeyError, changes: dict, user_id: Optional[ObjectId] = None
) -> HTTPException:
    """Work out which unique field a rejected write collided on."""
    key_pattern = (e.details or {}).get("keyPattern") or {}
    if "email" in key_pattern:
        return EmailTakenException()
    if "username" in key_pattern:
        return UsernameTakenException()
    # Not every server/driver reports keyPattern; fall back to lookups.
    others = {"_id": {"$ne": user_id}} if user_id is not None else {}
    try:
        if changes.get("email") is not None and await db[USERS].find_one(
            {"email": changes["email"], **others}, {"_id": 1}
        ):
            return EmailTakenException()
        if changes.get("username") is not None and await db[USERS].find_one(
            {"username": changes["username"], **others}, {"_id": 1}
        ):
            return UsernameTakenException()
    except Exception as lookup_error:
        logger.error("Duplicate key lookup failed: %s", lookup_error)
        return ServerException(str(lookup_error))
    logger.error("Unclassified duplicate key error: %s", e)
    return ServerException(str(e))


async def _update_user(db: AsyncIOMotorDatabase, user_id: ObjectId, changes: dict) -> dict:
    try:
        if not changes:
            user = await db[USERS].find_one({"_id": user_id})
        else:
            user = await db[USERS].find_one_and_update(
                {"_id": user_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
    except DuplicateKeyError as e:
        raise await _duplicate_key_exception(db, e, changes, user_id)
    except Exception as e:
        raise ServerException(str(e))
    if not user:
        raise UserNotFoundException()
    return user


@router.post("/register", response_model=RegisterResponse)
async def register(user: UserRegister, db: AsyncIOMotorDatabase = Depends(get_users_db)):
    try:
        password_hash = await hash_password_async(user.password)
        doc = {"username": user.username, "email": user.email, "password": password_hash}
        result = await db[USERS].insert_one(doc)
        doc["_id"] = result.inserted_id
        token = create_token(user.email, user.username, str(result.inserted_id))
    except DuplicateKeyError as e:
        logger.info("Registration rejected, duplicate key for %s", user.email)
        raise await _duplicate_key_exception(db, e, {"email": user.email, "username": user.username})
    except Exception as e:
        raise ServerException(str(e))

    logger.info("Registered user %s", doc["_id"])
    return {"user": doc, "message": "User created successfully", "token": token}


@router.post("/login", response_model=LoginResponse)
async def login(credentials: UserLogin, db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        found = await db[USERS].find_one({"email": credentials.email})
        # Same message for unknown email and wrong password.
        if not found or not await check_password_async(credentials.password, found["password"]):
            raise InvalidCredentialsException()
        user_id = str(found["_id"])
        token = create_token(found["email"], found["username"], user_id)
    except HTTPException:
        raise
    except Exception as e:
        raise ServerException(str(e))

    return {
        "message": "Logged in successfully",
        "token": token,
        "user": {"username": found["username"], "email": found["email"], "id": user_id},
    }


@router.delete("/delete/{id}", response_model=MessageResponse)
async def delete_user(
    user_id: ObjectId = Depends(user_object_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    try:
        user = await db[USERS].find_one_and_delete({"_id": user_id})
    except Exception as e:
        raise ServerException(str(e))
    if not user:
        raise UserNotFoundException()
    logger.info("Deleted user %s", user_id)
    return {"message": "User deleted successfully"}


@router.post("/update/account-details", response_model=UserResponse)
async def update_account_details(body: UserDetailsUpdate, db: AsyncIOMotorDatabase = Depends(get_users_db)):
    user_id = to_object_id(body.id, UserNotFoundException)
    user = await _update_user(db, user_id, body.data.model_dump(exclude_none=True))
    return {"message": "User details updated successfully", "user": user}


@router.post("/update/password", response_model=UserResponse)
async def update_password(body: PasswordUpdate, db: AsyncIOMotorDatabase = Depends(get_db)):
    user_id = to_object_id(body.id, UserNotFoundException)
    try:
        password_hash = await hash_password_async(body.password)
    except Exception as e:
        raise ServerException(str(e))
    user = await _update_user(db, user_id, {"password": password_hash})
    return {"message": "Password updated successfully", "user": user}
