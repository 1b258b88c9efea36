"""
Todo Service
Handles: todo CRUD, user registration/login, account updates
Port: 3000 (PORT)

- Passwords are bcrypt hashed, never stored or compared in plain text
- SECRET_KEY comes from the environment; startup fails without it
- Email/username uniqueness lives in MongoDB unique indexes
- Every error is returned as {"message": ...}
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_service import database, todos, users
from todo_service.config import LOG_LEVEL, PORT
from todo_service.exceptions import register_exception_handlers
from todo_service.models import HealthResponse

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [todo-service] %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.init_db(database.get_db())
    logger.info("Started on port %s", PORT)
    yield
    database.close_db()
    logger.info("Stopped")


app = FastAPI(title="Todo Service", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(todos.router, prefix="/todos", tags=["Todos"])
app.include_router(users.router, prefix="/user", tags=["Users"])


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": "todo"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("todo_service.main:app", host="0.0.0.0", port=PORT)
