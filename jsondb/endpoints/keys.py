from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, JsonValue

from jsondb.async_database import AsyncJsonDatabase
from jsondb.errors import KeyNotFound

router = APIRouter(tags=["keys"])
logger = logging.getLogger(__name__)

Operation = Literal["add", "subtract", "multiply", "divide", "mod", "power"]


class ValueBody(BaseModel):
    value: JsonValue = None


class OperandBody(BaseModel):
    # Left loose so the database does the numeric check and reports InvalidValue.
    operand: JsonValue = None


class BackupBody(BaseModel):
    path: str | None = None


def get_database(request: Request) -> AsyncJsonDatabase:
    return request.app.state.database


@router.get("/keys")
async def list_keys(db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    return {"keys": db.get_all_keys()}


@router.delete("/keys")
async def delete_prefixed(prefix: str, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    removed = await db.delete_each(prefix)
    return {"removed": removed}


@router.get("/keys/{key}")
async def get_key(key: str, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    if not db.has(key):
        raise KeyNotFound()
    return {"key": key, "value": db.fetch(key)}


@router.put("/keys/{key}")
async def put_key(key: str, body: ValueBody, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    await db.set(key, body.value)
    return {"key": key, "value": db.fetch(key)}


@router.delete("/keys/{key}")
async def delete_key(key: str, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    await db.remove(key)
    return {"key": key, "deleted": True}


@router.get("/keys/{key}/items/{index}")
async def get_item(key: str, index: int, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    return {"key": key, "index": index, "value": db.array_fetch(key, index)}


@router.post("/keys/{key}/items")
async def push_item(key: str, body: ValueBody, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    await db.push(key, body.value)
    return {"key": key, "value": db.fetch(key)}


@router.delete("/keys/{key}/items")
async def delete_items(key: str, body: ValueBody, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    await db.delete(key, body.value)
    return {"key": key, "value": db.fetch(key)}


@router.get("/keys/{key}/fields/{sub_key}")
async def get_field(key: str, sub_key: str, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    return {"key": key, "field": sub_key, "value": db.object_fetch(key, sub_key)}


@router.delete("/keys/{key}/fields/{sub_key}")
async def delete_field(key: str, sub_key: str, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    await db.delete_key(key, sub_key)
    return {"key": key, "value": db.fetch(key)}


@router.post("/keys/{key}/{operation}")
async def apply_operation(
    key: str,
    operation: Operation,
    body: OperandBody,
    db: AsyncJsonDatabase = Depends(get_database),
) -> dict[str, Any]:
    result = await getattr(db, operation)(key, body.operand)
    logger.debug("%s %s %r -> %r", operation, key, body.operand, result)
    return {"key": key, "value": result}


@router.post("/backup")
async def create_backup(body: BackupBody, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    path: Path = await db.create_backup(body.path)
    return {"path": str(path)}


@router.post("/restore")
async def restore_backup(body: BackupBody, db: AsyncJsonDatabase = Depends(get_database)) -> dict[str, Any]:
    await db.restore_backup(body.path)
    return {"keys": db.get_all_keys()}
