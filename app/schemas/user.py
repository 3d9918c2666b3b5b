"""Pydantic schemas for users kept by the storage layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UserCreate(BaseModel):
    username: str
    password: str


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    password: str
