"""
Models / account.py
Request/response models for `/auth`. The password hash never leaves the store.
"""
from pydantic import BaseModel


class CredentialsIn(BaseModel):
    username: str
    password: str


class AccountOut(BaseModel):
    id: str
    username: str
