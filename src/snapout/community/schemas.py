"""Pydantic schemas for community endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PostCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)


class CommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class ReportRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class CommentResponse(BaseModel):
    id: str
    post_id: int
    author_id: int
    author_name: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    id: int
    author_id: int | None = None
    author_name: str
    title: str
    content: str
    likes: int
    comment_count: int
    is_featured: bool
    streak: int
    created_at: datetime
    liked_by_me: bool = False

    model_config = {"from_attributes": True}


class PostDetailResponse(PostResponse):
    comments: list[CommentResponse] = []


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    filter: str
    limit: int


class LikeResponse(BaseModel):
    post_id: int
    liked: bool
    likes: int


class BlockResponse(BaseModel):
    blocked_user_id: int
    status: str = "blocked"


class ReportResponse(BaseModel):
    id: int
    reported_user_id: int
    status: str
