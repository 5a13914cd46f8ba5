"""Comment endpoints for the Beat Market API."""

from fastapi import APIRouter, Query, status

from beat_market.schemas.comment import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
)
from beat_market.services import comments

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/beat/{beat_id}", response_model=CommentListResponse)
def list_comments(
    beat_id: int,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> CommentListResponse:
    result = comments.list_comments(db, beat_id, page=page, limit=limit)
    return CommentListResponse(
        comments=[CommentResponse.model_validate(c) for c in result.items],
        total=result.total,
        page=result.page,
        total_pages=result.total_pages,
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=CommentResponse)
def add_comment(payload: CommentCreate, current_user: CurrentUserDep, db: SessionDep) -> CommentResponse:
    comment = comments.add_comment(db, current_user, payload.beat_id, payload.text)
    return CommentResponse.model_validate(comment)


@router.put("/{comment_id}", response_model=CommentResponse)
def edit_comment(
    comment_id: int,
    payload: CommentUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Edit a comment; allowed for its author, the beat owner and admins."""
    comment = comments.edit_comment(db, current_user, comment_id, payload.text)
    return CommentResponse.model_validate(comment)


@router.delete("/{comment_id}")
def delete_comment(comment_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, str]:
    comments.delete_comment(db, current_user, comment_id)
    return {"status": "deleted"}
