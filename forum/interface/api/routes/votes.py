"""Vote routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, status
from pydantic import BaseModel

from forum.application.usecase.vote import (
    ApplyVoteRequest,
    ApplyVoteResponse,
    ApplyVoteUseCase,
)
from forum.domain.error import DomainError
from forum.domain.service import JWTService
from forum.domain.value import VotableType
from forum.interface.api.auth import require_user_id
from forum.interface.error import to_http_exception

router = APIRouter(tags=["votes"], route_class=DishkaRoute)


class VoteBody(BaseModel):
    """Vote request body."""

    direction: str  # "up" or "down"


async def _apply_vote(
    votable_type: VotableType,
    votable_id: str,
    body: VoteBody,
    use_case: ApplyVoteUseCase,
    user_id: str,
) -> ApplyVoteResponse:
    try:
        request = ApplyVoteRequest(
            votable_type=votable_type,
            votable_id=votable_id,
            user_id=user_id,
            direction=body.direction,
        )
        return await use_case.execute(request)
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        # Malformed UUID in the path
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/threads/{thread_id}/vote", response_model=ApplyVoteResponse)
async def vote_thread(
    thread_id: str,
    body: VoteBody,
    apply_vote_use_case: FromDishka[ApplyVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ApplyVoteResponse:
    """Vote on a thread.

    Voting the same direction again retracts the vote; voting the other
    direction flips it. Requires authentication.

    Args:
        thread_id: Thread UUID
        body: Vote direction
        apply_vote_use_case: Apply vote use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Thread counters after the vote

    Raises:
        HTTPException: 401, 400 (bad direction), 404 (no thread), 409 (contention)
    """
    user_id = require_user_id(jwt_service, auth_token, "vote")
    return await _apply_vote(
        VotableType.THREAD, thread_id, body, apply_vote_use_case, user_id
    )


@router.post("/comments/{comment_id}/vote", response_model=ApplyVoteResponse)
async def vote_comment(
    comment_id: str,
    body: VoteBody,
    apply_vote_use_case: FromDishka[ApplyVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ApplyVoteResponse:
    """Vote on a comment.

    Same toggle semantics as thread votes. Requires authentication.

    Raises:
        HTTPException: 401, 400 (bad direction), 404 (no comment), 409 (contention)
    """
    user_id = require_user_id(jwt_service, auth_token, "vote")
    return await _apply_vote(
        VotableType.COMMENT, comment_id, body, apply_vote_use_case, user_id
    )
