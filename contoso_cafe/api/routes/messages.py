"""Bot messaging endpoint.

Accepts one activity per request and answers with every activity the bot
sent during that turn (the "expect replies" delivery mode).
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from contoso_cafe.api.dependencies import get_runtime
from contoso_cafe.core.activity import Activity, ExpectedReplies
from contoso_cafe.core.runtime import BotRuntime
from contoso_cafe.logging_config import get_logger

logger: Any = get_logger(__name__)

router = APIRouter()


@router.post(
    "/messages",
    response_model=ExpectedReplies,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def post_activity(
    activity: Activity,
    runtime: BotRuntime = Depends(get_runtime),
) -> ExpectedReplies:
    """Run one turn for the posted activity.

    Returns:
        The reply activities, in send order.

    Raises:
        HTTPException: 400 if the activity has no conversation id
    """
    if activity.conversation is None or not activity.conversation.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Activity must include conversation.id",
        )

    logger.debug(
        f"Received {activity.type} for conversation {activity.conversation.id}"
    )
    replies = await runtime.process(activity)
    return ExpectedReplies(activities=replies)
