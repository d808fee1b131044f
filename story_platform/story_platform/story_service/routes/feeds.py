"""
Feed routes - story listing for signed-in users.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..config import Settings, get_settings
from ..dependencies import get_current_user_id, get_story_store
from ..errors import FeedNotFound, NotFoundError
from ..schemas import StoryOut
from ..store import SQLAlchemyStoryStore

router = APIRouter(prefix="/feeds", tags=["feeds"], dependencies=[Depends(get_current_user_id)])


@router.get("", response_model=List[StoryOut])
def get_feeds(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of stories to return"),
    offset: int = Query(0, ge=0, description="Number of stories to skip"),
    stories: SQLAlchemyStoryStore = Depends(get_story_store),
    settings: Settings = Depends(get_settings),
):
    """Newest stories first."""
    return stories.list_stories(limit or settings.FEED_PAGE_LIMIT, offset)


@router.get("/{feed_id}", response_model=StoryOut)
def get_feed(feed_id: str, stories: SQLAlchemyStoryStore = Depends(get_story_store)):
    try:
        return stories.find_by_id(feed_id)
    except NotFoundError as exc:
        raise FeedNotFound() from exc
