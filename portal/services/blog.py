"""
Blog posts.

Posts are stored newest first as one JSON list under ``portal_blog_posts``.
"""
import re
import time
from datetime import datetime, timezone
from typing import Any, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

POSTS_KEY = "portal_blog_posts"
POST_TYPES = ("text", "video")
EDITABLE_FIELDS = ("title", "content", "type", "tags", "video_url")

_YOUTUBE = re.compile(r"(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/)([\w-]+)")
_VIMEO = re.compile(r"vimeo\.com/(\d+)")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_post(title: str, content: str, type: str, video_url: str) -> None:
    if not title or not content:
        raise ValueError("Please fill in all required fields")
    if type not in POST_TYPES:
        raise ValueError(f"Unknown post type: {type}")
    if type == "video" and not video_url:
        raise ValueError("Please provide a video URL")


def _clean_tags(tags: Optional[List[str]]) -> List[str]:
    return [t.strip() for t in (tags or []) if t.strip()]


def embed_url(url: str) -> str:
    """Player URL for YouTube and Vimeo links; other URLs are returned as is."""
    match = _YOUTUBE.search(url)
    if match:
        return f"https://www.youtube.com/embed/{match.group(1)}"
    match = _VIMEO.search(url)
    if match:
        return f"https://player.vimeo.com/video/{match.group(1)}"
    return url


class Post(BaseModel):
    id: int
    title: str
    content: str
    type: str = "text"
    tags: List[str] = Field(default_factory=list)
    video_url: str = ""
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)
    views: int = 0

    def preview(self, length: int = 150) -> str:
        if len(self.content) > length:
            return self.content[:length] + "..."
        return self.content


class BlogService:
    def __init__(self, store):
        self.store = store

    def get_posts(self) -> List[Post]:
        raw = self.store.get(POSTS_KEY, []) or []
        try:
            return [Post.model_validate(item) for item in raw]
        except (ValidationError, TypeError) as e:
            logger.error(f"Error loading posts: {e}")
            return []

    def save_posts(self, posts: List[Post]) -> None:
        self.store.set(POSTS_KEY, [post.model_dump() for post in posts])

    def create_post(
        self,
        title: str,
        content: str,
        type: str = "text",
        tags: Optional[List[str]] = None,
        video_url: str = "",
    ) -> Post:
        """
        Create a post and put it at the top of the list.

        Raises:
            ValueError: Missing title/content, unknown type, or a video post
                without a URL.
        """
        title, content, video_url = title.strip(), content.strip(), video_url.strip()
        _check_post(title, content, type, video_url)

        posts = self.get_posts()
        post_id = int(time.time() * 1000)
        if posts and post_id <= max(p.id for p in posts):
            post_id = max(p.id for p in posts) + 1

        post = Post(
            id=post_id,
            title=title,
            content=content,
            type=type,
            tags=_clean_tags(tags),
            video_url=video_url,
        )
        posts.insert(0, post)
        self.save_posts(posts)
        logger.info(f"Post created: {post.id}")
        return post

    def get_post(self, post_id: int) -> Optional[Post]:
        return next((p for p in self.get_posts() if p.id == int(post_id)), None)

    def update_post(self, post_id: int, **updates: Any) -> Optional[Post]:
        """
        Apply ``updates`` to one post and stamp ``updated_at``.

        Edits to the editable fields go through the same checks as
        create_post.

        Returns:
            The updated post, or None when no post has ``post_id``.

        Raises:
            ValueError: The edited post would be invalid.
        """
        posts = self.get_posts()
        updated = None
        for index, post in enumerate(posts):
            if post.id != int(post_id):
                continue
            for key in ("title", "content", "video_url"):
                if key in updates:
                    updates[key] = updates[key].strip()
            if "tags" in updates:
                updates["tags"] = _clean_tags(updates["tags"])
            updated = post.model_copy(update={**updates, "updated_at": _now()})
            if any(key in updates for key in EDITABLE_FIELDS):
                _check_post(updated.title, updated.content, updated.type, updated.video_url)
            posts[index] = updated
        if updated is not None:
            self.save_posts(posts)
            logger.debug(f"Post updated: {updated.id}")
        return updated

    def delete_post(self, post_id: int) -> bool:
        posts = self.get_posts()
        remaining = [p for p in posts if p.id != int(post_id)]
        if len(remaining) == len(posts):
            return False
        self.save_posts(remaining)
        return True

    def increment_views(self, post_id: int) -> Optional[Post]:
        post = self.get_post(post_id)
        if post is None:
            return None
        return self.update_post(post_id, views=post.views + 1)

    def filter_posts(self, type: str = "all") -> List[Post]:
        posts = self.get_posts()
        if type == "all":
            return posts
        return [p for p in posts if p.type == type]
