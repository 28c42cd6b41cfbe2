"""
Forum payload models.

Typed views of the Discourse JSON endpoints used by the tools:
search.json, latest.json, t/{id}.json and categories.json.
Unknown fields are ignored; missing fields fall back to empty defaults.
"""

import html
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "ForumPost",
    "ForumTopic",
    "ForumUser",
    "ForumCategory",
    "ForumTag",
    "ForumSearchResponse",
    "PostDetail",
    "PostStream",
    "ForumTopicDetail",
    "TopicList",
    "ForumLatestResponse",
    "ForumCategoryDetail",
    "CategoryList",
    "ForumCategoriesResponse",
    "as_utc",
]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ══════════════════════════════════════════════════════════════════════════════
# search.json
# ══════════════════════════════════════════════════════════════════════════════


class ForumPost(_Payload):
    id: int = 0
    name: Optional[str] = ""
    username: Optional[str] = ""
    created_at: Optional[datetime] = None
    like_count: int = 0
    blurb: Optional[str] = ""
    post_number: int = 0
    topic_id: int = 0


class ForumTopic(_Payload):
    id: int = 0
    title: str = ""
    fancy_title: Optional[str] = ""
    slug: str = ""
    posts_count: int = 0
    reply_count: int = 0
    highest_post_number: int = 0
    created_at: Optional[datetime] = None
    last_posted_at: Optional[datetime] = None
    bumped_at: Optional[datetime] = None
    views: int = 0
    like_count: int = 0
    category_id: Optional[int] = None

    @property
    def display_title(self) -> str:
        """Fancy title with HTML entities decoded, else the plain title."""
        if self.fancy_title:
            return html.unescape(self.fancy_title)
        return self.title

    @property
    def last_activity(self) -> Optional[datetime]:
        return as_utc(self.last_posted_at or self.bumped_at or self.created_at)

    @property
    def engagement_score(self) -> int:
        return self.like_count + self.views // 10 + self.reply_count * 2

    def matches_text(self, needle: str) -> bool:
        """Case-insensitive containment against title or fancy title."""
        needle = needle.lower()
        return needle in self.title.lower() or needle in (self.fancy_title or "").lower()


class ForumUser(_Payload):
    id: int = 0
    username: str = ""
    name: Optional[str] = ""


class ForumCategory(_Payload):
    id: int = 0
    name: str = ""
    slug: str = ""


class ForumTag(_Payload):
    id: Optional[int] = None
    name: str = ""
    topic_count: int = 0


class ForumSearchResponse(_Payload):
    posts: list[ForumPost] = Field(default_factory=list)
    topics: list[ForumTopic] = Field(default_factory=list)
    users: list[ForumUser] = Field(default_factory=list)
    categories: list[ForumCategory] = Field(default_factory=list)
    tags: list[ForumTag] = Field(default_factory=list)

    def author_of(self, topic_id: int) -> str:
        """Username of the opening post (post_number 1) of a topic."""
        for post in self.posts:
            if post.topic_id == topic_id and post.post_number == 1 and post.username:
                return post.username
        return "Unknown"


# ══════════════════════════════════════════════════════════════════════════════
# t/{id}.json
# ══════════════════════════════════════════════════════════════════════════════


class PostDetail(_Payload):
    id: int = 0
    username: str = ""
    created_at: Optional[datetime] = None
    cooked: Optional[str] = ""
    post_number: int = 0
    accepted_answer: bool = False


class PostStream(_Payload):
    posts: list[PostDetail] = Field(default_factory=list)


class ForumTopicDetail(_Payload):
    id: int = 0
    title: str = ""
    slug: str = ""
    posts_count: int = 0
    views: int = 0
    like_count: int = 0
    created_at: Optional[datetime] = None
    post_stream: Optional[PostStream] = None

    @property
    def posts(self) -> list[PostDetail]:
        return self.post_stream.posts if self.post_stream else []


# ══════════════════════════════════════════════════════════════════════════════
# latest.json / categories.json
# ══════════════════════════════════════════════════════════════════════════════


class TopicList(_Payload):
    topics: list[ForumTopic] = Field(default_factory=list)


class ForumLatestResponse(_Payload):
    topic_list: Optional[TopicList] = None


class ForumCategoryDetail(_Payload):
    id: int = 0
    name: Optional[str] = ""
    slug: str = ""
    description: Optional[str] = ""
    topic_count: int = 0
    position: int = 0


class CategoryList(_Payload):
    categories: list[ForumCategoryDetail] = Field(default_factory=list)


class ForumCategoriesResponse(_Payload):
    category_list: Optional[CategoryList] = None
