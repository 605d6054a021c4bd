"""Typed views over the upstream API payloads the adapters consume."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubRepo(BaseModel):
    id: int
    name: str
    full_name: str
    description: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: datetime
    updated_at: datetime
    pushed_at: datetime | None = None
    language: str | None = None
    topics: list[str] = Field(default_factory=list)


class GitHubUser(BaseModel):
    id: int
    login: str
    name: str | None = None
    company: str | None = None
    blog: str | None = None
    location: str | None = None
    email: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: datetime


class GitHubCommitAuthor(BaseModel):
    name: str | None = None
    email: str | None = None
    date: datetime


class GitHubCommitDetail(BaseModel):
    author: GitHubCommitAuthor
    message: str = ""


class GitHubCommit(BaseModel):
    sha: str
    commit: GitHubCommitDetail

    @property
    def authored_at(self) -> datetime:
        return self.commit.author.date


class ProductHuntTopic(BaseModel):
    name: str


class ProductHuntPost(BaseModel):
    id: str
    name: str
    slug: str | None = None
    tagline: str = ""
    description: str | None = None
    votes_count: int = 0
    comments_count: int = 0
    created_at: datetime
    featured_at: datetime | None = None
    maker_inside: bool = False
    topics: list[ProductHuntTopic] = Field(default_factory=list)

    @property
    def topic_names(self) -> list[str]:
        return [topic.name for topic in self.topics]
