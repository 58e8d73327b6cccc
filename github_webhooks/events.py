"""Webhook event names and payload models.

Payloads are kept as plain dicts by the dispatcher. The models here are used
by handlers built with ``on(..., model=...)`` that want a validated object;
they only declare the fields this package or its examples read and keep the
rest as extras.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

WebhookEventName = str
WebhookEvent = dict[str, Any]


class EventName(str, Enum):
    CHECK_RUN = "check_run"
    CHECK_SUITE = "check_suite"
    CREATE = "create"
    DELETE = "delete"
    DEPLOYMENT = "deployment"
    DEPLOYMENT_STATUS = "deployment_status"
    INSTALLATION = "installation"
    INSTALLATION_REPOSITORIES = "installation_repositories"
    ISSUE_COMMENT = "issue_comment"
    ISSUES = "issues"
    LABEL = "label"
    PING = "ping"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PUSH = "push"
    RELEASE = "release"
    REPOSITORY = "repository"
    STATUS = "status"
    WORKFLOW_JOB = "workflow_job"
    WORKFLOW_RUN = "workflow_run"


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class InstallationRef(_Payload):
    id: int


class User(_Payload):
    login: str
    id: int | None = None


class Repository(_Payload):
    id: int | None = None
    full_name: str


class Issue(_Payload):
    number: int
    title: str = ""
    user: User | None = None


class Comment(_Payload):
    id: int | None = None
    body: str = ""
    user: User


class PingEvent(_Payload):
    zen: str = ""
    hook_id: int | None = None
    installation: InstallationRef | None = None


class PushEvent(_Payload):
    ref: str
    before: str = ""
    after: str = ""
    commits: list[dict[str, Any]] = []
    repository: Repository | None = None
    installation: InstallationRef | None = None


class IssueCommentEvent(_Payload):
    action: str
    issue: Issue
    comment: Comment
    repository: Repository | None = None
    installation: InstallationRef | None = None


def installation_id_of(payload: WebhookEvent) -> int | None:
    """Return ``payload.installation.id`` if the delivery carries one."""
    installation = payload.get("installation")
    if not isinstance(installation, dict):
        return None
    installation_id = installation.get("id")
    if isinstance(installation_id, int) and not isinstance(installation_id, bool):
        return installation_id
    return None
