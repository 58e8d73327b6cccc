"""Tests for the event handler builder."""

from dataclasses import dataclass, replace

import pytest

from github_webhooks.context import Context
from github_webhooks.events import EventName, IssueCommentEvent
from github_webhooks.handlers import build_on, on


@pytest.fixture
def context():
    return Context(installation_id=42)


@pytest.fixture
def comment_payload():
    return {
        "action": "created",
        "issue": {"number": 7, "title": "Bug"},
        "comment": {"body": "LGTM", "user": {"login": "octocat"}},
        "installation": {"id": 42},
    }


class TestOn:
    async def test_matching_event_returns_new_context(self, context):
        handler = on("issue_comment", lambda payload, ctx: replace(ctx, token="t"))
        result = await handler("issue_comment", {}, context)
        assert result == Context(token="t", installation_id=42)

    async def test_matching_event_without_return_keeps_context(self, context):
        calls = []
        handler = on("issue_comment", lambda payload, ctx: calls.append(payload))

        result = await handler("issue_comment", {"a": 1}, context)

        assert result is context
        assert calls == [{"a": 1}]

    async def test_other_event_not_invoked(self, context):
        calls = []
        handler = on("issue_comment", lambda payload, ctx: calls.append(payload))

        result = await handler("push", {}, context)

        assert result is None
        assert calls == []

    async def test_async_handler_awaited(self, context):
        async def handler(payload, ctx):
            return replace(ctx, token=payload["token"])

        result = await on("push", handler)("push", {"token": "abc"}, context)
        assert result.token == "abc"

    async def test_enum_target(self, context):
        calls = []
        handler = on(EventName.PUSH, lambda payload, ctx: calls.append(payload))
        await handler("push", {}, context)
        assert len(calls) == 1

    async def test_model_validation(self, context, comment_payload):
        received = []
        handler = on(
            "issue_comment",
            lambda event, ctx: received.append(event),
            model=IssueCommentEvent,
        )

        await handler("issue_comment", comment_payload, context)

        assert isinstance(received[0], IssueCommentEvent)
        assert received[0].comment.user.login == "octocat"
        assert received[0].issue.number == 7
        assert received[0].installation.id == 42

    async def test_handler_error_propagates(self, context):
        def boom(payload, ctx):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await on("ping", boom)("ping", {}, context)


@dataclass(frozen=True)
class RepoContext(Context):
    repo: str = ""


class TestBuildOn:
    async def test_custom_context(self):
        on_repo = build_on(RepoContext)
        handler = on_repo(
            "push", lambda payload, ctx: replace(ctx, repo=payload["repository"]["full_name"])
        )

        result = await handler("push", {"repository": {"full_name": "org/repo"}}, RepoContext())

        assert result == RepoContext(repo="org/repo")

    def test_rejects_non_context(self):
        with pytest.raises(TypeError):
            build_on(dict)
