"""
Tests for the GitHub GraphQL client.

Requests are served by ``httpx.MockTransport`` handlers, so nothing leaves
the process.
"""

import json
from unittest.mock import Mock

import httpx
import pytest

from depsync.core.config.models import ProjectLocator, ResolveConfig, SyncConfig
from depsync.core.exceptions import GitHubClientError
from depsync.core.github import GitHubClient, ProjectGateway, RetryPolicy
from depsync.core.github.queries import GRAPHQL_FEATURES


class Recorder:
    """MockTransport handler returning canned responses and recording requests."""

    def __init__(self, *responses: httpx.Response | dict | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return httpx.Response(200, json=response)
        return response

    def payload(self, index: int) -> dict:
        return json.loads(self.requests[index].content)


def make_client(recorder: Recorder, max_retries: int = 0) -> GitHubClient:
    return GitHubClient(
        "test-token",
        retry=RetryPolicy(max_retries=max_retries, sleep=Mock()),
        transport=httpx.MockTransport(recorder),
    )


def items_page(nodes: list[dict], has_next: bool, cursor: str | None) -> dict:
    return {
        "data": {
            "organization": {
                "projectV2": {
                    "items": {
                        "nodes": nodes,
                        "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
                    }
                }
            }
        }
    }


class TestGraphQL:
    """Tests for request construction and error handling."""

    def test_sends_bearer_token_and_json_body(self):
        recorder = Recorder({"data": {"viewer": {"login": "me"}}})
        with make_client(recorder) as client:
            data = client.graphql("query { viewer { login } }", {"a": 1})

        assert data == {"viewer": {"login": "me"}}
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.github.com/graphql"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert recorder.payload(0) == {"query": "query { viewer { login } }", "variables": {"a": 1}}

    def test_graphql_errors_raise(self):
        recorder = Recorder(
            {"data": None, "errors": [{"message": "Bad field"}, {"message": "Also bad"}]}
        )
        with make_client(recorder) as client:
            with pytest.raises(GitHubClientError, match="Bad field, Also bad"):
                client.graphql("query { x }")

    def test_http_error_is_wrapped(self):
        recorder = Recorder(httpx.Response(401, json={"message": "Bad credentials"}))
        with make_client(recorder) as client:
            with pytest.raises(GitHubClientError) as exc_info:
                client.graphql("query { x }")

        assert exc_info.value.status_code == 401
        assert exc_info.value.retryable is False
        assert "Bad credentials" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    def test_transient_failure_is_retried(self):
        recorder = Recorder(httpx.Response(502, text="Bad gateway"), {"data": {"ok": True}})
        with make_client(recorder, max_retries=2) as client:
            assert client.graphql("query { ok }") == {"ok": True}
        assert len(recorder.requests) == 2

    def test_timeout_is_wrapped(self):
        recorder = Recorder(httpx.ReadTimeout("too slow"))
        with make_client(recorder) as client:
            with pytest.raises(GitHubClientError, match="timed out") as exc_info:
                client.graphql("query { x }")
        assert exc_info.value.retryable is True

    def test_non_json_body(self):
        recorder = Recorder(httpx.Response(200, text="<html>"))
        with make_client(recorder) as client:
            with pytest.raises(GitHubClientError, match="Failed to parse"):
                client.graphql("query { x }")

    def test_from_config(self):
        config = SyncConfig(
            token="cfg-token",
            project=ProjectLocator(org="o", number=1, url="https://github.com/orgs/o/projects/1"),
            graphql_url="https://ghe.example.com/api/graphql",
            max_retries=5,
        )
        recorder = Recorder({"data": {}})
        with GitHubClient.from_config(config, transport=httpx.MockTransport(recorder)) as client:
            client.graphql("query { x }")
            assert client.retry.max_retries == 5

        request = recorder.requests[0]
        assert str(request.url) == "https://ghe.example.com/api/graphql"
        assert request.headers["Authorization"] == "Bearer cfg-token"

    def test_from_resolve_config_applies_timeout_and_retries(self):
        config = ResolveConfig(token="cfg-token", timeout=5, max_retries=0)
        with GitHubClient.from_config(config, transport=httpx.MockTransport(Recorder())) as client:
            assert client.retry.max_retries == 0
            assert client._http.timeout.read == 5.0
            assert client.graphql_url == "https://api.github.com/graphql"

    def test_implements_gateway_protocol(self):
        with make_client(Recorder()) as client:
            assert isinstance(client, ProjectGateway)


class TestGatewayOperations:
    """Tests for the ProjectGateway methods."""

    def test_get_project_schema(self):
        recorder = Recorder(
            {
                "data": {
                    "organization": {
                        "projectV2": {
                            "id": "project-id",
                            "fields": {
                                "nodes": [
                                    {
                                        "id": "field-id",
                                        "name": "Initiative",
                                        "options": [{"id": "option-id", "name": "Option"}],
                                        "__typename": "ProjectV2SingleSelectField",
                                    }
                                ]
                            },
                        }
                    }
                }
            }
        )
        with make_client(recorder) as client:
            schema = client.get_project_schema("my-org", 1)

        assert schema is not None
        assert schema.project_id == "project-id"
        assert schema.fields[0].is_single_select
        assert recorder.payload(0)["variables"] == {"org": "my-org", "number": 1}

    def test_get_project_schema_missing_project(self):
        recorder = Recorder({"data": {"organization": {"projectV2": None}}})
        with make_client(recorder) as client:
            assert client.get_project_schema("my-org", 99) is None

    def test_list_project_items_paginates(self):
        recorder = Recorder(
            items_page(
                [{"id": "item-1", "fieldValues": {"nodes": []}, "content": {"id": "issue-1"}}],
                has_next=True,
                cursor="cursor-1",
            ),
            items_page(
                [{"id": "item-2", "fieldValues": {"nodes": []}, "content": {}}],
                has_next=False,
                cursor=None,
            ),
        )
        with make_client(recorder) as client:
            items = list(client.list_project_items("my-org", 1))

        assert [item.item_id for item in items] == ["item-1", "item-2"]
        assert items[0].record_id == "issue-1"
        assert items[1].record_id is None
        assert recorder.payload(0)["variables"]["after"] is None
        assert recorder.payload(1)["variables"]["after"] == "cursor-1"

    def test_list_project_items_is_lazy(self):
        recorder = Recorder(
            items_page([{"id": "item-1"}], has_next=True, cursor="c1"),
            items_page([{"id": "item-2"}], has_next=False, cursor=None),
        )
        with make_client(recorder) as client:
            iterator = client.list_project_items("my-org", 1)
            assert next(iterator).item_id == "item-1"
            assert len(recorder.requests) == 1

    def test_get_record_parent_uses_feature_header(self):
        recorder = Recorder(
            {
                "data": {
                    "node": {
                        "id": "issue-1",
                        "parent": {"id": "issue-0", "issueType": {"id": "t", "name": "Initiative"}},
                    }
                }
            }
        )
        with make_client(recorder) as client:
            link = client.get_record_parent("issue-1")

        assert link.parent_id == "issue-0"
        assert link.parent_type == "Initiative"
        assert recorder.requests[0].headers["GraphQL-Features"] == GRAPHQL_FEATURES
        assert recorder.payload(0)["variables"] == {"id": "issue-1"}

    def test_set_item_field_option(self):
        recorder = Recorder(
            {"data": {"updateProjectV2ItemFieldValue": {"projectV2Item": {"id": "item-1"}}}}
        )
        with make_client(recorder) as client:
            result = client.set_item_field_option("project-id", "item-1", "field-id", "option-id")

        assert result == "item-1"
        payload = recorder.payload(0)
        assert "updateProjectV2ItemFieldValue" in payload["query"]
        assert payload["variables"] == {
            "projectId": "project-id",
            "itemId": "item-1",
            "fieldId": "field-id",
            "value": {"singleSelectOptionId": "option-id"},
        }
