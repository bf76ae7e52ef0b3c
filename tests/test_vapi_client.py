"""Tests for the Vapi workflow client, using httpx's mock transport."""

import httpx
import pytest

from src.errors import CollaboratorError
from src.integrations.vapi import VapiWorkflowClient


def make_client(handler, api_key="test-key") -> VapiWorkflowClient:
    return VapiWorkflowClient(
        api_key=api_key,
        api_base="https://api.vapi.test",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestCreateWorkflow:
    @pytest.mark.asyncio
    async def test_posts_spec_with_bearer_auth(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(201, json={"id": "wf_abc"})

        workflow_id = await make_client(handler).create_workflow({"name": "x"})

        assert workflow_id == "wf_abc"
        assert seen["url"] == "https://api.vapi.test/workflow"
        assert seen["auth"] == "Bearer test-key"

    @pytest.mark.asyncio
    async def test_error_status(self):
        client = make_client(lambda request: httpx.Response(401))
        with pytest.raises(CollaboratorError, match="Workflow creation failed: 401 Unauthorized"):
            await client.create_workflow({})

    @pytest.mark.asyncio
    async def test_missing_id(self):
        client = make_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(CollaboratorError, match="no id"):
            await client.create_workflow({})

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(CollaboratorError, match="timed out"):
            await make_client(handler).create_workflow({})

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": "x"}), api_key="")
        with pytest.raises(CollaboratorError, match="not configured"):
            await client.create_workflow({})

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(CollaboratorError, match="invalid response body"):
            await client.create_workflow({})

    @pytest.mark.asyncio
    async def test_list_body(self):
        client = make_client(lambda request: httpx.Response(200, json=[{"id": "wf_1"}]))
        with pytest.raises(CollaboratorError, match="invalid response body"):
            await client.create_workflow({})
