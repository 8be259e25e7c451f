import json

import httpx
import pytest

from resourcekit import ConfigurationError, HttpAdapter, TransportError
from resourcekit.config import AdapterSettings


def make_adapter(handler, host="https://foo.com", **kwargs) -> HttpAdapter:
    return HttpAdapter(host=host, transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.unit
class TestHttpAdapterConstruction:

    def test_defaults(self):
        adapter = HttpAdapter()

        assert adapter.host == ""
        assert adapter.namespace == ""
        assert adapter.headers == {"content-type": "application/json"}

    def test_with_values(self):
        adapter = HttpAdapter(host="foo.com", namespace="/v2", headers={"boo": "baz"})

        assert adapter.host == "foo.com"
        assert adapter.namespace == "/v2"
        assert adapter.headers == {"content-type": "application/json", "boo": "baz"}

    def test_from_settings_with_overrides(self):
        settings = AdapterSettings(host="https://a.com", namespace="/v1", timeout=3)

        adapter = HttpAdapter.from_settings(settings, namespace="/v2")

        assert adapter.host == "https://a.com"
        assert adapter.namespace == "/v2"
        assert adapter.timeout == 3


@pytest.mark.unit
@pytest.mark.asyncio
class TestHttpAdapterRequest:

    async def test_resolves_normalized_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["headers"] = dict(request.headers)
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"foo": "bar"},
                headers={"x-powered-by": "Rails", "abc": "def"},
            )

        adapter = make_adapter(
            handler,
            host="https://foo.com",
            namespace="/v1",
            headers={"authorization": "xxx"},
        )

        response = await adapter.request("POST", "/bar", {"create": "foo_bar"})

        assert seen["url"] == "https://foo.com/v1/bar"
        assert seen["method"] == "POST"
        assert seen["headers"]["authorization"] == "xxx"
        assert seen["headers"]["content-type"] == "application/json"
        assert seen["body"] == {"create": "foo_bar"}
        assert response.status == 200
        assert response.status_text == "OK"
        assert response.headers["x-powered-by"] == "Rails"
        assert response.headers["abc"] == "def"
        assert response.data == {"foo": "bar"}

    async def test_rejects_non_2xx_with_same_shape(self):
        errors = {"errors": [{"code": "blank"}]}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json=errors)

        adapter = make_adapter(handler, host="https://foo.com")

        with pytest.raises(TransportError) as exc_info:
            await adapter.patch("/bar/1", {"data": {}})

        assert exc_info.value.status == 422
        assert exc_info.value.data == errors

    async def test_non_json_success_body_has_no_data(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        response = await make_adapter(handler).get("/bar")

        assert response.status == 200
        assert response.data is None

    async def test_empty_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        response = await make_adapter(handler).delete("/bar/1")

        assert response.status == 204
        assert response.data is None

    async def test_non_json_failure_body_still_rejects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(TransportError) as exc_info:
            await make_adapter(handler).get("/bar")

        assert exc_info.value.status == 500
        assert exc_info.value.data is None

    async def test_network_failure_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Network Down", request=request)

        with pytest.raises(TransportError) as exc_info:
            await make_adapter(handler).get("/bar")

        assert exc_info.value.status == 0
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.parametrize("verb", ["get", "delete"])
    async def test_bodiless_verbs(self, verb):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["content"] = request.content
            return httpx.Response(200, json={})

        await getattr(make_adapter(handler), verb)("/bar")

        assert seen["method"] == verb.upper()
        assert seen["content"] == b""

    async def test_put(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            return httpx.Response(200, json={})

        await make_adapter(handler).put("/bar", {"a": 1})

        assert seen["method"] == "PUT"

    async def test_shared_client(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": True})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with HttpAdapter(host="https://foo.com", client=client) as adapter:
            response = await adapter.get("/bar")

        assert response.data == {"ok": True}
        assert client.is_closed

    async def test_missing_host_raises_configuration_error(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(ConfigurationError, match="no host"):
            await make_adapter(handler, host="").get("/bar")

        assert calls == []
