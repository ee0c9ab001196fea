"""Tests for the ePortal functional areas."""

import pytest

from shared.models import ToolCallResult

from conftest import StubEPortal


class TestServersDomain:
    """Tests for the servers domain."""

    def setup_method(self):
        """Set up test fixtures."""
        from domains.servers import ServersDomain

        self.domain = ServersDomain()

    def test_tool_definitions(self):
        """Test that tools are properly defined."""
        names = [t.name for t in self.domain.tools]

        assert names == [
            "list_servers", "register_host", "unregister_host",
            "bulk_unregister_hosts", "set_server_tags",
        ]
        assert all(t.domain == "servers" for t in self.domain.tools)

    @pytest.mark.asyncio
    async def test_list_servers_with_filters(self, make_client):
        """Test list filters are sent as query parameters."""
        stub = StubEPortal(payload={"servers": [{"id": "s1", "hostname": "web-1"}]})

        result = await self.domain.handle(
            "list_servers", {"feed": "main", "limit": 5}, make_client(stub)
        )

        params = stub.last_request.url.params
        assert params["feed"] == "main"
        assert params["limit"] == "5"
        assert "Found 1 servers" in result.content[0].text
        assert "web-1" in result.content[0].text

    @pytest.mark.asyncio
    async def test_list_servers_empty(self, make_client):
        """Test an empty server list is reported plainly."""
        stub = StubEPortal(payload=[])

        result = await self.domain.handle("list_servers", {}, make_client(stub))

        assert result.content[0].text == "No servers found."

    @pytest.mark.asyncio
    async def test_register_host(self, make_client):
        """Test registering a host posts its details."""
        stub = StubEPortal(payload={"server_id": "abc"})

        result = await self.domain.handle(
            "register_host",
            {"key": "K1", "hostname": "web-1", "tags": ["prod"]},
            make_client(stub)
        )

        assert stub.last_request.method == "POST"
        assert stub.last_request.url.path == "/admin/api/servers"
        assert stub.last_json() == {"key": "K1", "hostname": "web-1", "tags": ["prod"]}
        assert "Host web-1 registered." in result.content[0].text
        assert "abc" in result.content[0].text

    @pytest.mark.asyncio
    async def test_unregister_host_escapes_id(self, make_client):
        """Test the server ID is escaped into the path."""
        stub = StubEPortal(status_code=204)

        result = await self.domain.handle(
            "unregister_host", {"server_id": "a/b"}, make_client(stub)
        )

        assert stub.last_request.method == "DELETE"
        assert stub.last_request.url.raw_path == b"/admin/api/servers/a%2Fb"
        assert result.content[0].text == "Server a/b unregistered."

    @pytest.mark.asyncio
    async def test_bulk_unregister(self, make_client):
        """Test bulk unregistration sends every ID in one request."""
        stub = StubEPortal(payload={"unregistered": 3})

        result = await self.domain.handle(
            "bulk_unregister_hosts", {"server_ids": ["a", "b", "c"]}, make_client(stub)
        )

        assert len(stub.requests) == 1
        assert stub.last_json() == {"server_ids": ["a", "b", "c"]}
        assert "Unregistered 3 servers." in result.content[0].text

    @pytest.mark.asyncio
    async def test_set_and_clear_tags(self, make_client):
        """Test tags are replaced with PUT, and an empty list clears them."""
        stub = StubEPortal(status_code=204)
        client = make_client(stub)

        result = await self.domain.handle(
            "set_server_tags", {"server_id": "s1", "tags": ["prod", "eu"]}, client
        )
        assert stub.last_request.method == "PUT"
        assert stub.last_request.url.path == "/admin/api/servers/s1/tags"
        assert stub.last_json() == {"tags": ["prod", "eu"]}
        assert "prod, eu" in result.content[0].text

        result = await self.domain.handle("set_server_tags", {"server_id": "s1", "tags": []}, client)
        assert result.content[0].text == "Tags of server s1 cleared."

    @pytest.mark.asyncio
    async def test_unknown_action(self, make_client):
        """Test a tool from another area is refused."""
        with pytest.raises(KeyError):
            await self.domain.handle("list_feeds", {}, make_client(StubEPortal()))


class TestFeedsDomain:
    """Tests for the feeds domain."""

    def setup_method(self):
        """Set up test fixtures."""
        from domains.feeds import FeedsDomain

        self.domain = FeedsDomain()

    @pytest.mark.asyncio
    async def test_list_feeds(self, make_client):
        """Test listing feeds."""
        stub = StubEPortal(payload={"result": [{"name": "main"}, {"name": "test"}]})

        result = await self.domain.handle("list_feeds", {}, make_client(stub))

        assert stub.last_request.url.path == "/admin/api/feeds"
        assert "Found 2 feeds" in result.content[0].text

    @pytest.mark.asyncio
    async def test_create_feed(self, make_client):
        """Test creating a feed posts the validated arguments."""
        from mcp_server.registry import build_registry

        registry, _ = build_registry()
        arguments = registry.validate_input("create_feed", {"name": "staging", "channel": "test"})
        stub = StubEPortal(payload={"name": "staging"})

        result = await self.domain.handle("create_feed", arguments, make_client(stub))

        assert stub.last_json() == {"name": "staging", "auto": False, "channel": "test"}
        assert "Feed staging created." in result.content[0].text

    @pytest.mark.asyncio
    async def test_delete_feed(self, make_client):
        """Test deleting a feed by name."""
        stub = StubEPortal(status_code=204)

        result = await self.domain.handle("delete_feed", {"name": "staging"}, make_client(stub))

        assert stub.last_request.method == "DELETE"
        assert stub.last_request.url.path == "/admin/api/feeds/staging"
        assert result.content[0].text == "Feed staging deleted."


class TestKeysDomain:
    """Tests for the keys domain."""

    def setup_method(self):
        """Set up test fixtures."""
        from domains.keys import KeysDomain

        self.domain = KeysDomain()

    @pytest.mark.asyncio
    async def test_list_keys_by_feed(self, make_client):
        """Test listing keys filtered by feed."""
        stub = StubEPortal(payload=[{"key": "K1", "feed": "main"}])

        result = await self.domain.handle("list_keys", {"feed": "main"}, make_client(stub))

        assert stub.last_request.url.params["feed"] == "main"
        assert "K1" in result.content[0].text

    @pytest.mark.asyncio
    async def test_create_key(self, make_client):
        """Test creating a key sends only the provided fields."""
        stub = StubEPortal(payload={"key": "generated-key"})

        result = await self.domain.handle(
            "create_key",
            {"description": "web fleet", "server_limit": 10},
            make_client(stub)
        )

        assert stub.last_json() == {"description": "web fleet", "server_limit": 10}
        assert "generated-key" in result.content[0].text

    @pytest.mark.asyncio
    async def test_delete_key(self, make_client):
        """Test deleting a key."""
        stub = StubEPortal(payload="")

        result = await self.domain.handle("delete_key", {"key": "K1"}, make_client(stub))

        assert stub.last_request.url.path == "/admin/api/keys/K1"
        assert result.content[0].text.startswith("Key K1 deleted.")


class TestPatchsetsDomain:
    """Tests for the patchsets domain."""

    def setup_method(self):
        """Set up test fixtures."""
        from domains.patchsets import PatchsetsDomain

        self.domain = PatchsetsDomain()

    def test_action_enum(self):
        """Test manage_patchsets restricts the action to known values."""
        tool = next(t for t in self.domain.tools if t.name == "manage_patchsets")

        assert tool.input_schema["properties"]["action"]["enum"] == [
            "enable", "disable", "enable-upto", "undeploy-downto"
        ]
        assert set(tool.input_schema["required"]) == {"patchset", "action"}

    @pytest.mark.asyncio
    async def test_list_patchsets(self, make_client):
        """Test listing patchsets for a product."""
        stub = StubEPortal(payload=[{"patchset": "K20240101_01", "status": "enabled"}])

        result = await self.domain.handle("list_patchsets", {"product": "kernel"}, make_client(stub))

        assert stub.last_request.url.params["product"] == "kernel"
        assert "K20240101_01" in result.content[0].text

    @pytest.mark.asyncio
    async def test_manage_patchsets(self, make_client):
        """Test changing a patchset's deployment state."""
        stub = StubEPortal(payload={"status": "ok"})

        result = await self.domain.handle(
            "manage_patchsets",
            {"patchset": "K20240101_01", "action": "enable-upto", "feed": "main"},
            make_client(stub)
        )

        assert stub.last_request.url.path == "/admin/api/patchsets/manage"
        assert stub.last_json() == {
            "patchset": "K20240101_01", "action": "enable-upto", "feed": "main"
        }
        assert "enable-upto applied" in result.content[0].text


class TestUsersDomain:
    """Tests for the users domain."""

    @pytest.mark.asyncio
    async def test_list_users(self, make_client):
        """Test listing users."""
        from domains.users import UsersDomain

        stub = StubEPortal(payload={"users": [{"username": "admin"}]})

        result = await UsersDomain().handle("list_users", {}, make_client(stub))

        assert isinstance(result, ToolCallResult)
        assert not result.is_error
        assert "admin" in result.content[0].text


class TestFormatting:
    """Tests for response rendering helpers."""

    def test_extract_items(self):
        """Test list envelopes are unwrapped."""
        from domains.base import extract_items

        assert extract_items([1, 2]) == [1, 2]
        assert extract_items({"data": [1]}) == [1]
        assert extract_items({"feeds": [1]}, "feeds") == [1]
        assert extract_items({"id": 1}) == {"id": 1}

    def test_non_list_payload_kept_whole(self):
        """Test a non-list response to a list tool is rendered in full."""
        from domains.base import list_result

        result = list_result({"total": 0, "note": "paged"}, "servers")

        assert '"note": "paged"' in result.content[0].text
