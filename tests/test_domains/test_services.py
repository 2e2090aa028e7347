"""
Tests for the server, key, reset, boot, reverse DNS and vSwitch services
and the ``Robot`` facade.
"""

import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from src.hrobot import Robot
from src.hrobot.core.exceptions import APIError, ConditionCancelledError, ParseError, is_not_found_error
from src.hrobot.core.poller import ConditionPoller, PollConfig
from src.hrobot.domains import (
    BootService,
    KeyService,
    RDNSService,
    ResetService,
    ResetType,
    ServerService,
    VSwitchService,
)

SERVER = {
    "server_ip": "123.123.123.123",
    "server_ipv6_net": "2a01:f48:111:4221::",
    "server_number": 321,
    "server_name": "server1",
    "product": "DS 3000",
    "dc": "NBG1-DC1",
    "traffic": "5 TB",
    "status": "ready",
    "cancelled": False,
    "paid_until": "2010-09-02",
    "ip": ["123.123.123.123"],
    "subnet": None,
}


@pytest.mark.asyncio
class TestServerService:
    async def test_list(self, robot_client, mock_transport):
        mock_transport.add(
            "GET",
            "/server",
            [
                {"server": dict(SERVER, traffic="unlimited")},
                {"server": dict(SERVER, server_number=322, traffic=1099511627776)},
            ],
        )

        servers = await ServerService(robot_client).list()

        assert [s.server_number for s in servers] == [321, 322]
        assert servers[0].traffic.unlimited is True
        assert str(servers[1].traffic) == "1.0 TB"
        assert servers[0].subnet == []

    async def test_get_with_invalid_traffic_is_parse_error(self, robot_client, mock_transport):
        mock_transport.add("GET", "/server/321", {"server": SERVER})

        with pytest.raises(ParseError):
            await ServerService(robot_client).get(321)

    async def test_get_not_found(self, robot_client, mock_transport):
        mock_transport.add(
            "GET",
            "/server/9",
            {"error": {"status": 404, "code": "SERVER_NOT_FOUND", "message": "Server not found"}},
            status_code=404,
        )

        with pytest.raises(APIError) as exc_info:
            await ServerService(robot_client).get(9)

        assert is_not_found_error(exc_info.value)

    async def test_set_name(self, robot_client, mock_transport):
        mock_transport.add("POST", "/server/321", {"server": dict(SERVER, server_name="db 1", traffic="unlimited")})

        server = await ServerService(robot_client).set_name(321, "db 1")

        assert server.server_name == "db 1"
        assert mock_transport.requests_made[0]["body"] == "server_name=db+1"


@pytest.mark.asyncio
class TestKeyService:
    FINGERPRINT = "56:29:99:a4:5d:ed:ac:95:c1:f5:88:82:90:5d:dd:10"

    async def test_list_localizes_timestamps(self, robot_client, mock_transport):
        mock_transport.add(
            "GET",
            "/key",
            [
                {
                    "key": {
                        "name": "key1",
                        "fingerprint": self.FINGERPRINT,
                        "type": "ED25519",
                        "size": 256,
                        "data": "ssh-ed25519 AAAA",
                        "created_at": "2021-12-31 23:59:59",
                    }
                }
            ],
        )

        keys = await KeyService(robot_client).list()

        assert keys[0].size == 256
        assert keys[0].created_at == datetime(2021, 12, 31, 23, 59, 59, tzinfo=ZoneInfo("Europe/Berlin"))

    async def test_fingerprint_is_escaped_in_path(self, robot_client, mock_transport):
        path = "/key/56%3A29%3A99%3Aa4%3A5d%3Aed%3Aac%3A95%3Ac1%3Af5%3A88%3A82%3A90%3A5d%3Add%3A10"
        mock_transport.add("GET", path, {"key": {"name": "key1", "fingerprint": self.FINGERPRINT}})
        mock_transport.add("DELETE", path)

        service = KeyService(robot_client)
        key = await service.get(self.FINGERPRINT)
        await service.delete(self.FINGERPRINT)

        assert key.created_at is None
        assert [r["method"] for r in mock_transport.requests_made] == ["GET", "DELETE"]

    async def test_create(self, robot_client, mock_transport):
        mock_transport.add("POST", "/key", {"key": {"name": "laptop", "fingerprint": self.FINGERPRINT}})

        key = await KeyService(robot_client).create("laptop", "ssh-ed25519 AAAA")

        assert key.name == "laptop"
        assert mock_transport.requests_made[0]["body"] == "data=ssh-ed25519+AAAA&name=laptop"


@pytest.mark.asyncio
class TestResetService:
    async def test_get_available_types(self, robot_client, mock_transport):
        mock_transport.add(
            "GET",
            "/reset/321",
            {"reset": {"server_ip": "123.123.123.123", "server_number": 321, "type": ["sw", "hw", "man"]}},
        )

        reset = await ResetService(robot_client).get(321)

        assert reset.type == ["sw", "hw", "man"]

    async def test_execute(self, robot_client, mock_transport):
        mock_transport.add("POST", "/reset/321", {"reset": {"server_number": 321, "type": "hw"}})

        reset = await ResetService(robot_client).execute(321, ResetType.HARDWARE)

        assert reset.type == "hw"
        assert mock_transport.requests_made[0]["body"] == "type=hw"


@pytest.mark.asyncio
class TestBootService:
    async def test_get(self, robot_client, mock_transport):
        mock_transport.add(
            "GET",
            "/boot/321",
            {
                "boot": {
                    "rescue": {"server_number": 321, "active": False, "os": ["linux", "vkvm"], "arch": [64]},
                    "linux": {"server_number": 321, "active": False, "dist": ["Debian 12"]},
                    "vnc": None,
                }
            },
        )

        config = await BootService(robot_client).get(321)

        assert config.rescue.os == ["linux", "vkvm"]
        assert config.linux.dist == ["Debian 12"]
        assert config.vnc is None

    async def test_activate_rescue(self, robot_client, mock_transport):
        mock_transport.add(
            "POST",
            "/boot/321/rescue",
            {"rescue": {"server_number": 321, "active": True, "os": "linux", "password": "pw"}},
        )

        rescue = await BootService(robot_client).activate_rescue(321, "linux", 64, ["aa:bb", "cc:dd"])

        assert rescue.active is True
        assert rescue.password == "pw"
        assert mock_transport.requests_made[0]["body"] == (
            "os=linux&arch=64&authorized_key%5B%5D=aa%3Abb&authorized_key%5B%5D=cc%3Add"
        )

    async def test_deactivate_and_last(self, robot_client, mock_transport):
        mock_transport.add("DELETE", "/boot/321/rescue", {"rescue": {"server_number": 321, "active": False}})
        mock_transport.add("GET", "/boot/321/rescue/last", {"rescue": {"server_number": 321, "password": "old"}})

        service = BootService(robot_client)
        await service.deactivate_rescue(321)
        last = await service.get_last_rescue(321)

        assert last.password == "old"

    async def test_activate_linux(self, robot_client, mock_transport):
        mock_transport.add(
            "POST",
            "/boot/321/linux",
            {
                "linux": {
                    "server_number": 321,
                    "dist": "Debian 12 base",
                    "arch": 64,
                    "lang": "en",
                    "active": True,
                    "password": "pw",
                    "authorized_key": None,
                }
            },
        )

        linux = await BootService(robot_client).activate_linux(321, "Debian 12 base", "en", 64, ["aa:bb"])

        assert linux.active is True
        assert linux.dist == "Debian 12 base"
        assert linux.authorized_key == []
        assert mock_transport.requests_made[0]["body"] == (
            "dist=Debian+12+base&arch=64&lang=en&authorized_key%5B%5D=aa%3Abb"
        )

    async def test_activate_vnc_and_deactivate(self, robot_client, mock_transport):
        mock_transport.add(
            "POST",
            "/boot/321/vnc",
            {"vnc": {"server_number": 321, "dist": "Fedora", "lang": "en_US", "active": True, "password": "pw"}},
        )
        mock_transport.add("DELETE", "/boot/321/vnc", {"vnc": {"server_number": 321, "active": False}})
        mock_transport.add("DELETE", "/boot/321/linux", {"linux": {"server_number": 321, "active": False}})

        service = BootService(robot_client)
        vnc = await service.activate_vnc(321, "Fedora", "en_US")
        await service.deactivate_vnc(321)
        await service.deactivate_linux(321)

        assert vnc.password == "pw"
        assert mock_transport.requests_made[0]["body"] == "dist=Fedora&lang=en_US"
        assert [r["method"] for r in mock_transport.requests_made[1:]] == ["DELETE", "DELETE"]


@pytest.mark.asyncio
class TestRDNSService:
    async def test_list_filtered_by_server(self, robot_client, mock_transport):
        mock_transport.add(
            "GET",
            "/rdns?server_ip=1.2.3.4",
            [{"rdns": {"ip": "1.2.3.4", "ptr": "a.example.com"}}],
        )

        entries = await RDNSService(robot_client).list(server_ip="1.2.3.4")

        assert entries[0].ptr == "a.example.com"

    async def test_create_uses_put_and_update_uses_post(self, robot_client, mock_transport):
        mock_transport.add("PUT", "/rdns/1.2.3.4", {"rdns": {"ip": "1.2.3.4", "ptr": "a.example.com"}})
        mock_transport.add("POST", "/rdns/1.2.3.4", {"rdns": {"ip": "1.2.3.4", "ptr": "b.example.com"}})

        service = RDNSService(robot_client)
        created = await service.create("1.2.3.4", "a.example.com")
        updated = await service.update("1.2.3.4", "b.example.com")

        assert (created.ptr, updated.ptr) == ("a.example.com", "b.example.com")
        assert [r["body"] for r in mock_transport.requests_made] == ["ptr=a.example.com", "ptr=b.example.com"]


@pytest.fixture
def vswitch_service(robot_client):
    return VSwitchService(robot_client, ConditionPoller(PollConfig(0.01, 0.02, 4)))


def vswitch_body(*statuses):
    return {
        "id": 4321,
        "name": "vswitch-test",
        "vlan": 4000,
        "cancelled": False,
        "server": [
            {"server_ip": f"10.0.0.{i}", "server_number": i, "status": status}
            for i, status in enumerate(statuses, start=1)
        ],
        "subnet": None,
        "cloud_network": [],
    }


@pytest.mark.asyncio
class TestVSwitchService:
    async def test_list_bare_array(self, vswitch_service, mock_transport):
        mock_transport.add("GET", "/vswitch", [{"id": 1, "name": "a", "vlan": 4000, "cancelled": False}])

        vswitches = await vswitch_service.list()

        assert vswitches[0].vlan == 4000

    async def test_get_bare_resource_with_server_field(self, vswitch_service, mock_transport):
        mock_transport.add("GET", "/vswitch/4321", vswitch_body("ready", "in process"))

        vswitch = await vswitch_service.get(4321)

        assert vswitch.id == 4321
        assert [s.status for s in vswitch.server] == ["ready", "in process"]
        assert vswitch.subnet == []

    async def test_cancel_sends_delete_body(self, vswitch_service, mock_transport):
        mock_transport.add("DELETE", "/vswitch/4321")

        await vswitch_service.cancel(4321)

        request = mock_transport.requests_made[0]
        assert request["body"] == "cancellation_date=now"
        assert request["headers"]["content-type"] == "application/x-www-form-urlencoded"

    async def test_add_and_remove_servers(self, vswitch_service, mock_transport):
        mock_transport.add("POST", "/vswitch/4321/server")
        mock_transport.add("DELETE", "/vswitch/4321/server")

        await vswitch_service.add_servers(4321, ["10.0.0.1", "321"])
        await vswitch_service.remove_servers(4321, ["10.0.0.1"])

        bodies = [(r["method"], r["body"]) for r in mock_transport.requests_made]
        assert bodies == [
            ("POST", "server[]=10.0.0.1&server[]=321"),
            ("DELETE", "server[]=10.0.0.1"),
        ]

    async def test_wait_until_ready(self, vswitch_service, mock_transport):
        mock_transport.responses["GET /vswitch/4321"] = [
            vswitch_body("ready", "in process"),
            vswitch_body("ready", "ready"),
        ]

        result = await vswitch_service.wait_until_ready(4321)

        assert result.attempts == 2

    async def test_wait_until_ready_cancelled(self, vswitch_service, mock_transport):
        mock_transport.add("GET", "/vswitch/4321", vswitch_body("in process"))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(ConditionCancelledError):
            await vswitch_service.wait_until_ready(4321, cancel_event=cancel)

        assert mock_transport.requests_made == []


@pytest.mark.asyncio
class TestRobotFacade:
    async def test_services_share_transport(self, robot_config, mock_transport):
        mock_transport.add("GET", "/server", [{"server": dict(SERVER, traffic="unlimited")}])
        mock_transport.add("GET", "/reset/321", {"reset": {"server_number": 321, "type": ["sw"]}})

        async with Robot(robot_config, transport=mock_transport) as robot:
            servers = await robot.servers.list()
            reset = await robot.reset.get(servers[0].server_number)

            assert robot.firewall.client is robot.client
            assert robot.vswitch.poller is robot.poller
            assert robot.failover.client is robot.client
            assert robot.wol.client is robot.client
            assert robot.poller.config.max_attempts == 5

        assert reset.type == ["sw"]
        assert robot.client.client.is_closed
