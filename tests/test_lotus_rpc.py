"""Lotus JSON-RPC client and adapters against a local fake Lotus server."""

from __future__ import annotations

import pytest
from aiohttp import web
from multiformats import CID

from provider_market.errors import ConfigError, RemoteError
from provider_market.lotus import (
    LotusChainService,
    LotusMarketService,
    LotusRPCClient,
    parse_api_info,
)
from tests.factories import PROPOSAL_CID, make_deal, make_lotus_ask

FAKE_PORT = 9234
FAKE_URL = f"http://127.0.0.1:{FAKE_PORT}/rpc/v0"
TOKEN = "test-token"


class FakeLotus:
    """Records JSON-RPC requests and answers from a method → result table."""

    def __init__(self) -> None:
        self.results: dict = {
            "Filecoin.ChainHead": {"Cids": [], "Blocks": [], "Height": 4242},
            "Filecoin.ActorAddress": "f01000",
            "Filecoin.ActorSectorSize": 34359738368,
            "Filecoin.MarketGetAsk": make_lotus_ask(),
            "Filecoin.MarketSetAsk": None,
            "Filecoin.DealsSetAcceptingStorageDeals": None,
            "Filecoin.DealsImportData": None,
            "Filecoin.MarketListIncompleteDeals": [make_deal()],
        }
        self.errors: dict[str, str] = {}
        self.status = 200
        self.requests: list[dict] = []
        self.auth_headers: list[str | None] = []

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append(body)
        self.auth_headers.append(request.headers.get("Authorization"))
        method = body["method"]
        if method in self.errors:
            return web.json_response(
                {"jsonrpc": "2.0", "id": body["id"],
                 "error": {"code": 1, "message": self.errors[method]}},
                status=self.status,
            )
        if self.status != 200:
            return web.Response(status=self.status, text="gateway exploded")
        return web.json_response(
            {"jsonrpc": "2.0", "id": body["id"], "result": self.results.get(method)},
        )


@pytest.fixture
async def fake_lotus():
    fake = FakeLotus()
    app = web.Application()
    app.router.add_post("/rpc/v0", fake.handle)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", FAKE_PORT)
    await site.start()
    yield fake
    await runner.cleanup()


@pytest.fixture
def rpc():
    return LotusRPCClient(FAKE_URL, TOKEN, timeout=5)


# ── API info parsing ──────────────────────────────────────────────


def test_parse_api_info_ip4():
    url, token = parse_api_info("eyJhbGci.abc:/ip4/127.0.0.1/tcp/2345/http")
    assert url == "http://127.0.0.1:2345/rpc/v0"
    assert token == "eyJhbGci.abc"


def test_parse_api_info_ip6_and_dns():
    assert parse_api_info("t:/ip6/::1/tcp/1234/http")[0] == "http://[::1]:1234/rpc/v0"
    assert parse_api_info("t:/dns/lotus.local/tcp/443/https")[0] == "https://lotus.local:443/rpc/v0"


def test_parse_api_info_without_token():
    assert parse_api_info("/ip4/10.0.0.2/tcp/2345/http") == ("http://10.0.0.2:2345/rpc/v0", "")


@pytest.mark.parametrize("info", ["token:", "token:http://x", "t:/ip4/1.2.3.4/udp/1", "t:/unix/sock/tcp/1"])
def test_parse_api_info_malformed(info):
    with pytest.raises(ConfigError):
        parse_api_info(info)


# ── Transport ─────────────────────────────────────────────────────


async def test_call_sends_jsonrpc_envelope(fake_lotus, rpc):
    await rpc.call("ActorSectorSize", "f01000")

    req = fake_lotus.requests[0]
    assert req["jsonrpc"] == "2.0"
    assert req["method"] == "Filecoin.ActorSectorSize"
    assert req["params"] == ["f01000"]
    assert fake_lotus.auth_headers[0] == f"Bearer {TOKEN}"


async def test_call_without_token_sends_no_auth(fake_lotus):
    await LotusRPCClient(FAKE_URL).call("ActorAddress")
    assert fake_lotus.auth_headers[0] is None


async def test_call_rpc_error_verbatim(fake_lotus, rpc):
    fake_lotus.errors["Filecoin.ActorAddress"] = "missing permission to invoke 'ActorAddress'"

    with pytest.raises(RemoteError) as exc_info:
        await rpc.call("ActorAddress")
    assert exc_info.value.method == "Filecoin.ActorAddress"
    assert exc_info.value.message == "missing permission to invoke 'ActorAddress'"


async def test_call_rpc_error_with_500_status(fake_lotus, rpc):
    fake_lotus.status = 500
    fake_lotus.errors["Filecoin.MarketSetAsk"] = "ask store locked"

    with pytest.raises(RemoteError) as exc_info:
        await rpc.call("MarketSetAsk", "1", 2, 256, 512)
    assert exc_info.value.message == "ask store locked"


async def test_call_http_error(fake_lotus, rpc):
    fake_lotus.status = 502
    with pytest.raises(RemoteError) as exc_info:
        await rpc.call("ChainHead")
    assert "HTTP 502" in str(exc_info.value)


async def test_call_connection_refused():
    rpc = LotusRPCClient("http://127.0.0.1:9/rpc/v0", timeout=2)
    with pytest.raises(RemoteError):
        await rpc.call("ChainHead")


# ── Adapters ──────────────────────────────────────────────────────


async def test_chain_service(fake_lotus, rpc):
    chain = LotusChainService(full_node=rpc, miner=rpc)

    assert await chain.current_height() == 4242
    address = await chain.provider_address()
    assert address == "f01000"
    assert await chain.sector_capacity(address) == 32 << 30


async def test_market_get_ask(fake_lotus, rpc):
    ask = await LotusMarketService(rpc).get_ask()

    assert ask is not None
    assert ask.price == 500_000_000
    assert ask.min_piece_size == 256
    assert ask.max_piece_size == 32 << 30
    assert ask.expiry == 103690
    assert ask.seq_no == 2


async def test_market_get_ask_none(fake_lotus, rpc):
    fake_lotus.results["Filecoin.MarketGetAsk"] = None
    assert await LotusMarketService(rpc).get_ask() is None


async def test_market_get_ask_malformed(fake_lotus, rpc):
    fake_lotus.results["Filecoin.MarketGetAsk"] = {"Ask": {"Price": "5"}}
    with pytest.raises(RemoteError):
        await LotusMarketService(rpc).get_ask()


async def test_market_set_ask_encodes_price_as_string(fake_lotus, rpc):
    await LotusMarketService(rpc).set_ask(5, 103680, 256, 32 << 30)

    req = fake_lotus.requests[-1]
    assert req["method"] == "Filecoin.MarketSetAsk"
    assert req["params"] == ["5", 103680, 256, 32 << 30]


async def test_market_accepting_and_import(fake_lotus, rpc):
    market = LotusMarketService(rpc)

    await market.set_accepting_deals(False)
    await market.import_deal_data(CID.decode(PROPOSAL_CID), "/data/piece.car")

    accept_req, import_req = fake_lotus.requests[-2:]
    assert accept_req["params"] == [False]
    assert import_req["method"] == "Filecoin.DealsImportData"
    assert import_req["params"] == [{"/": PROPOSAL_CID}, "/data/piece.car"]


async def test_market_list_incomplete_deals(fake_lotus, rpc):
    deals = await LotusMarketService(rpc).list_incomplete_deals()
    assert deals == [make_deal()]

    fake_lotus.results["Filecoin.MarketListIncompleteDeals"] = None
    assert await LotusMarketService(rpc).list_incomplete_deals() == []


@pytest.mark.parametrize("size", [None, "lots", True, {"Size": 1}, 0])
async def test_chain_sector_capacity_malformed(fake_lotus, rpc, size):
    fake_lotus.results["Filecoin.ActorSectorSize"] = size
    with pytest.raises(RemoteError) as exc_info:
        await LotusChainService(full_node=rpc, miner=rpc).sector_capacity("f01000")
    assert exc_info.value.method == "Filecoin.ActorSectorSize"


@pytest.mark.parametrize("address", [None, "", 1000])
async def test_chain_provider_address_malformed(fake_lotus, rpc, address):
    fake_lotus.results["Filecoin.ActorAddress"] = address
    with pytest.raises(RemoteError) as exc_info:
        await LotusChainService(full_node=rpc, miner=rpc).provider_address()
    assert exc_info.value.method == "Filecoin.ActorAddress"


@pytest.mark.parametrize("signed", ["not-an-ask", [1, 2]])
async def test_market_get_ask_not_an_object(fake_lotus, rpc, signed):
    fake_lotus.results["Filecoin.MarketGetAsk"] = signed
    with pytest.raises(RemoteError) as exc_info:
        await LotusMarketService(rpc).get_ask()
    assert exc_info.value.method == "Filecoin.MarketGetAsk"


async def test_market_list_incomplete_deals_not_a_list(fake_lotus, rpc):
    fake_lotus.results["Filecoin.MarketListIncompleteDeals"] = {"ProposalCid": {"/": PROPOSAL_CID}}
    with pytest.raises(RemoteError) as exc_info:
        await LotusMarketService(rpc).list_incomplete_deals()
    assert exc_info.value.method == "Filecoin.MarketListIncompleteDeals"
