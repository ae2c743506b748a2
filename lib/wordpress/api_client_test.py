"""Tests for the WordPress API client."""

import httpx
import pytest

from lib.wordpress.api_client import (
    WordPressApiClient,
    build_query,
    merge_room_rates,
)
from lib.wordpress.config import WordPressConfig
from lib.wordpress.errors import (
    ConfigurationError,
    MalformedResponseError,
    NotFoundError,
    RemoteRequestError,
)
from lib.wordpress.models import ContentItem


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, responder):
        self.responder = responder
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestBuildQuery:
    def test_drops_none(self):
        assert build_query({"slug": None, "page": 2}) == {"page": "2"}

    def test_booleans_lowercase(self):
        assert build_query({"_embed": True, "sticky": False}) == {"_embed": "true", "sticky": "false"}

    def test_empty(self):
        assert build_query(None) == {}


class TestClientConstruction:
    def test_unset_url_raises_outside_production(self):
        with pytest.raises(ConfigurationError):
            WordPressApiClient(WordPressConfig(environment="development"))

    def test_unset_url_allowed_in_production(self):
        client = WordPressApiClient(WordPressConfig(environment="production"))
        assert client.config.is_configured is False

    @pytest.mark.asyncio
    async def test_fetch_with_unset_url_raises_in_production(self):
        client = WordPressApiClient(WordPressConfig(environment="production"))
        with pytest.raises(ConfigurationError):
            await client.fetch_resource("posts")


class TestFetchResource:
    @pytest.mark.asyncio
    async def test_builds_url_and_params(self, make_client, json_response):
        handler = Recorder(lambda r: json_response([]))
        client = make_client(handler)

        await client.fetch_resource("rooms", {"per_page": 50, "_embed": True, "slug": None})

        request = handler.last
        assert request.method == "GET"
        assert request.url.path == "/wp-json/wp/v2/rooms"
        assert request.url.params["per_page"] == "50"
        assert request.url.params["_embed"] == "true"
        assert "slug" not in request.url.params

    @pytest.mark.asyncio
    async def test_disables_caching(self, make_client, json_response):
        handler = Recorder(lambda r: json_response([]))
        client = make_client(handler)

        await client.fetch_resource("posts")

        assert handler.last.headers["cache-control"] == "no-cache"

    @pytest.mark.asyncio
    async def test_returns_parsed_body_unvalidated(self, make_client, json_response):
        client = make_client(lambda r: json_response({"anything": [1, 2]}))
        assert await client.fetch_resource("settings") == {"anything": [1, 2]}

    @pytest.mark.asyncio
    async def test_404_raises_remote_error_with_status(self, make_client, json_response):
        client = make_client(lambda r: json_response({"code": "rest_no_route"}, status_code=404))

        with pytest.raises(RemoteRequestError) as exc_info:
            await client.fetch_resource("nope")

        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_transport_error_raises_remote_error(self, make_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(RemoteRequestError) as exc_info:
            await client.fetch_resource("posts")

        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_malformed_body(self, make_client):
        client = make_client(lambda r: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(MalformedResponseError):
            await client.fetch_resource("posts")


class TestCollections:
    @pytest.mark.asyncio
    async def test_list_by_type_defaults(self, make_client, json_response, room_payload):
        handler = Recorder(lambda r: json_response([room_payload()]))
        client = make_client(handler)

        items = await client.list_by_type("posts")

        assert isinstance(items[0], ContentItem)
        assert handler.last.url.params["per_page"] == "100"
        assert handler.last.url.params["_embed"] == "true"

    @pytest.mark.asyncio
    async def test_list_by_type_caller_params_override(self, make_client, json_response):
        handler = Recorder(lambda r: json_response([]))
        client = make_client(handler)

        await client.list_by_type("posts", {"per_page": 5})

        assert handler.last.url.params["per_page"] == "5"

    @pytest.mark.asyncio
    async def test_list_by_type_non_list_is_malformed(self, make_client, json_response):
        client = make_client(lambda r: json_response({"id": 1}))

        with pytest.raises(MalformedResponseError):
            await client.list_by_type("posts")

    @pytest.mark.asyncio
    async def test_list_rooms(self, make_client, json_response, room_payload):
        handler = Recorder(lambda r: json_response([room_payload(), room_payload(id=18, slug="twin")]))
        client = make_client(handler)

        rooms = await client.list_rooms()

        assert [r.slug for r in rooms] == ["deluxe", "twin"]
        assert handler.last.url.path.endswith("/rooms")
        assert handler.last.url.params["per_page"] == "50"

    @pytest.mark.asyncio
    async def test_list_rooms_empty_body_degrades(self, make_client):
        client = make_client(lambda r: httpx.Response(200, text=""))
        assert await client.list_rooms() == []

    @pytest.mark.asyncio
    async def test_list_rooms_server_error_degrades(self, make_client, json_response):
        client = make_client(lambda r: json_response({"code": "boom"}, status_code=500))
        assert await client.list_rooms() == []

    @pytest.mark.asyncio
    async def test_list_rooms_unconfigured_degrades(self):
        client = WordPressApiClient(WordPressConfig(environment="production"))
        assert await client.list_rooms() == []

    @pytest.mark.asyncio
    async def test_amenities_propagate_errors(self, make_client, json_response):
        handler = Recorder(lambda r: json_response({}, status_code=503))
        client = make_client(handler)

        with pytest.raises(RemoteRequestError):
            await client.list_amenities()

        assert handler.last.url.path.endswith("/amenities")

    @pytest.mark.asyncio
    async def test_points_of_interest_endpoint(self, make_client, json_response):
        handler = Recorder(lambda r: json_response([]))
        client = make_client(handler)

        assert await client.list_points_of_interest() == []
        assert handler.last.url.path.endswith("/tourist-spots")
        assert handler.last.url.params["per_page"] == "50"


class TestSlugLookup:
    @pytest.mark.asyncio
    async def test_get_or_fail_found(self, make_client, json_response, room_payload):
        handler = Recorder(lambda r: json_response([room_payload(slug="about-us")]))
        client = make_client(handler)

        item = await client.get_or_fail("pages", "about-us")

        assert item.slug == "about-us"
        assert handler.last.url.params["slug"] == "about-us"

    @pytest.mark.asyncio
    async def test_get_or_fail_missing(self, make_client, json_response):
        client = make_client(lambda r: json_response([]))

        with pytest.raises(NotFoundError) as exc_info:
            await client.get_or_fail("pages", "ghost")

        assert "ghost" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_get_or_fail_propagates_remote_error(self, make_client, json_response):
        client = make_client(lambda r: json_response({}, status_code=500))

        with pytest.raises(RemoteRequestError):
            await client.get_or_fail("pages", "about-us")

    @pytest.mark.asyncio
    async def test_get_or_null_missing(self, make_client, json_response):
        client = make_client(lambda r: json_response([]))
        assert await client.get_or_null("posts", "ghost") is None

    @pytest.mark.asyncio
    async def test_get_or_null_swallows_remote_error(self, make_client, json_response):
        client = make_client(lambda r: json_response({}, status_code=500))
        assert await client.get_or_null("posts", "any") is None


class TestEnrichment:
    @pytest.mark.asyncio
    async def test_fetch_room_rates(self, make_client, json_response):
        handler = Recorder(lambda r: json_response([
            {"id": 17, "acf": {"price_per_night": 250}},
            {"id": 18, "acf": []},
        ]))
        client = make_client(handler)

        rates = await client.fetch_room_rates()

        assert rates == {17: {"price_per_night": 250}}
        assert handler.last.url.params["_fields"] == "id,acf"

    @pytest.mark.asyncio
    async def test_fetch_room_rates_failure_is_empty(self, make_client, json_response):
        client = make_client(lambda r: json_response({}, status_code=500))
        assert await client.fetch_room_rates() == {}

    def test_merge_room_rates_backfills(self, room_payload):
        rooms = [
            ContentItem.model_validate(room_payload(id=17)),
            ContentItem.model_validate(room_payload(id=18, room_rates="K99")),
        ]
        merged = merge_room_rates(rooms, {17: {"price_per_night": 250}, 18: {"price_per_night": 500}})

        assert merged[0].room_rates == "K250"
        assert merged[1].room_rates == "K99"

    @pytest.mark.asyncio
    async def test_list_rooms_with_rates_survives_rate_failure(self, make_client, json_response, room_payload):
        def handler(request):
            if request.url.params.get("_fields"):
                return json_response({}, status_code=500)
            return json_response([room_payload()])

        client = make_client(handler)

        rooms = await client.list_rooms_with_rates()

        assert len(rooms) == 1
        assert rooms[0].room_rates is None

    @pytest.mark.asyncio
    async def test_list_rooms_with_rates_merges(self, make_client, json_response, room_payload):
        def handler(request):
            if request.url.params.get("_fields"):
                return json_response([{"id": 17, "acf": {"price_per_night": 320}}])
            return json_response([room_payload()])

        client = make_client(handler)

        rooms = await client.list_rooms_with_rates()

        assert rooms[0].room_rates == "K320"

    @pytest.mark.asyncio
    async def test_get_media_url(self, make_client, json_response):
        handler = Recorder(lambda r: json_response({"id": 5, "source_url": "https://cdn/5.jpg"}))
        client = make_client(handler)

        assert await client.get_media_url(5) == "https://cdn/5.jpg"
        assert handler.last.url.path.endswith("/media/5")

    @pytest.mark.asyncio
    async def test_get_media_url_failure_is_none(self, make_client, json_response):
        client = make_client(lambda r: json_response({}, status_code=404))
        assert await client.get_media_url(5) is None

    @pytest.mark.asyncio
    async def test_resolve_featured_images(self, make_client, json_response, room_payload):
        handler = Recorder(lambda r: json_response({"source_url": "https://cdn/9.jpg"}))
        client = make_client(handler)
        items = [
            ContentItem.model_validate(room_payload(id=1, featured_media=9)),
            ContentItem.model_validate(room_payload(id=2)),
        ]

        resolved = await client.resolve_featured_images(items)

        assert resolved[0].better_featured_image.source_url == "https://cdn/9.jpg"
        assert resolved[1].better_featured_image is None
        assert len(handler.requests) == 1
