"""Tests for switchyard.routing.router — route table, pages, and service fallback."""

from collections.abc import Iterator

import pytest
from providers import EchoProvider, SlowProvider

from switchyard.config import HubConfig
from switchyard.errors import ConfigurationError
from switchyard.routing.page import Page, PageMethod
from switchyard.routing.router import Router
from switchyard.routing.urls import URLParser
from switchyard.service.dispatcher import Service


class _Presenter:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.shown: list[Page] = []

    def show(self, page: Page) -> bool:
        self.shown.append(page)
        return self.result


@pytest.fixture
def router(service: Service) -> Router:
    return Router(service.parser, service)


class TestRegistration:
    def test_handler_round_trip(self, router: Router) -> None:
        calls: list[tuple[str, dict[str, str]]] = []

        def handler(path: str, parameters: dict[str, str]) -> bool:
            calls.append((path, parameters))
            return True

        router.register("user/settings", handler)
        assert router.open("myapp://user/settings") is True
        assert calls == [("user/settings", {})]

    def test_path_normalized(self, router: Router) -> None:
        router.register("/user//settings/", lambda path, params: True)
        assert "user/settings" in router
        assert list(router.routes) == ["user/settings"]

    def test_rejects_non_callable(self, router: Router) -> None:
        with pytest.raises(ConfigurationError, match="Page or a callable"):
            router.register("user", "not a handler")  # type: ignore[arg-type]

    def test_rejects_empty_path(self, router: Router) -> None:
        with pytest.raises(ConfigurationError, match="no segments"):
            router.register("/", lambda path, params: True)

    def test_reregister_replaces(self, router: Router) -> None:
        router.register("home", lambda path, params: False)
        router.register("home", lambda path, params: True)
        assert router.open("myapp://home") is True

    def test_deregister(self, router: Router) -> None:
        router.register("home", lambda path, params: True)
        router.deregister("/home/")
        assert "home" not in router
        assert router.open("myapp://home") is False

    def test_route_decorator(self, router: Router) -> None:
        @router.route("about")
        def about(path: str, parameters: dict[str, str]) -> bool:
            return parameters.get("ok") == "1"

        assert router.open("myapp://about?ok=1") is True
        assert router.open("myapp://about?ok=0") is False


class TestOpenHandlers:
    def test_parameters_passed(self, router: Router) -> None:
        received: dict[str, str] = {}

        def handler(path: str, parameters: dict[str, str]) -> bool:
            received.update(parameters)
            return True

        router.register("search", handler)
        router.open("myapp://search?q=trains&page=2")
        assert received == {"q": "trains", "page": "2"}

    def test_handler_false_result(self, router: Router) -> None:
        router.register("nope", lambda path, params: False)
        assert router.open("myapp://nope") is False

    def test_domain_route(self, router: Router) -> None:
        router.register("www.example.com/news", lambda path, params: True)
        assert router.open("https://www.example.com/news") is True

    def test_unlisted_scheme(self, router: Router) -> None:
        router.register("home", lambda path, params: True)
        assert router.open("ftp://home") is False


class TestOpenPages:
    def test_page_shown_with_url_parameters(self, service: Service) -> None:
        presenter = _Presenter()
        router = Router(service.parser, service, presenter)
        router.register("user/profile", Page("ProfileScreen", {"tab": "posts"}, PageMethod.PRESENT))

        assert router.open("myapp://user/profile?id=42") is True
        shown = presenter.shown[0]
        assert shown.target == "ProfileScreen"
        assert shown.method is PageMethod.PRESENT
        assert dict(shown.parameters) == {"tab": "posts", "id": "42"}

    def test_presenter_failure(self, service: Service) -> None:
        router = Router(service.parser, service, _Presenter(result=False))
        router.register("user/profile", Page("ProfileScreen"))
        assert router.open("myapp://user/profile") is False

    def test_no_presenter(self, router: Router) -> None:
        router.register("user/profile", Page("ProfileScreen"))
        assert router.open("myapp://user/profile") is False


class TestServiceFallback:
    def test_dispatches_provider_url(self, router: Router, service: Service) -> None:
        slow = SlowProvider(delay=0)
        service.register(slow)
        assert router.open("myapp://slow/work") is True

    def test_true_even_when_dispatch_fails(
        self, router: Router, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("WARNING", logger="switchyard.routing"):
            assert router.open("myapp://nobody/nothing") is True
        assert "missProvider" in caplog.text

    def test_route_table_wins_over_provider(self, router: Router, service: Service) -> None:
        service.register(EchoProvider())
        calls: list[str] = []
        router.register("echo/say", lambda path, params: calls.append(path) or True)
        assert router.open("myapp://echo/say") is True
        assert calls == ["echo/say"]

    def test_single_unmatched_segment(self, router: Router) -> None:
        assert router.open("myapp://lonely") is False


class TestStrictHosts:
    @pytest.fixture
    def strict(self) -> Iterator[Router]:
        config = HubConfig(schemes=("myapp",), label_hosts=False)
        with Service(config) as svc:
            yield Router(URLParser(config.schemes, label_hosts=False), svc)

    def test_label_host_dropped(self, strict: Router) -> None:
        strict.register("settings", lambda path, params: True)
        assert strict.open("myapp://bridge/settings") is True
