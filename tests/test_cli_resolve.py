"""Tests for switchyard.cli._resolve — loading a Hub from an import string."""

import sys
import types
from pathlib import Path

import pytest
from providers import EchoProvider

from switchyard.cli._resolve import load_hub
from switchyard.config import HubConfig
from switchyard.errors import ConfigurationError
from switchyard.hub import Hub
from switchyard.service.dispatcher import Service


def _broken_factory() -> Hub:
    raise RuntimeError("no config")


@pytest.fixture
def _fake_targets(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module exposing each kind of target."""
    service = Service(HubConfig(schemes=("svc",)))
    service.register(EchoProvider())

    mod = types.ModuleType("_fake_switchyard_targets")
    mod.hub = Hub()  # type: ignore[attr-defined]
    mod.service = service  # type: ignore[attr-defined]
    mod.provider = EchoProvider()  # type: ignore[attr-defined]
    mod.EchoProvider = EchoProvider  # type: ignore[attr-defined]
    mod.create_hub = Hub  # type: ignore[attr-defined]
    mod.create_service = lambda: service  # type: ignore[attr-defined]
    mod.broken = _broken_factory  # type: ignore[attr-defined]
    mod.make_string = lambda: "nope"  # type: ignore[attr-defined]
    mod.not_a_hub = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_switchyard_targets", mod)


@pytest.mark.usefixtures("_fake_targets")
class TestLoadHub:
    def test_hub_returned_as_is(self) -> None:
        hub = load_hub("_fake_switchyard_targets:hub")
        assert hub is sys.modules["_fake_switchyard_targets"].hub

    def test_default_attribute(self) -> None:
        """Omitting :attr looks up ``hub``."""
        assert load_hub("_fake_switchyard_targets") is sys.modules["_fake_switchyard_targets"].hub

    def test_service_wrapped(self) -> None:
        with load_hub("_fake_switchyard_targets:service") as hub:
            assert "echo" in hub.service
            assert "svc" in hub.parser.schemes
            assert hub.request("svc://echo/explicit").data == "explicit"

    def test_provider_instance_wrapped(self) -> None:
        with load_hub("_fake_switchyard_targets:provider") as hub:
            assert list(hub.service.providers) == ["echo"]

    def test_provider_class_instantiated(self) -> None:
        with load_hub("_fake_switchyard_targets:EchoProvider") as hub:
            assert isinstance(hub.service.get("echo"), EchoProvider)

    def test_factories(self) -> None:
        assert isinstance(load_hub("_fake_switchyard_targets:create_hub"), Hub)
        with load_hub("_fake_switchyard_targets:create_service") as hub:
            assert "echo" in hub.service

    def test_manifest_configures_wrapped_provider(self, tmp_path: Path) -> None:
        manifest = tmp_path / "app.toml"
        manifest.write_text('[[url_types]]\nschemes = ["fromfile"]\n')
        with load_hub("_fake_switchyard_targets:provider", manifest) as hub:
            assert "fromfile" in hub.parser.schemes
            assert hub.request("fromfile://echo/explicit").ok

    def test_manifest_ignored_for_hub(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        manifest = tmp_path / "app.toml"
        manifest.write_text('[[url_types]]\nschemes = ["fromfile"]\n')
        with caplog.at_level("WARNING", logger="switchyard.cli"):
            hub = load_hub("_fake_switchyard_targets:hub", manifest)
        assert "fromfile" not in hub.parser.schemes
        assert "Ignoring manifest" in caplog.text

    def test_bad_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read manifest"):
            load_hub("_fake_switchyard_targets:provider", tmp_path / "missing.toml")

    def test_factory_error(self) -> None:
        with pytest.raises(ConfigurationError, match="RuntimeError: no config"):
            load_hub("_fake_switchyard_targets:broken")

    def test_factory_wrong_type(self) -> None:
        with pytest.raises(ConfigurationError, match="is a str"):
            load_hub("_fake_switchyard_targets:make_string")

    def test_wrong_type(self) -> None:
        with pytest.raises(ConfigurationError, match="expected a Hub, Service, or Provider"):
            load_hub("_fake_switchyard_targets:not_a_hub")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            load_hub("nonexistent_module_xyz:hub")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            load_hub("_fake_switchyard_targets:does_not_exist")
