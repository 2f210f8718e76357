"""Tests for ConfigManager using QSettings."""

import pytest

from mpdctrl.api.mpd.client import CONNECT_TIMEOUT, DEFAULT_HOST, DEFAULT_PORT
from mpdctrl.core.config import ConfigManager, MpdSettings
from mpdctrl.core.status_poller import DEFAULT_POLL_INTERVAL, DEFAULT_RECONNECT_DELAY


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid test interference
    config = ConfigManager("MpdCtrlTest", "TestConfig")
    config.clear()
    return config


class TestConfigManagerDefaults:
    """Test default values when nothing is stored."""

    def test_connection_defaults(self, config: ConfigManager) -> None:
        """Test connection settings defaults."""
        assert config.get_mpd_host() == DEFAULT_HOST
        assert config.get_mpd_port() == DEFAULT_PORT
        assert config.get_mpd_password() == ""
        assert config.get_mpd_timeout() == CONNECT_TIMEOUT

    def test_monitoring_defaults(self, config: ConfigManager) -> None:
        """Test monitoring settings defaults."""
        assert config.get_poll_interval() == DEFAULT_POLL_INTERVAL
        assert config.get_reconnect_delay() == DEFAULT_RECONNECT_DELAY

    def test_load_defaults(self, config: ConfigManager) -> None:
        """Test that load() fills every field with defaults."""
        assert config.load() == MpdSettings()


class TestConfigManagerConnection:
    """Test connection settings."""

    def test_host(self, config: ConfigManager) -> None:
        """Test setting the host."""
        config.set_mpd_host("musicbox.local")
        assert config.get_mpd_host() == "musicbox.local"

    def test_socket_path(self, config: ConfigManager) -> None:
        """Test that a socket path is stored as the host."""
        config.set_mpd_host("/run/mpd/socket")
        assert config.get_mpd_host() == "/run/mpd/socket"

    def test_port(self, config: ConfigManager) -> None:
        """Test setting the port."""
        config.set_mpd_port(6601)
        assert config.get_mpd_port() == 6601

    def test_port_clamped(self, config: ConfigManager) -> None:
        """Test that out-of-range ports are clamped."""
        config.set_mpd_port(70000)
        assert config.get_mpd_port() == 65535
        config.set_mpd_port(-5)
        assert config.get_mpd_port() == 1

    def test_password(self, config: ConfigManager) -> None:
        """Test setting the password."""
        config.set_mpd_password("secret")
        assert config.get_mpd_password() == "secret"

    def test_timeout(self, config: ConfigManager) -> None:
        """Test setting the connect timeout."""
        config.set_mpd_timeout(2.5)
        assert config.get_mpd_timeout() == 2.5


class TestConfigManagerMonitoring:
    """Test polling settings."""

    def test_poll_interval(self, config: ConfigManager) -> None:
        """Test setting the poll interval."""
        config.set_poll_interval(1.5)
        assert config.get_poll_interval() == 1.5

    def test_poll_interval_clamped(self, config: ConfigManager) -> None:
        """Test poll interval bounds."""
        config.set_poll_interval(0.0)
        assert config.get_poll_interval() == 0.05
        config.set_poll_interval(120.0)
        assert config.get_poll_interval() == 30.0

    def test_reconnect_delay(self, config: ConfigManager) -> None:
        """Test setting the reconnect delay."""
        config.set_reconnect_delay(10.0)
        assert config.get_reconnect_delay() == 10.0

    def test_reconnect_delay_zero(self, config: ConfigManager) -> None:
        """Test that a zero delay is kept."""
        config.set_reconnect_delay(0.0)
        assert config.get_reconnect_delay() == 0.0


class TestConfigManagerBulk:
    """Test load/save of the full settings object."""

    def test_round_trip(self, config: ConfigManager) -> None:
        """Test that saved settings load back unchanged."""
        settings = MpdSettings(
            host="192.168.1.50",
            port=6601,
            password="pw",
            timeout=3.0,
            poll_interval=0.5,
            reconnect_delay=4.0,
        )
        config.save(settings)
        assert config.load() == settings

    def test_persistence(self, config: ConfigManager) -> None:
        """Test that a second manager sees synced values."""
        config.set_mpd_host("persist.local")
        config.sync()

        other = ConfigManager("MpdCtrlTest", "TestConfig")
        assert other.get_mpd_host() == "persist.local"

    def test_clear(self, config: ConfigManager) -> None:
        """Test that clear() restores defaults."""
        config.set_mpd_port(7000)
        config.clear()
        assert config.get_mpd_port() == DEFAULT_PORT
