"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
import yaml

from occ.config import (
    LaunchConfig,
    default_config_file,
    default_settings,
    env_var_name,
    load_config,
    read_config_file,
    save_config,
)
from occ.errors import ConfigError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "occ" / "config.yaml"
    path.parent.mkdir()
    path.write_text(
        yaml.safe_dump(
            {
                "ocm-user": "testUser",
                "offline-access-token": "testToken",
                "ops-utils-dir": "/home/test/ops-sop/v4/utils",
                "ops-utils-dir-rw": True,
            }
        )
    )
    return path


class TestDefaults:
    """Test default settings."""

    def test_default_config_file(self, tmp_path):
        """Test the config file lives under ~/.config/occ."""
        assert default_config_file(tmp_path) == tmp_path / ".config" / "occ" / "config.yaml"

    def test_linux_socket(self):
        """Test the linux podman socket default."""
        settings = default_settings("linux", Path("/home/test"))
        assert settings["podman-socket"] == "unix:///run/podman/podman.sock"
        assert settings["container-image-tag"] == "latest"
        assert settings["disable-console-port"] is False

    def test_mac_socket(self):
        """Test the mac podman machine socket default."""
        settings = default_settings("mac", Path("/Users/test"))
        assert settings["podman-socket"] == (
            "unix:///Users/test/.local/share/containers/podman/machine/"
            "podman-machine-default/podman.sock"
        )

    def test_env_var_name(self):
        """Test keys map to OCC_ prefixed variables."""
        assert env_var_name("ops-utils-dir-rw") == "OCC_OPS_UTILS_DIR_RW"


class TestLoadConfig:
    """Test resolving settings."""

    def test_file_values(self, config_file):
        """Test config file values override defaults."""
        settings = load_config(config_file, environ={}, platform="linux")
        assert settings["ocm-user"] == "testUser"
        assert settings["ops-utils-dir-rw"] is True
        assert settings["container-image-tag"] == "latest"

    def test_missing_file(self, tmp_path):
        """Test a missing file gives defaults only."""
        settings = load_config(tmp_path / "missing.yaml", environ={}, platform="linux")
        assert "ocm-user" not in settings
        assert settings["ops-utils-dir-rw"] is False

    def test_environment_overrides(self, config_file):
        """Test OCC_ variables win over the file."""
        environ = {"OCC_OCM_USER": "envUser", "OCC_OPS_UTILS_DIR_RW": "false", "OCC_OCM_URL": "https://example"}
        settings = load_config(config_file, environ=environ, platform="linux")
        assert settings["ocm-user"] == "envUser"
        assert settings["ops-utils-dir-rw"] is False
        assert settings["ocm-url"] == "https://example"

    def test_invalid_yaml(self, tmp_path):
        """Test unparseable files are reported."""
        path = tmp_path / "config.yaml"
        path.write_text("ocm-user: [unclosed")
        with pytest.raises(ConfigError):
            read_config_file(path)

    def test_non_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            read_config_file(path)

    def test_empty_file(self, tmp_path):
        """Test an empty file reads as no settings."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert read_config_file(path) == {}


class TestSaveConfig:
    """Test writing the config file."""

    def test_round_trip(self, tmp_path):
        """Test saved settings load back and parents are created."""
        path = tmp_path / "nested" / "occ" / "config.yaml"
        save_config(path, {"ocm-user": "testUser", "ops-utils-dir-rw": False})
        assert read_config_file(path) == {"ocm-user": "testUser", "ops-utils-dir-rw": False}


class TestLaunchConfig:
    """Test building the launch configuration."""

    def test_from_settings(self, config_file):
        """Test settings map onto launch config fields."""
        settings = load_config(config_file, environ={}, platform="linux")
        config = LaunchConfig.from_settings(settings, config_file, "my-cluster")
        assert config.config_path == str(config_file)
        assert config.user == "testUser"
        assert config.offline_access_token == "testToken"
        assert config.ocm_url == ""
        assert config.ops_utils_dir == "/home/test/ops-sop/v4/utils"
        assert config.ops_utils_dir_rw is True
        assert config.args == ["my-cluster"]

    def test_no_cluster(self):
        """Test no positional argument gives no args."""
        assert LaunchConfig(config_path="c").args == []

    def test_empty_cluster(self):
        """Test an empty positional argument is still passed on."""
        assert LaunchConfig(config_path="c", cluster_id="").args == [""]

    def test_frozen(self):
        """Test the launch config cannot be modified."""
        config = LaunchConfig(config_path="c")
        with pytest.raises(AttributeError):
            config.user = "other"
