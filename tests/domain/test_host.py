"""Tests for Host and Credentials value objects."""

import pytest
from stagehand.domain.value_objects.credentials import Credentials
from stagehand.domain.value_objects.host import Host, HostRole


class TestHost:
    def test_default_role(self):
        host = Host(name="TAXWS01")
        assert host.role is HostRole.TARGET

    def test_factories(self):
        assert Host.primary("TAXSRV01").role is HostRole.PRIMARY
        assert Host.target("TAXWS01").role is HostRole.TARGET
        assert Host.fleet_member("BRANCH01").role is HostRole.FLEET_MEMBER

    def test_factory_strips_whitespace(self):
        assert Host.target("  TAXWS01 ").name == "TAXWS01"

    def test_str(self):
        assert str(Host.primary("taxsrv01.corp.local")) == "taxsrv01.corp.local"

    def test_ipv4(self):
        assert Host(name="10.0.0.5").name == "10.0.0.5"

    def test_frozen(self):
        host = Host(name="TAXWS01")
        with pytest.raises(AttributeError):
            host.name = "OTHER"

    def test_equality(self):
        assert Host.target("A1") == Host.target("A1")
        assert Host.target("A1") != Host.primary("A1")


class TestHostValidation:
    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="Invalid host name"):
            Host(name="")

    def test_invalid_characters_rejected(self):
        with pytest.raises(ValueError, match="Invalid host name"):
            Host(name="bad host!")

    def test_leading_hyphen_rejected(self):
        with pytest.raises(ValueError, match="Invalid host name"):
            Host(name="-TAXWS01")

    def test_ipv4_octet_out_of_range(self):
        with pytest.raises(ValueError, match="Invalid host name"):
            Host(name="10.0.0.300")


class TestCredentials:
    def test_secret_not_in_repr(self):
        creds = Credentials(username="CORP\\deploy", secret="hunter2")
        assert "hunter2" not in repr(creds)
        assert "hunter2" not in str(creds)
        assert creds.secret == "hunter2"

    def test_empty_username_rejected(self):
        with pytest.raises(ValueError, match="username cannot be empty"):
            Credentials(username="", secret="x")
