"""Tests for hostini type definitions."""

from enum import Enum

import pytest

from hostini.exceptions import InvalidHostError
from hostini.types import Host, HostCollection, VarMap, normalize_key


class Key(Enum):
    ENV = "env"
    PORT = 22


class TestVarMap:
    """Tests for VarMap."""

    def test_indifferent_key_access(self):
        """Test that equivalent key representations address one slot."""
        v = VarMap()
        v["env"] = "prod"

        assert v[Key.ENV] == "prod"
        assert v[b"env"] == "prod"
        assert Key.ENV in v

        v[Key.ENV] = "staging"
        assert len(v) == 1
        assert v["env"] == "staging"

    def test_enum_without_string_value_uses_name(self):
        assert normalize_key(Key.PORT) == "PORT"

    def test_invalid_key_type(self):
        with pytest.raises(TypeError):
            VarMap()[42] = "x"
        assert 42 not in VarMap()

    def test_insertion_order_and_last_write_wins(self):
        v = VarMap([("b", "1"), ("a", "2")])
        v["b"] = "3"
        assert list(v.items()) == [("b", "3"), ("a", "2")]

    def test_values_stored_as_strings(self):
        v = VarMap({"port": 22})
        assert v["port"] == "22"

    def test_equality_with_mappings(self):
        assert VarMap({"a": "1"}) == {"a": "1"}
        assert VarMap({"a": "1"}) == VarMap({b"a": "1"})
        assert VarMap({"a": "1"}) != {"a": "2"}

    def test_copy_is_independent(self):
        v = VarMap({"a": "1"})
        c = v.copy()
        c["a"] = "2"
        assert v["a"] == "1"

    def test_to_tokens(self):
        assert VarMap({"ansible_host": "10.0.0.1", "env": "prod"}).to_tokens() == [
            "ansible_host=10.0.0.1",
            "env=prod",
        ]


class TestHost:
    """Tests for Host."""

    def test_minimal_host(self):
        host = Host("web01")
        assert host.name == "web01"
        assert host.vars == {}

    def test_vars_converted_to_varmap(self):
        host = Host("web01", {"role": "web"})
        assert isinstance(host.vars, VarMap)
        assert host.get_var(b"role") == "web"
        assert host.get_var("missing", "default") == "default"

    @pytest.mark.parametrize("name", ["", None, "   "])
    def test_invalid_name(self, name):
        """Test that a host without a name cannot be constructed."""
        with pytest.raises(InvalidHostError, match="cannot be None or empty"):
            Host(name)

    def test_structural_equality(self):
        assert Host("db1", {"role": "primary"}) == Host("db1", {"role": "primary"})
        assert Host("db1", {"role": "primary"}) != Host("db1", {"role": "replica"})
        assert Host("db1") != Host("db2")

    def test_set_var(self):
        host = Host("web01")
        host.set_var(Key.ENV, "prod")
        assert host.vars == {"env": "prod"}

    def test_to_line(self):
        assert Host("web01").to_line() == "web01"
        assert Host("web01", {"a": "1", "b": "2"}).to_line() == "web01 a=1 b=2"


class TestHostCollection:
    """Tests for HostCollection."""

    def test_add_is_idempotent(self):
        """Test that adding an equal host twice keeps one entry."""
        hosts = HostCollection()
        first = hosts.add("web01", {"env": "prod"})
        second = hosts.add(Host("web01", {"env": "prod"}))

        assert len(hosts) == 1
        assert second is first

    def test_add_same_name_different_vars(self):
        hosts = HostCollection()
        hosts.add("web01", {"env": "prod"})
        hosts.add("web01", {"env": "dev"})
        assert len(hosts) == 2

    def test_add_invalid_name(self):
        hosts = HostCollection()
        with pytest.raises(InvalidHostError):
            hosts.add("")
        assert len(hosts) == 0

    def test_append_does_not_dedup(self):
        hosts = HostCollection()
        hosts.append(Host("web01"))
        hosts.append(Host("web01"))
        assert hosts.names() == ["web01", "web01"]

    def test_lookup(self):
        hosts = HostCollection([Host("a", {"x": "1"}), Host("a", {"x": "2"}), Host("b")])
        assert hosts.lookup("a").vars == {"x": "1"}
        assert hosts.lookup("missing") is None

    def test_contains(self):
        hosts = HostCollection([Host("a", {"x": "1"})])
        assert "a" in hosts
        assert Host("a", {"x": "1"}) in hosts
        assert Host("a") not in hosts

    def test_remove_by_name_removes_all_matches(self):
        hosts = HostCollection()
        hosts.append(Host("a", {"x": "1"}))
        hosts.append(Host("b"))
        hosts.append(Host("a", {"x": "2"}))

        removed = hosts.remove("a")

        assert removed == Host("a", {"x": "1"})
        assert hosts.names() == ["b"]

    def test_remove_by_host(self):
        hosts = HostCollection([Host("a", {"x": "1"}), Host("a", {"x": "2"})])
        hosts.remove(Host("a", {"x": "2"}))
        assert [h.vars["x"] for h in hosts] == ["1"]

    def test_remove_missing(self):
        hosts = HostCollection([Host("a")])
        assert hosts.remove("zzz") is None
        assert len(hosts) == 1

    def test_sequence_protocol(self):
        hosts = HostCollection([Host("a"), Host("b")])
        assert hosts[1].name == "b"
        assert [h.name for h in hosts] == ["a", "b"]
        assert not HostCollection()
