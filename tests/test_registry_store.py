"""Tests for registry/store.py and registry/models.py.

Tests for loading, saving and the pure upsert/remove helpers.
"""

import json
from unittest.mock import patch

import pytest

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import RegistryCorrupt, RegistryIOError
from vhostctl.registry.models import SiteRecord
from vhostctl.registry.store import RegistryStore, find, remove, upsert


def _record(domain, server=BackendId.NGINX, ssl=False, path="/srv/site"):
    return SiteRecord(domain=domain, path=path, server=server, ssl=ssl)


class TestSiteRecord:
    """Tests for SiteRecord serialisation."""

    def test_to_dict(self):
        """Test record serialises with plain values."""
        record = _record("blog.test", ssl=True)

        assert record.to_dict() == {
            "domain": "blog.test",
            "path": "/srv/site",
            "server": "nginx",
            "ssl": True,
        }

    def test_from_dict_defaults_ssl_false(self):
        """Test missing ssl flag means no certificate."""
        record = SiteRecord.from_dict({"domain": "a.test", "path": "/a", "server": "apache"})

        assert record.ssl is False
        assert record.server is BackendId.APACHE

    def test_from_dict_rejects_unknown_server(self):
        """Test unknown backend names are reported as corruption."""
        with pytest.raises(RegistryCorrupt, match="Unknown server type"):
            SiteRecord.from_dict({"domain": "a.test", "path": "/a", "server": "caddy"})

    @pytest.mark.parametrize("ssl", ["false", 1, None])
    def test_from_dict_rejects_non_boolean_ssl(self, ssl):
        """Test a non-boolean ssl flag is corruption, not coerced."""
        with pytest.raises(RegistryCorrupt, match="non-boolean ssl flag"):
            SiteRecord.from_dict(
                {"domain": "a.test", "path": "/a", "server": "nginx", "ssl": ssl}
            )

    def test_from_dict_rejects_missing_domain(self):
        """Test entries without a domain are rejected."""
        with pytest.raises(RegistryCorrupt):
            SiteRecord.from_dict({"path": "/a", "server": "nginx"})

    def test_from_dict_rejects_non_object(self):
        """Test non-object entries are rejected."""
        with pytest.raises(RegistryCorrupt):
            SiteRecord.from_dict("blog.test")


class TestLoad:
    """Tests for RegistryStore.load."""

    def test_missing_file_is_empty(self, store):
        """Test an absent registry loads as empty."""
        assert store.load() == []

    def test_empty_file_is_empty(self, store):
        """Test a zero-byte registry loads as empty."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("")

        assert store.load() == []

    def test_invalid_json_raises_corrupt(self, store):
        """Test unparsable content is surfaced, not discarded."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")

        with pytest.raises(RegistryCorrupt):
            store.load()

        assert store.path.read_text() == "{not json"

    def test_invalid_utf8_raises_corrupt(self, store):
        """Test undecodable bytes are reported as corruption."""
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b'{"sites": [\xff\xfe]}')

        with pytest.raises(RegistryCorrupt, match="not valid UTF-8"):
            store.load()

    def test_wrong_shape_raises_corrupt(self, store):
        """Test a JSON document without a site list is rejected."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"sites": "nope"}))

        with pytest.raises(RegistryCorrupt):
            store.load()

    def test_loads_legacy_bare_list(self, store):
        """Test registries written as a bare list are still readable."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps(
                [
                    {"domain": "a.test", "path": "/a", "server": "apache", "ssl": False},
                    {"domain": "b.test", "path": "/b", "server": "nginx", "ssl": True},
                ]
            )
        )

        records = store.load()

        assert [r.domain for r in records] == ["a.test", "b.test"]
        assert records[1].ssl is True


class TestSave:
    """Tests for RegistryStore.save."""

    def test_creates_parent_directory(self, store):
        """Test saving creates the registry directory."""
        store.save([_record("blog.test")])

        assert store.path.exists()

    def test_document_format(self, store):
        """Test the saved document is versioned, indented and newline-terminated."""
        store.save([_record("blog.test")])

        content = store.path.read_text()
        data = json.loads(content)
        assert data["version"] == 1
        assert data["sites"][0]["domain"] == "blog.test"
        assert "\n  " in content
        assert content.endswith("\n")

    def test_roundtrip_preserves_order(self, store):
        """Test load -> save -> load yields the same sequence."""
        records = [
            _record("c.test"),
            _record("a.test", server=BackendId.APACHE, ssl=True),
            _record("b.test"),
        ]
        store.save(records)

        first = store.load()
        store.save(first)
        second = store.load()

        assert first == records
        assert second == first

    def test_no_temp_files_left(self, store):
        """Test the atomic write leaves only the registry file."""
        store.save([_record("blog.test")])

        assert [p.name for p in store.path.parent.iterdir()] == ["sites.json"]

    def test_failed_write_keeps_previous_content(self, store):
        """Test a failing replace leaves the old registry intact."""
        store.save([_record("old.test")])

        with patch("vhostctl.core.fileio.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(RegistryIOError):
                store.save([_record("new.test")])

        assert [r.domain for r in store.load()] == ["old.test"]
        assert [p.name for p in store.path.parent.iterdir()] == ["sites.json"]


class TestUpsert:
    """Tests for the pure upsert helper."""

    def test_appends_new_domain(self):
        """Test new domains go to the end."""
        records = [_record("a.test")]

        result = upsert(records, _record("b.test"))

        assert [r.domain for r in result] == ["a.test", "b.test"]

    def test_replaces_existing_domain_in_place(self):
        """Test an existing domain is overwritten at its position."""
        records = [_record("a.test"), _record("b.test"), _record("c.test")]

        result = upsert(records, _record("b.test", server=BackendId.APACHE, ssl=True))

        assert [r.domain for r in result] == ["a.test", "b.test", "c.test"]
        assert result[1].server is BackendId.APACHE
        assert result[1].ssl is True

    def test_does_not_mutate_input(self):
        """Test upsert returns a new list."""
        records = [_record("a.test")]

        upsert(records, _record("b.test"))

        assert len(records) == 1


class TestRemove:
    """Tests for the pure remove helper."""

    def test_removes_matching_record(self):
        """Test the record is returned and filtered out."""
        records = [_record("a.test"), _record("b.test")]

        remaining, removed = remove(records, "a.test")

        assert removed == records[0]
        assert [r.domain for r in remaining] == ["b.test"]
        assert len(records) == 2

    def test_missing_domain_returns_original(self):
        """Test an unknown domain returns the same sequence and None."""
        records = [_record("a.test")]

        remaining, removed = remove(records, "zzz.test")

        assert removed is None
        assert remaining is records

    def test_find(self):
        """Test find returns the matching record or None."""
        records = [_record("a.test"), _record("b.test")]

        assert find(records, "b.test") == records[1]
        assert find(records, "c.test") is None


class TestRegistryStorePath:
    """Tests for store construction."""

    def test_accepts_string_path(self, tmp_path):
        """Test string paths are converted."""
        store = RegistryStore(str(tmp_path / "sites.json"))

        assert store.path == tmp_path / "sites.json"
