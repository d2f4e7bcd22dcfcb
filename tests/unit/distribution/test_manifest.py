"""Tests for distribution manifest loading."""

import json
import os

import pytest

from multibuild.distribution.manifest import DistributionManifestLoader, ManifestError, ManifestRecord


def _write_manifest(directory, content):
    path = directory / "output.json"
    path.write_text(content if isinstance(content, str) else json.dumps(content))
    return path


class TestManifestRecord:
    """Tests for ManifestRecord."""

    def test_resolve_filename_override(self, tmp_path):
        assert ManifestRecord(tmp_path, "x.js").resolve_filename("alpha.js") == "x.js"

    def test_resolve_filename_fallback(self, tmp_path):
        assert ManifestRecord(tmp_path).resolve_filename("alpha.js") == "alpha.js"


class TestDistributionManifestLoader:
    """Tests for DistributionManifestLoader.load."""

    def test_absent_manifest_is_empty(self, tmp_path):
        assert DistributionManifestLoader().load(tmp_path) == []

    def test_records_in_order(self, tmp_path):
        _write_manifest(tmp_path, [{"dir": "A", "filename": "x.js"}, {"dir": "B"}])

        records = DistributionManifestLoader(base_dir=tmp_path).load(tmp_path)

        assert records == [
            ManifestRecord(directory=(tmp_path / "A").resolve(), filename="x.js"),
            ManifestRecord(directory=(tmp_path / "B").resolve(), filename=None),
        ]

    def test_relative_dir_resolved_against_base_dir(self, tmp_path):
        project = tmp_path / "src" / "projects" / "alpha"
        project.mkdir(parents=True)
        _write_manifest(project, [{"dir": "server/static"}])

        records = DistributionManifestLoader(base_dir=tmp_path).load(project)

        assert records[0].directory == (tmp_path / "server" / "static").resolve()

    def test_relative_dir_defaults_to_cwd(self, tmp_path, monkeypatch):
        _write_manifest(tmp_path, [{"dir": "drop"}])
        monkeypatch.chdir(tmp_path)

        records = DistributionManifestLoader().load(tmp_path)

        assert records[0].directory == (tmp_path / "drop").resolve()

    def test_absolute_dir_kept(self, tmp_path):
        target = tmp_path / "elsewhere"
        _write_manifest(tmp_path, [{"dir": str(target)}])
        records = DistributionManifestLoader(base_dir=tmp_path / "ignored").load(tmp_path)
        assert records[0].directory == target.resolve()

    def test_empty_array(self, tmp_path):
        _write_manifest(tmp_path, [])
        assert DistributionManifestLoader().load(tmp_path) == []

    def test_custom_manifest_name(self, tmp_path):
        (tmp_path / "copies.json").write_text(json.dumps([{"dir": "A"}]))
        loader = DistributionManifestLoader("copies.json", base_dir=tmp_path)
        assert len(loader.load(tmp_path)) == 1
        assert loader.manifest_path(tmp_path) == tmp_path / "copies.json"

    @pytest.mark.parametrize(
        "content,reason",
        [
            ("{not json", "not valid JSON"),
            ({"dir": "A"}, "expected a JSON array"),
            (["A"], "not an object"),
            ([{"filename": "x.js"}], "has no 'dir'"),
            ([{"dir": ""}], "has no 'dir'"),
            ([{"dir": 5}], "has no 'dir'"),
            ([{"dir": "A", "filename": 3}], "invalid 'filename'"),
            ([{"dir": "A", "filename": ""}], "invalid 'filename'"),
        ],
    )
    def test_malformed_manifest_raises(self, tmp_path, content, reason):
        path = _write_manifest(tmp_path, content)

        with pytest.raises(ManifestError) as exc_info:
            DistributionManifestLoader().load(tmp_path)

        assert exc_info.value.path == path
        assert reason in str(exc_info.value)

    def test_invalid_utf8_raises(self, tmp_path):
        (tmp_path / "output.json").write_bytes(b"\xff\xfe\x00[")
        with pytest.raises(ManifestError, match="cannot be read"):
            DistributionManifestLoader().load(tmp_path)

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits not enforced")
    def test_unreadable_manifest_raises(self, tmp_path):
        path = _write_manifest(tmp_path, [{"dir": "A"}])
        path.chmod(0)
        try:
            with pytest.raises(ManifestError, match="cannot be read") as exc_info:
                DistributionManifestLoader().load(tmp_path)
            assert exc_info.value.path == path
        finally:
            path.chmod(0o644)
