"""Unit tests for the artifact downloader."""

import io
import tarfile
import tempfile
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from precache.cache.downloader import ArtifactDownloader, DownloadError, ExtractionError


def _zip_bytes(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def _tar_bytes(files):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tf:
        for name, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def _response(content):
    response = MagicMock()
    response.headers = {"content-length": str(len(content))}
    response.iter_content.return_value = [content]
    response.raise_for_status.return_value = None
    return response


class TestArtifactDownloader:
    """Test cases for ArtifactDownloader."""

    def test_download(self):
        """Test a successful download lands at the destination."""
        with tempfile.TemporaryDirectory() as temp_dir:
            dest = Path(temp_dir) / "out" / "file.zip"
            with patch("requests.get", return_value=_response(b"data")) as get:
                result = ArtifactDownloader().download(
                    "https://example.com/file.zip", dest, show_progress=False
                )
            assert result == dest
            assert dest.read_bytes() == b"data"
            assert not dest.with_suffix(".zip.tmp").exists()
            get.assert_called_once_with("https://example.com/file.zip", stream=True, timeout=30)

    def test_download_http_error(self):
        """Test HTTP failures raise DownloadError and leave no temp file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            dest = Path(temp_dir) / "file.zip"
            response = _response(b"")
            response.raise_for_status.side_effect = requests.HTTPError("404")
            with patch("requests.get", return_value=response):
                with pytest.raises(DownloadError, match="404"):
                    ArtifactDownloader().download("https://example.com/file.zip", dest)
            assert not dest.exists()
            assert list(Path(temp_dir).iterdir()) == []

    def test_extract_zip(self):
        """Test zip archives are extracted."""
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = Path(temp_dir) / "a.zip"
            archive.write_bytes(_zip_bytes({"bin/tool": "x"}))
            dest = Path(temp_dir) / "dest"
            ArtifactDownloader().extract_archive(archive, dest)
            assert (dest / "bin" / "tool").read_text() == "x"

    def test_extract_tar(self):
        """Test tar archives are extracted."""
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = Path(temp_dir) / "a.tar.gz"
            archive.write_bytes(_tar_bytes({"bin/tool": "x"}))
            dest = Path(temp_dir) / "dest"
            ArtifactDownloader().extract_archive(archive, dest)
            assert (dest / "bin" / "tool").read_text() == "x"

    @pytest.mark.skipif(
        not hasattr(tarfile, "data_filter"), reason="tarfile extraction filters unavailable"
    )
    def test_extract_tar_rejects_escaping_member(self):
        """Test tar members outside the destination are refused."""
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = Path(temp_dir) / "a.tar.gz"
            archive.write_bytes(_tar_bytes({"../escaped": "x"}))
            dest = Path(temp_dir) / "dest"
            with pytest.raises(ExtractionError, match="Failed to extract"):
                ArtifactDownloader().extract_archive(archive, dest)
            assert not (Path(temp_dir) / "escaped").exists()

    def test_extract_unsupported(self):
        """Test unknown archive formats are rejected."""
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = Path(temp_dir) / "a.rar"
            archive.write_bytes(b"")
            with pytest.raises(ExtractionError, match="Unsupported"):
                ArtifactDownloader().extract_archive(archive, Path(temp_dir) / "dest")

    def test_extract_corrupt_zip(self):
        """Test corrupt archives raise ExtractionError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = Path(temp_dir) / "a.zip"
            archive.write_bytes(b"not a zip")
            with pytest.raises(ExtractionError, match="Failed to extract"):
                ArtifactDownloader().extract_archive(archive, Path(temp_dir) / "dest")

    def test_extract_missing(self):
        """Test a missing archive raises ExtractionError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with pytest.raises(ExtractionError, match="not found"):
                ArtifactDownloader().extract_archive(
                    Path(temp_dir) / "missing.zip", Path(temp_dir) / "dest"
                )

    def test_download_and_extract_removes_archive(self):
        """Test the archive is deleted after extraction."""
        with tempfile.TemporaryDirectory() as temp_dir:
            downloads = Path(temp_dir) / "downloads"
            dest = Path(temp_dir) / "dest"
            content = _zip_bytes({"artifact.txt": "hello"})
            with patch("requests.get", return_value=_response(content)):
                ArtifactDownloader().download_and_extract(
                    "https://example.com/engine/artifacts.zip",
                    downloads,
                    dest,
                    show_progress=False,
                )
            assert (dest / "artifact.txt").read_text() == "hello"
            assert not (downloads / "artifacts.zip").exists()
