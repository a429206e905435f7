import io
import zipfile
from unittest.mock import MagicMock, patch

import pytest

from geonames_search.download import download_dump, dump_url


def zipped(name, text):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr(name, text)
    return buf.getvalue()


def fake_response(content):
    resp = MagicMock()
    resp.iter_content.return_value = [content]
    resp.__enter__.return_value = resp
    return resp


def test_dump_url():
    assert dump_url("cities15000") == "https://download.geonames.org/export/dump/cities15000.zip"
    with pytest.raises(ValueError):
        dump_url("../etc/passwd")


def test_download_extracts_text(tmp_path):
    content = zipped("AU.txt", "1\tSydney\n")
    with patch("geonames_search.download.requests.get", return_value=fake_response(content)) as get:
        path = download_dump("AU", str(tmp_path))

    get.assert_called_once()
    assert get.call_args[0][0].endswith("/AU.zip")
    with open(path, encoding="utf-8") as f:
        assert f.read() == "1\tSydney\n"
    assert not (tmp_path / "AU.zip").exists()


def test_download_missing_member(tmp_path):
    content = zipped("readme.txt", "nothing")
    with patch("geonames_search.download.requests.get", return_value=fake_response(content)):
        with pytest.raises(FileNotFoundError):
            download_dump("AU", str(tmp_path), keep_zip=True)
    assert (tmp_path / "AU.zip").exists()
