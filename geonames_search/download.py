"""Fetch GeoNames export dumps (``allCountries``, ``cities15000``, ``AU`` ...)."""

from __future__ import annotations

import logging
import os
import re
import zipfile

import requests

logger = logging.getLogger(__name__)

DUMP_URL = "https://download.geonames.org/export/dump/{name}.zip"
_NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def dump_url(name: str) -> str:
    if not _NAME_RE.match(name):
        raise ValueError(f"Invalid dump name: {name!r}")
    return DUMP_URL.format(name=name)


def _download_zip(url: str, dest_path: str, chunk_size: int = 1 << 20) -> None:
    with requests.get(url, stream=True, timeout=60) as resp:
        resp.raise_for_status()
        with open(dest_path, "wb") as f:
            for chunk in resp.iter_content(chunk_size=chunk_size):
                f.write(chunk)


def download_dump(name: str, out_dir: str, keep_zip: bool = False) -> str:
    """Download ``name``.zip into ``out_dir`` and return the extracted text file."""
    os.makedirs(out_dir, exist_ok=True)
    zip_path = os.path.join(out_dir, f"{name}.zip")
    text_name = f"{name}.txt"
    text_path = os.path.join(out_dir, text_name)

    url = dump_url(name)
    logger.info("Downloading %s", url)
    _download_zip(url, zip_path)

    with zipfile.ZipFile(zip_path) as archive:
        if text_name not in archive.namelist():
            raise FileNotFoundError(f"{text_name} missing from {zip_path}")
        archive.extract(text_name, out_dir)
    if not keep_zip:
        os.remove(zip_path)
    return text_path
