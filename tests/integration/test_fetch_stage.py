from __future__ import annotations

from pathlib import Path

import pytest

from heritage_atlas.common.fs import read_json
from heritage_atlas.common.http import HttpRequestError
from heritage_atlas.harvest.fetch import run_fetch


class FakeClient:
    def __init__(self, payload):
        self.payload = payload
        self.urls: list[str] = []

    def get_json(self, url, **_kwargs):
        self.urls.append(url)
        return self.payload


def _config(enabled: bool = True) -> dict:
    return {"fetch": {"enabled": enabled, "heritage_url": "https://example.test/cbd.geojson", "timeout_seconds": 30}}


@pytest.mark.integration
def test_fetch_writes_feature_collection(tmp_path: Path):
    payload = {"type": "FeatureCollection", "features": [{"type": "Feature", "geometry": None, "properties": {}}]}
    client = FakeClient(payload)
    target = tmp_path / "raw" / "cbd.geojson"

    result = run_fetch(_config(), target, client=client)

    assert client.urls == ["https://example.test/cbd.geojson"]
    assert result["row_count"] == 1
    assert read_json(target) == payload


@pytest.mark.integration
def test_fetch_disabled_is_a_no_op(tmp_path: Path):
    target = tmp_path / "raw" / "cbd.geojson"

    result = run_fetch(_config(enabled=False), target, client=FakeClient({}))

    assert result["warnings"] == ["FETCH_DISABLED"]
    assert not target.exists()


@pytest.mark.integration
def test_fetch_rejects_non_geojson_payload(tmp_path: Path):
    target = tmp_path / "raw" / "cbd.geojson"

    with pytest.raises(HttpRequestError):
        run_fetch(_config(), target, client=FakeClient({"error": "not found"}))
    assert not target.exists()
