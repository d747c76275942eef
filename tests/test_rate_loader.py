import json
import os

import pytest

from borewell.core.settings import Settings
from borewell.domain.models import SlabRate
from borewell.rates.loader import (
    RateTableError,
    RateTableLoader,
    active_rates,
    get_loader,
    load_rate_table_file,
)
from borewell.rates.telescopic import default_rates


def _bump_mtime(p):
    st = p.stat()
    os.utime(p, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))


def _write_yaml(p, rows):
    lines = ["version: 1", "rates:"]
    for lo, hi, rate in rows:
        lines.append(f"  - {{minDepth: {lo}, maxDepth: {hi}, rate: {rate}}}")
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_load_yaml_fixture(fixtures_dir):
    rates = load_rate_table_file(fixtures_dir / "rates.sample.yaml")

    assert rates == (SlabRate(0, 300, 85), SlabRate(300, 400, 90), SlabRate(400, 500, 100))


def test_load_json_bare_list(tmp_path):
    p = tmp_path / "rates.json"
    p.write_text(json.dumps([{"minDepth": 0, "maxDepth": 1000, "rate": 110}]), encoding="utf-8")

    assert load_rate_table_file(p) == (SlabRate(0, 1000, 110),)


@pytest.mark.parametrize(
    "name, content",
    [
        ("rates.yaml", "rates: [{minDepth: 0, maxDepth: 300"),
        ("rates.yaml", "rates: {minDepth: 0}"),
        ("rates.yaml", "rates: [{minDepth: 300, maxDepth: 100, rate: 85}]"),
        ("rates.yaml", "rates: []"),
        ("rates.json", "{not json"),
        ("rates.txt", "0;300;85"),
    ],
)
def test_unusable_files_raise(tmp_path, name, content):
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")

    with pytest.raises(RateTableError):
        load_rate_table_file(p)


def test_missing_file_raises(tmp_path):
    with pytest.raises(RateTableError):
        load_rate_table_file(tmp_path / "absent.yaml")

    with pytest.raises(RateTableError):
        RateTableLoader(tmp_path / "absent.yaml")


def test_non_utf8_file_raises(tmp_path):
    p = tmp_path / "rates.yaml"
    p.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(RateTableError):
        load_rate_table_file(p)

    with pytest.raises(RateTableError):
        RateTableLoader(p)


def test_non_utf8_edit_keeps_previous_table(tmp_path):
    p = tmp_path / "rates.yaml"
    _write_yaml(p, [(0, 300, 85)])
    loader = RateTableLoader(p)

    p.write_bytes(b"rates: [{minDepth: 0, maxDepth: 300, rate: \xff\xfe}]\n")
    _bump_mtime(p)

    assert loader.get() == (SlabRate(0, 300, 85),)


def test_hot_reload_on_mtime_change(tmp_path):
    p = tmp_path / "rates.yaml"
    _write_yaml(p, [(0, 300, 85)])
    loader = RateTableLoader(p)
    assert loader.get() == (SlabRate(0, 300, 85),)

    _write_yaml(p, [(0, 300, 95), (300, 600, 105)])
    _bump_mtime(p)

    assert loader.get() == (SlabRate(0, 300, 95), SlabRate(300, 600, 105))


def test_invalid_edit_keeps_previous_table(tmp_path):
    p = tmp_path / "rates.yaml"
    _write_yaml(p, [(0, 300, 85)])
    loader = RateTableLoader(p)

    p.write_text("rates: [{minDepth: 0, maxDepth: -1, rate: 85}]\n", encoding="utf-8")
    _bump_mtime(p)

    assert loader.get() == (SlabRate(0, 300, 85),)


def test_deleted_file_keeps_previous_table(tmp_path):
    p = tmp_path / "rates.yaml"
    _write_yaml(p, [(0, 300, 85)])
    loader = RateTableLoader(p)

    p.unlink()

    assert loader.get() == (SlabRate(0, 300, 85),)


def test_get_loader_is_cached_per_path(tmp_path):
    p = tmp_path / "rates.yaml"
    _write_yaml(p, [(0, 300, 85)])

    assert get_loader(p) is get_loader(tmp_path / "." / "rates.yaml")


def test_active_rates_default_and_configured(tmp_path):
    assert active_rates(Settings(rates_file=None)) == default_rates()

    p = tmp_path / "rates.yaml"
    _write_yaml(p, [(0, 500, 99)])
    rates = active_rates(Settings(rates_file=p))

    assert rates == [SlabRate(0, 500, 99)]
    assert isinstance(rates, list)
