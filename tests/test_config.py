"""Tests for configuration loading."""

import json

import pytest

from capicefilter.config import load_config


def test_packaged_defaults():
    cfg = load_config()
    assert cfg["csq_info_key"] == "CSQ"
    assert cfg["capice_info_key"] == "CAPICE"
    assert cfg["csq_gene_symbol_index"] == 3
    assert cfg["csq_gnomad_af_index"] == 26
    assert cfg["missing_allele"] == "."
    assert cfg["validator_start_chromosome"] == "1"


def test_user_file_overrides_defaults(tmp_path):
    config_file = tmp_path / "custom.json"
    config_file.write_text(json.dumps({"csq_info_key": "ANN", "report_preview_width": 80}))
    cfg = load_config(str(config_file))
    assert cfg["csq_info_key"] == "ANN"
    assert cfg["report_preview_width"] == 80
    assert cfg["capice_info_key"] == "CAPICE"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.json"))


def test_invalid_json(tmp_path):
    config_file = tmp_path / "broken.json"
    config_file.write_text("{not json")
    with pytest.raises(ValueError, match="Error parsing JSON"):
        load_config(str(config_file))


def test_non_object_json(tmp_path):
    config_file = tmp_path / "list.json"
    config_file.write_text("[1, 2]")
    with pytest.raises(ValueError, match="JSON object"):
        load_config(str(config_file))
