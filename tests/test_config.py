"""
Tests for deploy configuration loading and validation.
"""

import json
from pathlib import Path

import pytest

from edgesync.config import (
    ConfigValidationError,
    DeployConfig,
    DomainRule,
    load_config,
    validate_config,
)


def _valid(**overrides):
    data = {
        "secret_id": "AKIDexample",
        "secret_key": "s3cr3t",
        "bucket": "blog-1250000000",
        "region": "ap-guangzhou",
        "upload_dir": "public",
    }
    data.update(overrides)
    return data


def _fields(errors):
    return [e.field for e in errors]


class TestValidateConfig:

    def test_minimal_config_gets_defaults(self, temp_dir):
        config, errors = validate_config(_valid(), temp_dir)

        assert errors == []
        assert isinstance(config, DeployConfig)
        assert config.upload_dir == temp_dir / "public"
        assert config.cache_type == "cdn"
        assert config.domains == []
        assert config.remove_remote_files is False
        assert config.refresh_index_page is False
        assert config.concurrency == 10

    def test_full_config(self, temp_dir):
        config, errors = validate_config(_valid(
            cache_type="edgeone",
            cdn_domains=[
                "https://www.example.com",
                {"domain": "https://static.example.com", "ignore_paths": ["/js/"], "ignore_extensions": ["MAP"]},
            ],
            remove_remote_files=True,
            refresh_index_page=True,
            concurrency=4,
        ), temp_dir)

        assert errors == []
        assert config.cache_type == "edgeone"
        assert config.domains == [
            DomainRule("https://www.example.com"),
            DomainRule("https://static.example.com", frozenset({"js"}), frozenset({".map"})),
        ]
        assert config.remove_remote_files is True
        assert config.refresh_index_page is True
        assert config.concurrency == 4

    def test_all_errors_reported_together(self, temp_dir):
        config, errors = validate_config({"bucket": "your_bucket", "concurrency": 0}, temp_dir)

        assert config is None
        assert set(_fields(errors)) == {
            "secret_id", "secret_key", "bucket", "region", "upload_dir", "concurrency",
        }

    def test_placeholder_values_rejected(self, temp_dir):
        _, errors = validate_config(_valid(secret_id="your_secret_id", region="your_region"), temp_dir)

        assert _fields(errors) == ["secret_id", "region"]
        assert "placeholder" in errors[0].message

    def test_unknown_cache_type(self, temp_dir):
        _, errors = validate_config(_valid(cache_type="akamai"), temp_dir)
        assert _fields(errors) == ["cache_type"]

    @pytest.mark.parametrize("value", [0, -1, "5", 2.5, True])
    def test_bad_concurrency(self, temp_dir, value):
        _, errors = validate_config(_valid(concurrency=value), temp_dir)
        assert _fields(errors) == ["concurrency"]

    def test_bad_domain_entries(self, temp_dir):
        _, errors = validate_config(_valid(cdn_domains=[
            "https://ok.example.com",
            "www.example.com",
            42,
            {"ignore_paths": ["a"]},
        ]), temp_dir)

        assert _fields(errors) == ["cdn_domains[1]", "cdn_domains[2]", "cdn_domains[3]"]

    def test_domains_must_be_list(self, temp_dir):
        _, errors = validate_config(_valid(cdn_domains="https://www.example.com"), temp_dir)
        assert _fields(errors) == ["cdn_domains"]

    def test_non_object(self, temp_dir):
        config, errors = validate_config(["not", "a", "dict"], temp_dir)
        assert config is None
        assert _fields(errors) == ["deploy"]


class TestLoadConfig:

    def _write(self, temp_dir: Path, data) -> Path:
        path = temp_dir / "deploy.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_flat_file(self, temp_dir):
        config, errors = load_config(self._write(temp_dir, _valid()))

        assert errors == []
        assert config.upload_dir == temp_dir / "public"

    def test_nested_under_deploy(self, temp_dir):
        path = self._write(temp_dir, {"title": "My Blog", "deploy": _valid(bucket="nested-125")})

        config, _ = load_config(path)

        assert config.bucket == "nested-125"

    def test_base_dir_override(self, temp_dir):
        site = temp_dir / "site"
        config, _ = load_config(self._write(temp_dir, _valid()), base_dir=site)
        assert config.upload_dir == site / "public"

    def test_overrides_fill_empty_fields_only(self, temp_dir):
        path = self._write(temp_dir, _valid(secret_id="", secret_key="from-file"))

        config, _ = load_config(path, overrides={"secret_id": "from-env", "secret_key": "also-env"})

        assert config.secret_id == "from-env"
        assert config.secret_key == "from-file"

    def test_empty_override_ignored(self, temp_dir):
        path = self._write(temp_dir, _valid(secret_id=""))

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path, overrides={"secret_id": ""})

        assert _fields(exc_info.value.errors) == ["secret_id"]

    def test_missing_file(self, temp_dir):
        config, errors = load_config(temp_dir / "nope.json", strict=False)

        assert config is None
        assert _fields(errors) == ["config"]
        assert "not found" in errors[0].message

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "deploy.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)

        assert _fields(exc_info.value.errors) == ["config"]

    def test_strict_error_message_lists_fields(self, temp_dir):
        path = self._write(temp_dir, {"bucket": "b"})

        with pytest.raises(ConfigValidationError, match="secret_id: required"):
            load_config(path)

    def test_domain_rule_from_dict_normalizes(self):
        rule = DomainRule.from_dict({"domain": " https://a.com ", "ignore_paths": ["/b/", "a", ""], "ignore_extensions": ["JS"]})
        assert rule == DomainRule("https://a.com", frozenset({"a", "b"}), frozenset({".js"}))
        assert DomainRule.from_dict("https://a.com") == DomainRule("https://a.com")
