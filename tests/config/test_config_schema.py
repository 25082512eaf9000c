from __future__ import annotations

import pytest

from psearch.config.defaults import default_config
from psearch.config.schema import AppConfig, clamp_field


class TestToDict:
    def test_keys_present(self) -> None:
        assert set(AppConfig().to_dict()) == {"workers", "singlePass", "sortResults", "showProgress", "maxPending"}

    def test_defaults(self) -> None:
        d = default_config().to_dict()
        assert d["workers"] is None
        assert d["maxPending"] is None
        assert d["showProgress"] is True
        assert d["singlePass"] is False


class TestFromDict:
    def test_round_trip(self) -> None:
        cfg = AppConfig(workers=3, single_pass=True, sort_results=True, show_progress=False, max_pending=50)
        assert AppConfig.from_dict(cfg.to_dict(), default_config()) == cfg

    def test_missing_keys_use_defaults(self) -> None:
        defaults = AppConfig(workers=2, sort_results=True)
        assert AppConfig.from_dict({}, defaults) == defaults

    def test_ints_are_clamped(self) -> None:
        cfg = AppConfig.from_dict({"workers": 0, "maxPending": -4}, default_config())
        assert cfg.workers == 1
        assert cfg.max_pending == 1

    def test_string_bools_fall_back_to_defaults(self) -> None:
        cfg = AppConfig.from_dict({"showProgress": "false", "singlePass": 1}, default_config())
        assert cfg.show_progress is True
        assert cfg.single_pass is False

    def test_non_integer_workers_rejected(self) -> None:
        with pytest.raises(ValueError, match="workers"):
            AppConfig.from_dict({"workers": "4"}, default_config())

    def test_bool_workers_rejected(self) -> None:
        with pytest.raises(ValueError, match="workers"):
            AppConfig.from_dict({"workers": True}, default_config())

    def test_null_workers_means_auto(self) -> None:
        cfg = AppConfig.from_dict({"workers": None}, AppConfig(workers=4))
        assert cfg.workers is None


class TestClampField:
    def test_clamps_to_minimum(self) -> None:
        assert clamp_field(0, "workers") == 1
        assert clamp_field(8, "workers") == 8

    def test_none_passes_through(self) -> None:
        assert clamp_field(None, "workers") is None

    def test_unknown_field_unchanged(self) -> None:
        assert clamp_field(-1, "unknown") == -1
