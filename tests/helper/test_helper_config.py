"""Tests for env-based configuration parsing."""

import pytest


def test_list_val_parses_bracketed_list(helper_config, monkeypatch):
    monkeypatch.setenv("SYNC_FILES", "[bot_logic.py, rag.py]")
    assert helper_config.get_list_val("SYNC_FILES") == ["bot_logic.py", "rag.py"]


def test_list_val_without_brackets_names_format(helper_config, monkeypatch):
    monkeypatch.setenv("SYNC_FILES", "bot_logic.py,rag.py")
    with pytest.raises(ValueError, match=r"must be in the format '\[elem1,elem2,\.\.\.\]'"):
        helper_config.get_list_val("SYNC_FILES")


def test_list_val_invalid_element_names_expected_format(helper_config, monkeypatch):
    monkeypatch.setenv("PORTS", "[8000,abc]")
    with pytest.raises(ValueError, match=r"Expected format: '\[elem1,elem2,\.\.\.\]'. Type set to int"):
        helper_config.get_list_val("PORTS", element_type=int)


def test_list_val_falls_back_to_default(helper_config, monkeypatch):
    monkeypatch.delenv("SYNC_FILES", raising=False)
    assert helper_config.get_list_val("SYNC_FILES", default=["config.py"]) == ["config.py"]
