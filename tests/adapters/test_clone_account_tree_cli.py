"""Tests for the clone_account_tree_cli adapter."""

from unittest.mock import MagicMock

from dre_config.adapters import clone_account_tree_cli
from dre_config.application.use_cases.clone_account_tree import (
    CloneAccountTreeResult,
)
from dre_config.domain.errors import SelfCloneError


def _patch(monkeypatch, use_case) -> MagicMock:
    logger = MagicMock()
    monkeypatch.setattr(clone_account_tree_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(
        clone_account_tree_cli,
        "get_usage_logger",
        lambda: MagicMock(),
    )
    monkeypatch.setattr(
        clone_account_tree_cli,
        "build_clone_account_tree_use_case",
        lambda: use_case,
    )
    return logger


def test_main_prints_clone_summary(monkeypatch, capsys) -> None:
    """The CLI runs the clone and prints counts."""
    use_case = MagicMock()
    use_case.execute.return_value = CloneAccountTreeResult(
        source_company_id="C1",
        target_company_id="C2",
        source_count=6,
        cloned_count=5,
        id_map={},
    )
    _patch(monkeypatch, use_case)
    monkeypatch.setenv("DRE_CLONE_SOURCE", "C1")
    monkeypatch.setenv("DRE_CLONE_TARGET", "C2")
    monkeypatch.setenv("DRE_CLONE_REPLACE", "true")

    clone_account_tree_cli.main()

    use_case.execute.assert_called_once_with("C1", "C2", replace_existing=True)
    assert "Cloned 5 of 6 accounts from C1 to C2." in capsys.readouterr().out


def test_main_requires_both_companies(monkeypatch, capsys) -> None:
    """Missing variables are reported without running the clone."""
    use_case = MagicMock()
    logger = _patch(monkeypatch, use_case)
    monkeypatch.setenv("DRE_CLONE_SOURCE", "C1")
    monkeypatch.delenv("DRE_CLONE_TARGET", raising=False)

    clone_account_tree_cli.main()

    use_case.execute.assert_not_called()
    logger.warning.assert_called_once()
    assert capsys.readouterr().out == ""


def test_main_logs_domain_errors(monkeypatch, capsys) -> None:
    """Validation failures are logged with their error code."""
    use_case = MagicMock()
    use_case.execute.side_effect = SelfCloneError()
    logger = _patch(monkeypatch, use_case)
    monkeypatch.setenv("DRE_CLONE_SOURCE", "C1")
    monkeypatch.setenv("DRE_CLONE_TARGET", "C1")
    monkeypatch.delenv("DRE_CLONE_REPLACE", raising=False)

    clone_account_tree_cli.main()

    use_case.execute.assert_called_once_with("C1", "C1", replace_existing=False)
    assert "SELF_CLONE" in logger.error.call_args.args[0]
    assert capsys.readouterr().out == ""
