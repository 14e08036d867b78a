"""Tests for the show_account_tree_cli adapter."""

from unittest.mock import MagicMock

from dre_config.adapters import show_account_tree_cli
from dre_config.domain.models import (
    AccountKind,
    AccountNode,
    AccountTreeRow,
    FlexPayload,
)


def _row(node_id: str, name: str, level: int, active: bool = True):
    node = AccountNode(
        id=node_id,
        company_id="C1",
        code=node_id,
        name=name,
        kind=AccountKind.FLEX,
        payload=FlexPayload(),
        parent_id=None,
        display_order=1,
        is_active=active,
    )
    return AccountTreeRow(node=node, level=level, has_children=False)


def _patch(monkeypatch, use_case) -> MagicMock:
    logger = MagicMock()
    monkeypatch.setattr(show_account_tree_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(
        show_account_tree_cli,
        "get_usage_logger",
        lambda: MagicMock(),
    )
    monkeypatch.setattr(
        show_account_tree_cli,
        "build_get_account_tree_use_case",
        lambda: use_case,
    )
    return logger


def test_main_prints_indented_tree(monkeypatch, capsys) -> None:
    """Rows are printed with code, name, kind and inactive marker."""
    use_case = MagicMock()
    use_case.execute.return_value = [
        _row("F01", "Ajustes", 0),
        _row("F01.01", "Manual", 1, active=False),
    ]
    _patch(monkeypatch, use_case)
    monkeypatch.setenv("DRE_COMPANY_ID", "C1")
    monkeypatch.delenv("DRE_INCLUDE_INACTIVE", raising=False)

    show_account_tree_cli.main()

    use_case.execute.assert_called_once_with("C1", include_inactive=True)
    assert capsys.readouterr().out.splitlines() == [
        "F01 Ajustes [flex]",
        "  F01.01 Manual [flex] (inactive)",
    ]


def test_main_reports_empty_tree(monkeypatch, capsys) -> None:
    """An empty company prints a short notice."""
    use_case = MagicMock()
    use_case.execute.return_value = []
    _patch(monkeypatch, use_case)
    monkeypatch.setenv("DRE_COMPANY_ID", "C7")
    monkeypatch.setenv("DRE_INCLUDE_INACTIVE", "0")

    show_account_tree_cli.main()

    use_case.execute.assert_called_once_with("C7", include_inactive=False)
    assert "No accounts configured for company C7." in capsys.readouterr().out


def test_main_requires_company(monkeypatch) -> None:
    """Without DRE_COMPANY_ID nothing is read."""
    use_case = MagicMock()
    logger = _patch(monkeypatch, use_case)
    monkeypatch.delenv("DRE_COMPANY_ID", raising=False)

    show_account_tree_cli.main()

    use_case.execute.assert_not_called()
    logger.warning.assert_called_once()
