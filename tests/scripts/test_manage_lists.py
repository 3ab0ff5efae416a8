"""Tests for the list management command line."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from repairbeam.domain.value_objects import Category
from scripts.manage_lists import build_parser, run


class TestArgumentParsing:
    """Tests for command line parsing."""

    def test_category_is_resolved(self) -> None:
        """Category names are matched case-insensitively."""
        args = build_parser().parse_args(["update", "--category", "laptop"])
        assert args.category is Category.LAPTOP

    def test_unknown_category_is_usage_error(self, capsys) -> None:
        """An unknown category exits with a usage message, not a traceback."""
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["generate-models", "--category", "Tablet"])

        assert excinfo.value.code == 2
        err = capsys.readouterr().err
        assert "Unknown device category 'Tablet'" in err
        assert "Traceback" not in err

    def test_category_required(self) -> None:
        """Category commands need --category."""
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["update"])
        assert excinfo.value.code == 2


class TestRun:
    """Tests for command dispatch."""

    @pytest.mark.asyncio
    async def test_update_uses_parsed_category(self) -> None:
        """The update command refreshes the parsed category."""
        service = MagicMock()
        service.refresh_brand_list = AsyncMock(return_value=MagicMock(items=["Apple", "Dell"]))
        args = build_parser().parse_args(["update", "--category", "LAPTOP"])

        with patch("scripts.manage_lists.create_tables", new=AsyncMock()), patch(
            "scripts.manage_lists.get_list_service", return_value=service
        ):
            exit_code = await run(args)

        assert exit_code == 0
        service.refresh_brand_list.assert_awaited_once_with(Category.LAPTOP)

    @pytest.mark.asyncio
    async def test_sweep_without_brand_list_fails(self) -> None:
        """A model sweep with no brand list reports an error exit code."""
        service = MagicMock()
        service.refresh_all_model_lists = AsyncMock(return_value=None)
        args = build_parser().parse_args(["generate-models", "--category", "Phone"])

        with patch("scripts.manage_lists.create_tables", new=AsyncMock()), patch(
            "scripts.manage_lists.get_list_service", return_value=service
        ):
            exit_code = await run(args)

        assert exit_code == 1
