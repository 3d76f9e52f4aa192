# tests/test_main.py

"""Tests for command-line routing in main.py."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import main


class TestParser(unittest.TestCase):

    def test_defaults_launch_tui(self) -> None:
        args = main._build_parser().parse_args([])
        self.assertFalse(main._is_headless(args))
        self.assertIsNone(args.link)
        self.assertEqual(args.output_format, "json")

    def test_commands_are_exclusive(self) -> None:
        with self.assertRaises(SystemExit):
            main._build_parser().parse_args(["--list", "--health"])

    def test_list_options(self) -> None:
        args = main._build_parser().parse_args(
            ["--list", "-c", "beauty", "--sort", "rating-desc", "--pages", "2"]
        )
        self.assertTrue(main._is_headless(args))
        self.assertEqual(args.category, "beauty")
        self.assertEqual(args.pages, 2)


class TestRouting(unittest.TestCase):

    @patch("src.cli.runner.cli_show", new_callable=AsyncMock, return_value=0)
    def test_product_routes_to_show(self, mock_show: AsyncMock) -> None:
        args = main._build_parser().parse_args(["--product", "5", "-f", "table"])
        self.assertEqual(main._run_cli(args), 0)
        mock_show.assert_awaited_once_with(5, "table")

    @patch("src.cli.runner.cli_resolve_link", return_value=1)
    def test_resolve_is_sync(self, mock_resolve: MagicMock) -> None:
        args = main._build_parser().parse_args(["--resolve", "x://y"])
        self.assertEqual(main._run_cli(args), 1)
        mock_resolve.assert_called_once_with("x://y")

    @patch("main.setup_logging")
    @patch("main._run_tui")
    def test_main_without_command_runs_tui(
        self, mock_tui: MagicMock, _logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["catalog_browser", "--link", "productsapp://product/1"]):
            main.main()
        mock_tui.assert_called_once_with("productsapp://product/1")
        _logging.assert_called_once_with(tui=True)

    @patch("main.setup_logging")
    @patch("main._run_cli", return_value=0)
    def test_main_exits_with_cli_code(
        self, _cli: MagicMock, _logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["catalog_browser", "--categories"]):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        self.assertEqual(ctx.exception.code, 0)
        _logging.assert_called_once_with(tui=False)


if __name__ == "__main__":
    unittest.main()
