"""Tests for server bootstrapping."""
from unittest.mock import patch

from marketing_analytics_mcp.server import build_registry, configure_logging, parse_args, run_server


class TestParseArgs:
    def test_defaults(self):
        assert parse_args([]).env_file is None

    def test_env_file(self):
        assert parse_args(["--env-file", "/tmp/marketing.env"]).env_file == "/tmp/marketing.env"


class TestBuildRegistry:
    def test_tools_registered_without_credentials(self, empty_config):
        registry = build_registry(empty_config)
        assert len(registry.tools) == 23
        assert registry.config is empty_config


class TestConfigureLogging:
    def test_unknown_level_falls_back_to_info(self):
        configure_logging("chatty")
        configure_logging("debug")


class TestRunServer:
    @patch("marketing_analytics_mcp.server.asyncio.run")
    @patch("marketing_analytics_mcp.server.load_dotenv")
    @patch("marketing_analytics_mcp.server.load_config")
    def test_env_file_loaded_before_config(self, mock_load_config, mock_load_dotenv, mock_run):
        run_server(["--env-file", "custom.env"])

        mock_load_dotenv.assert_called_once_with("custom.env")
        mock_load_config.assert_called_once_with()
        mock_run.assert_called_once()
        mock_run.call_args.args[0].close()

    @patch("marketing_analytics_mcp.server.asyncio.run", side_effect=KeyboardInterrupt)
    @patch("marketing_analytics_mcp.server.load_dotenv")
    @patch("marketing_analytics_mcp.server.load_config")
    def test_keyboard_interrupt(self, mock_load_config, mock_load_dotenv, mock_run):
        run_server([])

        mock_load_dotenv.assert_called_once_with()
        mock_run.call_args.args[0].close()
