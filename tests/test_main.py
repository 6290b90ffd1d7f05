"""Tests for main entry point."""

from argparse import Namespace
from unittest.mock import patch, MagicMock

from bundle_size.main import main


class TestMain:
    """Test the main entry point function."""

    @patch('bundle_size.main.Application')
    @patch('bundle_size.main.CLIConfigManager')
    @patch('bundle_size.main.setup_logging')
    @patch('bundle_size.main.get_logger')
    def test_main_successful_execution(self, mock_get_logger, mock_setup_logging,
                                       mock_cli_manager_class, mock_app_class):
        """Test successful execution of main function."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        mock_cli_manager = MagicMock()
        mock_args = Namespace(log_level='INFO', log_format='standard', command='report')
        mock_cli_manager.parse_args.return_value = mock_args
        mock_cli_manager_class.return_value = mock_cli_manager

        mock_app = MagicMock()
        mock_app.run.return_value = 0
        mock_app_class.return_value = mock_app

        result = main()

        assert result == 0
        mock_setup_logging.assert_called_once_with(level='INFO', format_type='standard')
        mock_get_logger.assert_called_with('bundle_size.main')
        mock_app.run.assert_called_once_with(mock_args)

    @patch('bundle_size.main.Application')
    @patch('bundle_size.main.CLIConfigManager')
    @patch('bundle_size.main.setup_logging')
    @patch('bundle_size.main.get_logger')
    def test_main_application_returns_error_code(self, mock_get_logger, mock_setup_logging,
                                                 mock_cli_manager_class, mock_app_class):
        """Test main passes the application's exit code through."""
        mock_cli_manager_class.return_value.parse_args.return_value = Namespace(
            log_level='DEBUG', log_format='json', command='history')
        mock_app_class.return_value.run.return_value = 2

        assert main() == 2
        mock_setup_logging.assert_called_once_with(level='DEBUG', format_type='json')

    @patch('bundle_size.main.CLIConfigManager')
    @patch('bundle_size.main.setup_logging')
    @patch('bundle_size.main.get_logger')
    def test_main_keyboard_interrupt(self, mock_get_logger, mock_setup_logging,
                                     mock_cli_manager_class):
        """Test main function handles KeyboardInterrupt."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        mock_cli_manager_class.return_value.parse_args.side_effect = KeyboardInterrupt()

        assert main() == 130
        mock_logger.info.assert_called_with("Interrupted by user")

    @patch('bundle_size.main.CLIConfigManager')
    @patch('bundle_size.main.setup_logging')
    @patch('bundle_size.main.get_logger')
    def test_main_unexpected_exception(self, mock_get_logger, mock_setup_logging,
                                       mock_cli_manager_class):
        """Test main function handles unexpected exceptions."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        mock_cli_manager_class.return_value.parse_args.side_effect = RuntimeError("Test error")

        assert main() == 1
        mock_logger.error.assert_called_with("Unexpected error: Test error")

    @patch('bundle_size.main.logging.getLogger')
    @patch('bundle_size.main.CLIConfigManager')
    @patch('bundle_size.main.setup_logging')
    @patch('bundle_size.main.get_logger')
    def test_main_exception_without_handlers(self, mock_get_logger, mock_setup_logging,
                                             mock_cli_manager_class, mock_root_logger):
        """Test logging is set up before reporting an early failure."""
        mock_root_logger.return_value.handlers = []
        mock_cli_manager_class.return_value.parse_args.side_effect = ValueError("Config error")

        assert main() == 1
        mock_setup_logging.assert_called_once_with()
