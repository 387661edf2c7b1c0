"""Tests for printer module."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from conferente.printer import Printer


class TestListPrinters:
    def test_list_printers_no_lpstat(self):
        """Raises RuntimeError when lpstat is not available."""
        with patch("shutil.which", return_value=None):
            with pytest.raises(RuntimeError, match="lpstat"):
                Printer.list_printers()

    def test_list_printers_with_printers(self):
        """Returns list of printers from lpstat output."""
        with patch("shutil.which", return_value="/usr/bin/lpstat"):
            default_result = MagicMock()
            default_result.returncode = 0
            default_result.stdout = "system default destination: Termica_80\n"

            list_result = MagicMock()
            list_result.returncode = 0
            list_result.stdout = (
                "printer Termica_80 is idle.\n"
                "printer Escritorio disabled since ...\n"
            )

            with patch(
                "subprocess.run",
                side_effect=[default_result, list_result],
            ):
                printers = Printer.list_printers()

        assert len(printers) == 2
        assert printers[0].name == "Termica_80"
        assert printers[0].is_default is True
        assert printers[1].name == "Escritorio"
        assert printers[1].is_default is False

    def test_list_printers_lpstat_timeout(self):
        """A hung lpstat yields an empty list."""
        with patch("shutil.which", return_value="/usr/bin/lpstat"):
            with patch(
                "subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="lpstat", timeout=10),
            ):
                assert Printer.list_printers() == []


class TestPrintFile:
    def test_print_file_not_found(self):
        """Raises FileNotFoundError for nonexistent file."""
        with pytest.raises(FileNotFoundError, match="Arquivo não encontrado"):
            Printer.print_file("/nonexistent/file.pdf")

    def test_print_file_no_lpr(self, tmp_path):
        pdf_file = tmp_path / "ticket.pdf"
        pdf_file.write_text("dummy")

        with patch("shutil.which", return_value=None):
            with pytest.raises(RuntimeError, match="lpr"):
                Printer.print_file(pdf_file)

    def test_print_file_default_printer(self, tmp_path):
        pdf_file = tmp_path / "ticket.pdf"
        pdf_file.write_text("dummy")

        result = MagicMock()
        result.returncode = 0

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch("subprocess.run", return_value=result) as mock_run:
                Printer.print_file(pdf_file)

        mock_run.assert_called_once()
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "lpr"
        assert "-P" not in cmd
        assert "-#" not in cmd
        assert cmd[-1] == str(pdf_file)

    def test_print_file_named_printer_and_copies(self, tmp_path):
        pdf_file = tmp_path / "ticket.pdf"
        pdf_file.write_text("dummy")

        result = MagicMock()
        result.returncode = 0

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch("subprocess.run", return_value=result) as mock_run:
                Printer.print_file(pdf_file, printer_name="Termica_80", copies=2)

        cmd = mock_run.call_args[0][0]
        assert cmd[cmd.index("-P") + 1] == "Termica_80"
        assert cmd[cmd.index("-#") + 1] == "2"

    def test_print_file_failure(self, tmp_path):
        pdf_file = tmp_path / "ticket.pdf"
        pdf_file.write_text("dummy")

        result = MagicMock()
        result.returncode = 1
        result.stderr = "No printer found"

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch("subprocess.run", return_value=result):
                with pytest.raises(RuntimeError, match="Falha na impressão"):
                    Printer.print_file(pdf_file)

    def test_print_file_timeout(self, tmp_path):
        pdf_file = tmp_path / "ticket.pdf"
        pdf_file.write_text("dummy")

        with patch("shutil.which", return_value="/usr/bin/lpr"):
            with patch(
                "subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="lpr", timeout=30),
            ):
                with pytest.raises(RuntimeError, match="Tempo esgotado"):
                    Printer.print_file(pdf_file)
