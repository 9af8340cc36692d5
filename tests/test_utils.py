"""
Utility function tests
"""
import logging
import os
from datetime import date, datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from log_setup import get_log_file_path, setup_logging
from queries import year_month
from utils import app_dir, fmt_km, fmt_money, normalize_date, parse_date, safe_float, safe_int, to_date


class TestSafeFloat:
    """Defensive numeric coercion"""

    @pytest.mark.parametrize("value,expected", [
        (12, 12.0),
        ("12.5", 12.5),
        (" -3 ", -3.0),
        (None, 0.0),
        ("", 0.0),
        ("  ", 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (True, 0.0),
        ([], 0.0),
    ])
    def test_values(self, value, expected: float) -> None:
        assert safe_float(value) == expected

    def test_custom_default(self) -> None:
        assert safe_float("abc", None) is None

    @pytest.mark.parametrize("value,expected", [("7", 7), (3.9, 3), ("-2.5", -2), ("x", 0), (None, 0)])
    def test_safe_int(self, value, expected: int) -> None:
        assert safe_int(value) == expected


class TestDates:
    """Date helpers"""

    def test_parse_date(self) -> None:
        assert parse_date(" 2026-03-10 ") == date(2026, 3, 10)

    def test_parse_date_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_date("10/03/2026")

    def test_normalize_date_pads_month_and_day(self) -> None:
        assert normalize_date("2026-3-5") == "2026-03-05"
        assert normalize_date(" 2026-03-05 ") == "2026-03-05"

    def test_normalized_date_matches_its_month(self) -> None:
        assert year_month("2026-03").matches(normalize_date("2026-3-5"))

    @pytest.mark.parametrize("value", ["05/03/2026", "", "2026-02-30", None])
    def test_normalize_date_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            normalize_date(value)

    def test_to_date(self) -> None:
        assert to_date("2026-03-10") == date(2026, 3, 10)
        assert to_date(date(2026, 3, 10)) == date(2026, 3, 10)
        assert to_date(datetime(2026, 3, 10, 23, 59)) == date(2026, 3, 10)


class TestFormatting:
    """Display rounding"""

    def test_money(self) -> None:
        assert fmt_money(1234.567, "₹") == "₹1,234.57"
        assert fmt_money(-50) == "-50.00"

    def test_km(self) -> None:
        assert fmt_km(85.55) in ("85.5", "85.6")
        assert fmt_km(-80) == "-80.0"


class TestAppDir:
    """Data directory"""

    def test_env_override(self, app_home: Path) -> None:
        path = app_dir()

        assert path == str(app_home)
        assert os.path.isdir(path)


class TestSetupLogging:
    """Logging bootstrap"""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        level = root.level
        yield
        for h in root.handlers[:]:
            if isinstance(h, TimedRotatingFileHandler) or type(h) is logging.StreamHandler:
                root.removeHandler(h)
                h.close()
        root.setLevel(level)

    def test_console_and_file_handlers(self, tmp_path: Path) -> None:
        root = setup_logging(log_dir=str(tmp_path / "logs"))

        kinds = {type(h).__name__ for h in root.handlers}
        assert kinds == {"StreamHandler", "TimedRotatingFileHandler"}

        logging.getLogger("store").info("hello from test")
        for h in root.handlers:
            h.flush()
        text = Path(get_log_file_path(str(tmp_path / "logs"))).read_text(encoding="utf-8")
        assert "| INFO     | store | hello from test" in text

    def test_called_twice_does_not_duplicate(self, tmp_path: Path) -> None:
        setup_logging(log_dir=str(tmp_path / "logs"))
        root = setup_logging(log_dir=str(tmp_path / "logs"))

        assert len(root.handlers) == 2

    def test_default_dir_under_app_home(self, app_home: Path) -> None:
        assert get_log_file_path() == os.path.join(str(app_home), "logs", "faresplit.log")
