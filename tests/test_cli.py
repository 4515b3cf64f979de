"""
Tests for the command-line driver and configuration

Run with: pytest tests/test_cli.py -v
"""

import json
import logging

import pytest

from simultaneous_kelly.cli import build_parser, load_bets, main, parse_bet
from simultaneous_kelly.config.settings import CONFIG, SimultaneousKellyConfig
from simultaneous_kelly.optimization.kelly import Bet
from simultaneous_kelly.utils.logging import PACKAGE_LOGGER, get_logger, setup_logging


class TestConfig:
    """Test configuration defaults."""

    def test_optimizer_defaults(self):
        config = SimultaneousKellyConfig()

        assert config.optimization.learning_rate == 0.01
        assert config.optimization.max_iterations == 10000

    def test_sample_slates(self):
        assert len(CONFIG.sample.bets) == 7
        assert len(CONFIG.sample.defined_loss_bets) == 7
        assert all(len(b) == 3 and b[2] == 0.5 for b in CONFIG.sample.defined_loss_bets)
        assert [b[:2] for b in CONFIG.sample.defined_loss_bets] == CONFIG.sample.bets


class TestBetParsing:
    """Test bet input formats."""

    def test_parse_bet(self):
        assert parse_bet("0.6,1.0") == Bet(0.6, 1.0)
        assert parse_bet("0.3,12.8,0.5") == Bet(0.3, 12.8, 0.5)

    def test_parse_bet_invalid(self):
        with pytest.raises(ValueError):
            parse_bet("0.6,abc")
        with pytest.raises(ValueError):
            parse_bet("1.5,1.0")

    def test_load_bets_objects(self, tmp_path):
        path = tmp_path / "bets.json"
        path.write_text(json.dumps([
            {"win_probability": 0.6, "win_multiplier": 1.0},
            {"win_probability": 0.3, "win_multiplier": 12.8, "loss_fraction": 0.5},
        ]))

        assert load_bets(path) == [Bet(0.6, 1.0), Bet(0.3, 12.8, 0.5)]

    def test_load_bets_arrays(self, tmp_path):
        path = tmp_path / "bets.json"
        path.write_text(json.dumps([[0.6, 1.0], [0.3, 12.8, 0.5]]))

        assert load_bets(path) == [Bet(0.6, 1.0), Bet(0.3, 12.8, 0.5)]

    def test_load_bets_not_a_list(self, tmp_path):
        path = tmp_path / "bets.json"
        path.write_text(json.dumps({"win_probability": 0.6}))

        with pytest.raises(ValueError):
            load_bets(path)


class TestCommands:
    """Test CLI commands end to end."""

    def test_parser_defaults(self):
        args = build_parser().parse_args(["optimize", "--bet", "0.6,1.0"])

        assert args.learning_rate == CONFIG.optimization.learning_rate
        assert args.max_iterations == CONFIG.optimization.max_iterations
        assert args.bet == ["0.6,1.0"]

    def test_optimize_writes_output(self, tmp_path, capsys):
        output = tmp_path / "result.json"

        main(["optimize", "--bet", "0.6,1.0", "--output", str(output)])

        data = json.loads(output.read_text())
        assert data["allocation"][0] == pytest.approx(0.2, abs=1e-4)
        assert data["stop_reason"] == "no_improvement"
        assert "Simultaneous Kelly Summary" in capsys.readouterr().out

    def test_evaluate(self, capsys):
        main(["evaluate", "--bet", "0.6,1.0", "--allocation", "0.0"])

        out = capsys.readouterr().out
        assert "Expected log wealth: 0.0" in out

    def test_sample(self, capsys):
        main(["sample", "--max-iterations", "50"])

        out = capsys.readouterr().out
        assert "Full-stake losses" in out
        assert "Defined losses" in out
        assert out.count("Optimized value of the objective function") == 2

    def test_allocation_length_mismatch_exits(self):
        with pytest.raises(SystemExit) as exc:
            main(["evaluate", "--bet", "0.6,1.0", "--allocation", "0.1", "0.2"])

        assert exc.value.code == 2

    def test_missing_bets_exits(self):
        with pytest.raises(SystemExit) as exc:
            main(["optimize"])

        assert exc.value.code == 2

    def test_invalid_learning_rate_exits(self):
        with pytest.raises(SystemExit) as exc:
            main(["optimize", "--bet", "0.6,1.0", "--learning-rate", "0"])

        assert exc.value.code == 2

    def test_no_command(self):
        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 1


class TestMalformedBetFiles:
    """Malformed bet files end the run with status 2, not a traceback."""

    @pytest.mark.parametrize("payload", [
        [1, 2],
        [{"win_probability": None, "win_multiplier": 1.0}],
        [[0.6, None]],
        [{"win_multiplier": 1.0}],
        ["0.6,1.0"],
    ])
    def test_optimize_exits_with_status_2(self, tmp_path, payload):
        path = tmp_path / "bets.json"
        path.write_text(json.dumps(payload))

        with pytest.raises(SystemExit) as exc:
            main(["optimize", "--bets", str(path)])

        assert exc.value.code == 2

    @pytest.mark.parametrize("payload", [
        [1, 2],
        [{"win_probability": None, "win_multiplier": 1.0}],
        [[0.6, None]],
    ])
    def test_load_bets_raises_value_error(self, tmp_path, payload):
        path = tmp_path / "bets.json"
        path.write_text(json.dumps(payload))

        with pytest.raises(ValueError):
            load_bets(path)

    def test_bets_file_and_inline_bets_are_exclusive(self, tmp_path):
        path = tmp_path / "bets.json"
        path.write_text(json.dumps([[0.6, 1.0]]))

        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["optimize", "--bets", str(path), "--bet", "0.3,12.8"])

        assert exc.value.code == 2


class TestLogging:
    """Test package logging setup."""

    def test_writes_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"

        main(["--log-file", str(log_file), "optimize", "--bet", "0.6,1.0"])

        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()
        text = log_file.read_text()
        assert "simultaneous_kelly.optimization.kelly" in text
        assert "no_improvement" in text

    def test_leaves_root_logger_alone(self):
        root = logging.getLogger()
        handlers = root.handlers[:]

        logger = setup_logging(level="DEBUG")

        assert root.handlers == handlers
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert not logger.propagate

    def test_verbose_flag_enables_debug(self):
        main(["-v", "optimize", "--bet", "0.6,1.0", "--max-iterations", "2"])

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")

    def test_get_logger_namespaced(self):
        assert get_logger("simultaneous_kelly.cli").name == "simultaneous_kelly.cli"
        assert get_logger("reports").name == "simultaneous_kelly.reports"
