import os
import signal
import sys
import threading

import pytest

import saltdose.cli
from saltdose.cli import build_config, main
from saltdose.config import OptimizerConfig
from saltdose.errors import ConfigError

from conftest import EXAMPLES_DIR

SALTS = str(EXAMPLES_DIR / "ion_contributions.txt")
TARGETS = str(EXAMPLES_DIR / "targets.txt")


class TestBuildConfig:
    def test_defaults(self):
        assert build_config({}) == OptimizerConfig()

    def test_only_set_values_override(self):
        cfg = build_config({"volume": 10.0, "eps": None, "seed": 3, "salt_table": "x"})
        assert cfg.water_volume_l == 10.0
        assert cfg.eps == OptimizerConfig().eps
        assert cfg.seed == 3

    def test_invalid_override(self):
        with pytest.raises(ConfigError):
            build_config({"iterations": -5})


def test_end_to_end(tmp_path, capsys):
    out = tmp_path / "report" / "report.txt"
    code = main([
        SALTS, TARGETS,
        "--iterations", "3000",
        "--report-every", "1000",
        "--seed", "1",
        "--volume", "20",
        "-o", str(out),
    ])
    assert code == 0

    printed = capsys.readouterr().out
    assert "Loaded 6 salts, 6 ions, 6 constraints" in printed
    assert "ERR @1000:" in printed
    assert "ERR @3000:" in printed
    assert "Salt additions for 20 L of water:" in printed
    assert "Alkalinity:" in printed

    saved = out.read_text(encoding="utf-8")
    assert "Achieved concentrations:" in saved
    assert "ERR @" not in saved


def test_quiet_hides_progress(capsys):
    assert main([SALTS, TARGETS, "--iterations", "2000", "--report-every", "1000", "-q"]) == 0
    assert "ERR @" not in capsys.readouterr().out


def test_bad_target_file(tmp_path, capsys):
    bad = tmp_path / "targets.txt"
    bad.write_text("Ca2+ 60\nZn 5\n", encoding="utf-8")
    assert main([SALTS, str(bad)]) == 1
    err = capsys.readouterr().err
    assert "✗" in err
    assert "unknown ion 'Zn'" in err


def test_missing_salt_table(tmp_path, capsys):
    assert main([str(tmp_path / "missing.txt"), TARGETS]) == 1
    assert "not found" in capsys.readouterr().err


def test_bad_config_option(capsys):
    assert main([SALTS, TARGETS, "--eps", "0"]) == 1
    assert "eps must be > 0" in capsys.readouterr().err


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")
def test_interrupt_stops_search_and_prints_best(monkeypatch, capsys):
    real_optimize = saltdose.cli.optimize

    def interrupted(table, constraints, cfg, progress=None, cancel=None):
        def _progress(i, err):
            progress(i, err)
            if i == 1000:
                os.kill(os.getpid(), signal.SIGINT)

        return real_optimize(table, constraints, cfg, progress=_progress, cancel=cancel)

    monkeypatch.setattr(saltdose.cli, "optimize", interrupted)
    before = signal.getsignal(signal.SIGINT)

    code = main([SALTS, TARGETS, "--iterations", "3000", "--report-every", "1000", "--seed", "1"])
    assert code == 0

    printed = capsys.readouterr().out
    assert "ERR @1000:" in printed
    assert "ERR @2000:" not in printed
    assert "cancelled" in printed
    assert "Salt additions for" in printed
    assert signal.getsignal(signal.SIGINT) is before


def test_runs_outside_main_thread(capsys):
    codes = []
    worker = threading.Thread(
        target=lambda: codes.append(
            main([SALTS, TARGETS, "--iterations", "2000", "--report-every", "1000", "-q"])
        )
    )
    worker.start()
    worker.join()
    assert codes == [0]
    assert "Salt additions for" in capsys.readouterr().out
