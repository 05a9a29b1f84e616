import logging

from throttle_gate.cli import main


def test_demo_permits_once(capsys):
    assert main(["demo", "--interval", "10", "--label", "Break", "--attempts", "100"]) == 0
    out = capsys.readouterr().out
    assert "Break called" in out
    assert "total calls 1" in out


def test_demo_zero_interval_fails(capsys):
    assert main(["demo", "--interval", "0", "--attempts", "3"]) == 1
    assert "total calls 4" in capsys.readouterr().out


def test_simulate(tmp_path, capsys):
    p = tmp_path / "gates.yaml"
    p.write_text("gates:\n  - label: Always\n    interval: 0\n  - label: Rare\n    interval: 3600\n", encoding="utf-8")

    assert main(["simulate", "--config", str(p), "--calls", "5"]) == 0
    out = capsys.readouterr().out
    assert "Always called" in out and "total calls 5" in out
    assert "Rare called" in out and "total calls 1" in out


def test_log_file_flag(tmp_path, capsys):
    log_file = tmp_path / "run.log"
    root = logging.getLogger()
    try:
        assert main(["--log-file", str(log_file), "demo", "--attempts", "5"]) == 0
        for h in root.handlers:
            h.flush()
        assert "Gate Break: 1 permitted, 5 rejected" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            if isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file.resolve()):
                root.removeHandler(h)
                h.close()
