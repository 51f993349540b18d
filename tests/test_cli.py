"""
Tests for the ensure-access command line.
"""

import logging
import os
import stat
from unittest.mock import patch

import pytest

from ensure_access.cli import create_parser, main


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / "share"
    root.mkdir()
    (root / "doc.txt").write_text("x")
    os.chmod(root / "doc.txt", 0o600)
    os.chmod(root, 0o700)
    return root


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("ENSURE_ACCESS_CONFIG", "ENSURE_ACCESS_DRY_RUN", "ENSURE_ACCESS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def mode_of(path):
    return stat.S_IMODE(os.lstat(path).st_mode)


def info_lines(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]


class TestParser:
    def test_repeatable_path(self, tree):
        args = create_parser().parse_args(["-m", "755", "-p", str(tree), "--path", str(tree / "doc.txt")])

        assert args.paths == [str(tree), str(tree / "doc.txt")]
        assert args.mode == "755"
        assert args.dry_run is None

    @pytest.mark.parametrize("mode", ["75", "7555", "8", "ab", "abc", "758"])
    def test_bad_mode_is_rejected(self, mode, tree, capsys):
        with pytest.raises(SystemExit) as excinfo:
            create_parser().parse_args(["--mode", mode, "--path", str(tree)])

        assert excinfo.value.code == 2
        assert "octal" in capsys.readouterr().err

    def test_missing_path_is_rejected(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            create_parser().parse_args(["--mode", "755", "--path", str(tmp_path / "missing")])

        assert excinfo.value.code == 2
        assert "does not exist" in capsys.readouterr().err


    def test_dangling_symlink_is_rejected(self, tmp_path, capsys):
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "missing")

        with pytest.raises(SystemExit) as excinfo:
            create_parser().parse_args(["--mode", "755", "--path", str(link)])

        assert excinfo.value.code == 2
        assert "does not exist" in capsys.readouterr().err


class TestMain:
    def test_applies_changes(self, tree, caplog):
        assert main(["--mode", "755", "--path", str(tree)]) == 0

        assert mode_of(tree) == 0o755
        assert mode_of(tree / "doc.txt") == 0o755
        assert info_lines(caplog) == [
            f"chmod 1755 {tree}",
            f"chmod 0755 {tree / 'doc.txt'}",
        ]

    def test_dry_run(self, tree, caplog):
        assert main(["--mode", "755", "--path", str(tree), "--dry-run"]) == 0

        assert mode_of(tree) == 0o700
        assert mode_of(tree / "doc.txt") == 0o600
        assert info_lines(caplog) == [
            f"[dry run] chmod 1755 {tree}",
            f"[dry run] chmod 0755 {tree / 'doc.txt'}",
        ]

    def test_missing_mode(self, tree, caplog):
        with patch("ensure_access.cli.PermissionEnforcer") as enforcer:
            assert main(["--path", str(tree)]) == 1

        enforcer.assert_not_called()
        assert "--mode option required" in caplog.text

    def test_missing_path(self, caplog):
        with patch("ensure_access.cli.PermissionEnforcer") as enforcer:
            assert main(["--mode", "755"]) == 1

        enforcer.assert_not_called()
        assert "--path option required" in caplog.text

    def test_bad_mode_touches_nothing(self, tree):
        with pytest.raises(SystemExit) as excinfo:
            main(["--mode", "78", "--path", str(tree)])

        assert excinfo.value.code == 2
        assert mode_of(tree) == 0o700

    def test_failed_path_exits_non_zero(self, tree, caplog):
        denied = PermissionError(13, "Permission denied", str(tree))
        with patch("ensure_access.walker.os.scandir", side_effect=denied):
            assert main(["--mode", "755", "--path", str(tree)]) == 1

        assert f'error ensuring permissions for "{tree}"' in caplog.text
        assert "Permission denied" in caplog.text
        # The root itself was changed before its listing failed
        assert mode_of(tree) == 0o755

    def test_config_file(self, tree, tmp_path):
        config = tmp_path / "ensure-access.yaml"
        config.write_text(f'mode: "750"\npaths:\n  - {tree}\n')

        assert main(["--config", str(config)]) == 0

        assert mode_of(tree) == 0o750
        assert mode_of(tree / "doc.txt") == 0o750

    def test_bad_config_file(self, tmp_path, caplog):
        config = tmp_path / "ensure-access.yaml"
        config.write_text("mode: 755\n")

        assert main(["--config", str(config)]) == 1
        assert "quoted string" in caplog.text

    def test_verbose_reports_unchanged(self, tree, caplog):
        os.chmod(tree / "doc.txt", 0o777)

        assert main(["-v", "-m", "700", "-p", str(tree / "doc.txt")]) == 0
        assert "already has rwx rwx rwx" in caplog.text
