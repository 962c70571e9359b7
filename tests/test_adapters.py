"""
Tests for runners and the typed tool clients.
"""

import logging

from bsnap.adapters.mock import MockRunner
from bsnap.adapters.shell.command import SubprocessRunner
from bsnap.adapters.snap import TABULAR_FLAG, PackageToolClient
from bsnap.adapters.systemd import ServiceManagerClient
from bsnap.core.models import EnabledState, InstallRequest

from .conftest import SNAP_HELP_CLASSIC, FakeSystem, FakeUnit, tsv_find

# ── Mock Runner Tests ────────────────────────────────────────────────


class TestMockRunner:
    def test_default_success(self):
        mock = MockRunner()
        result = mock.run(["anything"])
        assert result.ok
        assert mock.call_count == 1

    def test_custom_response(self):
        mock = MockRunner()
        mock.set_response(["snap", "list"], stdout="custom")
        assert mock.run(["snap", "list"]).stdout == "custom"

    def test_set_failure(self):
        mock = MockRunner()
        mock.set_failure(["snap", "remove", "x"], stderr="nope")
        result = mock.run(["snap", "remove", "x"], privileged=True)
        assert not result.ok
        assert result.privileged
        assert result.diagnostic == "nope"

    def test_records_flags_and_input(self):
        mock = MockRunner()
        mock.run(["a"], best_effort=True, input="data")
        assert mock.call_log[0].best_effort
        assert mock.inputs == ["data"]

    def test_calls_prefix(self):
        mock = MockRunner()
        mock.run(["systemctl", "start", "a"])
        mock.run(["snap", "list"])
        assert mock.calls("systemctl") == [["systemctl", "start", "a"]]

    def test_which(self):
        mock = MockRunner(binaries={"snap"})
        assert mock.which("snap")
        assert not mock.which("dnf")
        mock.add_binary("dnf")
        assert mock.which("dnf")

    def test_reset(self):
        mock = MockRunner()
        mock.set_failure(["x"])
        mock.run(["x"])
        mock.reset()
        assert mock.call_count == 0
        assert mock.run(["x"]).ok

    def test_authorize_is_a_no_op(self):
        mock = MockRunner()
        result = mock.authorize()
        assert result.ok
        assert mock.call_count == 0

    def test_repr(self):
        assert "mock" in repr(MockRunner())


class TestRunnerLogging:
    def test_best_effort_failure_logged_at_debug(self, caplog):
        mock = MockRunner()
        mock.set_failure(["systemctl", "daemon-reload"])
        with caplog.at_level(logging.DEBUG, logger="bsnap.adapters.base"):
            mock.run(["systemctl", "daemon-reload"], best_effort=True)
        records = [r for r in caplog.records if "ignored" in r.getMessage()]
        assert records and records[0].levelno == logging.DEBUG

    def test_significant_failure_logged_at_info(self, caplog):
        mock = MockRunner()
        mock.set_failure(["snap", "install", "x"])
        with caplog.at_level(logging.DEBUG, logger="bsnap.adapters.base"):
            mock.run(["snap", "install", "x"])
        assert any(
            r.levelno == logging.INFO and "Command failed" in r.getMessage()
            for r in caplog.records
        )


# ── Subprocess Runner Tests ──────────────────────────────────────────


class TestSubprocessRunner:
    def test_echo(self):
        runner = SubprocessRunner()
        result = runner.run(["echo", "hello"])
        assert result.ok
        assert result.stdout.strip() == "hello"
        assert result.command == ["echo", "hello"]

    def test_nonzero_exit(self):
        runner = SubprocessRunner()
        result = runner.run(["sh", "-c", "echo oops >&2; exit 3"])
        assert result.exit_code == 3
        assert result.diagnostic == "oops"

    def test_stdin(self):
        runner = SubprocessRunner()
        result = runner.run(["cat"], input="piped\n")
        assert result.stdout == "piped\n"

    def test_missing_binary(self):
        runner = SubprocessRunner()
        result = runner.run(["nonexistent_command_xyz_123"])
        assert result.exit_code == 127
        assert not result.ran
        assert "Command not found" in result.stderr

    def test_privileged_uses_sudo_prefix(self, monkeypatch):
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        runner = SubprocessRunner(sudo="env")
        result = runner.run(["echo", "as-root"], privileged=True)
        assert result.ok
        assert result.privileged
        assert result.command == ["echo", "as-root"]
        assert result.stdout.strip() == "as-root"

    def test_privileged_as_root_skips_sudo(self, monkeypatch):
        monkeypatch.setattr("os.geteuid", lambda: 0)
        runner = SubprocessRunner(sudo="nonexistent_sudo_xyz")
        assert runner.run(["echo", "x"], privileged=True).ok

    def test_authorize_as_root_runs_nothing(self, monkeypatch):
        monkeypatch.setattr("os.geteuid", lambda: 0)
        runner = SubprocessRunner(sudo="nonexistent_sudo_xyz")
        result = runner.authorize()
        assert result.ok
        assert result.command == []

    def test_authorize_validates_sudo(self, monkeypatch):
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        runner = SubprocessRunner(sudo="echo")
        result = runner.authorize()
        assert result.ok
        assert result.command == ["echo", "-v"]

    def test_which(self):
        runner = SubprocessRunner()
        assert runner.which("sh")
        assert not runner.which("nonexistent_command_xyz_123")


# ── Service manager client ───────────────────────────────────────────


class TestServiceManagerClient:
    def test_query_reads_both_axes(self):
        fake = FakeSystem({"a.service": FakeUnit(active=True, enabled="enabled")})
        state = ServiceManagerClient(fake).query("a.service")
        assert state.active is True
        assert state.enabled is EnabledState.ENABLED
        assert fake.mutating() == []

    def test_query_argv(self):
        mock = MockRunner()
        ServiceManagerClient(mock).query("a.service")
        assert mock.calls("systemctl") == [
            ["systemctl", "show", "-p", "UnitFileState", "--value", "a.service"],
            ["systemctl", "is-active", "a.service"],
        ]

    def test_query_failure_is_unknown(self):
        fake = FakeSystem()
        fake.query_fails = True
        state = ServiceManagerClient(fake).query("a.service")
        assert state.active is None
        assert state.enabled is EnabledState.UNKNOWN

    def test_writes_are_privileged(self):
        mock = MockRunner()
        client = ServiceManagerClient(mock)
        client.enable("a")
        client.stop("a")
        assert all(c.privileged for c in mock.call_log)

    def test_best_effort_defaults(self):
        mock = MockRunner()
        client = ServiceManagerClient(mock)
        client.unmask("a")
        client.start("a")
        client.daemon_reload()
        client.enable("a")
        assert [c.best_effort for c in mock.call_log] == [True, True, True, False]

    def test_enable_now(self):
        mock = MockRunner()
        ServiceManagerClient(mock).enable_now("a")
        assert mock.calls("systemctl") == [["systemctl", "enable", "--now", "a"]]

    def test_is_available(self):
        assert ServiceManagerClient(MockRunner(binaries={"systemctl"})).is_available()
        assert not ServiceManagerClient(MockRunner()).is_available()


# ── Package tool client ──────────────────────────────────────────────


class TestPackageToolClient:
    def test_tabular_probe(self, snap_system):
        assert PackageToolClient(snap_system).search_format() == "tabular"

    def test_classic_probe(self):
        mock = MockRunner()
        mock.set_response(["snap", "find", "--help"], stdout=SNAP_HELP_CLASSIC)
        assert PackageToolClient(mock).search_format() == "classic"

    def test_tabular_search_argv(self, snap_system):
        result, hits, dropped = PackageToolClient(snap_system).search("vlc", "tabular", 25)
        assert result.ok
        assert snap_system.calls("snap", "find", TABULAR_FLAG) == [tsv_find("vlc")]
        assert [h.name for h in hits] == ["vlc", "vlc-nightly", "mpv"]
        assert dropped == 0

    def test_classic_search_argv(self):
        mock = MockRunner()
        PackageToolClient(mock).search("vlc", "classic", 25)
        assert mock.calls("snap") == [["snap", "find", "--", "vlc"]]

    def test_leading_dash_query_stays_literal(self):
        mock = MockRunner()
        PackageToolClient(mock).search("--help", "classic", 25)
        assert mock.calls("snap") == [["snap", "find", "--", "--help"]]

    def test_failed_search_has_no_hits(self):
        mock = MockRunner()
        mock.set_failure(["snap", "find", "--", "vlc"], stderr="error: cannot search")
        result, hits, dropped = PackageToolClient(mock).search("vlc", "classic", 25)
        assert not result.ok
        assert hits == []

    def test_list_installed(self, snap_system):
        result, packages = PackageToolClient(snap_system).list_installed()
        assert result.ok
        assert [p.name for p in packages] == ["core22", "firefox", "vlc"]

    def test_install_is_privileged(self):
        mock = MockRunner()
        PackageToolClient(mock).install(InstallRequest(package_name="vlc"))
        call = mock.call_log[0]
        assert call.privileged
        assert call.command == ["snap", "install", "vlc", "--channel=stable"]

    def test_remove(self):
        mock = MockRunner()
        PackageToolClient(mock).remove("vlc")
        assert mock.call_log[0].command == ["snap", "remove", "vlc"]
        assert mock.call_log[0].privileged
