"""
Tests for subprocess/supervisor.py.

Tests the back-end supervisor with a mocked process factory:
- Spawning and argument substitution
- Child death detection
- Idempotent shutdown
- SIGTERM then SIGKILL escalation
"""

import signal
import subprocess
from unittest.mock import Mock, call, patch

import pytest

from fcgishim.exceptions import (
    ArgumentSubstitutionError,
    ChildExitedError,
    SpawnError,
    SupervisorError,
)
from fcgishim.subprocess.arguments import PLACEHOLDER
from fcgishim.subprocess.supervisor import ProcessSupervisor, SupervisorState

SOCK = "/tmp/fcgi-shim-test/backend.sock"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def proc():
    """Mock Popen object for a running child."""
    proc = Mock()
    proc.pid = 4242
    proc.poll.return_value = None
    proc.wait.return_value = -15
    return proc


@pytest.fixture
def popen(proc):
    return Mock(return_value=proc)


@pytest.fixture
def mock_signal():
    """Keep the real SIGCHLD disposition untouched."""
    with patch("fcgishim.subprocess.supervisor.signal.signal") as mock:
        mock.return_value = signal.SIG_DFL
        yield mock


@pytest.fixture
def mock_release():
    with patch("fcgishim.subprocess.supervisor.release_socket_path") as mock:
        yield mock


@pytest.fixture
def supervisor(mock_logger, popen, mock_signal, mock_release):
    return ProcessSupervisor(
        mock_logger, ["app", "--listen", PLACEHOLDER], SOCK, kill_grace=0.5, popen=popen
    )


# =============================================================================
# Construction and spinup
# =============================================================================


@pytest.mark.unit
class TestConstruction:
    """Test ProcessSupervisor initialization."""

    def test_initial_state(self, supervisor):
        assert supervisor.state is SupervisorState.NOT_STARTED
        assert supervisor.pid is None
        assert supervisor.socket_path == SOCK

    def test_argv_substituted(self, supervisor):
        assert supervisor.argv == ["app", "--listen", SOCK]

    def test_bad_command_fails_before_spawn(self, mock_logger, popen):
        """Substitution errors are raised by the constructor."""
        with pytest.raises(ArgumentSubstitutionError):
            ProcessSupervisor(mock_logger, [PLACEHOLDER, PLACEHOLDER], SOCK, popen=popen)

        popen.assert_not_called()


@pytest.mark.unit
class TestSpinup:
    """Test spinup."""

    def test_spawns_child(self, supervisor, popen, proc):
        pid = supervisor.spinup()

        assert pid == 4242
        assert supervisor.pid == 4242
        assert supervisor.state is SupervisorState.RUNNING
        popen.assert_called_once_with(
            ["app", "--listen", SOCK],
            stdin=subprocess.DEVNULL,
            stdout=2,
            close_fds=True,
        )

    def test_installs_child_handler(self, supervisor, mock_signal):
        supervisor.spinup()

        mock_signal.assert_called_once_with(
            signal.SIGCHLD, supervisor._handle_child_signal
        )

    def test_spinup_twice_rejected(self, supervisor):
        supervisor.spinup()

        with pytest.raises(SupervisorError):
            supervisor.spinup()

    def test_exec_failure(self, mock_logger, mock_signal, mock_release):
        """A program that cannot be executed raises SpawnError."""
        popen = Mock(side_effect=FileNotFoundError(2, "No such file or directory"))
        supervisor = ProcessSupervisor(mock_logger, ["missing"], SOCK, popen=popen)

        with pytest.raises(SpawnError) as exc_info:
            supervisor.spinup()

        assert exc_info.value.context["program"] == "missing"
        assert supervisor.state is SupervisorState.NOT_STARTED

    def test_child_dead_on_arrival(self, supervisor, proc):
        """A child that exits before spinup returns is reported."""
        proc.poll.return_value = 1

        with pytest.raises(ChildExitedError) as exc_info:
            supervisor.spinup()

        assert exc_info.value.pid == 4242
        assert exc_info.value.returncode == 1


# =============================================================================
# Child death
# =============================================================================


@pytest.mark.unit
class TestCheckChild:
    """Test child-death detection."""

    def test_running_child_ignored(self, supervisor):
        supervisor.spinup()

        supervisor.check_child()  # should not raise

    def test_exited_child_raises(self, supervisor, proc, mock_logger):
        supervisor.spinup()
        proc.poll.return_value = 3

        with pytest.raises(ChildExitedError):
            supervisor._handle_child_signal(signal.SIGCHLD, None)

        mock_logger.error.assert_called_once_with(
            "backend exited unexpectedly", extra={"pid": 4242, "returncode": 3}
        )

    def test_ignored_before_start(self, supervisor, proc):
        proc.poll.return_value = 0

        supervisor.check_child()  # should not raise

    def test_ignored_during_shutdown(self, supervisor, proc):
        """The child exiting because we killed it is not an error."""
        supervisor.spinup()
        supervisor.shutdown()
        proc.poll.return_value = -15

        supervisor.check_child()  # should not raise


# =============================================================================
# Shutdown
# =============================================================================


@pytest.mark.unit
class TestShutdown:
    """Test shutdown and termination escalation."""

    def test_terminates_child(self, supervisor, proc, mock_release):
        supervisor.spinup()
        supervisor.shutdown()

        proc.send_signal.assert_called_once_with(signal.SIGTERM)
        proc.wait.assert_called_once_with(timeout=0.5)
        mock_release.assert_called_once()
        assert supervisor.state is SupervisorState.TERMINATED

    def test_socket_released_before_child_signalled(self, supervisor, proc, mock_release):
        """The socket goes first, so no new connections reach a dying child."""
        order = []
        mock_release.side_effect = lambda *a: order.append("release")
        proc.send_signal.side_effect = lambda sig: order.append(sig.name)

        supervisor.spinup()
        supervisor.shutdown()

        assert order == ["release", "SIGTERM"]

    def test_escalates_to_sigkill(self, supervisor, proc, mock_logger):
        """A child ignoring SIGTERM is killed after the grace period."""
        proc.wait.side_effect = [subprocess.TimeoutExpired("app", 0.5), -9]

        supervisor.spinup()
        supervisor.shutdown()

        assert proc.send_signal.call_args_list == [
            call(signal.SIGTERM),
            call(signal.SIGKILL),
        ]
        assert proc.wait.call_args_list == [call(timeout=0.5), call(timeout=1.0)]
        mock_logger.warning.assert_called_once()

    def test_already_exited_child_not_signalled(self, supervisor, proc):
        supervisor.spinup()
        proc.poll.return_value = 0

        supervisor.shutdown()

        proc.send_signal.assert_not_called()

    def test_child_vanished_between_poll_and_kill(self, supervisor, proc, mock_logger):
        """ProcessLookupError is logged, not raised."""
        supervisor.spinup()
        proc.send_signal.side_effect = ProcessLookupError()

        supervisor.shutdown()

        proc.wait.assert_not_called()
        assert supervisor.state is SupervisorState.TERMINATED

    def test_shutdown_twice(self, supervisor, proc, mock_release):
        """The second call does nothing and does not raise."""
        supervisor.spinup()
        supervisor.shutdown()
        supervisor.shutdown()

        proc.send_signal.assert_called_once()
        mock_release.assert_called_once()

    def test_shutdown_without_spinup(self, supervisor, mock_release):
        """Only the socket path is released when no child was started."""
        supervisor.shutdown()

        mock_release.assert_called_once()
        assert supervisor.state is SupervisorState.TERMINATED

    def test_restores_child_handler(self, supervisor, mock_signal):
        supervisor.spinup()
        supervisor.shutdown()

        assert mock_signal.call_args_list[-1] == call(signal.SIGCHLD, signal.SIG_DFL)

    def test_context_manager_shuts_down(self, supervisor, proc):
        with supervisor:
            supervisor.spinup()

        assert supervisor.state is SupervisorState.TERMINATED
        proc.send_signal.assert_called_once_with(signal.SIGTERM)

    def test_context_manager_on_error(self, supervisor, proc):
        """Cleanup also runs when the body raises."""
        with pytest.raises(RuntimeError):
            with supervisor:
                supervisor.spinup()
                raise RuntimeError("boom")

        assert supervisor.state is SupervisorState.TERMINATED
