#!/usr/bin/env python3

"""
End-to-End Driver Tests

Runs the command line driver against fixture configurations and checks what
a user would see: printed entries, error lines and exit status.
"""

import threading

import pytest

from beanwire import cli
from beanwire.lifecycle import LifecycleController, LifecycleState
from beanwire.settings import ENV_EXIT_ZERO, ENV_WAIT_FOR_CLOSE


@pytest.fixture
def context_file(fixtures_dir):
    return str(fixtures_dir / "context.json")


@pytest.mark.e2e
class TestDriver:
    """Typical driver invocations"""

    def test_prints_requested_entries(self, context_file, capsys):
        exit_code = cli.main([context_file, "code", "primary"], environ={})

        out = capsys.readouterr().out.splitlines()
        assert exit_code == cli.EXIT_OK
        assert out[0] == "bean 'code' = 'SomeCode()'  (<class 'tests.test_utils.SomeCode'>)"
        assert out[1].startswith("bean 'primary' = '[primary] other = 'secondary'")
        assert out[-1] == "done"

    def test_no_names_only_wires(self, context_file, capsys):
        assert cli.main([context_file], environ={}) == cli.EXIT_OK
        assert capsys.readouterr().out.splitlines() == ["done"]

    def test_missing_name_keeps_going(self, context_file, capsys):
        """Test a failed lookup is reported and later names still print"""
        exit_code = cli.main([context_file, "ghost", "secondary"], environ={})

        captured = capsys.readouterr()
        assert exit_code == cli.EXIT_RESOLUTION_FAILED
        assert "error: No entry named 'ghost'" in captured.err
        assert "bean 'secondary'" in captured.out
        assert captured.out.splitlines()[-1] == "done"

    def test_missing_config(self, tmp_path, capsys):
        exit_code = cli.main([str(tmp_path / "absent.json"), "code"], environ={})

        assert exit_code == cli.EXIT_STARTUP_FAILED
        assert "error: Configuration source not found" in capsys.readouterr().err

    def test_cycle_fails_startup(self, fixtures_dir, capsys):
        exit_code = cli.main([str(fixtures_dir / "cycle.json"), "a"], environ={})

        captured = capsys.readouterr()
        assert exit_code == cli.EXIT_STARTUP_FAILED
        assert "Circular dependency detected" in captured.err
        assert "done" not in captured.out

    def test_provider_reference(self, capsys):
        exit_code = cli.main(["tests.test_utils:sample_specs", "service"], environ={})

        assert exit_code == cli.EXIT_OK
        assert "bean 'service'" in capsys.readouterr().out

    def test_exit_zero_from_env(self, context_file):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([context_file, "code"], environ={ENV_EXIT_ZERO: "1"})

        assert exc_info.value.code == 0

    def test_exit_zero_flag_skipped_on_failure(self, context_file):
        assert cli.main([context_file, "ghost", "--exit-zero"], environ={}) == cli.EXIT_RESOLUTION_FAILED

    def test_invalid_log_level_flag(self, context_file):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([context_file, "--log-level", "CHATTY"], environ={})

        assert exc_info.value.code == 2


@pytest.mark.e2e
class TestWaitForClose:

    @pytest.fixture
    def captured_controllers(self, monkeypatch):
        """Close each driver context from another thread once its hook is registered"""
        controllers = []
        original = LifecycleController.register_shutdown_hook

        def register(self, *args, **kwargs):
            hook = original(self, *args, **kwargs)
            controllers.append(self)
            threading.Timer(0.1, hook.trigger, args=("test",)).start()
            return hook

        monkeypatch.setattr(LifecycleController, "register_shutdown_hook", register)
        return controllers

    def test_wait_for_close_flag(self, context_file, captured_controllers, capsys):
        exit_code = cli.main([context_file, "code", "--wait-for-close"], environ={})

        assert exit_code == cli.EXIT_OK
        assert captured_controllers[0].state is LifecycleState.CLOSED
        assert capsys.readouterr().out.splitlines()[-1] == "done"

    def test_wait_for_close_from_env(self, context_file, captured_controllers):
        exit_code = cli.main([context_file], environ={ENV_WAIT_FOR_CLOSE: "true"})

        assert exit_code == cli.EXIT_OK
        assert not captured_controllers[0].is_active
