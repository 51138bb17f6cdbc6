import sys

import pytest

from vdb_ci.errors import ExternalCommandFailed
from vdb_ci.utils import CommandRunner, RecordingRunner


class TestCommandRunner:

    def test_successful_command_returns_output(self, logger, tmp_path):
        runner = CommandRunner(logger)

        result = runner.run([sys.executable, "-c", "import os; print(os.getcwd())"],
                            cwd=tmp_path, capture_output=True)

        assert result.returncode == 0
        assert result.stdout.strip() == str(tmp_path)

    def test_non_zero_exit_raises_with_status(self, logger):
        runner = CommandRunner(logger)

        with pytest.raises(ExternalCommandFailed) as excinfo:
            runner.run([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
                       capture_output=True)

        assert excinfo.value.returncode == 3
        assert excinfo.value.stderr == "boom"
        assert "exit code 3" in str(excinfo.value)

    def test_missing_program_is_reported_as_127(self, logger):
        runner = CommandRunner(logger)

        with pytest.raises(ExternalCommandFailed) as excinfo:
            runner.run(["vdb-ci-no-such-program"])

        assert excinfo.value.returncode == 127
        assert excinfo.value.command == ["vdb-ci-no-such-program"]

    def test_environment_is_passed_to_child(self, logger):
        runner = CommandRunner(logger)

        result = runner.run([sys.executable, "-c", "import os; print(os.environ['HFS'])"],
                            env={"HFS": "/opt/hfs"}, capture_output=True)

        assert result.stdout.strip() == "/opt/hfs"


class TestRecordingRunner:

    def test_records_commands_without_running_them(self, logger, tmp_path):
        runner = RecordingRunner(logger)

        result = runner.run(["make", "-C", "openvdb", "install"], cwd=tmp_path)

        assert result.returncode == 0
        assert runner.commands == ["make -C openvdb install"]
        assert runner.calls[0].cwd == tmp_path

    def test_arguments_are_stringified(self, logger, tmp_path):
        runner = RecordingRunner(logger)

        runner.run(["tar", "-xzf", tmp_path / "a b.tar.gz"])

        assert runner.calls[0].command == ("tar", "-xzf", str(tmp_path / "a b.tar.gz"))
        assert runner.commands[0] == f"tar -xzf '{tmp_path / 'a b.tar.gz'}'"

    def test_canned_output(self, logger):
        runner = RecordingRunner(logger)
        runner.respond("env -0", stdout="HFS=/opt/hfs\0")

        result = runner.run(["bash", "-c", "source ./houdini_setup_bash && env -0"], capture_output=True)

        assert result.stdout == "HFS=/opt/hfs\0"

    def test_failure_is_raised_after_recording(self, logger):
        runner = RecordingRunner(logger)
        runner.fail_on("apt-get install", returncode=100, stderr="E: Unable to locate package")

        with pytest.raises(ExternalCommandFailed) as excinfo:
            runner.run(["sudo", "apt-get", "install", "-y", "ccache"])

        assert excinfo.value.returncode == 100
        assert len(runner.calls) == 1

    def test_callable_matcher(self, logger):
        runner = RecordingRunner(logger)
        runner.fail_on(lambda args: args[0] == "wget")

        runner.run(["echo", "wget"])
        with pytest.raises(ExternalCommandFailed):
            runner.run(["wget", "-q", "http://example.invalid/x.tar.gz"])

    def test_find(self, logger):
        runner = RecordingRunner(logger)
        runner.run(["ccache", "-s"])
        runner.run(["make", "install"])
        runner.run(["ccache", "-s"])

        assert len(runner.find("ccache -s")) == 2
        assert runner.find("make")[0].command == ("make", "install")
