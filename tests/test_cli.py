"""
Tests for the mlsite command-line interface.
"""
import errno
import json
import os
import socket

import pytest

from mlsite import cli
from mlsite.errors import PortInUseError


@pytest.fixture
def busy_port():
    """A port on localhost that is bound and listening for the test."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    yield sock.getsockname()[1]
    sock.close()


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestParseAddrport:
    """Test the optional runserver argument."""

    @pytest.mark.parametrize("value,expected", [
        (None, ("127.0.0.1", 8000)),
        ("", ("127.0.0.1", 8000)),
        ("9000", ("127.0.0.1", 9000)),
        ("0.0.0.0:8080", ("0.0.0.0", 8080)),
        (":7000", ("127.0.0.1", 7000)),
        ("[::1]:8001", ("::1", 8001)),
    ])
    def test_valid(self, value, expected):
        assert cli.parse_addrport(value, "127.0.0.1", 8000) == expected

    @pytest.mark.parametrize("value", ["abc", "localhost:", "70000", "host:0"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            cli.parse_addrport(value, "127.0.0.1", 8000)


class TestRunserver:
    """Test the development server command without starting a server."""

    def test_port_in_use_detected(self, busy_port):
        with pytest.raises(PortInUseError) as excinfo:
            cli.ensure_port_free("127.0.0.1", busy_port)

        assert str(busy_port) in str(excinfo.value)

    def test_port_in_time_wait_is_free(self):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]
        client = socket.create_connection(("127.0.0.1", port))
        conn, _ = listener.accept()
        # closing the accepted side first leaves it in TIME_WAIT on the port
        conn.close()
        client.close()
        listener.close()

        cli.ensure_port_free("127.0.0.1", port)

    def test_bind_errors_are_reported(self, monkeypatch, capsys):
        def refuse(host, port):
            raise PermissionError(errno.EACCES, "Permission denied")

        monkeypatch.setattr(cli, "ensure_port_free", refuse)
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: pytest.fail("server started"))

        assert cli.main(["runserver", "80"]) == 1
        assert "cannot listen on 127.0.0.1:80: Permission denied" in capsys.readouterr().err

    def test_runserver_with_busy_port_fails(self, busy_port, monkeypatch, capsys):
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: pytest.fail("server started"))

        assert cli.main(["runserver", f"127.0.0.1:{busy_port}"]) == 1
        assert "already in use" in capsys.readouterr().err

    def test_runserver_starts_uvicorn(self, free_port, monkeypatch, tmp_path):
        calls = []
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert cli.main(["runserver", str(free_port)]) == 0

        app, kwargs = calls[0]
        assert app == "mlsite.main:create_app"
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == free_port
        # apps created by startapp in the working directory must be importable
        assert kwargs["app_dir"] == os.getcwd()

    def test_runserver_uses_configured_port(self, free_port, monkeypatch):
        calls = []
        monkeypatch.setenv("MLSITE_PORT", str(free_port))
        monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append(kwargs))

        assert cli.main(["runserver"]) == 0
        assert calls[0]["port"] == free_port

    def test_runserver_invalid_port(self, capsys):
        assert cli.main(["runserver", "notaport"]) == 2
        assert "not a valid port" in capsys.readouterr().err


class TestProjectCommands:
    """Test scaffolding, training and checking through the CLI."""

    def test_startproject(self, tmp_path, capsys):
        assert cli.main(["startproject", "mysite", str(tmp_path / "mysite")]) == 0

        assert (tmp_path / "mysite" / ".env").is_file()
        assert "pip install -r requirements.txt" in capsys.readouterr().out

    def test_startproject_existing_target(self, tmp_path, capsys):
        target = tmp_path / "mysite"
        target.mkdir()
        (target / "file").write_text("x")

        assert cli.main(["startproject", "mysite", str(target)]) == 1
        assert "already exists" in capsys.readouterr().err

    def test_startapp(self, tmp_path, capsys):
        assert cli.main(["startapp", "reports", str(tmp_path / "reports")]) == 0

        assert (tmp_path / "reports" / "routes.py").is_file()
        assert "reports.routes:router" in capsys.readouterr().out

    def test_train_then_check(self, tmp_path, monkeypatch, capsys):
        model = tmp_path / "models" / "model.joblib"
        monkeypatch.setenv("MLSITE_MODEL_PATH", str(model))

        assert cli.main(["train"]) == 0
        assert model.is_file()
        assert f"Model saved to {model}" in capsys.readouterr().out

        assert cli.main(["check"]) == 0
        description = json.loads(capsys.readouterr().out)
        assert description["path"] == str(model)
        assert description["estimator"] == "Pipeline"

    def test_check_missing_model(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("MLSITE_MODEL_PATH", str(tmp_path / "missing.joblib"))

        assert cli.main(["check"]) == 1
        assert "Model not found" in capsys.readouterr().err

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            cli.main([])
