"""Command-line interface of mlsite.

::

    mlsite startproject mysite        # lay out a project directory
    mlsite startapp reports           # add an application package
    mlsite train                      # write models/model.joblib
    mlsite check                      # load the configured model once
    mlsite runserver [PORT|HOST:PORT] # start the development server
"""

from __future__ import annotations

import argparse
import errno
import json
import os
import socket
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .errors import ModelLoadError, PortInUseError, ScaffoldError
from .log import configure_logging, get_logger
from .scaffold import startapp, startproject
from .settings import Settings, get_settings

logger = get_logger(__name__)


def parse_addrport(value: Optional[str], default_host: str, default_port: int) -> Tuple[str, int]:
    """Split ``PORT`` or ``HOST:PORT`` into a host and a port number."""
    if not value:
        return default_host, default_port
    host, sep, port = value.rpartition(":")
    if not sep:
        host = default_host
    host = host.strip("[]") or default_host
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"'{value}' is not a valid port number or address:port pair")
    return host, int(port)


def ensure_port_free(host: str, port: int) -> None:
    """Raise :class:`PortInUseError` if ``host:port`` is already bound."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    with socket.socket(family, socket.SOCK_STREAM) as sock:
        # a port left in TIME_WAIT is still usable by the server
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                raise PortInUseError(host, port) from exc
            raise


def cmd_startproject(args: argparse.Namespace, settings: Settings) -> int:
    created = startproject(args.name, args.directory)
    root = created[0].parent
    print(f"Created project '{args.name}' in {root}")
    print("Next steps:")
    print(f"  cd {root}")
    print("  pip install -r requirements.txt")
    print("  mlsite train")
    print("  mlsite runserver")
    return 0


def cmd_startapp(args: argparse.Namespace, settings: Settings) -> int:
    created = startapp(args.name, args.directory)
    print(f"Created application '{args.name}' in {created[0].parent}")
    print(f"Enable it with MLSITE_EXTRA_ROUTERS='[\"{args.name}.routes:router\"]'")
    return 0


def cmd_train(args: argparse.Namespace, settings: Settings) -> int:
    from training.train import train_model

    output = Path(args.output or settings.MODEL_PATH)
    metadata = train_model(
        output,
        test_size=args.test_size,
        random_state=args.random_state,
        input_field=settings.INPUT_FIELD,
    )
    print(f"Accuracy: {metadata['accuracy']:.4f}")
    print(f"F1-score: {metadata['f1']:.4f}")
    print(f"Model saved to {output}")
    return 0


def cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    from .predictor.loader import load_model

    predictor = load_model(settings.MODEL_PATH, strict_versions=settings.STRICT_VERSIONS)
    print(json.dumps(predictor.describe(), indent=2, default=str))
    return 0


def cmd_runserver(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    try:
        host, port = parse_addrport(args.addrport, settings.HOST, settings.PORT)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    try:
        ensure_port_free(host, port)
    except PortInUseError:
        raise
    except OSError as exc:
        print(f"Error: cannot listen on {host}:{port}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    logger.info("server_starting", host=host, port=port, reload=settings.RELOAD)
    uvicorn.run(
        "mlsite.main:create_app",
        factory=True,
        host=host,
        port=port,
        app_dir=os.getcwd(),
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mlsite", description="Serve a serialized model from a web page")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("startproject", help="Create a project directory")
    p.add_argument("name")
    p.add_argument("directory", nargs="?", default=None, help="Target directory (default ./NAME)")
    p.set_defaults(func=cmd_startproject)

    p = sub.add_parser("startapp", help="Create an application package")
    p.add_argument("name")
    p.add_argument("directory", nargs="?", default=None, help="Target directory (default ./NAME)")
    p.set_defaults(func=cmd_startapp)

    p = sub.add_parser("train", help="Train and save the demonstration model")
    p.add_argument("--output", default=None, help="Model path (default MLSITE_MODEL_PATH)")
    p.add_argument("--test-size", type=float, default=0.25)
    p.add_argument("--random-state", type=int, default=42)
    p.set_defaults(func=cmd_train)

    p = sub.add_parser("check", help="Load the configured model and print its metadata")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("runserver", help="Start the development server")
    p.add_argument("addrport", nargs="?", default=None, help="PORT or HOST:PORT")
    p.set_defaults(func=cmd_runserver)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    try:
        return args.func(args, settings)
    except (ModelLoadError, ScaffoldError, PortInUseError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
