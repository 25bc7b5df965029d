#!/usr/bin/env python3
"""
Container entrypoint: migrate + seed, then hand the process over to gunicorn.

Environment:
    PORT             listen port (default 8080)
    WEB_CONCURRENCY  gunicorn workers (default 2)
    GUNICORN_TIMEOUT worker timeout in seconds (default 60)
    LOG_LEVEL        passed to gunicorn as --log-level
    SKIP_RELEASE=1   start without running migrations/seed
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_port(raw: str | None) -> int:
    raw = (raw or "").strip()
    if not raw:
        return 8080
    port = int(raw)
    if not 1 <= port <= 65535:
        raise ValueError(f"port {port} out of range")
    return port


def gunicorn_command(port: int, env: dict[str, str] | None = None) -> list[str]:
    env = os.environ if env is None else env
    workers = (env.get("WEB_CONCURRENCY") or "").strip() or "2"
    timeout = (env.get("GUNICORN_TIMEOUT") or "").strip() or "60"
    log_level = (env.get("LOG_LEVEL") or "info").strip().lower()
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{port}",
        "--workers", workers,
        "--timeout", timeout,
        "--log-level", log_level,
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]


def main() -> None:
    try:
        port = parse_port(os.environ.get("PORT"))
    except ValueError:
        print(f"ERROR: Invalid PORT value {os.environ.get('PORT')!r}. Must be integer 1-65535.", flush=True)
        sys.exit(1)

    if os.environ.get("SKIP_RELEASE") == "1":
        print("SKIP_RELEASE=1, not running migrations/seed", flush=True)
    else:
        from scripts.release import run_release

        try:
            run_release()
        except Exception as e:
            print(f"Release failed: {e}", flush=True)
            sys.exit(1)

    argv = gunicorn_command(port)
    print(f"=== Starting gunicorn: {' '.join(argv[1:])} ===", flush=True)
    # exec so gunicorn is PID 1 and receives signals directly
    os.execvp(argv[0], argv)


if __name__ == "__main__":
    main()
