# Spin up the FastAPI apps with a real uvicorn server on a free port, backed by
# a throwaway SQLite file, and hand the base URL to the tests.

import logging
import os
import socket
import subprocess
import sys
import time
from collections.abc import Iterator
from contextlib import closing
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[2]
logger = logging.getLogger(__name__)


def _get_free_port(host: str = "127.0.0.1") -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return s.getsockname()[1]


def _stop(proc: subprocess.Popen) -> None:
    proc.terminate()
    try:
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()


def _serve(app_path: str, db_file: Path) -> Iterator[str]:
    env = os.environ.copy()
    env["DATABASE_URL"] = f"sqlite:///{db_file}"
    for key in ("REDIS_URL", "QUIZ_SERVICE_URL"):
        env.pop(key, None)

    port = _get_free_port()
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        app_path,
        "--host",
        "127.0.0.1",
        "--port",
        str(port),
        "--log-level",
        "warning",
    ]
    proc = subprocess.Popen(
        cmd,
        cwd=str(ROOT),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    logger.info("[tests] Started uvicorn %s (pid=%s) with %s", app_path, proc.pid, env["DATABASE_URL"])

    # Wait for health endpoint
    url = f"http://127.0.0.1:{port}"
    for _ in range(120):
        try:
            r = requests.get(url + "/health", timeout=1.0)
            if r.status_code == 200:
                break
        except requests.RequestException as e:
            logger.debug("[tests] Health check failed: %s", e)
        # If process died early, surface logs
        if proc.poll() is not None:
            out, err = proc.communicate(timeout=2)
            raise RuntimeError(f"Server exited early (code={proc.returncode}). STDOUT:\n{out}\nSTDERR:\n{err}")
        time.sleep(0.25)
    else:
        _stop(proc)
        raise RuntimeError(f"{app_path} did not start in time")

    try:
        yield url
    finally:
        _stop(proc)


@pytest.fixture(scope="session")
def base_url(tmp_path_factory: pytest.TempPathFactory) -> Iterator[str]:
    yield from _serve("ultangber.app:app", tmp_path_factory.mktemp("game") / "quiz.db")


@pytest.fixture(scope="session")
def quiz_url(tmp_path_factory: pytest.TempPathFactory) -> Iterator[str]:
    yield from _serve("quizbank.main:app", tmp_path_factory.mktemp("quiz") / "quiz.db")


@pytest.fixture()
def api(base_url: str):
    class Client:
        def __init__(self, base: str):
            self.base = base

        def create_set(self, questions, title: str = "Arithmetic") -> dict:
            r = requests.post(
                self.base + "/api/question-sets",
                json={"title": title, "subject": "Math", "questions": questions},
                timeout=5,
            )
            r.raise_for_status()
            return r.json()

        def create_game(self, set_id: str, **config) -> requests.Response:
            return requests.post(
                self.base + "/games",
                json={"question_set_id": set_id, **config},
                timeout=5,
            )

        def intent(self, game_id: str, kind: str, **fields) -> requests.Response:
            return requests.post(
                self.base + f"/games/{game_id}/intents",
                json={"intent": {"kind": kind, **fields}},
                timeout=5,
            )

        def game(self, game_id: str) -> requests.Response:
            return requests.get(self.base + f"/games/{game_id}", timeout=5)

    return Client(base_url)
