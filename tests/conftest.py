"""
Shared fixtures for the depfetch tests.
"""

import hashlib
import http.server
import io
import threading
import zipfile
from typing import Dict

import pytest

from depfetch.artifact_models import ArtifactsConfig
from depfetch.depfetch_logger import DepfetchLogger

SAMPLE_TREE = {
    "README.txt": b"sample archive\n",
    "lib/sample.jar": b"PK-not-really-a-jar" * 64,
    "lib/nested/data.bin": bytes(range(256)) * 16,
}


def build_zip(tree: Dict[str, bytes], with_directory_entries: bool = True) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        if with_directory_entries:
            directories = sorted({name.rsplit("/", 1)[0] + "/" for name in tree if "/" in name})
            for directory in directories:
                zf.writestr(zipfile.ZipInfo(directory), b"")
        for name, content in tree.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def sha256_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class _ArtifactRequestHandler(http.server.BaseHTTPRequestHandler):
    def do_GET(self):
        self.server.requests.append(self.path)
        body = self.server.routes.get(self.path)
        if body is None:
            self.send_error(404)
            return
        self.send_response(200)
        self.send_header("Content-Type", "application/octet-stream")
        declared = self.server.declared_lengths.get(self.path, len(body))
        self.send_header("Content-Length", str(declared))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


class LocalArtifactServer:
    """Serves in-memory files over HTTP on localhost."""

    def __init__(self):
        self.httpd = http.server.ThreadingHTTPServer(("127.0.0.1", 0), _ArtifactRequestHandler)
        self.httpd.routes = {}
        self.httpd.requests = []
        self.httpd.declared_lengths = {}
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def requests(self):
        return self.httpd.requests

    def add(self, path: str, body: bytes, declared_length=None) -> str:
        """Serve body at path; declared_length overrides the advertised Content-Length."""
        self.httpd.routes[path] = body
        if declared_length is not None:
            self.httpd.declared_lengths[path] = declared_length
        return self.base_url + path

    def start(self):
        self.thread.start()

    def stop(self):
        self.httpd.shutdown()
        self.httpd.server_close()


@pytest.fixture
def logger():
    return DepfetchLogger()


@pytest.fixture
def sample_zip_bytes():
    return build_zip(SAMPLE_TREE)


@pytest.fixture
def artifact_server():
    server = LocalArtifactServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def served_artifacts(artifact_server, sample_zip_bytes):
    """An artifact table whose artifacts are served by the local server."""
    tool_jar = b"tool jar contents"
    return ArtifactsConfig.from_dict(
        {
            "_description": "test artifacts",
            "artifacts": [
                {
                    "name": "sample",
                    "url": artifact_server.add("/sample.zip", sample_zip_bytes),
                    "sha256": sha256_of(sample_zip_bytes),
                    "filename": "sample.zip",
                },
                {
                    "name": "tool",
                    "url": artifact_server.add("/tool.jar", tool_jar),
                    "sha256": sha256_of(tool_jar),
                    "filename": "tool.jar",
                },
            ],
            "extract": [{"artifact": "sample", "target": "sample"}],
            "copy": [
                {"source": "sample/lib", "destination": "flatRepo", "pattern": "*.jar"},
                {"source": "tool.jar", "destination": "flatRepo/tool.jar"},
                {"source": "sample.zip", "destination": "Some/Project/build/sample.zip"},
            ],
        }
    )


@pytest.fixture
def sample_tree():
    return dict(SAMPLE_TREE)


@pytest.fixture
def zip_builder():
    return build_zip
