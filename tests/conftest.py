"""
Shared fixtures for QR composer tests
"""
import io
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from PIL import Image

GREEN = (0, 200, 0, 255)
MAGENTA = (255, 0, 255, 255)


def png_bytes(size=(40, 40), color=GREEN):
    img = Image.new('RGBA', size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


def open_png(data):
    img = Image.open(io.BytesIO(data))
    img.load()
    return img.convert('RGBA')


@pytest.fixture
def logo_path(tmp_path):
    """A solid green square logo on disk"""
    path = tmp_path / 'logo.png'
    path.write_bytes(png_bytes())
    return str(path)


@pytest.fixture
def wide_logo_path(tmp_path):
    """A 4:1 green logo for contain-fit checks"""
    path = tmp_path / 'wide.png'
    path.write_bytes(png_bytes(size=(200, 50)))
    return str(path)


@pytest.fixture
def logo_server():
    """Local HTTP server: /logo.png serves a logo, /broken.png serves junk, everything else 404s"""
    routes = {
        '/logo.png': (200, 'image/png', png_bytes()),
        '/broken.png': (200, 'image/png', b'not an image'),
    }
    requests_seen = []

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            requests_seen.append(self.path)
            status, content_type, body = routes.get(self.path, (404, 'text/plain', b'not found'))
            self.send_response(status)
            self.send_header('Content-Type', content_type)
            self.send_header('Content-Length', str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(('127.0.0.1', 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    base_url = f'http://127.0.0.1:{server.server_address[1]}'
    try:
        yield base_url, requests_seen
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def qr_decode():
    """pyzbar decoder returning the decoded strings, skipped when zbar is missing"""
    pyzbar = pytest.importorskip('pyzbar.pyzbar', exc_type=ImportError)

    def decode(data):
        img = Image.open(io.BytesIO(data)).convert('RGB')
        return [result.data.decode('utf-8') for result in pyzbar.decode(img)]
    return decode


@pytest.fixture
def svg_logo_path(tmp_path):
    """A green square SVG logo, skipped when cairosvg or cairo is missing"""
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError) as e:
        pytest.skip(f'cairosvg unavailable: {e}')
    path = tmp_path / 'logo.svg'
    path.write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<svg xmlns="http://www.w3.org/2000/svg" width="40" height="40" viewBox="0 0 40 40">'
        '<rect width="40" height="40" fill="#00C800"/></svg>'
    )
    return str(path)


@pytest.fixture
def garbage_server():
    """Raw TCP server answering every connection with a line that is not HTTP"""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(('127.0.0.1', 0))
    server.listen()
    server.settimeout(0.2)
    stop = threading.Event()

    def serve():
        while not stop.is_set():
            try:
                conn, _ = server.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.recv(4096)
                conn.sendall(b'garbage\r\n')

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        yield f'http://127.0.0.1:{server.getsockname()[1]}'
    finally:
        stop.set()
        thread.join(timeout=1)
        server.close()
