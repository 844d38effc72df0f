#!/usr/bin/env python3
"""Replay a .wpilog file over TCP for streaming-decoder testing.

Serves the raw bytes of the file on localhost:4200, throttled so the client
sees them arrive in small pieces.

Usage:
    python examples/tcp_source.py robot.wpilog

Then in another terminal:
    python examples/tcp_client.py
"""

import socket
import sys
import time


def serve(path: str, host: str = "0.0.0.0", port: int = 4200,
          chunk_size: int = 512, rate_hz: float = 200.0):
    """Accept TCP connections and stream the log file to each in turn."""
    with open(path, "rb") as f:
        data = f.read()

    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind((host, port))
    srv.listen(1)
    print(f"Serving {path} ({len(data):,} bytes) on {host}:{port}  (Ctrl-C to stop)")

    while True:
        print("Waiting for connection...")
        conn, addr = srv.accept()
        print(f"Client connected: {addr}")
        try:
            for i in range(0, len(data), chunk_size):
                conn.sendall(data[i:i + chunk_size])
                time.sleep(1.0 / rate_hz)
            print("  sent whole file")
        except (BrokenPipeError, ConnectionResetError):
            print("Client disconnected.")
        except KeyboardInterrupt:
            print("\nShutting down.")
            return
        finally:
            conn.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(f"usage: {sys.argv[0]} FILE.wpilog", file=sys.stderr)
        sys.exit(1)
    serve(sys.argv[1])
