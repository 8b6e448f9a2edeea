"""TLS sockets for intercepting connections in both directions."""

from __future__ import annotations

import os
import socket
import ssl
from enum import Enum

SSL_MAX_RECORD_LENGTH = 16384


class SSLMode(Enum):
    CLIENT = "client"
    SERVER = "server"


class SecureSocketError(RuntimeError):
    """A TLS operation failed."""

    def __init__(self, attempt: str, error: object) -> None:
        super().__init__(f"{attempt}: {error}")
        self.attempt = attempt


class SecureSocket:
    """A connected socket speaking TLS.

    Data is exchanged as text in which every character stands for one
    byte (latin-1), the form the HTTP parsers work on.
    """

    def __init__(self, sock: socket.socket, context: ssl.SSLContext, server_side: bool) -> None:
        try:
            self._ssl = context.wrap_socket(
                sock, server_side=server_side, do_handshake_on_connect=False
            )
        except OSError as error:
            raise SecureSocketError("SSL_set_fd", error) from error
        self._eof = False

    def _handshake(self, attempt: str) -> None:
        try:
            self._ssl.do_handshake()
        except OSError as error:
            raise SecureSocketError(attempt, error) from error

    def connect(self) -> None:
        """Perform the handshake as the connecting side."""
        self._handshake("SSL_connect")

    def accept(self) -> None:
        """Perform the handshake as the accepting side."""
        self._handshake("SSL_accept")

    def read(self) -> str:
        """Read what is available; an empty string means end of stream."""
        try:
            data = self._ssl.recv(SSL_MAX_RECORD_LENGTH)
            while data and self._ssl.pending():
                data += self._ssl.recv(self._ssl.pending())
        except (ssl.SSLZeroReturnError, ssl.SSLEOFError):
            self._eof = True
            return ""
        except OSError as error:
            raise SecureSocketError("SSL_read", error) from error
        if not data:
            self._eof = True
        return data.decode("latin-1")

    def write(self, message: str) -> None:
        """Send all of ``message``."""
        try:
            self._ssl.sendall(message.encode("latin-1"))
        except OSError as error:
            raise SecureSocketError("SSL_write", error) from error

    def eof(self) -> bool:
        return self._eof

    def fileno(self) -> int:
        return self._ssl.fileno()

    def close(self) -> None:
        self._ssl.close()


class SSLContext:
    """Settings for making TLS sockets on one side of a connection.

    A client context does not verify the server it talks to. A server
    context needs a certificate (and key) to present.
    """

    def __init__(
        self,
        mode: SSLMode,
        certfile: str | os.PathLike[str] | None = None,
        keyfile: str | os.PathLike[str] | None = None,
    ) -> None:
        self.mode = mode
        if mode is SSLMode.CLIENT:
            self._context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            self._context.check_hostname = False
            self._context.verify_mode = ssl.CERT_NONE
            return

        self._context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        if certfile is None:
            raise SecureSocketError(
                "SSL_CTX_use_certificate", "a server context needs a certificate"
            )
        try:
            self._context.load_cert_chain(certfile, keyfile)
        except OSError as error:
            raise SecureSocketError("SSL_CTX_check_private_key", error) from error

    def new_secure_socket(self, sock: socket.socket) -> SecureSocket:
        """Wrap a connected socket; the handshake happens on connect/accept."""
        return SecureSocket(sock, self._context, self.mode is SSLMode.SERVER)