"""A handle on a virtual HID device backed by the UHID character device."""

from __future__ import annotations

import errno
import os
from collections.abc import Callable
from typing import BinaryIO, Optional

from uhidvirt.codec import (
    UHID_EVENT_SIZE,
    Create,
    CreateParams,
    Destroy,
    GetReportReply,
    Input,
    OutputEvent,
    SetReportReply,
    StreamError,
    decode,
    encode,
)

__all__ = ["DEFAULT_PATH", "UHIDDevice"]

DEFAULT_PATH = "/dev/uhid"

Transform = Callable[[bytearray], None]


def _would_block() -> BlockingIOError:
    return BlockingIOError(errno.EAGAIN, os.strerror(errno.EAGAIN))


def _write_all(handle: BinaryIO, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = handle.write(view)
        if written is None:
            raise _would_block()
        view = view[written:]


class UHIDDevice:
    """Character misc-device handle for one HID device.

    The handle is any binary stream offering ``read`` and ``write``; use
    :meth:`create` to open the kernel's UHID device and register a device.
    """

    def __init__(self, handle: BinaryIO) -> None:
        self._handle = handle

    @classmethod
    def create(cls, params: CreateParams, path: str | os.PathLike[str] = DEFAULT_PATH) -> UHIDDevice:
        """Open the UHID device at ``path`` and register a device described by ``params``."""
        flags = os.O_RDWR | getattr(os, "O_CLOEXEC", 0) | getattr(os, "O_NONBLOCK", 0)
        fd = os.open(path, flags)
        try:
            handle = os.fdopen(fd, "r+b", buffering=0)
        except BaseException:
            os.close(fd)
            raise
        try:
            _write_all(handle, encode(Create(params)))
        except BaseException:
            handle.close()
            raise
        return cls(handle)

    def __enter__(self) -> UHIDDevice:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(self, event: bytes | bytearray) -> int:
        written = self._handle.write(bytes(event))
        if written is None:
            raise _would_block()
        return written

    def write(self, data: bytes, transform: Optional[Transform] = None) -> int:
        """Send an input report; the kernel parses it against the report descriptor.

        ``transform``, if given, may modify the encoded event in place before
        it is written.
        """
        event = bytearray(encode(Input(bytes(data))))
        if transform is not None:
            transform(event)
        return self._send(event)

    def write_set_report_reply(self, id: int, err: int) -> int:
        """Answer a SetReport request read from the device."""
        return self._send(encode(SetReportReply(id=id, err=err)))

    def write_get_report_reply(
        self, id: int, err: int, data: bytes, transform: Optional[Transform] = None
    ) -> int:
        """Answer a GetReport request read from the device."""
        event = bytearray(encode(GetReportReply(id=id, err=err, data=bytes(data))))
        if transform is not None:
            transform(event)
        return self._send(event)

    def read(self) -> OutputEvent:
        """Read one queued output event from the kernel."""
        buf = bytearray()
        while len(buf) < UHID_EVENT_SIZE:
            try:
                chunk = self._handle.read(UHID_EVENT_SIZE - len(buf))
            except OSError as exc:
                raise StreamError(str(exc)) from exc
            if chunk is None:
                raise StreamError("no event available") from _would_block()
            if not chunk:
                raise StreamError("unexpected end of stream")
            buf += chunk
        return decode(bytes(buf))

    def destroy(self) -> int:
        """Destroy the HID device; no further input is accepted afterwards."""
        return self._send(encode(Destroy()))

    def close(self) -> None:
        """Close the underlying handle."""
        self._handle.close()