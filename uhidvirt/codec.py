"""Encoding and decoding of UHID events exchanged with the kernel."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Union

__all__ = [
    "UHID_EVENT_SIZE",
    "StreamError",
    "UnknownEventType",
    "DevFlags",
    "ReportType",
    "Bus",
    "CreateParams",
    "Create",
    "Destroy",
    "Input",
    "Output",
    "OutputEv",
    "GetReportReply",
    "SetReportReply",
    "Feature",
    "FeatureAnswer",
    "SetReport",
    "Start",
    "Stop",
    "Open",
    "Close",
    "OutputReport",
    "GetReport",
    "SetReportRequest",
    "encode",
    "decode",
]

_DATA_MAX = 4096
_DESCRIPTOR_MAX = 4096
_NAME_SIZE = 128
_PHYS_SIZE = 64
_UNIQ_SIZE = 64

# type (u32) + the largest union member, create2 (name, phys, uniq,
# rd_size, bus, vendor, product, version, country, rd_data).
UHID_EVENT_SIZE = 4 + _NAME_SIZE + _PHYS_SIZE + _UNIQ_SIZE + 2 + 2 + 4 * 4 + _DESCRIPTOR_MAX

_PAYLOAD = 4


class _EventType(enum.IntEnum):
    LEGACY_CREATE = 0
    DESTROY = 1
    START = 2
    STOP = 3
    OPEN = 4
    CLOSE = 5
    OUTPUT = 6
    LEGACY_OUTPUT_EV = 7
    LEGACY_INPUT = 8
    GET_REPORT = 9
    GET_REPORT_REPLY = 10
    CREATE2 = 11
    INPUT2 = 12
    SET_REPORT = 13
    SET_REPORT_REPLY = 14


_LEGACY_FEATURE = _EventType.GET_REPORT

# Report type numbering used by the kernel's generic HID layer.
_HID_INPUT_REPORT = 0
_HID_OUTPUT_REPORT = 1

# Report type numbering used by the UHID interface.
_UHID_OUTPUT_REPORT = 1


class StreamError(Exception):
    """Raised when an event cannot be read from the UHID stream."""


class UnknownEventType(StreamError):
    """Raised when the kernel sends an event type this codec does not handle."""

    def __init__(self, event_type: int) -> None:
        super().__init__(f"unknown UHID event type {event_type}")
        self.event_type = event_type


class DevFlags(enum.IntFlag):
    """Whether a given report type uses numbered reports."""

    FEATURE_REPORTS_NUMBERED = 0b0000_0001
    OUTPUT_REPORTS_NUMBERED = 0b0000_0010
    INPUT_REPORTS_NUMBERED = 0b0000_0100


class ReportType(enum.IntEnum):
    FEATURE = 0
    OUTPUT = 1
    INPUT = 2


class Bus(enum.IntEnum):
    PCI = 1
    ISAPNP = 2
    USB = 3
    HIL = 4
    BLUETOOTH = 5
    VIRTUAL = 6
    ISA = 16
    I8042 = 17
    XTKBD = 18
    RS232 = 19
    GAMEPORT = 20
    PARPORT = 21
    AMIGA = 22
    ADB = 23
    I2C = 24
    HOST = 25
    GSC = 26
    ATARI = 27
    SPI = 28
    RMI = 29
    CEC = 30
    INTEL_ISHTP = 31


@dataclass(frozen=True)
class CreateParams:
    """Description of a HID device, sent when the device is created."""

    name: str
    phys: str
    uniq: str
    bus: Bus
    vendor: int
    product: int
    version: int
    country: int
    rd_data: bytes


# Events written by user space to the kernel.


@dataclass(frozen=True)
class Create:
    params: CreateParams


@dataclass(frozen=True)
class Destroy:
    pass


@dataclass(frozen=True)
class Input:
    data: bytes


@dataclass(frozen=True)
class Output:
    data: bytes


@dataclass(frozen=True)
class OutputEv:
    event_type: int
    code: int
    value: int


@dataclass(frozen=True)
class GetReportReply:
    id: int
    err: int
    data: bytes


@dataclass(frozen=True)
class SetReportReply:
    id: int
    err: int


@dataclass(frozen=True)
class Feature:
    id: int
    report_num: int


@dataclass(frozen=True)
class FeatureAnswer:
    id: int
    err: int
    data: bytes


@dataclass(frozen=True)
class SetReport:
    id: int
    report_num: int
    data: bytes


InputEvent = Union[
    Create,
    Destroy,
    Input,
    Output,
    OutputEv,
    GetReportReply,
    SetReportReply,
    Feature,
    FeatureAnswer,
    SetReport,
]


# Events read by user space from the kernel.


@dataclass(frozen=True)
class Start:
    dev_flags: list[DevFlags] = field(default_factory=list)


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class Open:
    pass


@dataclass(frozen=True)
class Close:
    pass


@dataclass(frozen=True)
class OutputReport:
    data: bytes


@dataclass(frozen=True)
class GetReport:
    id: int
    report_number: int
    report_type: ReportType


@dataclass(frozen=True)
class SetReportRequest:
    id: int
    report_number: int
    report_type: ReportType
    data: bytes


OutputEvent = Union[Start, Stop, Open, Close, OutputReport, GetReport, SetReportRequest]


def _put(buf: bytearray, offset: int, data: bytes, capacity: int, what: str) -> None:
    if len(data) > capacity:
        raise ValueError(f"{what} is {len(data)} bytes, at most {capacity} fit")
    buf[offset : offset + len(data)] = data


def _size16(data: bytes) -> int:
    return len(data) & 0xFFFF


def encode(event: InputEvent) -> bytes:
    """Serialise an event for writing to the UHID device."""
    buf = bytearray(UHID_EVENT_SIZE)
    p = _PAYLOAD

    match event:
        case Create(params=params):
            event_type = _EventType.CREATE2
            _put(buf, p, params.name.encode(), _NAME_SIZE, "name")
            _put(buf, p + 128, params.phys.encode(), _PHYS_SIZE, "phys")
            _put(buf, p + 192, params.uniq.encode(), _UNIQ_SIZE, "uniq")
            rd_data = bytes(params.rd_data)
            struct.pack_into(
                "<HHIIII",
                buf,
                p + 256,
                _size16(rd_data),
                int(params.bus),
                params.vendor,
                params.product,
                params.version,
                params.country,
            )
            _put(buf, p + 276, rd_data, _DESCRIPTOR_MAX, "report descriptor")
        case Destroy():
            event_type = _EventType.DESTROY
        case Input(data=data):
            event_type = _EventType.INPUT2
            data = bytes(data)
            _put(buf, p + 2, data, _DATA_MAX, "input data")
            struct.pack_into("<H", buf, p, _size16(data))
        case Output(data=data):
            event_type = _EventType.OUTPUT
            data = bytes(data)
            _put(buf, p, data, _DATA_MAX, "output data")
            struct.pack_into("<HB", buf, p + _DATA_MAX, _size16(data), _HID_OUTPUT_REPORT)
        case OutputEv(event_type=ev_type, code=code, value=value):
            event_type = _EventType.LEGACY_OUTPUT_EV
            struct.pack_into("<HHi", buf, p, ev_type, code, value)
        case GetReportReply(id=ident, err=err, data=data) | FeatureAnswer(
            id=ident, err=err, data=data
        ):
            event_type = _EventType.GET_REPORT_REPLY
            data = bytes(data)
            _put(buf, p + 8, data, _DATA_MAX, "report data")
            struct.pack_into("<IHH", buf, p, ident, err, _size16(data))
        case SetReportReply(id=ident, err=err):
            event_type = _EventType.SET_REPORT_REPLY
            struct.pack_into("<IH", buf, p, ident, err)
        case Feature(id=ident, report_num=report_num):
            event_type = _LEGACY_FEATURE
            struct.pack_into("<IBB", buf, p, ident, report_num, _HID_INPUT_REPORT)
        case SetReport(id=ident, report_num=report_num, data=data):
            event_type = _EventType.SET_REPORT
            data = bytes(data)
            _put(buf, p + 8, data, _DATA_MAX, "report data")
            struct.pack_into(
                "<IBBH", buf, p, ident, report_num, _HID_INPUT_REPORT, _size16(data)
            )
        case _:
            raise TypeError(f"cannot encode {type(event).__name__}")

    struct.pack_into("<I", buf, 0, int(event_type))
    return bytes(buf)


def _report_type(value: int) -> ReportType:
    try:
        return ReportType(value)
    except ValueError:
        raise StreamError(f"invalid report type {value}") from None


def _payload_data(data: bytes, offset: int, size: int) -> bytes:
    return bytes(data[offset : offset + min(size, _DATA_MAX)])


def decode(data: bytes) -> OutputEvent:
    """Parse one event read from the UHID device."""
    if len(data) != UHID_EVENT_SIZE:
        raise ValueError(f"a UHID event is {UHID_EVENT_SIZE} bytes, got {len(data)}")

    (raw_type,) = struct.unpack_from("<I", data, 0)
    p = _PAYLOAD

    if raw_type == _EventType.START:
        (bits,) = struct.unpack_from("<Q", data, p)
        return Start(dev_flags=[flag for flag in DevFlags if bits & flag])
    if raw_type == _EventType.STOP:
        return Stop()
    if raw_type == _EventType.OPEN:
        return Open()
    if raw_type == _EventType.CLOSE:
        return Close()
    if raw_type == _EventType.OUTPUT:
        size, rtype = struct.unpack_from("<HB", data, p + _DATA_MAX)
        if rtype != _UHID_OUTPUT_REPORT:
            raise StreamError(f"output event carries report type {rtype}")
        return OutputReport(data=_payload_data(data, p, size))
    if raw_type == _EventType.GET_REPORT:
        ident, rnum, rtype = struct.unpack_from("<IBB", data, p)
        return GetReport(id=ident, report_number=rnum, report_type=_report_type(rtype))
    if raw_type == _EventType.SET_REPORT:
        ident, rnum, rtype, size = struct.unpack_from("<IBBH", data, p)
        return SetReportRequest(
            id=ident,
            report_number=rnum,
            report_type=_report_type(rtype),
            data=_payload_data(data, p + 8, size),
        )
    raise UnknownEventType(raw_type)