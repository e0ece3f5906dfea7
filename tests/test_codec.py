import struct

import pytest

from uhidvirt.codec import (
    UHID_EVENT_SIZE,
    Bus,
    Close,
    Create,
    CreateParams,
    Destroy,
    DevFlags,
    Feature,
    FeatureAnswer,
    GetReport,
    GetReportReply,
    Input,
    Open,
    Output,
    OutputEv,
    OutputReport,
    ReportType,
    SetReport,
    SetReportReply,
    SetReportRequest,
    Start,
    Stop,
    StreamError,
    UnknownEventType,
    decode,
    encode,
)

RDESC = bytes(
    [
        0x05, 0x01, 0x09, 0x02, 0xA1, 0x01, 0x09, 0x01, 0xA1, 0x00,
        0x85, 0x01, 0x05, 0x09, 0x19, 0x01, 0x29, 0x03, 0x15, 0x00,
        0x25, 0x01, 0x95, 0x03, 0x75, 0x01, 0x81, 0x02, 0x95, 0x01,
        0x75, 0x05, 0x81, 0x01, 0x05, 0x01, 0x09, 0x30, 0x09, 0x31,
        0x09, 0x38, 0x15, 0x81, 0x25, 0x7F, 0x75, 0x08, 0x95, 0x03,
        0x81, 0x06, 0xC0, 0xC0, 0x05, 0x01, 0x09, 0x06, 0xA1, 0x01,
        0x85, 0x02, 0x05, 0x08, 0x19, 0x01, 0x29, 0x03, 0x15, 0x00,
        0x25, 0x01, 0x95, 0x03, 0x75, 0x01, 0x91, 0x02, 0x95, 0x01,
        0x75, 0x05, 0x91, 0x01, 0xC0,
    ]
)


def _params(**overrides):
    values = dict(
        name="test-uhid-device",
        phys="",
        uniq="",
        bus=Bus.USB,
        vendor=0x15D9,
        product=0x0A37,
        version=0,
        country=0,
        rd_data=RDESC,
    )
    values.update(overrides)
    return CreateParams(**values)


def _raw(event_type, fill=None):
    buf = bytearray(UHID_EVENT_SIZE)
    struct.pack_into("<I", buf, 0, event_type)
    if fill:
        for offset, chunk in fill.items():
            buf[offset : offset + len(chunk)] = chunk
    return bytes(buf)


def test_event_size():
    assert UHID_EVENT_SIZE == 4376
    assert len(encode(Destroy())) == 4376


def test_encode_create_request():
    expected = bytearray(UHID_EVENT_SIZE)
    expected[0] = 0x0B
    expected[4:20] = b"test-uhid-device"
    expected[260] = 0x55
    expected[262] = 0x03
    expected[264] = 0xD9
    expected[265] = 0x15
    expected[268] = 0x37
    expected[269] = 0x0A
    expected[280:365] = RDESC
    assert expected[364] == 0xC0

    assert encode(Create(_params())) == bytes(expected)


def test_encode_destroy_request():
    expected = bytearray(UHID_EVENT_SIZE)
    expected[0] = 0x01
    assert encode(Destroy()) == bytes(expected)


def test_encode_create_name_too_long():
    with pytest.raises(ValueError):
        encode(Create(_params(name="x" * 129)))


def test_encode_create_name_exactly_fits():
    result = encode(Create(_params(name="n" * 128)))
    assert result[4:132] == b"n" * 128
    assert result[132] == 0


def test_encode_create_phys_and_uniq():
    result = encode(Create(_params(phys="usb-1", uniq="abc")))
    assert result[132:137] == b"usb-1"
    assert result[196:199] == b"abc"


def test_encode_input():
    result = encode(Input(data=bytes([1, 0, 20, 0, 0])))
    assert result[0:4] == b"\x0c\x00\x00\x00"
    assert result[4:6] == b"\x05\x00"
    assert result[6:11] == bytes([1, 0, 20, 0, 0])
    assert result[11:] == bytes(UHID_EVENT_SIZE - 11)


def test_encode_input_too_long():
    with pytest.raises(ValueError):
        encode(Input(data=bytes(4097)))


def test_encode_output():
    result = encode(Output(data=b"\x07\x08"))
    assert result[0] == 6
    assert result[4:6] == b"\x07\x08"
    assert result[4100:4102] == b"\x02\x00"
    assert result[4102] == 1


def test_encode_output_ev():
    result = encode(OutputEv(event_type=0x11, code=2, value=-1))
    assert result[0] == 7
    assert result[4:12] == b"\x11\x00\x02\x00\xff\xff\xff\xff"


def test_encode_get_report_reply():
    result = encode(GetReportReply(id=0x01020304, err=5, data=b"\xaa\xbb\xcc"))
    assert result[0] == 10
    assert result[4:8] == b"\x04\x03\x02\x01"
    assert result[8:10] == b"\x05\x00"
    assert result[10:12] == b"\x03\x00"
    assert result[12:15] == b"\xaa\xbb\xcc"


def test_feature_answer_encodes_like_get_report_reply():
    answer = encode(FeatureAnswer(id=9, err=1, data=b"\x01\x02"))
    reply = encode(GetReportReply(id=9, err=1, data=b"\x01\x02"))
    assert answer == reply


def test_encode_set_report_reply():
    result = encode(SetReportReply(id=42, err=3))
    assert result[0] == 14
    assert result[4:10] == b"\x2a\x00\x00\x00\x03\x00"
    assert result[10:] == bytes(UHID_EVENT_SIZE - 10)


def test_encode_feature():
    result = encode(Feature(id=7, report_num=2))
    assert result[0] == 9
    assert result[4:10] == b"\x07\x00\x00\x00\x02\x00"


def test_encode_set_report():
    result = encode(SetReport(id=3, report_num=1, data=b"\x10\x20"))
    assert result[0] == 13
    assert result[4:12] == b"\x03\x00\x00\x00\x01\x00\x02\x00"
    assert result[12:14] == b"\x10\x20"


def test_set_report_round_trip():
    event = decode(encode(SetReport(id=3, report_num=1, data=b"\x10\x20")))
    assert event == SetReportRequest(
        id=3, report_number=1, report_type=ReportType.FEATURE, data=b"\x10\x20"
    )


def test_encode_rejects_unknown_object():
    with pytest.raises(TypeError):
        encode(Stop())


def test_decode_start_flags():
    event = decode(_raw(2, {4: struct.pack("<Q", 0b101)}))
    assert event == Start(
        dev_flags=[DevFlags.FEATURE_REPORTS_NUMBERED, DevFlags.INPUT_REPORTS_NUMBERED]
    )


def test_decode_start_truncates_unknown_bits():
    event = decode(_raw(2, {4: struct.pack("<Q", 0xF0 | 0b010)}))
    assert event.dev_flags == [DevFlags.OUTPUT_REPORTS_NUMBERED]


@pytest.mark.parametrize(
    "event_type, expected", [(3, Stop()), (4, Open()), (5, Close())]
)
def test_decode_simple_events(event_type, expected):
    assert decode(_raw(event_type)) == expected


def test_decode_output():
    raw = _raw(6, {4: b"\x01\x02\x03", 4100: b"\x03\x00\x01"})
    assert decode(raw) == OutputReport(data=b"\x01\x02\x03")


def test_decode_output_wrong_report_type():
    raw = _raw(6, {4: b"\x01", 4100: b"\x01\x00\x02"})
    with pytest.raises(StreamError):
        decode(raw)


def test_decode_get_report():
    raw = _raw(9, {4: b"\x05\x00\x00\x00\x02\x01"})
    assert decode(raw) == GetReport(
        id=5, report_number=2, report_type=ReportType.OUTPUT
    )


def test_decode_get_report_invalid_report_type():
    raw = _raw(9, {4: b"\x05\x00\x00\x00\x02\x09"})
    with pytest.raises(StreamError):
        decode(raw)


def test_decode_set_report():
    raw = _raw(13, {4: b"\x06\x00\x00\x00\x03\x02\x02\x00\xde\xad"})
    assert decode(raw) == SetReportRequest(
        id=6, report_number=3, report_type=ReportType.INPUT, data=b"\xde\xad"
    )


@pytest.mark.parametrize("event_type", [0, 1, 7, 8, 10, 11, 12, 14, 15, 1000])
def test_decode_unknown_event_type(event_type):
    with pytest.raises(UnknownEventType) as info:
        decode(_raw(event_type))
    assert info.value.event_type == event_type


def test_unknown_event_type_is_stream_error():
    with pytest.raises(StreamError):
        decode(_raw(99))


def test_decode_wrong_length():
    with pytest.raises(ValueError):
        decode(bytes(10))