# uhidvirt

Create virtual HID devices on Linux from user space. The kernel's UHID
interface (`/dev/uhid`) lets a program register a device with a HID report
descriptor, feed it input reports, and receive the kernel's output, get-report
and set-report requests. `uhidvirt` encodes and decodes the fixed-size UHID
event records (`uhidvirt.codec.UHID_EVENT_SIZE` bytes each) and wraps the
character device in a small object.

## Installation

```
pip install uhidvirt
```

No third-party dependencies are needed. Opening `/dev/uhid` usually requires
root or a udev rule granting your user access to it; otherwise
`UHIDDevice.create` raises `PermissionError`.

## Creating a device

```python
from uhidvirt.codec import Bus, CreateParams
from uhidvirt.device import UHIDDevice

params = CreateParams(
    name="test-uhid-device",
    phys="",
    uniq="",
    bus=Bus.USB,
    vendor=0x15D9,
    product=0x0A37,
    version=0,
    country=0,
    rd_data=REPORT_DESCRIPTOR,  # bytes of your HID report descriptor
)

with UHIDDevice.create(params) as device:
    device.write(bytes([1, 0, 20, 0, 0]))   # send an input report
    event = device.read()                   # next event from the kernel
```

`UHIDDevice.create(params, path)` opens `path` (by default
`uhidvirt.device.DEFAULT_PATH`, which is `/dev/uhid`) read-write and
non-blocking, and writes the create event. `UHIDDevice` can also be built
directly around any binary stream with `read` and `write` methods.

Because the handle is non-blocking:

- `read` raises `StreamError` when no event is queued (its `__cause__` is a
  `BlockingIOError`), and also when the stream ends or reading fails;
- the write methods raise `BlockingIOError` if the kernel cannot take the
  record right away.

The write methods return the number of bytes written.

## Events

`uhidvirt.codec.encode(event)` turns an event object into a UHID record, and
`uhidvirt.codec.decode(data)` turns a record read from the kernel back into
one.

Events you send: `Create`, `Destroy`, `Input`, `Output`, `OutputEv`,
`GetReportReply`, `SetReportReply`, `Feature`, `FeatureAnswer`, `SetReport`.
`encode` raises `ValueError` if a name, phys or uniq string, report
descriptor or data payload is too long for its field, and `TypeError` for an
object that is not one of these events.

Events the kernel sends: `Start` (carrying a list of `DevFlags`), `Stop`,
`Open`, `Close`, `OutputReport`, `GetReport` and `SetReportRequest`
(the latter two carrying a `ReportType`). Answer a `GetReport` with
`UHIDDevice.write_get_report_reply(id, err, data)` and a `SetReportRequest`
with `UHIDDevice.write_set_report_reply(id, err)`, passing back the
request's `id`.

`decode` raises `ValueError` if the record is not exactly
`UHID_EVENT_SIZE` bytes, `UnknownEventType` (a subclass of `StreamError`,
with the raw value in `event_type`) for an event type it does not handle, and
`StreamError` for an invalid report type.

`write` and `write_get_report_reply` accept an optional `transform` callable
that receives the encoded record as a `bytearray` and may adjust it in place
before it is written.

Call `destroy` to remove the HID device from the kernel, and `close` (or leave
the `with` block) to close the file handle.

## Demo mouse

The package ships a small demonstration that registers a combined mouse and
keyboard-LED device and sends a report moving the pointer 20 units to the
right for every line read from standard input, until end of input:

```
uhidvirt-mouse
uhidvirt-mouse --path /dev/uhid
```

If the device cannot be created it prints the error and exits with status 1.
Its parameters are available from `uhidvirt.mouse.create_params()`, and the
descriptor and report from `uhidvirt.mouse.RDESC` and `uhidvirt.mouse.REPORT`.