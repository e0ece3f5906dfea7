"""A virtual mouse that sends a fixed movement report for each line of input."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Optional

from uhidvirt.codec import Bus, CreateParams
from uhidvirt.device import DEFAULT_PATH, UHIDDevice

__all__ = ["RDESC", "REPORT", "create_params", "main"]

RDESC = bytes(
    [
        0x05, 0x01,  # USAGE_PAGE (Generic Desktop)
        0x09, 0x02,  # USAGE (Mouse)
        0xA1, 0x01,  # COLLECTION (Application)
        0x09, 0x01,  # USAGE (Pointer)
        0xA1, 0x00,  # COLLECTION (Physical)
        0x85, 0x01,  # REPORT_ID (1)
        0x05, 0x09,  # USAGE_PAGE (Button)
        0x19, 0x01,  # USAGE_MINIMUM (Button 1)
        0x29, 0x03,  # USAGE_MAXIMUM (Button 3)
        0x15, 0x00,  # LOGICAL_MINIMUM (0)
        0x25, 0x01,  # LOGICAL_MAXIMUM (1)
        0x95, 0x03,  # REPORT_COUNT (3)
        0x75, 0x01,  # REPORT_SIZE (1)
        0x81, 0x02,  # INPUT (Data,Var,Abs)
        0x95, 0x01,  # REPORT_COUNT (1)
        0x75, 0x05,  # REPORT_SIZE (5)
        0x81, 0x01,  # INPUT (Cnst,Var,Abs)
        0x05, 0x01,  # USAGE_PAGE (Generic Desktop)
        0x09, 0x30,  # USAGE (X)
        0x09, 0x31,  # USAGE (Y)
        0x09, 0x38,  # USAGE (WHEEL)
        0x15, 0x81,  # LOGICAL_MINIMUM (-127)
        0x25, 0x7F,  # LOGICAL_MAXIMUM (127)
        0x75, 0x08,  # REPORT_SIZE (8)
        0x95, 0x03,  # REPORT_COUNT (3)
        0x81, 0x06,  # INPUT (Data,Var,Rel)
        0xC0,  # END_COLLECTION
        0xC0,  # END_COLLECTION
        0x05, 0x01,  # USAGE_PAGE (Generic Desktop)
        0x09, 0x06,  # USAGE (Keyboard)
        0xA1, 0x01,  # COLLECTION (Application)
        0x85, 0x02,  # REPORT_ID (2)
        0x05, 0x08,  # USAGE_PAGE (Led)
        0x19, 0x01,  # USAGE_MINIMUM (1)
        0x29, 0x03,  # USAGE_MAXIMUM (3)
        0x15, 0x00,  # LOGICAL_MINIMUM (0)
        0x25, 0x01,  # LOGICAL_MAXIMUM (1)
        0x95, 0x03,  # REPORT_COUNT (3)
        0x75, 0x01,  # REPORT_SIZE (1)
        0x91, 0x02,  # Output (Data,Var,Abs)
        0x95, 0x01,  # REPORT_COUNT (1)
        0x75, 0x05,  # REPORT_SIZE (5)
        0x91, 0x01,  # Output (Cnst,Var,Abs)
        0xC0,  # END_COLLECTION
    ]
)

# Report id 1, no buttons, 20 units right, no vertical or wheel movement.
REPORT = bytes([1, 0, 20, 0, 0])


def create_params() -> CreateParams:
    """Parameters describing the example mouse device."""
    return CreateParams(
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


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Create the mouse and move it once for every line read from standard input."""
    parser = argparse.ArgumentParser(
        prog="uhidvirt-mouse",
        description="Create a virtual mouse that moves right on every line of input.",
    )
    parser.add_argument("--path", default=DEFAULT_PATH, help="UHID device to open")
    args = parser.parse_args(argv)

    try:
        device = UHIDDevice.create(create_params(), args.path)
    except OSError as exc:
        print(f"cannot create device: {exc}", file=sys.stderr)
        return 1

    with device:
        for _line in sys.stdin:
            device.write(REPORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())