"""Virtual HID devices through the Linux UHID interface: event codec, device handle and a demo mouse."""

__version__ = "0.0.8"
__all__ = ["codec", "device", "mouse"]