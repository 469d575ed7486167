"""Unit tests for the vendor call client adapter."""
import pytest

from call_relay.core.exceptions import TerminationWarning
from call_relay.services.widget.events import CallEvent, CallEventEmitter
from call_relay.services.widget.vendor import VendorCallClient


class RecordingVendor:
    """Vendor SDK double exposing every termination method."""

    def __init__(self):
        self.calls = []
        self.events = CallEventEmitter()

    def on(self, event, handler):
        self.events.on(event, handler)

    async def start_call(self, access_token):
        self.calls.append(("start_call", access_token))

    async def stop_call(self):
        self.calls.append("stop_call")

    def end_call(self):
        self.calls.append("end_call")

    async def hangup(self):
        self.calls.append("hangup")


class BareVendor:
    """Vendor without events or termination methods."""

    def __init__(self):
        self.tokens = []

    def start_call(self, access_token):
        self.tokens.append(access_token)


class TestStartCall:
    """Test starting calls through the adapter."""

    @pytest.mark.asyncio
    async def test_passes_access_token(self):
        vendor = RecordingVendor()
        client = VendorCallClient(vendor)

        await client.start_call("tok123")

        assert vendor.calls == [("start_call", "tok123")]

    @pytest.mark.asyncio
    async def test_sync_vendor_start(self):
        """Test non-async vendor methods are accepted."""
        vendor = BareVendor()
        client = VendorCallClient(vendor)

        await client.start_call("tok123")

        assert vendor.tokens == ["tok123"]


class TestTerminate:
    """Test best-effort termination."""

    @pytest.mark.asyncio
    async def test_tries_every_method_in_order(self):
        vendor = RecordingVendor()
        client = VendorCallClient(vendor)

        await client.terminate()

        assert vendor.calls == ["stop_call", "end_call", "hangup"]

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_later_methods(self):
        """Test a failing method is skipped over."""
        vendor = RecordingVendor()

        async def broken_stop_call():
            raise RuntimeError("not connected")

        vendor.stop_call = broken_stop_call
        client = VendorCallClient(vendor)

        await client.terminate()

        assert vendor.calls == ["end_call", "hangup"]

    @pytest.mark.asyncio
    async def test_missing_methods_are_skipped(self):
        """Test only the methods the vendor has are called."""

        class HangupOnly:
            def __init__(self):
                self.hung_up = False

            def start_call(self, access_token):
                pass

            def hangup(self):
                self.hung_up = True

        vendor = HangupOnly()
        client = VendorCallClient(vendor)

        await client.terminate()

        assert vendor.hung_up is True

    @pytest.mark.asyncio
    async def test_no_methods_raises_warning(self):
        client = VendorCallClient(BareVendor())

        with pytest.raises(TerminationWarning):
            await client.terminate()

    @pytest.mark.asyncio
    async def test_all_methods_failing_raises_warning(self):
        class Broken:
            def start_call(self, access_token):
                pass

            def stop_call(self):
                raise RuntimeError("a")

            def hangup(self):
                raise RuntimeError("b")

        client = VendorCallClient(Broken())

        with pytest.raises(TerminationWarning) as exc_info:
            await client.terminate()

        assert "stop_call" in str(exc_info.value)
        assert "hangup" in str(exc_info.value)


class TestEvents:
    """Test vendor events are re-emitted by the adapter."""

    def test_vendor_events_reach_adapter_handlers(self):
        vendor = RecordingVendor()
        client = VendorCallClient(vendor)
        received = []
        client.on(CallEvent.CALL_STARTED, lambda: received.append("started"))
        client.on(CallEvent.ERROR, lambda error: received.append(error))

        vendor.events.emit("call_started")
        vendor.events.emit("error", "ice failed")

        assert received == ["started", "ice failed"]

    def test_vendor_without_events(self):
        """Test a vendor with no 'on' is still usable."""
        client = VendorCallClient(BareVendor())

        assert client.handler_count(CallEvent.CALL_ENDED) == 0
