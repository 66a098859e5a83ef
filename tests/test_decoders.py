"""Tests for the explicit decoder registry."""

import io
import pytest
from PIL import Image

from photosweep.errors import DecodeError
from photosweep.imaging.decoders import DecoderRegistry, RasterFormat, default_registry, pillow_decoder
from tests.helpers.image_factory import encode, horizontal_gradient


class TestDefaultRegistry:
    def test_registered_formats(self):
        """GIF, JPEG and PNG are registered in that order."""
        assert default_registry().format_names == ["GIF", "JPEG", "PNG"]

    @pytest.mark.parametrize("fmt", ["PNG", "JPEG", "GIF"])
    def test_decodes_supported_formats(self, fmt):
        data = encode(horizontal_gradient(32, 24), fmt)

        img = default_registry().decode(io.BytesIO(data), source=f"test.{fmt.lower()}")

        assert img.format == fmt
        assert img.size == (32, 24)

    def test_match_by_signature(self):
        registry = default_registry()
        assert registry.match(b"GIF89a....").name == "GIF"
        assert registry.match(b"\xff\xd8\xff\xe0").name == "JPEG"
        assert registry.match(b"\x89PNG\r\n\x1a\n\x00").name == "PNG"
        assert registry.match(b"plain text") is None

    def test_unregistered_pillow_format_is_rejected(self):
        """Pillow can read BMP, but it is not in the default registry."""
        data = encode(horizontal_gradient(16, 16), 'BMP')

        with pytest.raises(DecodeError, match="not a supported image"):
            default_registry().decode(io.BytesIO(data))

    def test_truncated_png_raises_decode_error(self):
        data = encode(horizontal_gradient(64, 64), 'PNG')[:40]

        with pytest.raises(DecodeError, match="as PNG"):
            default_registry().decode(io.BytesIO(data), source="cut.png")

    def test_empty_stream_raises_decode_error(self):
        with pytest.raises(DecodeError):
            default_registry().decode(io.BytesIO(b""))


class TestCustomRegistry:
    def test_register_additional_format(self):
        registry = default_registry()
        registry.register(RasterFormat("BMP", (b"BM",), pillow_decoder("BMP")))
        data = encode(horizontal_gradient(16, 16), 'BMP')

        img = registry.decode(io.BytesIO(data))

        assert img.format == "BMP"

    def test_duplicate_registration_rejected(self):
        registry = default_registry()
        with pytest.raises(ValueError):
            registry.register(RasterFormat("PNG", (b"\x89PNG",), pillow_decoder("PNG")))

    def test_first_matching_format_wins(self):
        calls = []

        def first(stream):
            calls.append("first")
            return Image.new('L', (1, 1))

        def second(stream):
            calls.append("second")
            return Image.new('L', (1, 1))

        registry = DecoderRegistry()
        registry.register(RasterFormat("A", (b"AB",), first))
        registry.register(RasterFormat("B", (b"ABC",), second))
        registry.decode(io.BytesIO(b"ABCDEF"))

        assert calls == ["first"]

    def test_empty_registry_rejects_everything(self):
        registry = DecoderRegistry()
        assert registry.header_size == 0
        with pytest.raises(DecodeError):
            registry.decode(io.BytesIO(encode(horizontal_gradient(), 'PNG')))
