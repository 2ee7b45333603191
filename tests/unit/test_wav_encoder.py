"""Tests for the WAV encoder."""

import numpy as np
import pytest

from voicecast.exceptions import EncodeError
from voicecast.services.audio_manager import WAV_HEADER_SIZE, encode_wav, parse_wav_header
from voicecast.services.audio_manager.wav_encoder import build_wav_header, float_to_pcm16


class TestWavHeader:
    """Test suite for the 44-byte header."""

    def test_header_fields_for_mono_16_bit(self):
        """Header should describe mono 16-bit PCM at the given rate."""
        header = parse_wav_header(build_wav_header(3000, 16000))

        assert header.format_tag == 1
        assert header.channels == 1
        assert header.sample_rate == 16000
        assert header.byte_rate == 32000
        assert header.block_align == 2
        assert header.bits_per_sample == 16

    def test_sizes_for_3000_samples(self):
        """3000 samples give a 6000-byte data region in a 6044-byte file."""
        data = encode_wav(np.zeros(3000, dtype=np.float32), 16000)
        header = parse_wav_header(data)

        assert header.data_size == 6000
        assert header.riff_size == 6036
        assert header.file_size == 6044
        assert header.sample_count == 3000
        assert len(data) == 6044

    def test_chunk_identifiers(self):
        """Header should start with the RIFF/WAVE/fmt /data markers."""
        data = encode_wav(np.zeros(10, dtype=np.float32), 22050)

        assert data[0:4] == b"RIFF"
        assert data[8:12] == b"WAVE"
        assert data[12:16] == b"fmt "
        assert data[36:40] == b"data"
        assert len(data) == WAV_HEADER_SIZE + 20

    def test_invalid_sample_rate_raises(self):
        """A non-positive rate cannot be encoded."""
        with pytest.raises(EncodeError):
            build_wav_header(100, 0)

    def test_parse_rejects_short_data(self):
        """Fewer than 44 bytes is not a header."""
        with pytest.raises(ValueError):
            parse_wav_header(b"RIFF")


class TestSampleConversion:
    """Test suite for float to 16-bit conversion."""

    def test_scaling_and_clamping(self):
        """Out-of-range values clamp, negatives scale by 32768, positives by 32767."""
        samples = np.array([-2.0, -1.0, -0.5, 0.0, 0.5, 1.0, 2.0], dtype=np.float32)
        pcm = float_to_pcm16(samples)

        assert pcm.tolist() == [-32768, -32768, -16384, 0, 16383, 32767, 32767]

    def test_nan_becomes_silence(self):
        """NaN samples should encode as zero."""
        pcm = float_to_pcm16(np.array([np.nan, 0.25], dtype=np.float32))
        assert pcm.tolist() == [0, 8191]

    def test_data_region_is_little_endian(self):
        """Samples should be written as little-endian int16."""
        data = encode_wav(np.array([1.0, -1.0], dtype=np.float32), 8000)
        assert data[WAV_HEADER_SIZE:] == b"\xff\x7f\x00\x80"


class TestEncodeWav:
    """Test suite for full file encoding."""

    def test_encoding_is_deterministic(self):
        """Encoding the same samples twice gives identical bytes."""
        samples = np.linspace(-1.0, 1.0, 501, dtype=np.float32)
        assert encode_wav(samples, 44100) == encode_wav(samples, 44100)

    def test_empty_samples_raise(self):
        """Zero-length audio is an encode error."""
        with pytest.raises(EncodeError):
            encode_wav(np.array([], dtype=np.float32), 16000)

    def test_multichannel_array_raises(self):
        """Only one-dimensional buffers are accepted."""
        with pytest.raises(EncodeError):
            encode_wav(np.zeros((2, 100), dtype=np.float32), 16000)
