"""FFmpeg command construction for audio format normalization.

Targets are tuned for speech recognition: mono, 16 kHz for the lossless and
PCM targets, low bitrates for compressed targets.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from ..models import AudioEncoding

SPEECH_SAMPLE_RATE = 16000

_TARGET_ARGS: Dict[AudioEncoding, List[str]] = {
    AudioEncoding.WAV: ["-ac", "1", "-ar", str(SPEECH_SAMPLE_RATE), "-c:a", "pcm_s16le", "-f", "wav"],
    AudioEncoding.FLAC: ["-ac", "1", "-ar", str(SPEECH_SAMPLE_RATE), "-c:a", "flac", "-f", "flac"],
    AudioEncoding.MP3: ["-ac", "1", "-c:a", "libmp3lame", "-b:a", "64k", "-f", "mp3"],
    AudioEncoding.OGG: ["-ac", "1", "-c:a", "libopus", "-b:a", "32k", "-f", "ogg"],
    AudioEncoding.OPUS: ["-ac", "1", "-c:a", "libopus", "-b:a", "32k", "-f", "opus"],
    AudioEncoding.WEBM: ["-ac", "1", "-c:a", "libopus", "-b:a", "32k", "-f", "webm"],
    AudioEncoding.MP4: ["-ac", "1", "-c:a", "aac", "-b:a", "64k", "-f", "mp4"],
    AudioEncoding.M4A: ["-ac", "1", "-c:a", "aac", "-b:a", "64k", "-f", "ipod"],
}


def build_base_cmd(ffmpeg: str, input_path: Path) -> List[str]:
    """Build the base ffmpeg command: quiet, one input, overwrite enabled.

    Args:
        ffmpeg: Resolved path of the ffmpeg binary
        input_path: Path to the input audio file

    Returns:
        Command arguments ending with "-y" so ffmpeg never prompts
    """
    return [ffmpeg, "-hide_banner", "-nostdin", "-loglevel", "error", "-i", str(input_path), "-y"]


def build_convert_command(
    ffmpeg: str, input_path: Path, output_path: Path, target: AudioEncoding
) -> List[str]:
    """Build the command converting ``input_path`` into ``target`` at ``output_path``.

    Video streams are dropped ("-vn") since browser recordings in mp4/webm
    containers can carry an empty video track.
    """
    return [*build_base_cmd(ffmpeg, input_path), "-vn", *_TARGET_ARGS[target], str(output_path)]
