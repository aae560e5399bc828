# encoder.py

import glob
import logging
import os
import shutil
import subprocess

import constants

logger = logging.getLogger("particle_sim")


class EncodingError(RuntimeError):
    """The external encoder is missing or failed. Frames are left on disk."""


def video_duration(frame_count: int, frame_rate: float) -> float:
    """Playback length in seconds of frame_count frames at frame_rate."""
    return frame_count / frame_rate


def which_ffmpeg():
    return shutil.which("ffmpeg")


def build_command(ffmpeg: str, frame_directory: str, file_name_pattern: str,
                  output_path: str, frame_rate: int, frame_count: int = None) -> list:
    """
    ffmpeg arguments for turning a numbered image sequence into an H.264 video.
    yuv420p needs even dimensions, so odd sizes are padded by one pixel.
    With frame_count set, only frames 0..frame_count-1 are read, so stale
    higher-numbered files from an earlier run are ignored.
    """
    cmd = [
        ffmpeg,
        "-y",
        "-hide_banner",
        "-loglevel", "error",
        "-framerate", str(frame_rate),
        "-i", os.path.join(frame_directory, file_name_pattern),
    ]
    if frame_count is not None:
        cmd += ["-frames:v", str(frame_count)]
    cmd += [
        "-vf", "pad=ceil(iw/2)*2:ceil(ih/2)*2",
        "-c:v", "libx264",
        "-pix_fmt", "yuv420p",
        output_path,
    ]
    return cmd


def frame_files(frame_directory: str, file_name_pattern: str = constants.FRAME_PATTERN,
                frame_count: int = None) -> list:
    """
    Exported frame images in frame order. With frame_count set, exactly the
    paths for indices 0..frame_count-1; otherwise every frame file on disk.
    """
    if frame_count is not None:
        return [os.path.join(frame_directory, file_name_pattern % i) for i in range(frame_count)]
    pattern = os.path.join(frame_directory, f"{constants.FRAME_PREFIX}*.{constants.FRAME_EXT}")
    return sorted(glob.glob(pattern))


def encode(frame_directory: str = constants.FRAMES_DIR,
           file_name_pattern: str = constants.FRAME_PATTERN,
           output_path: str = constants.OUTPUT_VIDEO,
           frame_rate: int = constants.VIDEO_FPS,
           frame_count: int = None) -> str:
    """
    Assembles the exported frame sequence into one video, then deletes the frames.

    Blocks until the encoder exits. On any failure the frames are kept so the
    user can inspect them or rerun the encoder by hand. When frame_count is
    given, only that many frames are encoded and deleted; leftovers from an
    earlier failed run stay untouched.

    - Outputs: output_path (str) on success.
    - Raises: EncodingError if ffmpeg is unavailable or exits non-zero.
    """
    ffmpeg = which_ffmpeg()
    if not ffmpeg:
        raise EncodingError("ffmpeg not found on PATH. Frames were kept in "
                            f"'{frame_directory}'.")

    frames = frame_files(frame_directory, file_name_pattern, frame_count)
    logger.info(
        f"Encoding {len(frames)} frame(s) at {frame_rate} fps "
        f"({video_duration(len(frames), frame_rate):.2f}s) into '{output_path}'..."
    )

    cmd = build_command(ffmpeg, frame_directory, file_name_pattern, output_path, frame_rate, frame_count)
    try:
        subprocess.run(cmd, check=True)
    except (subprocess.CalledProcessError, OSError) as e:
        raise EncodingError(f"ffmpeg failed: {e}. Frames were kept in '{frame_directory}'.") from e

    for path in frames:
        os.remove(path)
    logger.info(f"Video written to '{output_path}'. Removed {len(frames)} intermediate frame(s).")
    return output_path
