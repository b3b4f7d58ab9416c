import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional
from media_importer.core.common.filenames import split_extension
from ..domain.interfaces import IMetadataGenerator, IUniqueNameGenerator
from .destination import NumberedNameGenerator

logger = logging.getLogger(__name__)

class FFprobeMetadataGenerator(IMetadataGenerator):
    """
    Reads stored media with ffprobe and renders a thumbnail with ffmpeg.

    Thumbnail names come from the same generator as imported files, so a
    thumbnail never lands on a name an import holds or will be given.

    Result shape:
        {"width": 640, "height": 480, "duration": 3.2,
         "sizes": {"thumbnail": {"file": "clip-thumbnail.jpg", "width": 150}}}
    """

    THUMBNAIL_SUFFIX = "-thumbnail.jpg"

    def __init__(self, ffprobe_binary: str, ffmpeg_binary: str, thumbnail_width: int = 150,
                 names: Optional[IUniqueNameGenerator] = None):
        self.ffprobe_binary = ffprobe_binary
        self.ffmpeg_binary = ffmpeg_binary
        self.thumbnail_width = thumbnail_width
        self.names = names or NumberedNameGenerator()

    def generate(self, file_path: Path, mime_type: str) -> Optional[Dict[str, Any]]:
        if not mime_type.startswith(("image/", "video/", "audio/")):
            return None

        # 1. Dimensions / duration
        info = self._read_streams(file_path)
        metadata: Dict[str, Any] = {}

        video_stream = next(
            (s for s in info.get("streams", []) if s.get("codec_type") == "video"), None
        )
        if video_stream:
            metadata["width"] = video_stream.get("width")
            metadata["height"] = video_stream.get("height")

        duration = info.get("format", {}).get("duration")
        if duration and not mime_type.startswith("image/"):
            metadata["duration"] = float(duration)

        # 2. Thumbnail for anything with a picture
        if video_stream and not mime_type.startswith("audio/"):
            stem = split_extension(file_path.name)[0]
            thumb_name = self.names.unique_name(file_path.parent, f"{stem}{self.THUMBNAIL_SUFFIX}")
            thumb_path = file_path.with_name(thumb_name)
            self._render_thumbnail(file_path, thumb_path)
            metadata["sizes"] = {
                "thumbnail": {"file": thumb_path.name, "width": self.thumbnail_width}
            }

        return metadata or None

    def _read_streams(self, file_path: Path) -> Dict[str, Any]:
        cmd = [
            self.ffprobe_binary,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(file_path)
        ]
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown ffprobe error"
            raise RuntimeError(f"ffprobe failed for {file_path.name}: {error_message}") from e

        try:
            return json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise RuntimeError(f"ffprobe returned invalid JSON for {file_path.name}") from e

    def _render_thumbnail(self, source: Path, output: Path) -> None:
        # -n never overwrites; -frames:v 1 grabs a single frame; scale keeps the aspect ratio
        cmd = [
            self.ffmpeg_binary,
            "-n",
            "-i", str(source),
            "-frames:v", "1",
            "-vf", f"scale={self.thumbnail_width}:-1",
            str(output)
        ]
        logger.debug(f"Rendering thumbnail: {' '.join(cmd)}")

        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            raise RuntimeError(f"Thumbnail generation failed: {error_message}") from e
