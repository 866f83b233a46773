"""
Relaxing-sound models — categories of YouTube tracks suggested for a mood.
"""

import re

from pydantic import BaseModel, Field

_VIDEO_ID = re.compile(
    r"(?:youtube\.com/.*(?:\?|&)v=|youtube\.com/embed/|youtu\.be/|youtube\.com/shorts/)([a-zA-Z0-9_-]{11})"
)
_QUERY_V = re.compile(r"[?&]v=([^&#]+)")


class Track(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    youtube: str = Field(min_length=1)

    model_config = {"frozen": True}

    @property
    def video_id(self) -> str:
        """YouTube video id from watch, embed, shorts or youtu.be links; "" if none."""
        match = _VIDEO_ID.search(self.youtube)
        if match:
            return match.group(1)
        match = _QUERY_V.search(self.youtube)
        return match.group(1) if match else ""


class SoundCategory(BaseModel):
    section: str = Field(min_length=1)
    tracks: tuple[Track, ...] = Field(min_length=1)

    model_config = {"frozen": True}
