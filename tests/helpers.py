"""Small builders shared by the test modules."""

import os

from stepsentence.models import Cue


def make_cues(*texts: str) -> list:
    """Cues numbered from 1, one second each."""
    return [
        Cue(index=i, start_sec=float(i - 1), end_sec=float(i), text=text)
        for i, text in enumerate(texts, 1)
    ]


def write_recording(directory, name: str = "take.m4a") -> str:
    path = os.path.join(str(directory), name)
    with open(path, "wb") as f:
        f.write(b"fake-m4a")
    return path
