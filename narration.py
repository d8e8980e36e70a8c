"""
Voice Narration
- Speaks lesson prompts through an offline text-to-speech process
- A new phrase interrupts the one still playing
"""

import importlib.util
import logging
import os
import shutil
import subprocess
import sys
from typing import Optional

import config

logger = logging.getLogger(__name__)

_PYTTSX3_SCRIPT = (
    "import sys\n"
    "import pyttsx3\n"
    "e=pyttsx3.init()\n"
    "e.setProperty('rate', int(sys.argv[1]))\n"
    "e.say(' '.join(sys.argv[2:]))\n"
    "e.runAndWait()\n"
)


class Narrator:
    """Out-of-process speech so a broken audio stack can't take down the game."""

    def __init__(self, enabled: bool = True, backend: Optional[str] = "auto"):
        self.enabled = enabled
        self._backend = self._resolve_backend() if backend == "auto" else backend
        self._active_proc: Optional[subprocess.Popen] = None

    @property
    def backend(self) -> Optional[str]:
        return self._backend

    @property
    def supported(self) -> bool:
        return self._backend is not None

    def speak(self, text: str, enabled: bool = True):
        """Cancel anything in flight and say `text`. No-op when disabled or unsupported."""
        if not (enabled and self.enabled) or self._backend is None:
            return
        phrase = " ".join(str(text).split())
        if not phrase:
            return

        self.stop()
        self._active_proc = self._launch(phrase)

    def stop(self):
        proc = self._active_proc
        self._active_proc = None
        if proc is None or proc.poll() is not None:
            return
        proc.terminate()
        try:
            proc.wait(timeout=0.5)
        except subprocess.TimeoutExpired:
            proc.kill()

    @staticmethod
    def _resolve_backend() -> Optional[str]:
        if os.environ.get("TRACE_DISABLE_TTS", "0") == "1":
            return None
        if sys.platform == "darwin" and shutil.which("say"):
            return "say"
        if shutil.which("espeak"):
            return "espeak"
        if importlib.util.find_spec("pyttsx3") is not None:
            return "pyttsx3"
        logger.info("No text-to-speech backend found; narration disabled")
        return None

    def _command(self, text: str) -> list:
        rate = str(config.SPEECH_RATE)
        if self._backend == "say":
            return ["say", "-r", rate, text]
        if self._backend == "espeak":
            return ["espeak", "-s", rate, text]
        return [sys.executable, "-c", _PYTTSX3_SCRIPT, rate, text]

    def _launch(self, text: str) -> Optional[subprocess.Popen]:
        try:
            return subprocess.Popen(
                self._command(text),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning("Narration backend %s failed (%s); disabling voice", self._backend, e)
            self._backend = None
            return None
