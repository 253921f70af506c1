"""
Audio and desktop notification backends for the focus timer.

DesktopAlerts bundles a SoundManager and a NotificationManager behind the
AlertCapability interface used by FocusTimerLogic. Neither backend raises
when the host has no audio device or notification daemon.
"""

import logging
import os
import shutil
import subprocess
import sys

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame

from time_compass.config import APP_NAME
from time_compass.focus_timer import Permission

logger = logging.getLogger('time_compass.alerts')

SAMPLE_RATE = 44100


# ===================== SOUND MANAGER =====================

class SoundManager:
    """Synthesized tones played through the pygame mixer"""

    def __init__(self):
        self.sounds = {}
        self.available = False
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
            self.available = True
        except pygame.error as e:
            logger.warning(f"Audio unavailable, focus alerts will be silent: {e}")
            return
        self._generate_sounds()

    def _generate_sounds(self):
        # A4 beep decaying like an exponential gain ramp
        self.sounds["Beep"] = self._create_tone(440, 0.5)

    def _create_tone(self, freq, duration, peak=0.1, floor=0.00001):
        try:
            n = int(duration * SAMPLE_RATE)
            t = np.linspace(0, duration, n, False)
            wave = np.sin(freq * t * 2 * np.pi)

            wave *= np.geomspace(peak, floor, n)

            audio = (wave * 32767).astype(np.int16)
            stereo = np.repeat(audio.reshape(n, 1), 2, axis=1)
            return pygame.sndarray.make_sound(stereo)
        except (pygame.error, ValueError) as e:
            logger.warning(f"Tone generation failed: {e}")
            return None

    def play(self, sound_name="Beep"):
        if not self.available:
            return
        sound = self.sounds.get(sound_name)
        if sound is None:
            return
        try:
            sound.play()
        except pygame.error as e:
            logger.warning(f"Play error: {e}")

    def stop(self):
        if not self.available:
            return
        try:
            pygame.mixer.stop()
        except pygame.error as e:
            logger.debug(f"Mixer stop failed: {e}")

    def close(self):
        if self.available:
            self.stop()
            pygame.mixer.quit()
            self.available = False


# ===================== NOTIFICATION MANAGER =====================

class NotificationManager:
    """Native OS notifications with a browser-style permission state"""

    def __init__(self, platform=None):
        self.platform = platform or sys.platform
        self.permission = Permission.DEFAULT

    def _backend(self):
        if self.platform == 'darwin':
            return shutil.which('osascript') and 'osascript'
        if self.platform.startswith('linux'):
            return shutil.which('notify-send') and 'notify-send'
        if self.platform == 'win32':
            return 'plyer'
        return None

    def request_permission(self) -> Permission:
        """Granted when the platform has a notification backend"""
        if self.permission == Permission.DEFAULT:
            self.permission = Permission.GRANTED if self._backend() else Permission.DENIED
            logger.info(f"Notification permission: {self.permission.value}")
        return self.permission

    def show(self, title, message):
        backend = self._backend()
        if backend == 'osascript':
            script = f'display notification {_applescript_str(message)} with title {_applescript_str(title)} sound name "Ping"'
            subprocess.run(['osascript', '-e', script], check=False, timeout=5)
        elif backend == 'notify-send':
            subprocess.run(['notify-send', '--app-name', APP_NAME, title, message], check=False, timeout=5)
        elif backend == 'plyer':
            from plyer import notification
            notification.notify(title=title, message=message, app_name=APP_NAME, timeout=10)
        else:
            logger.debug(f"No notification backend on {self.platform}")


def _applescript_str(text):
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


# ===================== CAPABILITY =====================

class DesktopAlerts:
    """AlertCapability backed by the local sound and notification managers"""

    def __init__(self, sound_mgr=None, notif_mgr=None):
        self.sound_mgr = sound_mgr or SoundManager()
        self.notif_mgr = notif_mgr or NotificationManager()

    @property
    def permission(self) -> Permission:
        return self.notif_mgr.permission

    def request_permission(self) -> Permission:
        return self.notif_mgr.request_permission()

    def notify(self, title, body):
        try:
            self.notif_mgr.show(title, body)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Notification error: {e}")

    def emit_tone(self):
        self.sound_mgr.play("Beep")

    def close(self):
        self.sound_mgr.close()
