"""Window lookup and screen capture for the RISK client.

Uses ``mss`` to capture the game window as a numpy array. All capture
operations go through this module; no other module should import ``mss``
directly.
"""

import logging
import platform
import subprocess
from dataclasses import dataclass
from typing import Optional

import mss
import mss.exception
import numpy as np

from config import WINDOW_TITLE
from exceptions import CaptureFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowHandle:
    """A top-level window as seen at lookup time.

    The geometry is a snapshot; ``capture_window()`` refreshes it on
    Windows before grabbing pixels.
    """

    title: str
    handle: int
    left: int
    top: int
    width: int
    height: int

    def geometry(self) -> dict[str, int]:
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }


def _client_geometry_windows(hwnd: int) -> Optional[dict[str, int]]:
    """Read a window's client area in screen coordinates.

    Returns:
        A dict with keys ``"left"``, ``"top"``, ``"width"``, ``"height"``,
        or ``None`` if the window no longer exists.
    """
    import ctypes
    import ctypes.wintypes

    user32 = ctypes.windll.user32

    if not user32.IsWindow(hwnd):
        return None

    rect = ctypes.wintypes.RECT()
    user32.GetClientRect(hwnd, ctypes.byref(rect))

    # Convert client (0, 0) to screen coordinates
    point = ctypes.wintypes.POINT(0, 0)
    user32.ClientToScreen(hwnd, ctypes.byref(point))

    return {
        "left": point.x,
        "top": point.y,
        "width": rect.right - rect.left,
        "height": rect.bottom - rect.top,
    }


def _is_minimized_windows(hwnd: int) -> bool:
    import ctypes

    return bool(ctypes.windll.user32.IsIconic(hwnd))


def _list_windows_windows() -> list[WindowHandle]:
    """Enumerate visible, titled top-level windows with the Windows API."""
    import ctypes
    import ctypes.wintypes

    user32 = ctypes.windll.user32

    hwnds: list[int] = []

    WNDENUMPROC = ctypes.WINFUNCTYPE(
        ctypes.wintypes.BOOL,
        ctypes.wintypes.HWND,
        ctypes.wintypes.LPARAM,
    )

    def enum_callback(hwnd: int, _lparam: int) -> bool:
        if user32.IsWindowVisible(hwnd):
            hwnds.append(hwnd)
        return True  # continue enumeration

    if not user32.EnumWindows(WNDENUMPROC(enum_callback), 0):
        raise ctypes.WinError()

    windows = []
    for hwnd in hwnds:
        length = user32.GetWindowTextLengthW(hwnd)
        if length == 0:
            continue
        buf = ctypes.create_unicode_buffer(length + 1)
        user32.GetWindowTextW(hwnd, buf, length + 1)
        geometry = _client_geometry_windows(hwnd)
        if geometry is None:
            continue
        windows.append(WindowHandle(title=buf.value, handle=hwnd, **geometry))
    return windows


def _list_windows_wmctrl() -> list[WindowHandle]:
    """Enumerate windows on X11 by parsing ``wmctrl -lG``.

    Each output line reads ``<id> <desktop> <x> <y> <w> <h> <host> <title>``.
    The game only runs on Windows; this path exists for development
    convenience.
    """
    result = subprocess.run(
        ["wmctrl", "-lG"],
        capture_output=True, text=True, check=False,
    )
    if result.returncode != 0:
        raise RuntimeError(
            f"wmctrl exited with status {result.returncode}: "
            f"{result.stderr.strip()}"
        )

    windows = []
    for line in result.stdout.splitlines():
        fields = line.split(None, 7)
        if len(fields) < 8:
            continue  # untitled
        window_id, _desktop, x, y, w, h, _host, title = fields
        try:
            window = WindowHandle(
                title=title,
                handle=int(window_id, 16),
                left=int(x),
                top=int(y),
                width=int(w),
                height=int(h),
            )
        except ValueError:
            logger.debug("Skipping unparseable wmctrl line: %r", line)
            continue
        windows.append(window)
    return windows


def list_windows() -> list[WindowHandle]:
    """List the currently open top-level windows.

    On Windows, uses ``EnumWindows`` and reads each window's client area.
    Elsewhere, falls back to ``wmctrl -lG``.

    Returns:
        Every visible window that has a non-empty title, in enumeration
        order.

    Raises:
        OSError: If the platform enumeration API fails or ``wmctrl`` is
            not installed.
        RuntimeError: If ``wmctrl`` exits with an error.
    """
    if platform.system() == "Windows":
        return _list_windows_windows()
    return _list_windows_wmctrl()


def find_window(title: str = WINDOW_TITLE) -> Optional[WindowHandle]:
    """Find the first window whose title equals *title* exactly.

    Enumeration failures are logged and reported as "not found".

    Args:
        title: The exact window title to look for.

    Returns:
        The matching window, or ``None``.
    """
    try:
        windows = list_windows()
    except (OSError, RuntimeError) as exc:
        logger.warning("Window enumeration failed: %s", exc)
        return None

    for window in windows:
        if window.title == title:
            logger.info(
                "Found window '%s' at screen position (%d, %d), client area %dx%d",
                title, window.left, window.top, window.width, window.height,
            )
            return window

    logger.debug("No window titled '%s' among %d windows", title, len(windows))
    return None


def capture_window(window: WindowHandle) -> np.ndarray:
    """Capture a window's client area as a BGR numpy array.

    Args:
        window: A handle returned by ``find_window()`` during this scan.

    Returns:
        A numpy array of shape ``(height, width, 3)`` in BGR colour order.

    Raises:
        CaptureFailedError: If the window has closed, is minimized, has an
            empty client area, or the capture backend fails.
    """
    geometry = window.geometry()

    if platform.system() == "Windows":
        refreshed = _client_geometry_windows(window.handle)
        if refreshed is None:
            raise CaptureFailedError(window.title, "window has closed")
        if _is_minimized_windows(window.handle):
            raise CaptureFailedError(window.title, "window is minimized")
        geometry = refreshed

    if geometry["width"] <= 0 or geometry["height"] <= 0:
        raise CaptureFailedError(
            window.title,
            f"client area is empty ({geometry['width']}x{geometry['height']})",
        )

    try:
        with mss.mss() as sct:
            screenshot = sct.grab(geometry)
    except mss.exception.ScreenShotError as exc:
        raise CaptureFailedError(window.title, str(exc)) from exc

    # mss returns BGRA; drop alpha channel for OpenCV-compatible BGR.
    frame = np.array(screenshot)[:, :, :3]

    logger.debug("Captured frame: shape=%s", frame.shape)
    return frame
