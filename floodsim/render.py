"""Colouring water depth as images and showing them in a window."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pygame

DEPTH_COLOUR_SCALE = 20000.0
MAX_CHANNEL = 255
PAUSE_DELAY_MS = 100
WINDOW_TITLE = "Flood simulation"


def depth_to_blue(eta, z) -> np.ndarray:
    """Map water depth ``eta - z`` to shades of blue.

    Returns an array of shape ``eta.shape + (3,)`` of unsigned bytes, indexed
    ``[x, y, channel]`` as a surface expects. Negative depths are dry (black);
    deep or non-numeric cells saturate at full blue.
    """
    eta = np.asarray(eta, dtype=np.float32)
    z = np.asarray(z, dtype=np.float32)
    if eta.shape != z.shape:
        raise ValueError(f"eta shape {eta.shape} does not match z shape {z.shape}")
    if eta.ndim != 2:
        raise ValueError("eta must be two-dimensional")
    with np.errstate(all="ignore"):
        depth = eta - z
        depth = np.where(depth < np.float32(0.0), np.float32(0.0), depth)
        scaled = depth * np.float32(DEPTH_COLOUR_SCALE)
        limited = np.where(
            np.isnan(scaled),
            np.float32(MAX_CHANNEL),
            np.minimum(scaled, np.float32(MAX_CHANNEL)),
        )
    image = np.zeros(eta.shape + (3,), dtype=np.uint8)
    image[..., 2] = np.floor(limited).astype(np.uint8)
    return image


def downsample(image, factor) -> np.ndarray:
    """Keep every ``factor``-th cell along both grid axes."""
    if factor < 1:
        raise ValueError(f"downsample factor must be at least 1, got {factor}")
    image = np.asarray(image)
    if image.ndim < 2:
        raise ValueError("image must have at least two dimensions")
    return image[::factor, ::factor]


def _poll(paused: bool) -> tuple[bool, bool]:
    """Handle pending window events; return ``(stop, paused)``."""
    stop = False
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            stop = True
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                stop = True
            elif event.key == pygame.K_SPACE:
                paused = not paused
    return stop, paused


def show(frames: Iterable, scale=1, delay_ms=10) -> int:
    """Display RGB frames of shape ``(width, height, 3)`` in a window.

    Each frame is reduced by ``scale`` first. Closing the window or pressing
    Escape stops; Space pauses and resumes without drawing further frames.
    Returns the number of frames shown.
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")
    if delay_ms < 0:
        raise ValueError(f"delay must not be negative, got {delay_ms}")
    pygame.display.init()
    try:
        iterator = iter(frames)
        screen = None
        shown = 0
        paused = False
        while True:
            stop, paused = _poll(paused)
            if stop:
                break
            if paused:
                pygame.time.delay(PAUSE_DELAY_MS)
                continue
            try:
                frame = next(iterator)
            except StopIteration:
                break
            image = downsample(np.asarray(frame, dtype=np.uint8), scale)
            if image.ndim != 3 or image.shape[2] != 3:
                raise ValueError("frames must have shape (width, height, 3)")
            size = image.shape[:2]
            if screen is None:
                screen = pygame.display.set_mode(size)
                pygame.display.set_caption(WINDOW_TITLE)
            elif screen.get_size() != size:
                raise ValueError(
                    f"frame size {size} differs from window size {screen.get_size()}"
                )
            surface = pygame.surfarray.make_surface(np.ascontiguousarray(image))
            screen.blit(surface, (0, 0))
            pygame.display.flip()
            shown += 1
            pygame.time.delay(delay_ms)
        return shown
    finally:
        pygame.display.quit()