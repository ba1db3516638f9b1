"""
Real-Time Flame Preview Window

Runs the flame simulation interactively at the display refresh rate.

Features:
- Live particle animation driven by fire behavior presets
- On-screen frame rate, particle count and flame length
- Preset cycling and wind toggle

Controls:
    SPACE       - Pause/resume
    LEFT/RIGHT  - Previous/next preset
    W           - Toggle wind drift
    C           - Clear particles
    I           - Toggle info
    H           - Show/hide help
    ESC/Q       - Quit

Requires: pygame (pip install pygame)
"""

import time
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass

from .surface import BlendMode, RenderSurface

# Try to import pygame
try:
    import pygame
    from pygame.locals import (
        K_ESCAPE, K_q, K_SPACE, K_LEFT, K_RIGHT, K_w, K_c, K_i, K_h,
    )
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False
    pygame = None


HELP_LINES = [
    ("SPACE", "Pause/Resume"),
    ("LEFT/RIGHT", "Prev/Next preset"),
    ("W", "Toggle wind"),
    ("C", "Clear particles"),
    ("I", "Toggle info"),
    ("H", "Hide this help"),
    ("ESC/Q", "Quit"),
]
LINE_HEIGHT = 20
PANEL_PADDING = 10


# =============================================================================
# Preview Configuration
# =============================================================================

@dataclass
class PreviewConfig:
    """Configuration for the preview window"""
    # Window settings
    window_width: int = 640
    window_height: int = 480
    window_title: str = "WildfireFX"
    background_color: Tuple[int, int, int] = (0, 0, 0)

    # Playback settings
    fps: int = 60

    # Display settings
    show_info: bool = True
    show_help: bool = False
    text_color: Tuple[int, int, int] = (200, 200, 200)


# =============================================================================
# Pygame Surface Adapter
# =============================================================================

class PygameSurface(RenderSurface):
    """RenderSurface drawing onto a pygame Surface"""

    _BLEND_FLAGS = {}

    def __init__(self, target):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameSurface. Install with: pip install pygame")
        self.target = target
        self.alpha = 1.0
        self.blend_mode = BlendMode.SRC_OVER
        self.fill = (255, 255, 255)
        self._scratch: Dict[Tuple[int, int], Any] = {}
        if not PygameSurface._BLEND_FLAGS:
            PygameSurface._BLEND_FLAGS = {
                BlendMode.SRC_OVER: 0,
                BlendMode.ADD: pygame.BLEND_RGB_ADD,
                BlendMode.MULTIPLY: pygame.BLEND_RGB_MULT,
                BlendMode.SCREEN: pygame.BLEND_RGB_MAX,
            }

    @property
    def width(self) -> int:
        return self.target.get_width()

    @property
    def height(self) -> int:
        return self.target.get_height()

    def set_global_alpha(self, alpha: float) -> None:
        self.alpha = min(max(alpha, 0.0), 1.0)

    def set_blend_mode(self, mode: BlendMode) -> None:
        self.blend_mode = mode

    def set_fill(self, color) -> None:
        self.fill = tuple(int(c) for c in color[:3])

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._draw(x, y, width, height, pygame.draw.rect)

    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        self._draw(x, y, width, height, pygame.draw.ellipse)

    def _draw(self, x, y, width, height, shape) -> None:
        w, h = max(1, int(round(width))), max(1, int(round(height)))
        if self.alpha <= 0:
            return

        flags = self._BLEND_FLAGS[self.blend_mode]
        r, g, b = self.fill

        if flags == 0:
            # Alpha compositing through a per-pixel alpha scratch surface
            scratch = self._scratch_surface(w, h)
            shape(scratch, (r, g, b, int(self.alpha * 255)), (0, 0, w, h))
            self.target.blit(scratch, (int(x), int(y)))
            return

        scratch = self._scratch_surface(w, h)
        if self.blend_mode == BlendMode.MULTIPLY:
            # Fade toward white so low alpha leaves the target unchanged
            a = self.alpha
            color = tuple(int(255 - (255 - c) * a) for c in (r, g, b))
            scratch.fill((255, 255, 255, 0))
        else:
            color = tuple(int(c * self.alpha) for c in (r, g, b))
        shape(scratch, (*color, 255), (0, 0, w, h))
        self.target.blit(scratch, (int(x), int(y)), special_flags=flags)

    def _scratch_surface(self, w: int, h: int):
        key = (w, h)
        scratch = self._scratch.get(key)
        if scratch is None:
            scratch = pygame.Surface(key, pygame.SRCALPHA)
            self._scratch[key] = scratch
        scratch.fill((0, 0, 0, 0))
        return scratch


# =============================================================================
# Preview Window
# =============================================================================

class SimulationWindow:
    """
    Real-time flame preview window.

    Example:
        sim = FireSimulation(FireEmitter())
        window = SimulationWindow(sim, presets=PresetManager())
        window.run()
    """

    def __init__(
        self,
        simulation,
        config: Optional[PreviewConfig] = None,
        presets=None,
        preset_name: Optional[str] = None
    ):
        """
        Initialize preview window.

        Args:
            simulation: FireSimulation to drive
            config: Preview configuration
            presets: PresetManager used for preset cycling
            preset_name: Preset to start from
        """
        if not PYGAME_AVAILABLE:
            raise ImportError(
                "pygame is required for preview. Install with: pip install pygame"
            )

        self.simulation = simulation
        self.config = config or PreviewConfig()
        self.presets = presets
        self.preset_names: List[str] = presets.list_all() if presets else []
        self.preset_index = 0
        if preset_name and preset_name in self.preset_names:
            self.preset_index = self.preset_names.index(preset_name)

        # State
        self.paused = False

        # Initialize pygame
        self._init_pygame()

    def _init_pygame(self):
        pygame.init()
        pygame.display.set_caption(self.config.window_title)
        self._open_display(self.config.window_width, self.config.window_height)
        self.clock = pygame.time.Clock()

        try:
            self.font = pygame.font.SysFont('consolas', 14)
        except (pygame.error, OSError):
            self.font = pygame.font.Font(None, 16)

    def _open_display(self, width: int, height: int):
        """(Re)create the display; the flame origin follows the new size"""
        self.config.window_width = width
        self.config.window_height = height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.surface = PygameSurface(self.screen)

    def run(self):
        """Block until the window is closed"""
        running = True
        try:
            while running:
                self.clock.tick(self.config.fps)

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        running = self._handle_key(event.key)
                    elif event.type == pygame.VIDEORESIZE:
                        self._open_display(event.w, event.h)

                if not self.paused:
                    self._render_frame()
                pygame.display.flip()
        finally:
            pygame.quit()

    def _render_frame(self):
        """Clear, advance the simulation, draw overlays"""
        self.surface.clear(self.config.background_color)
        self.simulation.tick(
            time.perf_counter_ns(),
            self.config.window_width,
            self.config.window_height,
            self.surface
        )

        if self.config.show_info:
            self._render_info()
        if self.config.show_help:
            self._render_help()

    def _handle_key(self, key: int) -> bool:
        """Handle keyboard input. Returns False to quit."""
        if key in (K_ESCAPE, K_q):
            return False

        elif key == K_SPACE:
            self.paused = not self.paused
            if not self.paused:
                self.simulation.meter.reset()

        elif key == K_RIGHT:
            self._select_preset(self.preset_index + 1)
        elif key == K_LEFT:
            self._select_preset(self.preset_index - 1)

        elif key == K_w:
            emitter = self.simulation.emitter
            emitter.wind_enabled = not emitter.wind_enabled

        elif key == K_c:
            self.simulation.pool.clear()

        elif key == K_h:
            self.config.show_help = not self.config.show_help
        elif key == K_i:
            self.config.show_info = not self.config.show_info

        return True

    def _select_preset(self, index: int):
        if not self.preset_names:
            return
        self.preset_index = index % len(self.preset_names)
        preset = self.presets.get(self.preset_names[self.preset_index])
        start, end = preset.colors()
        self.simulation.emitter.set_colors(start, end)
        self.simulation.apply_fire_behavior(preset.sample())

    def _render_info(self):
        """Diagnostic counters in the top-left corner"""
        lines = self.simulation.stats.format_lines()
        if self.preset_names:
            lines.append(f"Preset: {self.preset_names[self.preset_index]}")
        if self.simulation.emitter.wind_enabled:
            lines.append("Wind: ON")
        if self.paused:
            lines.append("PAUSED")
        self._draw_panel(lines, (10, 10), self.config.text_color)

    def _render_help(self):
        """Key bindings, centered"""
        lines = ["CONTROLS:", ""] + [f"{key:<11}{action}" for key, action in HELP_LINES]
        width = max(self.font.size(line)[0] for line in lines) + 2 * PANEL_PADDING
        height = len(lines) * LINE_HEIGHT + 2 * PANEL_PADDING
        x = (self.config.window_width - width) // 2
        y = (self.config.window_height - height) // 2
        self._draw_panel(lines, (x, y), (255, 255, 255), backdrop=(width, height))

    def _draw_panel(self, lines, origin, color, backdrop=None):
        """Draw lines of shadowed text, optionally over a translucent box"""
        x, y = origin
        if backdrop is not None:
            box = pygame.Surface(backdrop, pygame.SRCALPHA)
            box.fill((0, 0, 0, 180))
            self.screen.blit(box, (x, y))
            x += PANEL_PADDING
            y += PANEL_PADDING

        for i, line in enumerate(lines):
            pos = (x, y + i * LINE_HEIGHT)
            self.screen.blit(self.font.render(line, True, (0, 0, 0)), (pos[0] + 1, pos[1] + 1))
            self.screen.blit(self.font.render(line, True, color), pos)


# =============================================================================
# Convenience Functions
# =============================================================================

def preview_simulation(
    simulation,
    presets=None,
    preset_name: Optional[str] = None,
    width: int = 640,
    height: int = 480,
    fps: int = 60,
    title: str = "WildfireFX"
) -> None:
    """Open a preview window for a simulation and block until it closes"""
    if not PYGAME_AVAILABLE:
        print("Preview requires pygame. Install with: pip install pygame")
        print("Alternatively, export to GIF with --export.")
        return

    config = PreviewConfig(
        window_width=width,
        window_height=height,
        window_title=title,
        fps=fps
    )
    window = SimulationWindow(simulation, config, presets=presets, preset_name=preset_name)
    window.run()


def check_pygame_available() -> bool:
    """Check if pygame is available for preview"""
    return PYGAME_AVAILABLE
